# -*- coding: utf-8 -*-
import sys

from link2ink.cli import main

sys.exit(main())
