# -*- coding: utf-8 -*-
"""
Link2Ink Studio: an interactive terminal client that turns code repositories
into flow diagrams and articles into infographics.
"""

__version__ = "0.1.0"
