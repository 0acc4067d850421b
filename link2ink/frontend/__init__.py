# -*- coding: utf-8 -*-
"""Textual frontend for Link2Ink Studio."""

from .app import Link2InkApp

__all__ = ["Link2InkApp"]
