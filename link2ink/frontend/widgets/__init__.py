# -*- coding: utf-8 -*-
"""Widgets for the Link2Ink TUI."""

from .history_list import HistoryItemSelected, HistoryList, format_history_row
from .home import HomeView
from .loading_state import LoadingState, render_bar
from .tool_view import ToolView

__all__ = [
    "HistoryItemSelected",
    "HistoryList",
    "HomeView",
    "LoadingState",
    "ToolView",
    "format_history_row",
    "render_bar",
]
