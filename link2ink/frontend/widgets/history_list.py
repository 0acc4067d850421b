# -*- coding: utf-8 -*-
"""Recent-results list for one tool, newest first."""

from typing import Optional, Sequence

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Label, OptionList
from textual.widgets.option_list import Option

from link2ink.categories import TaskCategory
from link2ink.history import HistoryItem


class HistoryItemSelected(Message):
    """Message emitted when a history row is chosen."""

    def __init__(self, category: TaskCategory, item_id: str) -> None:
        self.category = category
        self.item_id = item_id
        super().__init__()


def format_history_row(item: HistoryItem) -> Text:
    """One row: title, artifact count badge, source and timestamp."""
    row = Text()
    row.append(item.title, style="bold")
    if len(item.images) > 1:
        row.append(f"  ▦ {len(item.images)}", style="green")
    row.append(f"  {item.source}", style="dim")
    row.append(f"  {item.created_at.strftime('%Y-%m-%d %H:%M')}", style="dim italic")
    return row


class HistoryList(Widget):
    """Lists a category's history; selecting a row recalls it."""

    DEFAULT_CSS = """
    HistoryList {
        width: 100%;
        height: auto;
        padding-top: 1;
    }

    HistoryList #history_header {
        color: $text-muted;
        text-style: bold;
    }

    HistoryList OptionList {
        height: auto;
        max-height: 12;
    }
    """

    def __init__(self, category: TaskCategory, title: str = "Recent", *, id: Optional[str] = None) -> None:
        super().__init__(id=id)
        self.category = category
        self.title = title

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(f"🕘 {self.title}", id="history_header")
            yield OptionList(id="history_options")

    def set_items(self, items: Sequence[HistoryItem]) -> None:
        options = self.query_one("#history_options", OptionList)
        options.clear_options()
        options.add_options([Option(format_history_row(item), id=item.id) for item in items])
        self.display = bool(items)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if event.option_id is not None:
            self.post_message(HistoryItemSelected(self.category, event.option_id))
