# -*- coding: utf-8 -*-
"""Keyboard shortcuts help modal."""

from typing import List, Tuple

from textual.app import ComposeResult
from textual.containers import Container, Horizontal, VerticalScroll
from textual.widgets import Button, Label, Static

from .modal_base import BaseModal

VIEW_LABELS = {
    "home": "Home",
    "repo_analyzer": "GitFlow (repository → flow diagram)",
    "article_infographic": "SiteSketch (article → infographic)",
}


class KeyboardShortcutsModal(BaseModal):
    """Modal listing navigation and form shortcuts."""

    def __init__(self, navigation: List[Tuple[str, str]]):
        """
        Args:
            navigation: ``(key label, view value)`` pairs from the dispatcher.
        """
        super().__init__()
        self.navigation = navigation

    def compose(self) -> ComposeResult:
        nav_lines = "\n".join(f"  [yellow]{label:<8}[/] {VIEW_LABELS.get(view, view)}" for label, view in self.navigation)
        with Container(id="shortcuts_modal_container"):
            yield Label("📖  Shortcuts", classes="modal-header")
            yield Label("Navigation shortcuts work once the session is unlocked", classes="modal-hint")
            with VerticalScroll(id="shortcuts_body"):
                yield Static(
                    "[bold cyan]Navigation[/]\n"
                    f"{nav_lines}\n"
                    "\n"
                    "[bold cyan]Forms[/]\n"
                    "  [yellow]Ctrl+Enter[/] Generate (also [yellow]Ctrl+J[/])\n"
                    "  [yellow]Tab[/]        Next field\n"
                    "\n"
                    "[bold cyan]App[/]\n"
                    "  [yellow]Ctrl+G[/]     This help\n"
                    "  [yellow]Ctrl+Q[/]     Quit",
                    markup=True,
                )
            with Horizontal(classes="modal-buttons"):
                yield Button("Close (ESC)", id="close_shortcuts_button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close_shortcuts_button":
            self.dismiss()
