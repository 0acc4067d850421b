# -*- coding: utf-8 -*-
"""Introductory overlay shown once at startup."""

from textual import events
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, Static

from .modal_base import BaseModal

INTRO_DURATION = 3.0  # seconds before the overlay completes on its own

INTRO_BANNER = """[bold magenta]link[/][bold]:[/][bold green]ink[/]$

[bold]Link2Ink Studio[/]
[dim]Visual Intelligence Platform[/]

Turn repositories into flow diagrams and articles into infographics."""


class IntroOverlay(BaseModal):
    """Dismisses on any key, the button, or after ``INTRO_DURATION``.

    Keys pressed while the overlay is up are consumed here so they never
    reach the global shortcut dispatcher.
    """

    def __init__(self, duration: float = INTRO_DURATION):
        super().__init__()
        self.duration = duration
        self._completed = False

    def compose(self) -> ComposeResult:
        with Container(id="intro_container"):
            yield Static(INTRO_BANNER, id="intro_banner", markup=True)
            with Horizontal(classes="modal-buttons"):
                yield Button("Enter Studio", id="intro_enter", variant="primary")

    def on_mount(self) -> None:
        if self.duration > 0:
            self.set_timer(self.duration, self._complete)

    def _complete(self) -> None:
        if self._completed:
            return
        self._completed = True
        self.dismiss(True)

    def action_close(self) -> None:
        self._complete()

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self._complete()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "intro_enter":
            event.stop()
            self._complete()
