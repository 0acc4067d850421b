# -*- coding: utf-8 -*-
"""Blocking modal shown while the session gate is locked."""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, Input, Label, Static

from .modal_base import BaseModal


class ApiKeyModal(BaseModal):
    """Asks for a paid API key. Dismisses with the key; cannot be skipped."""

    DISMISSIBLE = False

    DEFAULT_CSS = """
    ApiKeyModal #api_key_error {
        color: $error;
        height: auto;
    }
    """

    def __init__(self, reason: Optional[str] = None):
        super().__init__()
        self.reason = reason

    def compose(self) -> ComposeResult:
        with Container(id="api_key_container"):
            yield Label("🔑  Paid API Key Required", classes="modal-header")
            yield Static(
                "Image generation needs a key from a billing-enabled project.\n"
                "Paste it below to unlock Link2Ink for this session.",
                classes="modal-hint",
            )
            if self.reason:
                yield Static(f"[dim]{self.reason}[/]", id="api_key_reason", markup=True)
            yield Input(placeholder="API key", password=True, id="api_key_input")
            yield Static("", id="api_key_error")
            with Horizontal(classes="modal-buttons"):
                yield Button("Unlock", id="api_key_submit", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#api_key_input", Input).focus()

    def _submit(self) -> None:
        value = self.query_one("#api_key_input", Input).value.strip()
        if not value:
            self.query_one("#api_key_error", Static).update("Please enter an API key.")
            return
        self.dismiss(value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "api_key_submit":
            event.stop()
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "api_key_input":
            event.stop()
            self._submit()
