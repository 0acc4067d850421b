# -*- coding: utf-8 -*-
"""Base class and shared CSS for Link2Ink modal dialogs."""

from textual.binding import Binding
from textual.screen import ModalScreen

MODAL_BASE_CSS = """
BaseModal {
    align: center middle;
    background: $background 70%;
}

BaseModal > Container {
    width: 72;
    height: auto;
    max-height: 90%;
    padding: 1 2;
    border: round $primary;
    background: $surface;
}

BaseModal .modal-header {
    width: 100%;
    text-style: bold;
    color: $primary;
    padding-bottom: 1;
}

BaseModal .modal-hint {
    color: $text-muted;
    padding-bottom: 1;
}

BaseModal .modal-buttons {
    width: 100%;
    height: auto;
    align-horizontal: right;
    padding-top: 1;
}
"""


class BaseModal(ModalScreen):
    """Modal screen with Escape-to-close and the shared styling.

    Subclasses that must not be dismissed by the user set ``DISMISSIBLE``
    to False; Escape is then ignored.
    """

    DEFAULT_CSS = MODAL_BASE_CSS
    DISMISSIBLE = True

    BINDINGS = [
        Binding("escape", "close", "Close", show=False),
    ]

    def action_close(self) -> None:
        if self.DISMISSIBLE:
            self.dismiss(None)
