# -*- coding: utf-8 -*-
"""
Tool View for Link2Ink TUI.

One form per task category. The view is a thin shell around its ToolSlot:
it reads the form, asks the slot to validate and submit, and re-renders from
the slot whenever the slot notifies. Because the slot lives on the app, a
result that arrives after the user switched views is shown the next time
the view is displayed.
"""

from pathlib import Path
from typing import Callable, List, Optional, Tuple

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Input, Label, Select, Static

from link2ink.categories import TaskCategory
from link2ink.errors import ExportError, InputValidationError
from link2ink.generation import (
    ASPECT_RATIOS,
    CUSTOM_STYLE,
    LANGUAGES,
    MAX_VARIATIONS,
    MIN_VARIATIONS,
    STYLE_PRESETS,
    GenerationRequest,
)
from link2ink.history import Citation
from link2ink.tool_slot import ToolSlot

from ..tui_debug import tui_log
from .history_list import HistoryItemSelected, HistoryList
from .loading_state import LoadingState

SOURCE_PLACEHOLDERS = {
    TaskCategory.REPO: "https://github.com/owner/repo or owner/repo",
    TaskCategory.ARTICLE: "https://example.com/some-article",
}

TOOL_TAGLINES = {
    TaskCategory.REPO: "Turn a code repository into an architecture flow diagram.",
    TaskCategory.ARTICLE: "Turn an article or web page into an infographic.",
}


def summarize_citations(citations: Tuple[Citation, ...]) -> str:
    lines = []
    for citation in citations:
        title = citation.title or citation.hostname
        lines.append(f"  • {title} ({citation.hostname})")
    return "\n".join(lines)


class ToolView(Vertical):
    """Form, progress and results for one ToolSlot."""

    BINDINGS = [
        Binding("ctrl+enter", "submit", "Generate", show=False),
        Binding("ctrl+j", "submit", "Generate", show=False),
        Binding("ctrl+s", "save", "Save images", show=False),
    ]

    DEFAULT_CSS = """
    ToolView {
        width: 100%;
        height: 1fr;
        padding: 0 2;
    }

    ToolView #tool_title {
        text-style: bold;
        color: $accent;
        padding-top: 1;
    }

    ToolView #tool_tagline {
        color: $text-muted;
        padding-bottom: 1;
    }

    ToolView .tool-row {
        height: auto;
        width: 100%;
    }

    ToolView .tool-row Select {
        width: 1fr;
    }

    ToolView #custom_style_input {
        display: none;
    }

    ToolView #tool_error {
        color: $error;
        height: auto;
    }

    ToolView #tool_result {
        height: auto;
        padding-top: 1;
    }

    ToolView #generate_button {
        margin-top: 1;
    }

    ToolView #save_button {
        display: none;
    }
    """

    def __init__(self, slot: ToolSlot, *, id: Optional[str] = None) -> None:
        super().__init__(id=id)
        self.slot = slot
        self.active = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.last_saved: List[Path] = []

    @property
    def category(self) -> TaskCategory:
        return self.slot.category

    def compose(self) -> ComposeResult:
        presets = STYLE_PRESETS[self.category]
        with VerticalScroll():
            yield Label(self.slot.profile.label, id="tool_title")
            yield Label(TOOL_TAGLINES[self.category], id="tool_tagline")
            yield Input(placeholder=SOURCE_PLACEHOLDERS[self.category], id="source_input")
            with Horizontal(classes="tool-row"):
                yield Select([(p, p) for p in presets], value=presets[0], allow_blank=False, id="style_select")
                yield Select(LANGUAGES, value=LANGUAGES[0][1], allow_blank=False, id="language_select")
            yield Input(placeholder="Describe your custom style...", id="custom_style_input")
            with Horizontal(classes="tool-row"):
                yield Select(
                    [(f"{n} variation{'s' if n > 1 else ''}", n) for n in range(MIN_VARIATIONS, MAX_VARIATIONS + 1)],
                    value=MIN_VARIATIONS,
                    allow_blank=False,
                    id="variations_select",
                )
                yield Select(
                    [(f"{value}  {desc}", value) for value, desc in ASPECT_RATIOS],
                    value=ASPECT_RATIOS[0][0],
                    allow_blank=False,
                    id="aspect_select",
                )
            yield Button("Generate", id="generate_button", variant="primary", disabled=True)
            yield Static("", id="tool_error", markup=False)
            yield LoadingState(id="tool_loading")
            yield Static("", id="tool_result", markup=False)
            yield Button("Save images", id="save_button")
            yield HistoryList(self.category, id="tool_history")

    def on_mount(self) -> None:
        self._unsubscribe = self.slot.subscribe(self.sync_from_slot)
        if self.slot.source:
            self.query_one("#source_input", Input).value = self.slot.source
        self.sync_from_slot()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def set_active(self, active: bool) -> None:
        """Called by the app when this view is shown or hidden."""
        self.active = active
        self.sync_from_slot()

    # ─────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────

    def sync_from_slot(self) -> None:
        slot = self.slot
        if not self.is_mounted:
            return
        loading = self.query_one("#tool_loading", LoadingState)
        if self.active and slot.busy and slot.run is not None:
            loading.attach(slot.run)
        else:
            loading.detach()
        loading.display = slot.busy

        error = self.query_one("#tool_error", Static)
        error.update(f"⚠ {slot.error}" if slot.error else "")
        error.display = bool(slot.error)

        self._update_generate_button()

        result = self.query_one("#tool_result", Static)
        if slot.has_result and not slot.busy:
            count = len(slot.images)
            text = f"✓ {count} artifact{'s' if count != 1 else ''} for {slot.source}"
            if slot.citations:
                text += "\nSources:\n" + summarize_citations(slot.citations)
            result.update(text)
            result.display = True
        else:
            result.update("")
            result.display = False
        self.query_one("#save_button", Button).display = slot.has_result and not slot.busy

        self.query_one("#tool_history", HistoryList).set_items(slot.history.items)

    def _update_generate_button(self) -> None:
        source = self.query_one("#source_input", Input).value.strip()
        button = self.query_one("#generate_button", Button)
        button.disabled = self.slot.busy or not source
        button.label = "Generating..." if self.slot.busy else "Generate"

    # ─────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "source_input":
            self._update_generate_button()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id in ("source_input", "custom_style_input"):
            event.stop()
            self.action_submit()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "style_select":
            self.query_one("#custom_style_input", Input).display = event.value == CUSTOM_STYLE

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "generate_button":
            event.stop()
            self.action_submit()
        elif event.button.id == "save_button":
            event.stop()
            self.action_save()

    def on_history_item_selected(self, event: HistoryItemSelected) -> None:
        event.stop()
        item = self.slot.history.get(event.item_id)
        if item is None:
            return
        self.query_one("#source_input", Input).value = item.source
        self.slot.recall(item)

    # ─────────────────────────────────────────────────────────────────────
    # Submission
    # ─────────────────────────────────────────────────────────────────────

    def read_form(self) -> GenerationRequest:
        """Build a request from the form. Raises InputValidationError."""
        return self.slot.build_request(
            source=self.query_one("#source_input", Input).value,
            style=self.query_one("#style_select", Select).value,
            custom_style=self.query_one("#custom_style_input", Input).value,
            language=self.query_one("#language_select", Select).value,
            variations=self.query_one("#variations_select", Select).value,
            aspect_ratio=self.query_one("#aspect_select", Select).value,
        )

    def action_submit(self) -> None:
        if not self.slot.can_submit:
            return
        try:
            request = self.read_form()
        except InputValidationError as e:
            self.slot.reject(e)
            return
        tui_log(f"[ToolView] submit {self.category.value}: {request.source}")
        self.app.run_worker(self.slot.submit(request), group=f"generate_{self.category.value}", exit_on_error=False)

    def action_save(self) -> None:
        """Write the displayed artifacts into the app's export directory."""
        directory = self.app.export_dir
        try:
            self.last_saved = self.slot.save_artifacts(directory)
        except ExportError as e:
            self.app.notify(e.message, severity="error")
            return
        tui_log(f"[ToolView] saved {len(self.last_saved)} artifact(s) to {directory}")
        self.app.notify(f"Saved {len(self.last_saved)} image(s) to {directory}", severity="information")
