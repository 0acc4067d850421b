# -*- coding: utf-8 -*-
"""
Link2Ink Textual application.

Startup sequence:

1. A neutral placeholder is shown while the SessionGate is CHECKING.
2. The capability probe runs once. UNLOCKED reveals the studio; LOCKED
   reveals it behind a blocking ApiKeyModal.
3. When enabled, the IntroOverlay is shown first and any key dismisses it.

Global navigation shortcuts are routed through ``ShortcutDispatcher`` from
``on_key``; a consumed key is stopped so it does not trigger anything else.
A later re-lock (e.g. a rejected credential) sends the router back to Home
and asks for a key again.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Type

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import QueryType
from textual.theme import Theme
from textual.widgets import Button, ContentSwitcher, Footer, Static

from link2ink.categories import TaskCategory
from link2ink.generation import GenerationService
from link2ink.history import HistoryStore
from link2ink.logger_config import logger
from link2ink.router import ShortcutDispatcher, View, ViewRouter
from link2ink.session_gate import CapabilityProbe, GateState, SessionGate
from link2ink.storage import StorageBackend
from link2ink.tool_slot import ToolSlot

from .modals import ApiKeyModal, IntroOverlay, KeyboardShortcutsModal
from .modals.intro_modal import INTRO_DURATION
from .tui_debug import tui_log
from .widgets import HomeView, ToolView

VIEW_CATEGORIES = {
    View.REPO_ANALYZER: TaskCategory.REPO,
    View.ARTICLE_INFOGRAPHIC: TaskCategory.ARTICLE,
}

TAB_LABELS = {
    View.HOME: "Home",
    View.REPO_ANALYZER: "GitFlow",
    View.ARTICLE_INFOGRAPHIC: "SiteSketch",
}

CHECKING_PLACEHOLDER = "Checking session..."


class Link2InkApp(App):
    """Interactive client for the Link2Ink generation tools.

    Args:
        storage: Backend for both history stores.
        service: Generation service; None leaves submission disabled with a message.
        probe: Capability probe run once at startup; None means locked.
        modifier: Designated modifier for the navigation shortcuts.
        show_intro: Show the introductory overlay at startup.
        history_limit: Optional per-category history cap.
        theme_name: ``dark`` or ``light``.
        intro_duration: Seconds before the intro overlay completes on its own.
        export_dir: Directory for saved artifacts; defaults to the current directory.
    """

    TITLE = "Link2Ink Studio"

    CUSTOM_THEMES = {
        "dark": Theme(
            name="link2ink-dark",
            primary="#58a6ff",
            secondary="#a371f7",
            accent="#3fb950",
            foreground="#e6edf3",
            background="#0d1117",
            surface="#161b22",
            panel="#21262d",
            success="#3fb950",
            warning="#d29922",
            error="#f85149",
            dark=True,
        ),
        "light": Theme(
            name="link2ink-light",
            primary="#0969da",
            secondary="#8250df",
            accent="#1a7f37",
            foreground="#1f2328",
            background="#ffffff",
            surface="#f6f8fa",
            panel="#ffffff",
            success="#1a7f37",
            warning="#9a6700",
            error="#cf222e",
            dark=False,
        ),
    }

    CSS = """
    #gate_placeholder {
        width: 100%;
        height: 1fr;
        content-align: center middle;
        color: $text-muted;
    }

    #studio {
        display: none;
        height: 1fr;
    }

    #nav_bar {
        height: auto;
        width: 100%;
        padding: 0 1;
        background: $panel;
    }

    #nav_bar Button {
        min-width: 18;
        margin-right: 1;
        border: none;
        height: 1;
    }

    #nav_bar Button.-active {
        text-style: bold reverse;
    }

    #view_switcher {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("ctrl+g", "show_shortcuts", "Shortcuts"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        storage: StorageBackend,
        service: Optional[GenerationService] = None,
        probe: Optional[CapabilityProbe] = None,
        modifier: str = "alt",
        show_intro: bool = True,
        history_limit: Optional[int] = None,
        theme_name: str = "dark",
        export_dir: Optional[Path] = None,
        intro_duration: float = INTRO_DURATION,
    ):
        super().__init__()
        self.probe = probe
        self.export_dir = Path(export_dir) if export_dir is not None else Path.cwd()
        self.show_intro = show_intro
        self.intro_duration = intro_duration
        self.theme_name = theme_name if theme_name in self.CUSTOM_THEMES else "dark"
        self.intro_active = False
        self.api_key: Optional[str] = None
        self._key_prompt_open = False

        self.gate = SessionGate()
        self.router = ViewRouter(self.gate)
        self.dispatcher = ShortcutDispatcher(self.router, modifier=modifier, overlay_active=lambda: self.intro_active)

        self.histories: Dict[TaskCategory, HistoryStore] = {}
        self.slots: Dict[TaskCategory, ToolSlot] = {}
        for category in TaskCategory:
            store = HistoryStore(category, storage, max_items=history_limit)
            store.load()
            self.histories[category] = store
            self.slots[category] = ToolSlot(category, store, self.gate, service)

        self.gate.subscribe(self._on_gate_changed)
        self.router.subscribe(self._on_view_changed)

    # ─────────────────────────────────────────────────────────────────────
    # Layout
    # ─────────────────────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield Static(CHECKING_PLACEHOLDER, id="gate_placeholder")
        with Vertical(id="studio"):
            with Horizontal(id="nav_bar"):
                for label, view in self.dispatcher.describe():
                    yield Button(f"{TAB_LABELS[view]} ({label})", id=f"tab_{view.value}")
            with ContentSwitcher(initial=View.HOME.value, id="view_switcher"):
                yield HomeView(self.router.navigate, self.dispatcher.describe(), id=View.HOME.value)
                for view, category in VIEW_CATEGORIES.items():
                    yield ToolView(self.slots[category], id=view.value)
        yield Footer()

    def on_mount(self) -> None:
        for theme in self.CUSTOM_THEMES.values():
            self.register_theme(theme)
        self.theme = self.CUSTOM_THEMES[self.theme_name].name
        self._sync_nav_bar()
        self.run_worker(self._check_session(), exclusive=True, group="session")

    def main_query_one(self, selector: str, expect_type: Type[QueryType]) -> QueryType:
        """Query the studio screen even while a modal is on top."""
        return self.screen_stack[0].query_one(selector, expect_type)

    def tool_view(self, category: TaskCategory) -> ToolView:
        for view, view_category in VIEW_CATEGORIES.items():
            if view_category is category:
                return self.main_query_one(f"#{view.value}", ToolView)
        raise KeyError(category)

    # ─────────────────────────────────────────────────────────────────────
    # Session gate
    # ─────────────────────────────────────────────────────────────────────

    async def _check_session(self) -> None:
        state = await self.gate.check(self.probe)
        logger.info("[Link2InkApp] Session {}", state.value)
        self.main_query_one("#gate_placeholder", Static).display = False
        self.main_query_one("#studio", Vertical).display = True
        if self.show_intro:
            self._show_intro()
        else:
            self._prompt_for_key_if_locked()

    def _on_gate_changed(self, old: GateState, new: GateState) -> None:
        tui_log(f"[Link2InkApp] gate {old.value} -> {new.value}")
        if old is GateState.UNLOCKED and new is GateState.LOCKED:
            self._prompt_for_key_if_locked()

    def _prompt_for_key_if_locked(self) -> None:
        if self.gate.state is not GateState.LOCKED or self._key_prompt_open:
            return
        self._key_prompt_open = True

        def _on_key_entered(key: Optional[str]) -> None:
            self._key_prompt_open = False
            if not key:
                self._prompt_for_key_if_locked()
                return
            self.api_key = key
            self.gate.unlock()

        self.push_screen(ApiKeyModal(reason=self.gate.lock_reason or None), _on_key_entered)

    # ─────────────────────────────────────────────────────────────────────
    # Intro overlay
    # ─────────────────────────────────────────────────────────────────────

    def _show_intro(self) -> None:
        self.intro_active = True

        def _on_intro_done(_result: Optional[bool]) -> None:
            self.intro_active = False
            self._prompt_for_key_if_locked()

        self.push_screen(IntroOverlay(self.intro_duration), _on_intro_done)

    # ─────────────────────────────────────────────────────────────────────
    # Navigation
    # ─────────────────────────────────────────────────────────────────────

    def on_key(self, event: events.Key) -> None:
        if self.dispatcher.handle_key(event.key):
            event.prevent_default()
            event.stop()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("tab_"):
            event.stop()
            self.router.navigate(View(button_id[len("tab_") :]))

    def _on_view_changed(self, old: View, new: View) -> None:
        self.main_query_one("#view_switcher", ContentSwitcher).current = new.value
        for view, category in VIEW_CATEGORIES.items():
            self.tool_view(category).set_active(view is new)
        self._sync_nav_bar()

    def _sync_nav_bar(self) -> None:
        current = self.router.current
        for view in View:
            self.main_query_one(f"#tab_{view.value}", Button).set_class(view is current, "-active")

    def action_show_shortcuts(self) -> None:
        navigation: List[Tuple[str, str]] = [(label, view.value) for label, view in self.dispatcher.describe()]
        self.push_screen(KeyboardShortcutsModal(navigation))
