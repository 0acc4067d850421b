# -*- coding: utf-8 -*-
"""
View routing and the global keyboard-shortcut dispatcher.

Exactly one View is active at a time. Explicit selection and shortcuts both
go through ``ViewRouter.navigate``, which refuses to move while the session
gate is not unlocked. The one exception is the gate itself closing, which
sends the router back to Home.
"""

from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

from link2ink.logger_config import logger
from link2ink.session_gate import GateState, SessionGate

ViewListener = Callable[["View", "View"], None]

KNOWN_MODIFIERS: FrozenSet[str] = frozenset({"alt", "ctrl", "meta", "shift", "super", "hyper"})


class View(Enum):
    HOME = "home"
    REPO_ANALYZER = "repo_analyzer"
    ARTICLE_INFOGRAPHIC = "article_infographic"


DEFAULT_SHORTCUTS: Mapping[str, View] = {
    "1": View.HOME,
    "2": View.REPO_ANALYZER,
    "3": View.ARTICLE_INFOGRAPHIC,
}


class ViewRouter:
    """Finite-state view selector, initial view Home."""

    def __init__(self, gate: SessionGate, initial: View = View.HOME):
        self.gate = gate
        self._current = initial
        self._listeners: List[ViewListener] = []
        gate.subscribe(self._on_gate_changed)

    @property
    def current(self) -> View:
        return self._current

    def subscribe(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def navigate(self, view: View) -> bool:
        """Switch to ``view``. Returns False when the gate refuses it."""
        if not self.gate.is_unlocked:
            logger.debug("[Router] Ignoring navigation to {} while gate is {}", view.value, self.gate.state.value)
            return False
        self._set(view)
        return True

    def _set(self, view: View) -> None:
        old = self._current
        if old is view:
            return
        self._current = view
        logger.debug("[Router] {} -> {}", old.value, view.value)
        for listener in list(self._listeners):
            listener(old, view)

    def _on_gate_changed(self, old: GateState, new: GateState) -> None:
        if old is GateState.UNLOCKED and new is GateState.LOCKED:
            self._set(View.HOME)


def parse_key(key: str) -> Tuple[FrozenSet[str], str]:
    """Split a Textual key name like ``"ctrl+alt+1"`` into (modifiers, key)."""
    *modifiers, base = key.lower().split("+")
    return frozenset(m for m in modifiers if m in KNOWN_MODIFIERS), base


class ShortcutDispatcher:
    """Maps ``<modifier>+<digit>`` key-downs to views.

    Only combinations of exactly one designated modifier plus a digit from
    the table match. While disabled (gate not unlocked, or the intro overlay
    is showing) nothing is consumed so the key keeps its default behavior.

    Args:
        router: Router to drive.
        modifier: The designated modifier (``alt`` by default).
        shortcuts: Digit to view table.
        overlay_active: Returns True while an introductory overlay is shown.
    """

    def __init__(
        self,
        router: ViewRouter,
        modifier: str = "alt",
        shortcuts: Optional[Mapping[str, View]] = None,
        overlay_active: Optional[Callable[[], bool]] = None,
    ):
        modifier = modifier.lower()
        if modifier not in KNOWN_MODIFIERS:
            raise ValueError(f"Unknown modifier: {modifier}")
        self.router = router
        self.modifier = modifier
        self.shortcuts: Dict[str, View] = dict(shortcuts or DEFAULT_SHORTCUTS)
        self._overlay_active = overlay_active or (lambda: False)

    @property
    def enabled(self) -> bool:
        return self.router.gate.is_unlocked and not self._overlay_active()

    def match(self, key: str) -> Optional[View]:
        """Return the target view for ``key``, ignoring whether we're enabled."""
        modifiers, base = parse_key(key)
        if modifiers != {self.modifier}:
            return None
        return self.shortcuts.get(base)

    def handle_key(self, key: str) -> bool:
        """Dispatch one key-down. Returns True when the event was consumed."""
        if not self.enabled:
            return False
        view = self.match(key)
        if view is None:
            return False
        self.router.navigate(view)
        return True

    def describe(self) -> List[Tuple[str, View]]:
        """Shortcut labels for help text, e.g. ``[("Alt+1", View.HOME), ...]``."""
        label = self.modifier.capitalize()
        return [(f"{label}+{digit}", view) for digit, view in sorted(self.shortcuts.items())]
