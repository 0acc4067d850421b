# -*- coding: utf-8 -*-
"""Home view: the landing page with one entry per tool."""

from typing import Callable, List, Optional, Tuple

from textual.app import ComposeResult
from textual.containers import Center, Horizontal, Vertical
from textual.widgets import Button, Static

from link2ink.router import View

HOME_BANNER = """[bold magenta]link[/][bold]:[/][bold green]ink[/]$  [bold]Studio[/]

[dim]Visual Intelligence Platform[/]"""

TOOL_CARDS = [
    (View.REPO_ANALYZER, "GitFlow", "Repository → architecture flow diagram"),
    (View.ARTICLE_INFOGRAPHIC, "SiteSketch", "Article → infographic"),
]


class HomeView(Vertical):
    """Landing view. Buttons navigate through the given callback."""

    DEFAULT_CSS = """
    HomeView {
        width: 100%;
        height: 1fr;
        align: center middle;
    }

    HomeView #home_banner {
        width: auto;
        text-align: center;
        padding-bottom: 1;
    }

    HomeView .home-cards {
        width: auto;
        height: auto;
    }

    HomeView .home-cards Button {
        margin: 0 2;
        min-width: 30;
    }

    HomeView #home_shortcuts {
        width: auto;
        color: $text-muted;
        padding-top: 1;
    }
    """

    def __init__(
        self,
        on_select: Callable[[View], None],
        shortcuts: Optional[List[Tuple[str, View]]] = None,
        *,
        id: Optional[str] = None,
    ) -> None:
        super().__init__(id=id)
        self._on_select = on_select
        self._shortcuts = shortcuts or []

    def compose(self) -> ComposeResult:
        with Center():
            yield Static(HOME_BANNER, id="home_banner", markup=True)
        with Center():
            with Horizontal(classes="home-cards"):
                for view, name, description in TOOL_CARDS:
                    yield Button(f"{name}\n{description}", id=f"open_{view.value}")
        if self._shortcuts:
            hint = "   ".join(f"{label} {view.value.replace('_', ' ')}" for label, view in self._shortcuts)
            with Center():
                yield Static(hint, id="home_shortcuts", markup=False)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("open_"):
            event.stop()
            self._on_select(View(button_id[len("open_") :]))
