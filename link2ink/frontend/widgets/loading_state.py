# -*- coding: utf-8 -*-
"""
Loading State Widget for Link2Ink TUI.

Shows the current stage message, the eased completion percentage and the
rolling kernel log of the TaskRun it is attached to.

```
┌──────────────────────────────────────────────┐
│            ANALYZING CODE STRUCTURE           │
│  ━━━━━━━━━━━━━━━━━━━━━━━━━░░░░░░░  70% COMPLETE │
│  ➜ > initializing git_module...               │
│  ➜ [12:01:03] Mapping dependency graph... OK  │
└──────────────────────────────────────────────┘
```
"""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.widget import Widget
from textual.widgets import Label, Static

from link2ink.task_run import TaskRun

from ..tui_debug import tui_log

BAR_WIDTH = 32


def render_bar(percent: float, width: int = BAR_WIDTH) -> str:
    """Text progress bar: filled cells for the displayed percentage."""
    percent = max(0.0, min(100.0, percent))
    filled = int(percent / 100 * width)
    return "━" * filled + "░" * (width - filled)


class LoadingState(Widget):
    """Progress display bound to at most one TaskRun at a time.

    The widget owns the run's timers only while it is attached: ``attach``
    starts them on this widget's ``set_interval`` and ``detach`` (also called
    on unmount) stops them.
    """

    DEFAULT_CSS = """
    LoadingState {
        width: 100%;
        height: auto;
        padding: 1 2;
        border: round $primary-darken-2;
    }

    LoadingState #loading_stage {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
    }

    LoadingState #loading_progress {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }

    LoadingState #loading_log {
        width: 100%;
        height: 6;
        padding-top: 1;
        color: $text-muted;
    }
    """

    def __init__(self, *, id: Optional[str] = None, classes: Optional[str] = None) -> None:
        super().__init__(id=id, classes=classes)
        self.run: Optional[TaskRun] = None

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label("PROCESSING", id="loading_stage", markup=False)
            yield Label(f"{render_bar(0)}   0% COMPLETE", id="loading_progress", markup=False)
            yield Static("", id="loading_log", markup=False)

    def attach(self, run: Optional[TaskRun]) -> None:
        """Display ``run`` and drive its timers; None detaches."""
        if run is self.run and run is not None and run.timers_active:
            return
        self.detach()
        self.run = run
        if run is None:
            return
        if run.start_timers(self.set_interval, self.refresh_display):
            tui_log(f"[LoadingState] attached {run.category.value} run")
        self.refresh_display()

    def detach(self) -> None:
        """Stop the attached run's timers without closing the run."""
        if self.run is not None:
            self.run.stop_timers()
            tui_log(f"[LoadingState] detached {self.run.category.value} run")
        self.run = None

    def on_unmount(self) -> None:
        """Clean up timers."""
        self.detach()

    def refresh_display(self) -> None:
        run = self.run
        if run is None:
            return
        try:
            stage = self.query_one("#loading_stage", Label)
            progress = self.query_one("#loading_progress", Label)
            log = self.query_one("#loading_log", Static)
        except NoMatches:
            # Not composed yet
            return
        stage.update((run.stage_message or run.profile.idle_stage).upper())
        progress.update(f"{render_bar(run.progress.current)} {run.progress.percent:>3d}% COMPLETE")
        log.update("\n".join(f"➜ {line}" for line in run.logs.render_lines()))
