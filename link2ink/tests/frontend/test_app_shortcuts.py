# -*- coding: utf-8 -*-
"""Pilot tests for startup gating, the intro overlay and view shortcuts."""

from __future__ import annotations

import pytest
from textual.widgets import Button, ContentSwitcher, Static

from link2ink.frontend import Link2InkApp
from link2ink.frontend.modals import ApiKeyModal, IntroOverlay, KeyboardShortcutsModal
from link2ink.router import View
from link2ink.session_gate import GateState
from link2ink.storage import MemoryStorage


async def _granted() -> bool:
    return True


def _make_app(probe=_granted, **kwargs) -> Link2InkApp:
    kwargs.setdefault("show_intro", False)
    return Link2InkApp(storage=MemoryStorage(), probe=probe, **kwargs)


async def _wait_for(pilot, predicate, attempts: int = 100) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await pilot.pause(0.01)
    assert predicate()


@pytest.mark.asyncio
async def test_alt_digit_switches_view_when_unlocked() -> None:
    app = _make_app()
    async with app.run_test(headless=True, size=(120, 40)) as pilot:
        await _wait_for(pilot, lambda: app.gate.is_unlocked)
        await pilot.pause()

        await pilot.press("alt+2")
        await pilot.pause()
        assert app.router.current is View.REPO_ANALYZER
        assert app.main_query_one("#view_switcher", ContentSwitcher).current == "repo_analyzer"

        await pilot.press("alt+3")
        await pilot.pause()
        assert app.router.current is View.ARTICLE_INFOGRAPHIC

        await pilot.press("alt+1")
        await pilot.pause()
        assert app.router.current is View.HOME


@pytest.mark.asyncio
async def test_extra_modifier_does_not_switch_view() -> None:
    app = _make_app()
    async with app.run_test(headless=True, size=(120, 40)) as pilot:
        await _wait_for(pilot, lambda: app.gate.is_unlocked)
        await pilot.press("ctrl+alt+2")
        await pilot.pause()
        assert app.router.current is View.HOME


@pytest.mark.asyncio
async def test_locked_session_ignores_shortcut_until_key_entered() -> None:
    app = _make_app(probe=None)
    async with app.run_test(headless=True, size=(120, 40)) as pilot:
        await _wait_for(pilot, lambda: isinstance(app.screen, ApiKeyModal))
        assert app.gate.state is GateState.LOCKED
        assert app.main_query_one("#gate_placeholder", Static).display is False

        await pilot.press("alt+2")
        await pilot.pause()
        assert app.router.current is View.HOME

        app.screen.query_one("#api_key_input").value = "sk-test"
        await pilot.click("#api_key_submit")
        await _wait_for(pilot, lambda: app.gate.is_unlocked)
        assert app.api_key == "sk-test"
        assert not isinstance(app.screen, ApiKeyModal)

        await pilot.press("alt+2")
        await pilot.pause()
        assert app.router.current is View.REPO_ANALYZER


@pytest.mark.asyncio
async def test_empty_key_keeps_modal_open() -> None:
    app = _make_app(probe=None)
    async with app.run_test(headless=True, size=(120, 40)) as pilot:
        await _wait_for(pilot, lambda: isinstance(app.screen, ApiKeyModal))
        await pilot.click("#api_key_submit")
        await pilot.pause()
        assert isinstance(app.screen, ApiKeyModal)
        assert app.gate.state is GateState.LOCKED


@pytest.mark.asyncio
async def test_intro_overlay_swallows_first_key() -> None:
    app = _make_app(show_intro=True, intro_duration=0)
    async with app.run_test(headless=True, size=(120, 40)) as pilot:
        await _wait_for(pilot, lambda: isinstance(app.screen, IntroOverlay))
        assert app.intro_active
        assert app.dispatcher.enabled is False

        await pilot.press("alt+2")
        await _wait_for(pilot, lambda: not app.intro_active)
        assert app.router.current is View.HOME

        await pilot.press("alt+3")
        await pilot.pause()
        assert app.router.current is View.ARTICLE_INFOGRAPHIC


@pytest.mark.asyncio
async def test_intro_completes_on_its_own() -> None:
    app = _make_app(show_intro=True, intro_duration=0.05)
    async with app.run_test(headless=True, size=(120, 40)) as pilot:
        await _wait_for(pilot, lambda: app.gate.is_unlocked)
        await _wait_for(pilot, lambda: not app.intro_active)
        assert not isinstance(app.screen, IntroOverlay)


@pytest.mark.asyncio
async def test_help_modal_lists_shortcuts() -> None:
    app = _make_app()
    async with app.run_test(headless=True, size=(120, 40)) as pilot:
        await _wait_for(pilot, lambda: app.gate.is_unlocked)
        await pilot.press("ctrl+g")
        await pilot.pause()
        assert isinstance(app.screen, KeyboardShortcutsModal)
        assert [label for label, _ in app.screen.navigation] == ["Alt+1", "Alt+2", "Alt+3"]

        await pilot.press("escape")
        await pilot.pause()
        assert not isinstance(app.screen, KeyboardShortcutsModal)


@pytest.mark.asyncio
async def test_tab_bar_buttons_navigate() -> None:
    app = _make_app()
    async with app.run_test(headless=True, size=(120, 40)) as pilot:
        await _wait_for(pilot, lambda: app.gate.is_unlocked)
        await pilot.click("#tab_article_infographic")
        await pilot.pause()
        assert app.router.current is View.ARTICLE_INFOGRAPHIC
        assert app.main_query_one("#tab_article_infographic", Button).has_class("-active")
        assert not app.main_query_one("#tab_home", Button).has_class("-active")
