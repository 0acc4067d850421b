# -*- coding: utf-8 -*-
"""Shared fixtures for frontend tests."""

import pytest


@pytest.fixture(autouse=True)
def _isolate_frontend_logs_to_tmp_path(monkeypatch, tmp_path):
    """Keep frontend tests from writing log sessions into repo-local .link2ink/."""
    import link2ink.logger_config as logger_config

    monkeypatch.setattr(logger_config, "_LOG_BASE_SESSION_DIR", None)
    monkeypatch.setattr(logger_config, "_LOG_SESSION_DIR", None)
    logger_config.set_log_base_session_dir_absolute(tmp_path / "link2ink_logs")


@pytest.fixture(autouse=True)
def _no_tui_debug(monkeypatch):
    monkeypatch.delenv("LINK2INK_TUI_DEBUG", raising=False)
