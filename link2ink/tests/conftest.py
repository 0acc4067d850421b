# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

import pytest

from link2ink.storage import MemoryStorage


@pytest.fixture
def _isolate_test_logs(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Keep tests from writing log sessions into repo-local .link2ink/."""
    import link2ink.logger_config as logger_config

    monkeypatch.delenv("LINK2INK_LOG_BASE_DIR", raising=False)
    monkeypatch.setattr(logger_config, "_LOG_BASE_SESSION_DIR", None)
    monkeypatch.setattr(logger_config, "_LOG_SESSION_DIR", None)
    logger_config.set_log_base_session_dir_absolute(tmp_path / "link2ink_logs")
    yield
    logger_config.reset_logging_session()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


class FakeClock:
    """Deterministic clock; each call returns the scripted times in order."""

    def __init__(self, times: List[datetime]):
        self._times = list(times)
        self.calls = 0

    def __call__(self) -> datetime:
        value = self._times[min(self.calls, len(self._times) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def fake_clock() -> FakeClock:
    start = datetime(2024, 6, 12, 10, 0, 0)
    return FakeClock([start + timedelta(seconds=i) for i in range(50)])


class ScriptedRandom:
    """random.Random stand-in with scripted ``random()`` draws."""

    def __init__(self, draws: List[float]):
        self._draws = list(draws)
        self.choices: List[str] = []

    def random(self) -> float:
        return self._draws.pop(0)

    def choice(self, seq):
        self.choices.append(seq[0])
        return seq[0]


@pytest.fixture
def make_clock():
    return FakeClock


@pytest.fixture
def make_rng():
    return ScriptedRandom
