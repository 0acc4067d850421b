# -*- coding: utf-8 -*-
"""Tests for the per-category task slot."""

import asyncio

import pytest

from link2ink.categories import TaskCategory
from link2ink.errors import AuthorizationError, ExportError, GenerationError, InputValidationError
from link2ink.generation import CUSTOM_STYLE, GenerationResult, ScriptedGenerationService
from link2ink.history import Citation, HistoryStore
from link2ink.router import View, ViewRouter
from link2ink.session_gate import GateState, SessionGate
from link2ink.storage import MemoryStorage
from link2ink.tool_slot import NO_SERVICE_MESSAGE, UNEXPECTED_ERROR_MESSAGE, ToolSlot


async def _granted() -> bool:
    return True


async def _slot(category=TaskCategory.ARTICLE, service=None, storage=None):
    gate = SessionGate()
    await gate.check(_granted)
    history = HistoryStore(category, storage or MemoryStorage())
    return ToolSlot(category, history, gate, service)


class RecordingScheduler:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, callback):
        scheduler = self

        class _Timer:
            stopped = False

            def stop(self):
                self.stopped = True

        timer = _Timer()
        scheduler.timers.append(timer)
        return timer


class ExplodingService:
    async def generate(self, request, on_stage):
        on_stage("Reading content...")
        raise KeyError("boom")


class BlockingService:
    def __init__(self, error=None):
        self.release = asyncio.Event()
        self.calls = 0
        self.error = error

    async def generate(self, request, on_stage):
        self.calls += 1
        on_stage("Fetching page")
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return GenerationResult(images=("img",), citations=(Citation("https://example.com/a", "A"),))


@pytest.mark.asyncio
async def test_missing_source_is_rejected_before_dispatch():
    service = ScriptedGenerationService(stage_delay=0)
    slot = await _slot(service=service)
    with pytest.raises(InputValidationError) as excinfo:
        slot.build_request("   ")
    assert excinfo.value.message == "Please provide a valid URL."
    assert excinfo.value.field == "source"
    assert service.requests == []
    assert slot.run is None


@pytest.mark.asyncio
async def test_custom_style_requires_description():
    slot = await _slot(category=TaskCategory.REPO)
    with pytest.raises(InputValidationError, match="custom style"):
        slot.build_request("owner/repo", style=CUSTOM_STYLE, custom_style=" ")
    request = slot.build_request("owner/repo", style=CUSTOM_STYLE, custom_style="Neon cyberpunk")
    assert request.style == "Neon cyberpunk"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"style": "Watercolor"}, "style"),
        ({"language": "Klingon"}, "language"),
        ({"variations": 5}, "variations"),
        ({"variations": 0}, "variations"),
        ({"variations": "many"}, "variations"),
        ({"variations": None}, "variations"),
        ({"aspect_ratio": "2:1"}, "aspect_ratio"),
    ],
)
async def test_selectors_outside_fixed_sets_are_rejected(kwargs, field):
    slot = await _slot()
    with pytest.raises(InputValidationError) as excinfo:
        slot.build_request("https://example.com", **kwargs)
    assert excinfo.value.field == field


@pytest.mark.asyncio
async def test_reject_shows_message_without_starting_run():
    slot = await _slot()
    seen = []
    slot.subscribe(lambda: seen.append(slot.error))
    slot.reject(InputValidationError("Please provide a valid URL.", field="source"))
    assert slot.error == "Please provide a valid URL."
    assert slot.run is None
    assert not slot.busy
    assert seen == ["Please provide a valid URL."]


@pytest.mark.asyncio
async def test_success_appends_history_and_closes_run():
    service = ScriptedGenerationService(stage_delay=0)
    slot = await _slot(service=service)
    scheduler = RecordingScheduler()
    request = slot.build_request("https://example.com/post", variations=3)

    assert await slot.submit(request, scheduler=scheduler) is True
    assert not slot.busy
    assert slot.run is None
    assert slot.error is None
    assert len(slot.images) == 3
    assert slot.citations[0].hostname == "example.com"
    assert len(slot.history) == 1
    assert slot.history.items[0].title == "example.com"
    assert len(scheduler.timers) == 2
    assert all(t.stopped for t in scheduler.timers)
    assert service.requests == [request]


@pytest.mark.asyncio
async def test_generation_error_is_shown_and_clears_results():
    service = ScriptedGenerationService(stage_delay=0)
    slot = await _slot(service=service)
    await slot.submit(slot.build_request("https://example.com/ok"))
    assert slot.has_result

    service.error = GenerationError("Failed to generate infographic image. The URL might be inaccessible.")
    assert await slot.submit(slot.build_request("https://example.com/bad")) is False
    assert slot.error == "Failed to generate infographic image. The URL might be inaccessible."
    assert not slot.has_result
    assert not slot.busy
    assert len(slot.history) == 1


@pytest.mark.asyncio
async def test_empty_result_is_a_generation_failure():
    slot = await _slot(category=TaskCategory.REPO, service=ScriptedGenerationService(stage_delay=0, images=()))
    assert await slot.submit(slot.build_request("owner/repo")) is False
    assert "flow diagram" in slot.error
    assert len(slot.history) == 0


@pytest.mark.asyncio
async def test_authorization_failure_relocks_gate_and_returns_home():
    service = ScriptedGenerationService(stage_delay=0, error=AuthorizationError("Requested entity was not found."))
    slot = await _slot(service=service)
    router = ViewRouter(slot.gate)
    router.navigate(View.ARTICLE_INFOGRAPHIC)

    await slot.submit(slot.build_request("https://example.com"))
    assert slot.gate.state is GateState.LOCKED
    assert slot.gate.lock_reason == "Requested entity was not found."
    assert router.current is View.HOME
    assert slot.error == "Requested entity was not found."
    assert not slot.can_submit


@pytest.mark.asyncio
async def test_unexpected_error_is_caught_and_generic():
    slot = await _slot(service=ExplodingService())
    assert await slot.submit(slot.build_request("https://example.com")) is False
    assert slot.error == UNEXPECTED_ERROR_MESSAGE
    assert not slot.busy


@pytest.mark.asyncio
async def test_no_service_configured():
    slot = await _slot(service=None)
    assert await slot.submit(slot.build_request("https://example.com")) is False
    assert slot.error == NO_SERVICE_MESSAGE
    assert slot.run is None


@pytest.mark.asyncio
async def test_second_submit_while_busy_is_refused():
    service = BlockingService()
    slot = await _slot(service=service)
    request = slot.build_request("https://example.com/a")

    first = asyncio.create_task(slot.submit(request))
    await asyncio.sleep(0)
    assert slot.busy
    assert slot.run is not None
    assert slot.run.progress.target == 35
    assert not slot.can_submit
    assert await slot.submit(request) is False
    assert service.calls == 1

    service.release.set()
    assert await first is True
    assert not slot.busy


@pytest.mark.asyncio
async def test_run_closed_when_submission_is_cancelled():
    service = BlockingService()
    slot = await _slot(service=service)
    task = asyncio.create_task(slot.submit(slot.build_request("https://example.com/a")))
    await asyncio.sleep(0)
    run = slot.run
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert run.closed
    assert not slot.busy
    assert slot.run is None


@pytest.mark.asyncio
async def test_category_mismatch_rejected():
    slot = await _slot(category=TaskCategory.ARTICLE)
    repo_slot = await _slot(category=TaskCategory.REPO)
    with pytest.raises(ValueError):
        await slot.submit(repo_slot.build_request("owner/repo"))
    with pytest.raises(ValueError):
        ToolSlot(TaskCategory.REPO, HistoryStore(TaskCategory.ARTICLE, MemoryStorage()), slot.gate)


@pytest.mark.asyncio
async def test_recall_shows_history_item():
    service = ScriptedGenerationService(stage_delay=0)
    slot = await _slot(service=service)
    await slot.submit(slot.build_request("https://example.com/one"))
    await slot.submit(slot.build_request("https://example.com/two"))
    older = slot.history.items[1]
    slot.recall(older)
    assert slot.source == "https://example.com/one"
    assert slot.images == older.images


@pytest.mark.asyncio
async def test_storage_quota_failure_still_shows_result():
    slot = await _slot(service=ScriptedGenerationService(stage_delay=0), storage=MemoryStorage(quota_bytes=1))
    assert await slot.submit(slot.build_request("https://example.com")) is True
    assert len(slot.history) == 1
    assert slot.error is None


@pytest.mark.asyncio
async def test_submit_refused_before_gate_unlocks():
    service = ScriptedGenerationService(stage_delay=0, error=AuthorizationError("Requested entity was not found."))
    gate = SessionGate()
    slot = ToolSlot(TaskCategory.ARTICLE, HistoryStore(TaskCategory.ARTICLE, MemoryStorage()), gate, service)
    request = slot.build_request("https://example.com")

    assert await slot.submit(request) is False
    assert gate.state is GateState.CHECKING
    assert service.requests == []
    assert slot.run is None


@pytest.mark.asyncio
async def test_authorization_failure_after_gate_already_relocked():
    service = BlockingService(error=AuthorizationError("Requested entity was not found."))
    slot = await _slot(service=service)
    task = asyncio.create_task(slot.submit(slot.build_request("https://example.com/a")))
    await asyncio.sleep(0)
    slot.gate.relock("Another tool lost access")

    service.release.set()
    assert await task is False
    assert slot.error == "Requested entity was not found."
    assert slot.gate.state is GateState.LOCKED
    assert slot.gate.lock_reason == "Another tool lost access"


@pytest.mark.asyncio
async def test_save_artifacts_uses_category_file_names(tmp_path):
    slot = await _slot(category=TaskCategory.REPO, service=ScriptedGenerationService(stage_delay=0))
    with pytest.raises(ExportError):
        slot.save_artifacts(tmp_path)

    await slot.submit(slot.build_request("owner/repo", variations=2))
    paths = slot.save_artifacts(tmp_path)
    assert [p.name for p in paths] == ["git-flow-v1.png", "git-flow-v2.png"]
    assert all(p.stat().st_size > 0 for p in paths)
