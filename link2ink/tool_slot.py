# -*- coding: utf-8 -*-
"""
ToolSlot - the active-task slot of one tool (task category).

A slot holds at most one in-flight generation request. It validates input
before anything starts, drives a TaskRun while the request is outstanding,
appends the result to the category's history on success and turns every
failure into a short inline message. The slot lives on the app, not on the
view, so a request that completes after the user navigated away still lands
in the slot and is shown when the tool is opened again.
"""

from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from link2ink.categories import TaskCategory, get_profile
from link2ink.errors import AuthorizationError, ExportError, GenerationError, InputValidationError
from link2ink import export
from link2ink.generation import (
    ASPECT_RATIOS,
    CUSTOM_STYLE,
    LANGUAGES,
    MAX_VARIATIONS,
    MIN_VARIATIONS,
    STYLE_PRESETS,
    GenerationRequest,
    GenerationService,
)
from link2ink.history import Citation, HistoryItem, HistoryStore
from link2ink.logger_config import logger
from link2ink.session_gate import SessionGate
from link2ink.task_run import Scheduler, TaskRun

SlotListener = Callable[[], None]

EMPTY_RESULT_MESSAGES = {
    TaskCategory.ARTICLE: "Failed to generate infographic image. The URL might be inaccessible.",
    TaskCategory.REPO: "Failed to generate flow diagram. The repository might be private or inaccessible.",
}
MISSING_SOURCE_MESSAGES = {
    TaskCategory.ARTICLE: "Please provide a valid URL.",
    TaskCategory.REPO: "Please provide a repository URL or owner/repo.",
}
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."
NO_SERVICE_MESSAGE = "No generation service configured."


class ToolSlot:
    """Per-category task slot.

    Args:
        category: Which tool this slot belongs to.
        history: The category's history store.
        gate: Session gate to re-lock on authorization failures.
        service: Generation service; None disables submission with a message.
    """

    def __init__(
        self,
        category: TaskCategory,
        history: HistoryStore,
        gate: SessionGate,
        service: Optional[GenerationService] = None,
    ):
        if history.category is not category:
            raise ValueError(f"History store for {history.category.value} given to {category.value} slot")
        self.category = category
        self.profile = get_profile(category)
        self.history = history
        self.gate = gate
        self.service = service

        self.busy = False
        self.error: Optional[str] = None
        self.source: str = ""
        self.images: Tuple[str, ...] = ()
        self.citations: Tuple[Citation, ...] = ()
        self.run: Optional[TaskRun] = None
        self.last_request: Optional[GenerationRequest] = None
        self._listeners: List[SlotListener] = []

    # ─────────────────────────────────────────────────────────────────────
    # Observers
    # ─────────────────────────────────────────────────────────────────────

    def subscribe(self, listener: SlotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def has_result(self) -> bool:
        return bool(self.images)

    @property
    def can_submit(self) -> bool:
        return not self.busy and self.gate.is_unlocked

    # ─────────────────────────────────────────────────────────────────────
    # Requests
    # ─────────────────────────────────────────────────────────────────────

    def build_request(
        self,
        source: str,
        style: Optional[str] = None,
        custom_style: str = "",
        language: str = LANGUAGES[0][1],
        variations: int = MIN_VARIATIONS,
        aspect_ratio: str = ASPECT_RATIOS[0][0],
    ) -> GenerationRequest:
        """Validate form values and build a request.

        Raises:
            InputValidationError: A required field is missing or empty, or a
                selector holds a value outside its fixed set.
        """
        source = (source or "").strip()
        if not source:
            raise InputValidationError(MISSING_SOURCE_MESSAGES[self.category], field="source")

        presets = STYLE_PRESETS[self.category]
        style = style or presets[0]
        if style not in presets:
            raise InputValidationError(f"Unknown style: {style}", field="style")
        if style == CUSTOM_STYLE:
            style = (custom_style or "").strip()
            if not style:
                raise InputValidationError("Please describe your custom style.", field="custom_style")

        if language not in {value for _, value in LANGUAGES}:
            raise InputValidationError(f"Unsupported language: {language}", field="language")
        try:
            variations = int(variations)
        except (TypeError, ValueError):
            raise InputValidationError(f"Variations must be a number, got {variations!r}.", field="variations") from None
        if not MIN_VARIATIONS <= variations <= MAX_VARIATIONS:
            raise InputValidationError(
                f"Variations must be between {MIN_VARIATIONS} and {MAX_VARIATIONS}.",
                field="variations",
            )
        if aspect_ratio not in {value for value, _ in ASPECT_RATIOS}:
            raise InputValidationError(f"Unsupported aspect ratio: {aspect_ratio}", field="aspect_ratio")

        return GenerationRequest(
            category=self.category,
            source=source,
            style=style,
            language=language,
            variations=variations,
            aspect_ratio=aspect_ratio,
        )

    def reject(self, error: InputValidationError) -> None:
        """Show a validation failure; nothing is dispatched."""
        self.error = error.message
        self._notify()

    async def submit(
        self,
        request: GenerationRequest,
        scheduler: Optional[Scheduler] = None,
        on_tick: Optional[Callable[[], None]] = None,
    ) -> bool:
        """Run one generation request to completion.

        When ``scheduler`` is given the run's timers are started with it; a
        view can instead attach its own timers to ``self.run`` while it is
        displayed. Either way the run is closed when the request settles.

        Returns True when a result was produced and added to history. Never
        raises for service failures; the message is left in ``self.error``.
        """
        if self.busy:
            logger.warning("[ToolSlot:{}] Submission ignored: a request is already in flight", self.category.value)
            return False
        if request.category is not self.category:
            raise ValueError(f"{request.category.value} request submitted to {self.category.value} slot")
        if not self.gate.is_unlocked:
            logger.warning("[ToolSlot:{}] Submission ignored: session is {}", self.category.value, self.gate.state.value)
            return False
        if self.service is None:
            self.error = NO_SERVICE_MESSAGE
            self._notify()
            return False

        self.busy = True
        self.error = None
        self.images = ()
        self.citations = ()
        self.source = request.source
        self.last_request = request
        run = TaskRun(self.category)
        run.begin(self.profile.opening_stage)
        self.run = run
        self._notify()
        logger.info(
            "[ToolSlot:{}] Submitting {} (style={}, language={}, variations={}, ratio={})",
            self.category.value,
            request.source,
            request.style,
            request.language,
            request.variations,
            request.aspect_ratio,
        )

        succeeded = False
        try:
            try:
                if scheduler is not None:
                    run.start_timers(scheduler, on_tick)
                result = await self.service.generate(request, run.on_stage)
            finally:
                run.close()
            if not result.images:
                raise GenerationError(EMPTY_RESULT_MESSAGES[self.category])
            self.images = tuple(result.images)
            self.citations = tuple(result.citations)
            item = self.history.new_item(request.source, self.images, self.citations)
            self.history.append(item)
            succeeded = True
            logger.info("[ToolSlot:{}] Completed with {} artifact(s)", self.category.value, len(self.images))
        except AuthorizationError as e:
            logger.warning("[ToolSlot:{}] Authorization failed: {}", self.category.value, e.message)
            self.error = e.message
            if self.gate.is_unlocked:
                self.gate.relock(e.message)
        except GenerationError as e:
            logger.warning("[ToolSlot:{}] Generation failed: {}", self.category.value, e.message)
            self.error = e.message
        except Exception:
            logger.exception("[ToolSlot:{}] Unexpected generation failure", self.category.value)
            self.error = UNEXPECTED_ERROR_MESSAGE
        finally:
            self.busy = False
            self.run = None
            self._notify()
        return succeeded

    # ─────────────────────────────────────────────────────────────────────
    # History
    # ─────────────────────────────────────────────────────────────────────

    def save_artifacts(self, directory: Union[str, Path]) -> List[Path]:
        """Write the displayed artifacts to ``directory`` as numbered PNG files.

        Raises:
            ExportError: Nothing is displayed, a request is in flight, or
                the files could not be written.
        """
        if self.busy:
            raise ExportError("Wait for the current request to finish before saving.")
        if not self.has_result:
            raise ExportError("There is nothing to save yet.")
        return export.save_artifacts(self.images, directory, self.profile.artifact_name)

    def recall(self, item: HistoryItem) -> None:
        """Show a history item's results in the slot."""
        if self.busy:
            return
        self.source = item.source
        self.images = item.images
        self.citations = item.citations
        self.error = None
        self._notify()
