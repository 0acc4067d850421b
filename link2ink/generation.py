# -*- coding: utf-8 -*-
"""
Generation service interface.

The actual generation (scraping, analysis, image synthesis) happens in an
external service. This module defines what the client sends and receives,
plus a deterministic scripted service for tests and ``--demo`` runs.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Sequence, Tuple

from link2ink.categories import TaskCategory
from link2ink.errors import GenerationError
from link2ink.history import Citation

StageCallback = Callable[[str], None]

CUSTOM_STYLE = "Custom"

STYLE_PRESETS = {
    TaskCategory.ARTICLE: (
        "Modern Editorial",
        "Fun & Playful",
        "Clean Minimalist",
        "Dark Mode Tech",
        CUSTOM_STYLE,
    ),
    TaskCategory.REPO: (
        "Modern Data Flow",
        "Hand-Drawn Blueprint",
        "Clean Minimalist",
        "Dark Mode Tech",
        CUSTOM_STYLE,
    ),
}

# (label, value)
LANGUAGES: Tuple[Tuple[str, str], ...] = (
    ("English (US)", "English"),
    ("Arabic (Egypt)", "Arabic"),
    ("German (Germany)", "German"),
    ("Spanish (Mexico)", "Spanish"),
    ("French (France)", "French"),
    ("Hindi (India)", "Hindi"),
    ("Indonesian (Indonesia)", "Indonesian"),
    ("Italian (Italy)", "Italian"),
    ("Japanese (Japan)", "Japanese"),
    ("Korean (South Korea)", "Korean"),
    ("Portuguese (Brazil)", "Portuguese"),
    ("Russian (Russia)", "Russian"),
    ("Ukrainian (Ukraine)", "Ukrainian"),
    ("Vietnamese (Vietnam)", "Vietnamese"),
    ("Chinese (China)", "Chinese"),
)

# (value, description)
ASPECT_RATIOS: Tuple[Tuple[str, str], ...] = (
    ("1:1", "Square"),
    ("16:9", "Landscape"),
    ("4:3", "Standard"),
    ("3:4", "Portrait"),
    ("9:16", "Mobile"),
)

MIN_VARIATIONS = 1
MAX_VARIATIONS = 4


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the generation service needs for one task."""

    category: TaskCategory
    source: str
    style: str
    language: str = "English"
    variations: int = 1
    aspect_ratio: str = "1:1"


@dataclass(frozen=True)
class GenerationResult:
    """Successful generation payload: base64 artifacts and citations, in order."""

    images: Tuple[str, ...] = field(default_factory=tuple)
    citations: Tuple[Citation, ...] = field(default_factory=tuple)


class GenerationService(Protocol):
    """External generation service.

    ``on_stage`` may be called zero or more times with free-text status
    strings while the request is in flight. Failures raise GenerationError
    (or its AuthorizationError subclass) with a user-facing message.
    """

    async def generate(self, request: GenerationRequest, on_stage: StageCallback) -> GenerationResult:
        ...


# 1x1 transparent PNG
PLACEHOLDER_PNG = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="

DEFAULT_SCRIPT = {
    TaskCategory.ARTICLE: (
        "Reading article content...",
        "Researching key facts...",
        "Structuring visual narrative...",
        "Generating infographic...",
    ),
    TaskCategory.REPO: (
        "Connecting to repository...",
        "Fetching file tree...",
        "Analyzing code structure...",
        "Designing flow diagram...",
        "Rendering final image...",
    ),
}


class ScriptedGenerationService:
    """Deterministic stand-in for the real service.

    Emits a fixed list of stage messages with a delay between them, then
    returns one placeholder artifact per requested variation. Setting
    ``error`` makes every call fail with that exception after the stages.
    """

    def __init__(
        self,
        stages: Optional[Sequence[str]] = None,
        stage_delay: float = 0.8,
        error: Optional[GenerationError] = None,
        images: Optional[Sequence[str]] = None,
    ):
        self.stages = tuple(stages) if stages is not None else None
        self.stage_delay = stage_delay
        self.error = error
        self.images = tuple(images) if images is not None else None
        self.requests: list = []

    async def generate(self, request: GenerationRequest, on_stage: StageCallback) -> GenerationResult:
        self.requests.append(request)
        stages = self.stages if self.stages is not None else DEFAULT_SCRIPT[request.category]
        for stage in stages:
            on_stage(stage)
            if self.stage_delay:
                await asyncio.sleep(self.stage_delay)
        if self.error is not None:
            raise self.error
        images = self.images if self.images is not None else (PLACEHOLDER_PNG,) * request.variations
        return GenerationResult(
            images=tuple(images),
            citations=(Citation(uri=request.source, title="Source"),) if images else (),
        )
