# -*- coding: utf-8 -*-
"""Task categories (tools) and their per-category constants."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class TaskCategory(Enum):
    """The task categories. Each has its own history store and task slot."""

    REPO = "repo"  # Repository -> flow diagram ("GitFlow")
    ARTICLE = "article"  # Article/web page -> infographic ("SiteSketch")


@dataclass(frozen=True)
class CategoryProfile:
    """Constants attached to a task category."""

    category: TaskCategory
    label: str
    storage_key: str
    log_prefix: str
    log_tasks: Tuple[str, ...]
    opening_stage: str
    idle_stage: str
    artifact_name: str


PROFILES = {
    TaskCategory.REPO: CategoryProfile(
        category=TaskCategory.REPO,
        label="GitFlow",
        storage_key="link2ink_repo_history",
        log_prefix="git",
        log_tasks=(
            "Fetching remote tree object...",
            "Parsing Abstract Syntax Tree...",
            "Mapping dependency graph...",
            "Identifying structural hotspots...",
            "Vectorizing node positions...",
            "Calculating force-directed layout...",
            "Optimizing render pipeline...",
            "Compiling WebGL assets...",
            "Finalizing lightmap bake...",
        ),
        opening_stage="INITIALIZING...",
        idle_stage="CONNECTING_TO_REPO",
        artifact_name="git-flow",
    ),
    TaskCategory.ARTICLE: CategoryProfile(
        category=TaskCategory.ARTICLE,
        label="SiteSketch",
        storage_key="link2ink_article_history",
        log_prefix="web",
        log_tasks=(
            "Resolving DNS headers...",
            "Scraping DOM structure...",
            "Extracting semantic entities...",
            "Analyzing content density...",
            "Synthesizing visual metaphors...",
            "Determining optimal layout...",
            "Rasterizing vector layers...",
            "Applying style transfer...",
            "Generating final composite...",
        ),
        opening_stage="INITIALIZING...",
        idle_stage="READING_CONTENT",
        artifact_name="site-sketch",
    ),
}


def get_profile(category: TaskCategory) -> CategoryProfile:
    return PROFILES[category]
