# -*- coding: utf-8 -*-
"""
Progress estimation and smoothing for the loading display.

The generation service only reports free-text stage messages, never a numeric
percentage. ``stage_target`` turns each message into one of three coarse
tiers and ``ProgressAnimator`` eases the displayed value toward that tier on
every tick, which gives a smooth three-step progress illusion.
"""

from typing import Optional, Tuple

BASELINE = 10.0
TICK_INTERVAL = 0.03  # seconds
EASING = 0.05  # fraction of the remaining distance covered per tick
SETTLE_TOLERANCE = 0.5

# Ordered buckets: the first bucket with a matching keyword wins.
STAGE_BUCKETS: Tuple[Tuple[Tuple[str, ...], float], ...] = (
    (("connect", "fetch", "read", "init"), 35.0),
    (("analyz", "research", "pars", "struct"), 70.0),
    (("generat", "render", "design", "transform"), 98.0),
)


def classify_stage(message: str) -> Optional[float]:
    """Return the target tier for a stage message, or None if nothing matches."""
    lowered = (message or "").lower()
    for keywords, tier in STAGE_BUCKETS:
        if any(keyword in lowered for keyword in keywords):
            return tier
    return None


def stage_target(message: str, previous: float) -> float:
    """Map a stage message to a target tier, keeping ``previous`` when unmatched.

    There is no backward guard: a later message that matches an earlier
    bucket moves the target down again.

    Args:
        message: Free-text status string from the generation service.
        previous: The target currently in effect.

    Returns:
        The new target tier.
    """
    tier = classify_stage(message)
    return previous if tier is None else tier


class ProgressAnimator:
    """Eases a displayed percentage toward a target, one tick at a time.

    ``current`` is the only value the loading display renders and only
    ``tick`` and ``reset`` write it.
    """

    def __init__(self, baseline: float = BASELINE, easing: float = EASING, tolerance: float = SETTLE_TOLERANCE):
        self.baseline = baseline
        self.easing = easing
        self.tolerance = tolerance
        self._current = baseline
        self._target = baseline

    @property
    def current(self) -> float:
        return self._current

    @property
    def target(self) -> float:
        return self._target

    @property
    def percent(self) -> int:
        """Displayed value rounded for the ``NN% COMPLETE`` label."""
        return int(round(self._current))

    @property
    def settled(self) -> bool:
        return abs(self._target - self._current) < self.tolerance

    def reset(self) -> None:
        """Return both values to the baseline for a new task."""
        self._current = self.baseline
        self._target = self.baseline

    def set_target(self, target: float) -> None:
        self._target = max(0.0, min(100.0, float(target)))

    def apply_stage(self, message: str) -> float:
        """Feed a stage message through the mapper and return the new target."""
        self.set_target(stage_target(message, self._target))
        return self._target

    def tick(self) -> float:
        """Advance one animation step and return the displayed value."""
        delta = self._target - self._current
        if abs(delta) < self.tolerance:
            return self._current
        self._current = max(0.0, min(100.0, self._current + delta * self.easing))
        return self._current
