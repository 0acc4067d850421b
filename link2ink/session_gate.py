# -*- coding: utf-8 -*-
"""
Capability gate for paid features.

The gate has three states and exactly three transitions:

    CHECKING --probe result--> LOCKED | UNLOCKED     (once, at startup)
    LOCKED   --unlock()------> UNLOCKED              (explicit user interaction)
    UNLOCKED --relock()------> LOCKED                (any collaborator)

After a re-lock the gate never probes again; only the explicit unlock
interaction re-arms it.
"""

import os
from enum import Enum
from typing import Awaitable, Callable, List, Mapping, Optional

from link2ink.errors import GateTransitionError, ProbeError
from link2ink.logger_config import logger

CapabilityProbe = Callable[[], Awaitable[bool]]
GateListener = Callable[["GateState", "GateState"], None]

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


class GateState(Enum):
    CHECKING = "checking"
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class SessionGate:
    """Three-state gate deciding whether the rest of the app is usable."""

    def __init__(self) -> None:
        self._state = GateState.CHECKING
        self._listeners: List[GateListener] = []
        self.lock_reason: Optional[str] = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_unlocked(self) -> bool:
        return self._state is GateState.UNLOCKED

    @property
    def is_checking(self) -> bool:
        return self._state is GateState.CHECKING

    def subscribe(self, listener: GateListener) -> Callable[[], None]:
        """Register ``listener(old, new)``; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _transition(self, new_state: GateState) -> None:
        old_state = self._state
        if old_state is new_state:
            return
        self._state = new_state
        logger.info("[SessionGate] {} -> {}", old_state.value, new_state.value)
        for listener in list(self._listeners):
            listener(old_state, new_state)

    async def check(self, probe: Optional[CapabilityProbe]) -> GateState:
        """Run the single startup probe and settle on LOCKED or UNLOCKED.

        A missing probe is treated exactly like a probe resolving False. A
        probe that raises degrades to LOCKED.
        """
        if self._state is not GateState.CHECKING:
            raise GateTransitionError(f"Capability already checked (state={self._state.value})")

        granted = False
        if probe is None:
            logger.info("[SessionGate] No capability probe available; treating as not granted")
        else:
            try:
                granted = await _run_probe(probe)
            except ProbeError as e:
                logger.warning("[SessionGate] Capability probe unreachable: {}", e)
                granted = False

        if not granted:
            self.lock_reason = "Capability not granted"
        self._transition(GateState.UNLOCKED if granted else GateState.LOCKED)
        return self._state

    def unlock(self) -> None:
        """Explicit unlock interaction (e.g. the user supplied an API key)."""
        if self._state is not GateState.LOCKED:
            raise GateTransitionError(f"Can only unlock a locked gate (state={self._state.value})")
        self.lock_reason = None
        self._transition(GateState.UNLOCKED)

    def relock(self, reason: str = "") -> None:
        """Close the gate again, e.g. after an authorization failure."""
        if self._state is GateState.CHECKING:
            raise GateTransitionError("Cannot re-lock before the capability check completes")
        if self._state is GateState.LOCKED:
            return
        self.lock_reason = reason or "Re-lock requested"
        logger.warning("[SessionGate] Re-lock requested: {}", self.lock_reason)
        self._transition(GateState.LOCKED)


async def _run_probe(probe: CapabilityProbe) -> bool:
    try:
        return bool(await probe())
    except ProbeError:
        raise
    except Exception as e:
        raise ProbeError(str(e) or type(e).__name__) from e


def resolve_probe(environ: Optional[Mapping[str, str]] = None, enabled: bool = True) -> Optional[CapabilityProbe]:
    """Return the environment's capability probe, or None when there is none.

    The probe reports whether an API key is configured in the environment.
    Callers treat a None result exactly like a probe that resolves False.
    """
    if not enabled:
        return None
    env = os.environ if environ is None else environ

    async def _has_api_key() -> bool:
        return any(env.get(name, "").strip() for name in API_KEY_ENV_VARS)

    return _has_api_key
