# -*- coding: utf-8 -*-
"""
Rolling diagnostic log shown under the loading display.

The lines are decorative: they are never derived from the real stage
messages and never fed back into the request lifecycle. Where the lines come
from is a ``LogSource``, so a real event tap can replace the decorative
source without touching the stream or the progress animator.
"""

import random
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Deque, List, Optional, Protocol, Sequence

WINDOW_SIZE = 5
TICK_INTERVAL = 0.6  # seconds
SKIP_PROBABILITY = 0.7


@dataclass(frozen=True)
class LogEntry:
    """One rendered log line."""

    timestamp: datetime
    text: str

    def render(self) -> str:
        return f"[{self.timestamp.strftime('%H:%M:%S')}] {self.text}"


class LogSource(Protocol):
    """Produces at most one log line per poll."""

    def poll(self) -> Optional[str]:
        ...


class DecorativeLogSource:
    """Draws category-specific task descriptions at an uneven cadence.

    Each poll skips with probability ``skip_probability`` to imitate uneven
    processing speed, otherwise returns one task from the pool uniformly.
    """

    def __init__(
        self,
        tasks: Sequence[str],
        rng: Optional[random.Random] = None,
        skip_probability: float = SKIP_PROBABILITY,
    ):
        if not tasks:
            raise ValueError("DecorativeLogSource needs at least one task line")
        self.tasks = tuple(tasks)
        self.skip_probability = skip_probability
        self._rng = rng or random.Random()

    def poll(self) -> Optional[str]:
        if self._rng.random() < self.skip_probability:
            return None
        return f"{self._rng.choice(self.tasks)} ... OK"


class LogStream:
    """Bounded window of the most recent log entries, oldest first."""

    def __init__(
        self,
        source: LogSource,
        window_size: int = WINDOW_SIZE,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.source = source
        self.window_size = window_size
        self._clock = clock
        self._entries: Deque[LogEntry] = deque()

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def seed(self, text: str) -> None:
        """Start the window over with a single opening line."""
        self._entries.clear()
        self._append(text)

    def tick(self) -> Optional[LogEntry]:
        """Poll the source once; returns the appended entry, if any."""
        text = self.source.poll()
        if text is None:
            return None
        return self._append(text)

    def _append(self, text: str) -> LogEntry:
        stamp = self._clock()
        # Wall clock can step backwards; the window stays in timestamp order.
        if self._entries and stamp < self._entries[-1].timestamp:
            stamp = self._entries[-1].timestamp
        entry = LogEntry(timestamp=stamp, text=text)
        self._entries.append(entry)
        while len(self._entries) > self.window_size:
            self._entries.popleft()
        return entry

    def render_lines(self) -> List[str]:
        return [entry.render() for entry in self._entries]
