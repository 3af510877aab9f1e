# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Bounded per-pool windows of queue-wait samples.

Each sample (`SLAEntry`) is the aggregate over all builds waiting for a pool
at one sampling instant. A window keeps the most recent `capacity` samples;
pushing into a full window evicts the oldest one.

The registry is owned by the SLA tracker and only mutated from its cycle.
Readers get copies through `snapshot()`.
"""

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

from ..core.types import LabelName, TimestampMs


@dataclass(frozen=True)
class SLAEntry:
    """One sampling instant: summed wait time (ms) and number of waiting builds."""

    timestamp_ms: TimestampMs
    total_wait_ms: int = 0
    waiting_builds: int = 0

    @property
    def average_wait_ms(self) -> int:
        """Integer average wait; 0 when nothing was waiting."""
        if self.waiting_builds <= 0:
            return 0
        return self.total_wait_ms // self.waiting_builds

    def add_wait(self, wait_ms: int) -> SLAEntry:
        return SLAEntry(self.timestamp_ms, self.total_wait_ms + wait_ms, self.waiting_builds + 1)

    def __str__(self) -> str:
        return f"{self.total_wait_ms} ms - {self.waiting_builds} builds"


class SLAWindow:
    """Fixed-capacity FIFO of SLA entries (ring buffer)."""

    __slots__ = ("_entries",)

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._entries: deque[SLAEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def push(self, entry: SLAEntry) -> SLAEntry | None:
        """Append `entry`; returns the evicted oldest entry when the window was full."""
        evicted = self._entries[0] if len(self._entries) == self.capacity else None
        self._entries.append(entry)
        return evicted

    def snapshot(self) -> tuple[SLAEntry, ...]:
        return tuple(self._entries)

    @property
    def oldest(self) -> SLAEntry | None:
        return self._entries[0] if self._entries else None

    @property
    def newest(self) -> SLAEntry | None:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SLAEntry]:
        return iter(self.snapshot())


class WindowRegistry:
    """
    label -> window map owned by one tracker.

    Windows are created lazily with the registry's capacity and are never
    removed, even when the pool later disappears from the host.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._windows: dict[LabelName, SLAWindow] = {}

    def ensure(self, label: LabelName) -> SLAWindow:
        win = self._windows.get(label)
        if win is None:
            win = SLAWindow(self.capacity)
            self._windows[label] = win
        return win

    def get(self, label: LabelName) -> SLAWindow | None:
        return self._windows.get(label)

    def labels(self) -> list[LabelName]:
        return list(self._windows)

    def snapshot(self) -> dict[LabelName, tuple[SLAEntry, ...]]:
        """Copies of every window, in creation order."""
        return {label: win.snapshot() for label, win in self._windows.items()}

    def __contains__(self, label: object) -> bool:
        return label in self._windows

    def __len__(self) -> int:
        return len(self._windows)
