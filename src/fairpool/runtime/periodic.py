# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Fixed-cadence runner for periodic work.

Invokes `task.on_interval()` from one asyncio task, so at most one cycle is
in flight, including across `stop()`. The cycle runs in a worker thread, so
host reads that block do not stall the event loop. The next invocation is
due one period after the previous one *started*; a cycle that overruns its
period is followed immediately by the next one. The period is read and
validated once, in `start()`.

A failing cycle is logged and the loop keeps going.
"""

import asyncio
from typing import Protocol, runtime_checkable

from ..core.logging import get_logger
from ..core.time import Clock, SystemClock


@runtime_checkable
class PeriodicTask(Protocol):
    """Work the host triggers on a fixed cadence."""

    @property
    def recurrence_period_ms(self) -> int: ...

    def on_interval(self) -> None: ...


class PeriodicRunner:
    """
    Minimal lifecycle:
        runner = PeriodicRunner(tracker)
        await runner.start()
        ...
        await runner.stop()
    """

    def __init__(self, task: PeriodicTask, *, clock: Clock | None = None, name: str = "periodic") -> None:
        self.task = task
        self.clock = clock or SystemClock()
        self.name = name
        self.log = get_logger("runtime.periodic")
        self.cycles = 0
        self.failures = 0
        self._period_ms = 0
        self._bg: asyncio.Task | None = None
        self._cycle: asyncio.Future | None = None

    @property
    def running(self) -> bool:
        return self._bg is not None and not self._bg.done()

    async def start(self) -> None:
        if self.running:
            return
        period_ms = int(self.task.recurrence_period_ms)
        if period_ms <= 0:
            raise ValueError(f"recurrence period must be positive, got {period_ms}")
        self._period_ms = period_ms
        self._bg = asyncio.create_task(self._loop(), name=self.name)

    async def stop(self) -> None:
        t, self._bg = self._bg, None
        if t is None:
            return
        t.cancel()
        try:
            await t
        except asyncio.CancelledError:
            pass
        cycle, self._cycle = self._cycle, None
        if cycle is not None:
            # the worker thread cannot be interrupted; let the cycle finish
            await asyncio.wait([cycle])
            if not cycle.cancelled() and cycle.exception() is not None:
                self.failures += 1
                self.log.error(
                    "periodic cycle failed", exc_info=cycle.exception(), event="periodic.failed", runner=self.name
                )

    async def _loop(self) -> None:
        period_ms = self._period_ms
        while True:
            started = self.clock.mono_ms()
            try:
                self._cycle = asyncio.ensure_future(asyncio.to_thread(self.task.on_interval))
                await asyncio.shield(self._cycle)
            except Exception:
                self.failures += 1
                self.log.exception("periodic cycle failed", event="periodic.failed", runner=self.name)
            self._cycle = None
            self.cycles += 1
            await self.clock.sleep_ms(max(0, started + period_ms - self.clock.mono_ms()))
