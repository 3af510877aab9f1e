# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Host wiring.

The host scheduler holds typed handles and calls them directly:
  - `Dispatcher.can_take(node, task)` from its load-balancing loop;
  - `PeriodicTask.on_interval()` on a fixed cadence (or via `PeriodicRunner`);
  - `SLAWidget.get_figure()` from UI request handlers.

`FairScheduler` builds all of them around one `ClusterView` and one shared
`LatestFigureCache`.
"""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .cluster import ClusterView
from .core.config import FairpoolConfig
from .core.time import Clock, SystemClock
from .dispatch.dispatcher import FairDispatcher
from .dispatch.metrics import DispatchMetrics
from .model import Decision, Node, Task
from .runtime.periodic import PeriodicRunner, PeriodicTask
from .sla.figure import LatestFigureCache
from .sla.metrics import SLAMetrics
from .sla.tracker import SLATracker
from .sla.widget import SLAWidget

__all__ = [
    "Dispatcher",
    "FairScheduler",
    "PeriodicTask",
]


@runtime_checkable
class Dispatcher(Protocol):
    def can_take(self, node: Node, task: Task) -> Decision: ...


@dataclass
class FairScheduler:
    """
    Everything the host needs, wired once per process.

    Usage:
        fs = FairScheduler.create(view)
        await fs.start()           # SLA sampling in the background
        fs.dispatcher.can_take(node, task)
        fs.widget.get_figure()
        await fs.stop()
    """

    view: ClusterView
    cfg: FairpoolConfig
    dispatcher: FairDispatcher
    tracker: SLATracker
    cache: LatestFigureCache
    widget: SLAWidget
    runner: PeriodicRunner = field(repr=False)

    @classmethod
    def create(
        cls,
        view: ClusterView,
        *,
        cfg: FairpoolConfig | None = None,
        clock: Clock | None = None,
        dispatch_metrics: DispatchMetrics | None = None,
        sla_metrics: SLAMetrics | None = None,
    ) -> FairScheduler:
        cfg = cfg or FairpoolConfig.load()
        clock = clock or SystemClock()
        cache = LatestFigureCache()
        tracker = SLATracker(view, cache, cfg=cfg, clock=clock, metrics=sla_metrics)
        return cls(
            view=view,
            cfg=cfg,
            dispatcher=FairDispatcher(view, metrics=dispatch_metrics),
            tracker=tracker,
            cache=cache,
            widget=SLAWidget(cache),
            runner=PeriodicRunner(tracker, clock=clock, name="sla-monitor"),
        )

    async def start(self) -> None:
        await self.runner.start()

    async def stop(self) -> None:
        await self.runner.stop()
