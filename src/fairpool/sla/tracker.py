# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
Pool SLA monitor.

Samples queue wait times once per fixed interval, keeps a bounded window of
samples per pool, logs an error when a pool's average wait exceeds its
configured SLA and publishes a fresh chart into the latest-figure cache.

To set a threshold, add a global env property:
    poolmonitor.<pool name>.sla = <minutes>

Each cycle runs three phases in order:
  sampling   - create missing windows; sum wait time and count of queued
               buildable items per true pool;
  evaluating - push the snapshot (or a zero entry) into every window and
               check thresholds of pools with waiting builds;
  rendering  - rebuild the figure from window copies and publish it.

Cycles never overlap: the periodic runner keeps at most one `on_interval()`
call in flight, so the windows need no locking.
"""

from enum import Enum

from ..cluster import ClusterView, is_true_pool
from ..core.config import FairpoolConfig
from ..core.logging import get_logger, log_context
from ..core.time import Clock, SystemClock
from ..core.types import LabelName, MS_PER_MINUTE, TimestampMs
from .figure import LatestFigureCache, SLAFigure, build_figure
from .metrics import SLAMetrics
from .thresholds import lookup_threshold
from .window import SLAEntry, WindowRegistry


class TrackerState(str, Enum):
    idle = "idle"
    sampling = "sampling"
    evaluating = "evaluating"
    rendering = "rendering"


class SLATracker:
    """
    Periodic SLA sampler.

    Usage:
        cache = LatestFigureCache()
        tracker = SLATracker(view, cache)
        tracker.on_interval()   # once per `recurrence_period_ms`
    """

    def __init__(
        self,
        view: ClusterView,
        cache: LatestFigureCache,
        *,
        cfg: FairpoolConfig | None = None,
        clock: Clock | None = None,
        metrics: SLAMetrics | None = None,
    ) -> None:
        self.view = view
        self.cache = cache
        self.cfg = cfg or FairpoolConfig()
        self.clock = clock or SystemClock()
        self.metrics = metrics or SLAMetrics.default()
        self.log = get_logger("sla")

        # fixed for the lifetime of the tracker
        self._period_ms = self.cfg.sla_sample_interval_ms
        self._windows = WindowRegistry(self.cfg.sla_window_capacity)
        self._state = TrackerState.idle
        self._cycle = 0

    # ---- PeriodicTask --------------------------------------------------------

    @property
    def recurrence_period_ms(self) -> int:
        return self._period_ms

    def on_interval(self) -> None:
        """Run one sampling cycle."""
        self._cycle += 1
        with log_context(cycle=self._cycle):
            try:
                pools = self._sample_pools()
                snapshot = self._sample_queue(pools)
                self._state = TrackerState.evaluating
                self._record(pools, snapshot)
                self._check_thresholds(snapshot)
                self._state = TrackerState.rendering
                self._render()
            finally:
                self._state = TrackerState.idle
        self.metrics.cycles_total.inc()

    # ---- introspection -------------------------------------------------------

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def windows(self) -> WindowRegistry:
        return self._windows

    # ---- phases --------------------------------------------------------------

    def _sample_pools(self) -> list[LabelName]:
        self._state = TrackerState.sampling
        pools: list[LabelName] = []
        for label in self.view.labels():
            if label in self._windows:
                pools.append(label)
            elif is_true_pool(label, self.view.label_nodes(label)):
                self._windows.ensure(label)
                pools.append(label)
        return pools

    def _sample_queue(self, pools: list[LabelName]) -> dict[LabelName, SLAEntry]:
        known = set(pools)
        snapshot: dict[LabelName, SLAEntry] = {}
        for item in self.view.buildable_items():
            label = item.task.label
            if label is None:
                continue
            if label not in known and not is_true_pool(label, self.view.label_nodes(label)):
                continue
            now = self.clock.now_ms()
            entry = snapshot.get(label) or SLAEntry(timestamp_ms=now)
            snapshot[label] = entry.add_wait(max(0, now - item.buildable_since_ms))

        self.log.info(
            "current snapshot: {" + ", ".join(f"{k}={v}" for k, v in snapshot.items()) + "}",
            event="sla.snapshot",
            pools=len(snapshot),
        )
        return snapshot

    def _record(self, pools: list[LabelName], snapshot: dict[LabelName, SLAEntry]) -> None:
        now: TimestampMs = self.clock.now_ms()
        for label in pools:
            window = self._windows.get(label)
            if window is None:
                continue
            entry = snapshot.get(label) or SLAEntry(timestamp_ms=now)
            window.push(entry)
            self.metrics.waiting_builds.labels(pool=label).set(entry.waiting_builds)
            self.metrics.average_wait_minutes.labels(pool=label).set(entry.average_wait_ms / MS_PER_MINUTE)

    def _check_thresholds(self, snapshot: dict[LabelName, SLAEntry]) -> None:
        try:
            env = self.view.global_env()
        except Exception as e:
            self.log.warning("global env unavailable, skipping SLA checks", exc_info=e, event="sla.env.failed")
            return
        if env is None:
            return
        for label, entry in snapshot.items():
            if entry.waiting_builds <= 0:
                continue
            try:
                sla_minutes = lookup_threshold(env, label, self.cfg)
            except Exception as e:
                self.log.warning(
                    f"SLA lookup failed for pool '{label}'", exc_info=e, event="sla.threshold.failed", pool=label
                )
                continue
            if sla_minutes is None:
                continue
            average_wait_ms = entry.average_wait_ms
            if average_wait_ms > sla_minutes * MS_PER_MINUTE:
                observed = average_wait_ms / MS_PER_MINUTE
                self.metrics.breaches_total.labels(pool=label).inc()
                self.log.error(
                    f"queue wait time ({observed:.2f} minutes) for pool '{label}' exceeded SLA ({sla_minutes} minutes)",
                    event="sla.breach",
                    pool=label,
                    minutes_observed=round(observed, 2),
                    minutes_threshold=sla_minutes,
                )

    def _render(self) -> SLAFigure:
        figure = build_figure(
            self._windows.snapshot(),
            generated_ms=self.clock.now_ms(),
            width=self.cfg.figure_width,
            height=self.cfg.figure_height,
        )
        self.cache.publish(figure)
        return figure
