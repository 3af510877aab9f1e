# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

"""
SLA chart model and the latest-figure cache
===========================================

`SLAFigure` is a ready-to-plot time-series artifact: one series per pool,
average queue wait in minutes per sample instant, y axis "minutes", no title.
The UI layer hands it to whatever charting library it uses.

`LatestFigureCache` holds the most recent figure. The SLA tracker publishes
a fully built figure once per cycle with a single reference swap; readers on
any thread get either the previous or the new figure, never a partial one,
and neither side ever waits on the other.
"""

from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..core.types import LabelName, MS_PER_MINUTE, MS_PER_SECOND, TimestampMs
from .window import SLAEntry


class SeriesPoint(BaseModel):
    """One sample: epoch ms (whole second) and average wait in minutes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ts_ms: TimestampMs
    minutes: float


class TimeSeries(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    pool: LabelName
    points: tuple[SeriesPoint, ...] = ()


class SLAFigure(BaseModel):
    """
    Time-series chart of pool queue waits.

    Fields:
        generated_ms: When the figure was built (epoch ms); 0 for the placeholder.
        title: Always None; the widget renders its own heading.
        y_axis_label: Axis caption, "minutes".
        width/height: Suggested render size in pixels.
        series: One series per pool in window creation order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    generated_ms: TimestampMs = 0
    title: str | None = None
    y_axis_label: str = "minutes"
    width: int = 336
    height: int = 240
    series: tuple[TimeSeries, ...] = Field(default_factory=tuple)

    def series_by_pool(self) -> dict[LabelName, TimeSeries]:
        return {s.pool: s for s in self.series}

    @property
    def is_placeholder(self) -> bool:
        return self.generated_ms == 0 and not self.series


def series_from_entries(pool: LabelName, entries: Sequence[SLAEntry]) -> TimeSeries:
    """
    Average wait in minutes per sample (0 when no build waited).
    Samples are addressed by whole second; a later sample within the same
    second replaces the earlier one.
    """
    by_second: dict[int, float] = {}
    for entry in entries:
        second = entry.timestamp_ms // MS_PER_SECOND
        minutes = entry.total_wait_ms / entry.waiting_builds / MS_PER_MINUTE if entry.waiting_builds > 0 else 0.0
        by_second[second] = minutes
    points = tuple(SeriesPoint(ts_ms=sec * MS_PER_SECOND, minutes=m) for sec, m in sorted(by_second.items()))
    return TimeSeries(pool=pool, points=points)


def build_figure(
    windows: Mapping[LabelName, Sequence[SLAEntry]],
    *,
    generated_ms: TimestampMs,
    width: int = 336,
    height: int = 240,
) -> SLAFigure:
    series = tuple(series_from_entries(pool, entries) for pool, entries in windows.items())
    return SLAFigure(generated_ms=generated_ms, width=width, height=height, series=series)


class LatestFigureCache:
    """
    Last-writer-wins cell holding the current SLA figure.

    Owned by the host and passed to both the tracker (writer) and the UI
    (readers). Starts with an empty placeholder figure.
    """

    __slots__ = ("_figure",)

    def __init__(self, initial: SLAFigure | None = None) -> None:
        self._figure: SLAFigure = initial or SLAFigure()

    def publish(self, figure: SLAFigure) -> None:
        # single attribute store; the figure is immutable once built
        self._figure = figure

    def get(self) -> SLAFigure:
        return self._figure
