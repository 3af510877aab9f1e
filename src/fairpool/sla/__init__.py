# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from .figure import LatestFigureCache, SeriesPoint, SLAFigure, TimeSeries, build_figure, series_from_entries
from .metrics import SLAMetrics
from .thresholds import lookup_threshold, parse_threshold
from .tracker import SLATracker, TrackerState
from .widget import SLAWidget
from .window import SLAEntry, SLAWindow, WindowRegistry

__all__ = [
    "LatestFigureCache",
    "SLAEntry",
    "SLAFigure",
    "SLAMetrics",
    "SLATracker",
    "SLAWidget",
    "SLAWindow",
    "SeriesPoint",
    "TimeSeries",
    "TrackerState",
    "WindowRegistry",
    "build_figure",
    "lookup_threshold",
    "parse_threshold",
    "series_from_entries",
]
