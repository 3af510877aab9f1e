from __future__ import annotations

import threading

import pytest

from fairpool.sla.figure import LatestFigureCache, SLAFigure, build_figure, series_from_entries
from fairpool.sla.widget import SLAWidget
from fairpool.sla.window import SLAEntry

pytestmark = [pytest.mark.unit, pytest.mark.sla]


def test_series_reports_average_minutes_and_zero_for_idle_samples():
    entries = [
        SLAEntry(timestamp_ms=60_000, total_wait_ms=240_000, waiting_builds=2),
        SLAEntry(timestamp_ms=120_000),
    ]
    s = series_from_entries("pool", entries)
    assert s.pool == "pool"
    assert [(p.ts_ms, p.minutes) for p in s.points] == [(60_000, 2.0), (120_000, 0.0)]


def test_samples_within_one_second_replace_each_other():
    entries = [
        SLAEntry(timestamp_ms=5_100, total_wait_ms=60_000, waiting_builds=1),
        SLAEntry(timestamp_ms=5_900, total_wait_ms=180_000, waiting_builds=1),
    ]
    s = series_from_entries("pool", entries)
    assert [(p.ts_ms, p.minutes) for p in s.points] == [(5_000, 3.0)]


def test_build_figure_has_one_series_per_pool():
    fig = build_figure(
        {"a": (SLAEntry(timestamp_ms=1_000),), "b": ()},
        generated_ms=42,
    )
    assert fig.title is None
    assert fig.y_axis_label == "minutes"
    assert (fig.width, fig.height) == (336, 240)
    assert list(fig.series_by_pool()) == ["a", "b"]
    assert fig.series_by_pool()["b"].points == ()


def test_cache_starts_with_placeholder_and_keeps_last_published():
    cache = LatestFigureCache()
    assert cache.get().is_placeholder

    first = SLAFigure(generated_ms=1)
    second = SLAFigure(generated_ms=2)
    cache.publish(first)
    cache.publish(second)

    assert cache.get() is second


def test_readers_only_ever_see_published_figures():
    cache = LatestFigureCache()
    initial = cache.get()
    published = [SLAFigure(generated_ms=i) for i in range(1, 200)]
    seen: list[SLAFigure] = []

    def reader():
        for _ in range(500):
            seen.append(cache.get())

    t = threading.Thread(target=reader)
    t.start()
    for fig in published:
        cache.publish(fig)
    t.join()

    allowed = {id(f) for f in published} | {id(initial)}
    assert all(id(f) in allowed for f in seen)


def test_widget_reads_through_cache():
    cache = LatestFigureCache()
    widget = SLAWidget(cache)
    assert widget.url_name == "sla"

    fig = build_figure({"pool": (SLAEntry(timestamp_ms=2_000, total_wait_ms=60_000, waiting_builds=1),)}, generated_ms=9)
    cache.publish(fig)

    assert widget.get_figure() is fig
    payload = widget.to_json()
    assert payload["y_axis_label"] == "minutes"
    assert payload["series"][0]["pool"] == "pool"
    assert payload["series"][0]["points"][0] == {"ts_ms": 2_000, "minutes": 1.0}
