from __future__ import annotations

import asyncio

import pytest

from fairpool import Dispatcher, FairScheduler, PeriodicTask
from fairpool.core.config import FairpoolConfig
from fairpool.dispatch.metrics import DispatchMetrics
from fairpool.sla.metrics import SLAMetrics

pytestmark = [pytest.mark.e2e]


@pytest.fixture
def fair(cluster, manual_clock, registry):
    return FairScheduler.create(
        cluster,
        cfg=FairpoolConfig(sla_sample_interval_sec=60, sla_retention_sec=600),
        clock=manual_clock,
        dispatch_metrics=DispatchMetrics.create(registry),
        sla_metrics=SLAMetrics.create(registry),
    )


def test_components_expose_host_interfaces(fair, cluster):
    assert isinstance(fair.dispatcher, Dispatcher)
    assert isinstance(fair.tracker, PeriodicTask)
    assert fair.widget.get_figure() is fair.cache.get()
    assert fair.tracker.cache is fair.cache


@pytest.mark.asyncio
async def test_background_sampling_feeds_the_widget(fair, cluster, manual_clock):
    cluster.add_node("a", labels=["pool"])
    cluster.add_node("b", labels=["pool"])
    task = cluster.add_task("project1", label="pool")
    cluster.enqueue(task, manual_clock.now_ms() - 120_000)

    await fair.start()
    try:
        for _ in range(5_000):
            if len(fair.tracker.windows.get("pool") or ()) >= 3:
                break
            await asyncio.sleep(0.001)
    finally:
        await fair.stop()

    fig = fair.widget.get_figure()
    assert not fig.is_placeholder
    points = fig.series_by_pool()["pool"].points
    # the queued item keeps waiting one more minute every cycle
    assert [p.minutes for p in points[:3]] == [2.0, 3.0, 4.0]


def test_dispatch_and_monitor_share_one_view(fair, cluster):
    a = cluster.add_node("a", labels=["pool"])
    task = cluster.add_task("project1", label="pool")

    assert fair.dispatcher.can_take(a, task).allowed
    fair.tracker.on_interval()
    assert "pool" in fair.widget.get_figure().series_by_pool()
