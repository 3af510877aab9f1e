from __future__ import annotations

import pytest

from fairpool.sla.window import SLAEntry, SLAWindow, WindowRegistry

pytestmark = [pytest.mark.unit, pytest.mark.sla]


def test_entry_accumulates_waits():
    e = SLAEntry(timestamp_ms=1000).add_wait(30_000).add_wait(90_000)
    assert (e.total_wait_ms, e.waiting_builds) == (120_000, 2)
    assert e.average_wait_ms == 60_000
    assert str(e) == "120000 ms - 2 builds"


def test_entry_average_guards_zero_builds():
    assert SLAEntry(timestamp_ms=0).average_wait_ms == 0
    assert SLAEntry(timestamp_ms=0, total_wait_ms=500, waiting_builds=0).average_wait_ms == 0


def test_window_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        SLAWindow(0)


def test_window_evicts_oldest_at_capacity():
    win = SLAWindow(3)
    for ts in range(1, 4):
        assert win.push(SLAEntry(timestamp_ms=ts)) is None

    evicted = win.push(SLAEntry(timestamp_ms=4))

    assert evicted == SLAEntry(timestamp_ms=1)
    assert len(win) == 3
    assert [e.timestamp_ms for e in win] == [2, 3, 4]
    assert win.oldest.timestamp_ms == 2
    assert win.newest.timestamp_ms == 4


def test_window_never_exceeds_capacity():
    win = SLAWindow(5)
    for ts in range(100):
        win.push(SLAEntry(timestamp_ms=ts))
        assert len(win) <= 5
    assert [e.timestamp_ms for e in win] == [95, 96, 97, 98, 99]


def test_window_snapshot_is_a_copy():
    win = SLAWindow(2)
    win.push(SLAEntry(timestamp_ms=1))
    snap = win.snapshot()
    win.push(SLAEntry(timestamp_ms=2))
    assert snap == (SLAEntry(timestamp_ms=1),)


def test_registry_creates_each_window_once():
    reg = WindowRegistry(capacity=4)
    first = reg.ensure("pool")
    assert reg.ensure("pool") is first
    assert first.capacity == 4
    assert "pool" in reg and len(reg) == 1
    assert reg.get("other") is None


def test_registry_snapshot_keeps_creation_order():
    reg = WindowRegistry(capacity=2)
    reg.ensure("b").push(SLAEntry(timestamp_ms=1))
    reg.ensure("a")
    snap = reg.snapshot()
    assert list(snap) == ["b", "a"]
    assert snap["b"] == (SLAEntry(timestamp_ms=1),)
    assert snap["a"] == ()
