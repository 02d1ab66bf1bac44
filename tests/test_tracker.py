"""Async completion tracker behaviour."""

from __future__ import annotations

import asyncio

import pytest

from icecanary.errors import AssetFetchError, StalledAsyncError, fetch_error
from icecanary.tracker import AsyncTracker


def test_callback_fires_immediately_without_work():
    tracker = AsyncTracker()
    fired = []
    tracker.setup_callback(lambda: fired.append(True))
    assert fired == [True]
    assert tracker.fired


def test_callback_waits_for_matching_end():
    tracker = AsyncTracker()
    fired = []
    tracker.start()
    tracker.start()
    tracker.setup_callback(lambda: fired.append(True))
    assert fired == []
    tracker.end()
    assert fired == []
    tracker.end()
    assert fired == [True]


def test_callback_fires_exactly_once():
    tracker = AsyncTracker()
    fired = []
    tracker.start()
    tracker.end()  # count hits zero before sealing: must not fire
    assert fired == []
    tracker.setup_callback(lambda: fired.append(True))
    assert fired == [True]
    with pytest.raises(RuntimeError):
        tracker.setup_callback(lambda: fired.append(True))
    assert fired == [True]


def test_start_after_seal_is_rejected():
    tracker = AsyncTracker()
    tracker.setup_callback(lambda: None)
    with pytest.raises(RuntimeError):
        tracker.start()


def test_unmatched_end_is_rejected():
    with pytest.raises(RuntimeError):
        AsyncTracker().end()


def test_spawned_tasks_complete_before_callback():
    order: list[str] = []

    async def work(name: str, delay: float):
        await asyncio.sleep(delay)
        order.append(name)

    async def main():
        tracker = AsyncTracker()
        tracker.spawn(work("slow", 0.02), name="slow")
        tracker.spawn(work("fast", 0.0), name="fast")
        assert tracker.pending == 2
        tracker.setup_callback(lambda: order.append("done"))
        await tracker.join(timeout=5)
        return tracker

    tracker = asyncio.run(main())
    assert order == ["fast", "slow", "done"]
    assert tracker.pending == 0


def test_join_times_out_with_stalled_error():
    fired = []

    async def main():
        tracker = AsyncTracker()
        tracker.spawn(asyncio.sleep(10), name="merge:xx")
        tracker.setup_callback(lambda: fired.append(True))
        await tracker.join(timeout=0.01)

    with pytest.raises(StalledAsyncError) as ei:
        asyncio.run(main())
    assert ei.value.context == {"tasks": ["merge:xx"]}
    assert fired == []


def test_failed_task_is_reraised_and_suppresses_callback():
    fired = []

    async def boom():
        raise fetch_error("nope")

    async def main():
        tracker = AsyncTracker()
        tracker.spawn(boom())
        tracker.setup_callback(lambda: fired.append(True))
        await tracker.join(timeout=5)

    with pytest.raises(AssetFetchError):
        asyncio.run(main())
    assert fired == []


def test_callback_error_surfaces_from_join():
    def finalize():
        raise OSError("disk full")

    async def main():
        tracker = AsyncTracker()
        tracker.setup_callback(finalize)
        await tracker.join()

    with pytest.raises(OSError):
        asyncio.run(main())
