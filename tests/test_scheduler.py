"""Tests for the single-flight refresh scheduler."""

import asyncio

import pytest

from claude_news.config import SchedulerConfig
from claude_news.core.types import ConcurrentRefreshRejected, RefreshResult
from claude_news.scheduler import RefreshScheduler


def test_concurrent_trigger_is_rejected():
    calls = []

    async def _run():
        gate = asyncio.Event()

        async def cycle():
            calls.append("cycle")
            await gate.wait()
            return RefreshResult(total_articles=3, new_count=1)

        scheduler = RefreshScheduler(cycle)
        first = asyncio.create_task(scheduler.run_cycle())
        await asyncio.sleep(0)
        assert scheduler.fetching

        second = await scheduler.run_cycle()
        gate.set()
        return scheduler, await first, second

    scheduler, first, second = asyncio.run(_run())

    assert calls == ["cycle"]
    assert isinstance(first, RefreshResult)
    assert first.new_count == 1
    assert isinstance(second, ConcurrentRefreshRejected)
    assert second.to_dict() == {"success": False, "message": "Refresh already in progress"}
    assert not scheduler.fetching


def test_fetching_resets_after_failed_cycle():
    async def cycle():
        raise RuntimeError("boom")

    scheduler = RefreshScheduler(cycle)

    with pytest.raises(RuntimeError):
        asyncio.run(scheduler.run_cycle())

    assert not scheduler.fetching


def test_sequential_triggers_both_run():
    calls = []

    async def cycle():
        calls.append("cycle")
        return RefreshResult(total_articles=0, new_count=0)

    scheduler = RefreshScheduler(cycle)

    async def _run():
        await scheduler.run_cycle()
        await scheduler.run_cycle()

    asyncio.run(_run())

    assert calls == ["cycle", "cycle"]


def test_start_arms_clock_aligned_triggers():
    async def cycle():
        return RefreshResult(total_articles=0, new_count=0)

    async def _run():
        scheduler = RefreshScheduler(cycle, SchedulerConfig(timezone="UTC"))
        assert scheduler.status().running is False

        scheduler.start()
        scheduler.start()
        status = scheduler.status()
        scheduler.stop()
        return scheduler, status

    scheduler, status = asyncio.run(_run())

    assert status.running is True
    assert status.fetching is False
    assert status.next_run is not None
    assert status.next_run.minute == 0
    assert status.next_run.hour % 6 == 0
    assert scheduler.running is False
    assert scheduler.status().to_dict() == {"running": False, "fetching": False, "nextRun": None}


def test_stop_without_start_is_noop():
    async def cycle():
        return RefreshResult(total_articles=0, new_count=0)

    scheduler = RefreshScheduler(cycle)
    scheduler.stop()

    assert scheduler.running is False
