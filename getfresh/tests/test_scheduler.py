"""
Unit tests for the recurring asyncio scheduler.

Tests verify:
- Timers fire immediately on start and then every interval.
- reschedule() changes the cadence without an extra immediate fire.
- A failing callback is logged and the timer keeps running.
- stop() ends run() after in-flight callbacks finish.
- Invalid registrations are rejected.

Intervals are kept to tens of milliseconds so the suite stays fast.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging

import pytest
from getfresh.src.scheduler import Scheduler


class TestRegister:
    def test_duplicate_name_rejected(self) -> None:
        scheduler = Scheduler()
        scheduler.register("tariff", 60, lambda: asyncio.sleep(0))

        with pytest.raises(ValueError, match="already registered"):
            scheduler.register("tariff", 60, lambda: asyncio.sleep(0))

    @pytest.mark.parametrize("interval", [0, -1])
    def test_non_positive_interval_rejected(self, interval: float) -> None:
        with pytest.raises(ValueError):
            Scheduler().register("readings", interval, lambda: asyncio.sleep(0))

    def test_reschedule_unknown_timer_raises(self) -> None:
        with pytest.raises(KeyError):
            Scheduler().reschedule("nope", 10)


class TestFiring:
    @pytest.mark.asyncio
    async def test_fires_immediately_then_periodically(self) -> None:
        scheduler = Scheduler()
        calls: list[float] = []

        async def _tick() -> None:
            calls.append(asyncio.get_running_loop().time())

        scheduler.register("readings", 0.05, _tick)
        runner = asyncio.create_task(scheduler.run())
        await asyncio.sleep(0.01)
        assert len(calls) == 1

        await asyncio.sleep(0.13)
        scheduler.stop()
        await runner

        assert 3 <= len(calls) <= 4

    @pytest.mark.asyncio
    async def test_timers_independent(self) -> None:
        scheduler = Scheduler()
        counts = {"fast": 0, "slow": 0}

        async def _fast() -> None:
            counts["fast"] += 1

        async def _slow() -> None:
            counts["slow"] += 1

        scheduler.register("fast", 0.02, _fast)
        scheduler.register("slow", 10, _slow)
        runner = asyncio.create_task(scheduler.run())
        await asyncio.sleep(0.11)
        scheduler.stop()
        await runner

        assert counts["slow"] == 1
        assert counts["fast"] >= 4

    @pytest.mark.asyncio
    async def test_failing_callback_keeps_timer_alive(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        scheduler = Scheduler()
        calls = 0

        async def _boom() -> None:
            nonlocal calls
            calls += 1
            raise RuntimeError("cycle failed")

        scheduler.register("readings", 0.02, _boom)
        with caplog.at_level(logging.ERROR, logger="getfresh.src.scheduler"):
            runner = asyncio.create_task(scheduler.run())
            await asyncio.sleep(0.07)
            scheduler.stop()
            await runner

        assert calls >= 2
        assert "callback error" in caplog.text


class TestReschedule:
    @pytest.mark.asyncio
    async def test_reschedule_changes_cadence(self) -> None:
        scheduler = Scheduler()
        calls = 0

        async def _tick() -> None:
            nonlocal calls
            calls += 1

        scheduler.register("readings", 10, _tick)
        runner = asyncio.create_task(scheduler.run())
        await asyncio.sleep(0.01)
        assert calls == 1

        scheduler.reschedule("readings", 0.03)
        await asyncio.sleep(0.01)
        # Re-arming restarts the countdown without firing.
        assert calls == 1
        assert scheduler.interval("readings") == 0.03

        await asyncio.sleep(0.1)
        scheduler.stop()
        await runner

        assert calls >= 3

    @pytest.mark.asyncio
    async def test_reschedule_same_interval_is_noop(self) -> None:
        scheduler = Scheduler()
        scheduler.register("readings", 60, lambda: asyncio.sleep(0))

        scheduler.reschedule("readings", 60)

        assert scheduler.interval("readings") == 60


class TestStop:
    @pytest.mark.asyncio
    async def test_stop_waits_for_inflight_callback(self) -> None:
        scheduler = Scheduler()
        finished = asyncio.Event()

        async def _slow() -> None:
            await asyncio.sleep(0.05)
            finished.set()

        scheduler.register("tariff", 60, _slow)
        runner = asyncio.create_task(scheduler.run())
        await asyncio.sleep(0.01)
        scheduler.stop()
        await asyncio.wait_for(runner, timeout=1.0)

        assert finished.is_set()
        assert scheduler.stopped
