"""
Recurring asyncio timers with runtime re-arming.

Each registered timer fires its callback immediately when the scheduler
starts and then every ``interval_s`` seconds. Callbacks run as independent
tasks so a slow callback never delays the timer's cadence; overlap is
handled by the callbacks themselves.

:meth:`Scheduler.reschedule` changes a timer's interval at runtime and
restarts its countdown without firing. :meth:`Scheduler.stop` ends all timer
loops; :meth:`Scheduler.run` then waits for in-flight callbacks before
returning.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Awaitable[object]]


@dataclass
class _Timer:
    interval_s: float
    callback: TimerCallback
    wake: asyncio.Event = field(default_factory=asyncio.Event)


class Scheduler:
    """Named recurring timers driven by one asyncio event loop."""

    def __init__(self) -> None:
        self._timers: dict[str, _Timer] = {}
        self._shutdown = asyncio.Event()
        self._inflight: set[asyncio.Task[None]] = set()

    @property
    def stopped(self) -> bool:
        return self._shutdown.is_set()

    def interval(self, name: str) -> float:
        """Return the current interval of timer *name* in seconds."""
        return self._timers[name].interval_s

    def register(self, name: str, interval_s: float, callback: TimerCallback) -> None:
        """Register a timer. Must be called before :meth:`run`.

        Raises:
            ValueError: If *name* is already registered or the interval
                is not positive.
        """
        if name in self._timers:
            raise ValueError(f"Timer '{name}' is already registered")
        if interval_s <= 0:
            raise ValueError(f"Timer '{name}' interval must be > 0")
        self._timers[name] = _Timer(interval_s=interval_s, callback=callback)

    def reschedule(self, name: str, interval_s: float) -> None:
        """Change the interval of timer *name* and restart its countdown.

        Raises:
            KeyError: If *name* is not registered.
            ValueError: If the interval is not positive.
        """
        if interval_s <= 0:
            raise ValueError(f"Timer '{name}' interval must be > 0")
        timer = self._timers[name]
        if timer.interval_s == interval_s:
            return
        logger.info(
            "Timer '%s' rescheduled: %ss -> %ss", name, timer.interval_s, interval_s
        )
        timer.interval_s = interval_s
        timer.wake.set()

    def stop(self) -> None:
        """Stop all timer loops after their current wait."""
        self._shutdown.set()
        for timer in self._timers.values():
            timer.wake.set()

    async def run(self) -> None:
        """Run all timers until :meth:`stop`, then drain in-flight callbacks."""
        logger.info("Scheduler started with timers %s", sorted(self._timers))
        await asyncio.gather(
            *(self._run_timer(name, timer) for name, timer in self._timers.items())
        )
        if self._inflight:
            logger.info("Waiting for %d in-flight callbacks", len(self._inflight))
            await asyncio.gather(*self._inflight, return_exceptions=True)
        logger.info("Scheduler stopped")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _run_timer(self, name: str, timer: _Timer) -> None:
        fire = True
        while not self._shutdown.is_set():
            if fire:
                self._fire(name, timer)
            timer.wake.clear()
            try:
                await asyncio.wait_for(timer.wake.wait(), timeout=timer.interval_s)
            except TimeoutError:
                fire = True
            else:
                # Woken by reschedule() or stop(): restart the countdown.
                fire = False

    def _fire(self, name: str, timer: _Timer) -> None:
        task = asyncio.create_task(self._invoke(name, timer.callback), name=name)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _invoke(self, name: str, callback: TimerCallback) -> None:
        try:
            await callback()
        except Exception:
            logger.error("Timer '%s' callback error", name, exc_info=True)
