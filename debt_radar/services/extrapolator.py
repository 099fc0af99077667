# debt_radar/services/extrapolator.py
from __future__ import annotations

"""
Real-time debt counter.

Between two annual data points the "current" debt is unknown; the dashboard
shows a linear projection of the last observed yearly increase, anchored at
the moment the counter was started. Display only, never fed back into data.
"""

import asyncio
import itertools
import logging
import time
from typing import Any, Callable, Dict, Optional

from debt_radar import config
from debt_radar.models import IDLE, ExtrapolationState, TimeSeries
from debt_radar.services.metrics import MILLION
from debt_radar.utils.series_math import last_two

logger = logging.getLogger("debt-radar")

SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60

Subscriber = Callable[[float], Any]


def anchor(debt: TimeSeries, now: float) -> Optional[ExtrapolationState]:
    """Extrapolation state anchored at now, or None when debt cannot support one."""
    pair = last_two(debt)
    if pair is None:
        return None
    previous, latest = pair
    if not latest.value or not previous.value or latest.value <= 0 or previous.value <= 0:
        logger.warning("[realtime] invalid debt data for real-time counter: %s / %s", previous, latest)
        return None
    annual_increase = (latest.value - previous.value) * MILLION
    return ExtrapolationState(
        anchor_timestamp=now,
        base_value=latest.value * MILLION,
        per_second_rate=annual_increase / SECONDS_PER_YEAR,
        active=True,
    )


class RealTimeExtrapolator:
    """Idle -> Running -> Idle. At most one ticker task at a time."""

    def __init__(self, interval_ms: Optional[int] = None, clock: Callable[[], float] = time.time):
        self.interval = (config.UPDATE_INTERVAL_MS if interval_ms is None else interval_ms) / 1000.0
        self._clock = clock
        self._state: ExtrapolationState = IDLE
        self._task: Optional[asyncio.Task] = None
        self._subscribers: Dict[int, Subscriber] = {}
        self._handles = itertools.count(1)
        self.last_estimate: Optional[float] = None

    # -- state -----------------------------------------------------------------
    @property
    def state(self) -> ExtrapolationState:
        return self._state

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def estimate(self, now: Optional[float] = None) -> Optional[float]:
        s = self._state
        if not s.active:
            return None
        now = self._clock() if now is None else now
        return s.base_value + (now - s.anchor_timestamp) * s.per_second_rate

    def increase_since_anchor(self, now: Optional[float] = None) -> Optional[float]:
        est = self.estimate(now)
        if est is None:
            return None
        return est - self._state.base_value

    # -- lifecycle -------------------------------------------------------------
    def start(self, debt: TimeSeries) -> bool:
        """
        Anchor on the last two debt points and start ticking.
        With fewer than two usable points nothing changes and False is returned.
        Must be called from inside the running event loop.
        """
        state = anchor(debt, self._clock())
        if state is None:
            return False
        loop = asyncio.get_running_loop()
        self.stop()
        self._state = state
        self._task = loop.create_task(self._run(), name="debt-radar-realtime")
        logger.info(
            "[realtime] started: base=%.0f EUR, +%.1f EUR/sec",
            state.base_value, state.per_second_rate,
        )
        return True

    def stop(self) -> bool:
        """Cancel the ticker and clear the anchor. Safe to call when idle."""
        was_running = self.running
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._state = IDLE
        self.last_estimate = None
        return was_running

    async def aclose(self) -> None:
        task = self._task
        self.stop()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.tick()

    def tick(self) -> Optional[float]:
        """Compute the estimate now and hand it to every subscriber."""
        est = self.estimate()
        if est is None:
            return None
        self.last_estimate = est
        for handle, callback in list(self._subscribers.items()):
            try:
                callback(est)
            except Exception:
                logger.exception("[realtime] subscriber %s failed", handle)
        return est

    # -- subscribers -----------------------------------------------------------
    def subscribe(self, callback: Subscriber) -> int:
        handle = next(self._handles)
        self._subscribers[handle] = callback
        return handle

    def unsubscribe(self, handle: int) -> bool:
        return self._subscribers.pop(handle, None) is not None


__all__ = ["SECONDS_PER_YEAR", "anchor", "RealTimeExtrapolator"]
