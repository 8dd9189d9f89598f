"""
Clock/Tick Source.

A single periodic heartbeat that drives all elapsed-time state. Listeners
are called once per tick while the clock is running. Pausing stops the
heartbeat; resuming restarts it without replaying missed ticks.

Two ways to drive it:
- `step()` delivers ticks synchronously (tests, scripted trainers)
- `run()` is an asyncio loop that ticks every `interval_seconds`
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum

from loguru import logger

TickListener = Callable[[], None]


class ClockState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class TickSource:
    """Cooperative 1-second tick source."""

    def __init__(self, interval_seconds: float = 1.0):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.interval_seconds = interval_seconds
        self.state = ClockState.IDLE
        self.ticks_delivered = 0
        self._listeners: list[TickListener] = []
        self._running = asyncio.Event()
        self._interrupted = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self.state == ClockState.RUNNING

    @property
    def is_stopped(self) -> bool:
        return self.state == ClockState.STOPPED

    def subscribe(self, listener: TickListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: TickListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def start(self) -> bool:
        if self.state != ClockState.IDLE:
            return False
        self._set_state(ClockState.RUNNING)
        return True

    def pause(self) -> bool:
        if self.state != ClockState.RUNNING:
            return False
        self._set_state(ClockState.PAUSED)
        return True

    def resume(self) -> bool:
        if self.state != ClockState.PAUSED:
            return False
        self._set_state(ClockState.RUNNING)
        return True

    def stop(self) -> bool:
        if self.state == ClockState.STOPPED:
            return False
        self._set_state(ClockState.STOPPED)
        return True

    def _set_state(self, state: ClockState) -> None:
        logger.debug("Clock {} -> {}", self.state.value, state.value)
        self.state = state
        # Wake the loop for both RUNNING and STOPPED so run() can exit
        if state in (ClockState.RUNNING, ClockState.STOPPED):
            self._running.set()
        else:
            self._running.clear()
        if state in (ClockState.PAUSED, ClockState.STOPPED):
            self._interrupted.set()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def step(self, count: int = 1) -> int:
        """
        Deliver up to `count` ticks synchronously.

        Stops early if a listener pauses or stops the clock.

        Returns:
            Number of ticks delivered
        """
        delivered = 0
        for _ in range(count):
            if not self.is_running:
                break
            self._dispatch()
            delivered += 1
        return delivered

    def _dispatch(self) -> None:
        self.ticks_delivered += 1
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Tick listener failed; continuing on next interval")

    async def run(self) -> None:
        """Tick every interval while running, until stopped."""
        while not self.is_stopped:
            await self._running.wait()
            if self.is_stopped:
                break
            # A pause or stop during the wait drops the partial interval, so the
            # next tick comes one full interval after resume
            self._interrupted.clear()
            try:
                await asyncio.wait_for(self._interrupted.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                if self.is_running:
                    self._dispatch()
