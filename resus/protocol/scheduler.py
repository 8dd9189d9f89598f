"""
Deferred callbacks keyed to the session's logical clock.

Follow-up transitions (the 2s/4s drug prompts after a shock) fire when the
elapsed-seconds counter reaches their due time, so a paused session never
fires them. Pausing parks them with their remaining delay; teardown and ROSC
drop them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count

from loguru import logger


@dataclass(order=True)
class DeferredCall:
    due_at: int
    seq: int
    label: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)


class DeferredScheduler:
    """Cancellable one-shot callbacks relative to logical seconds."""

    def __init__(self):
        self._pending: list[DeferredCall] = []
        self._parked: list[tuple[int, DeferredCall]] = []
        self._seq = count()
        self._now = 0

    @property
    def pending(self) -> list[str]:
        """Labels of armed callbacks in firing order."""
        return [call.label for call in sorted(self._pending)]

    @property
    def parked(self) -> list[str]:
        return [call.label for _, call in self._parked]

    def schedule(self, delay: int, callback: Callable[[], None], label: str = "") -> DeferredCall:
        """Arm a callback to fire `delay` logical seconds from now."""
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        call = DeferredCall(
            due_at=self._now + delay,
            seq=next(self._seq),
            label=label,
            callback=callback,
        )
        self._pending.append(call)
        logger.debug("Deferred '{}' scheduled for t={}", label, call.due_at)
        return call

    def advance(self, now: int) -> int:
        """
        Move the logical clock to `now` and fire everything due.

        Returns:
            Number of callbacks fired
        """
        self._now = now
        due = sorted(call for call in self._pending if call.due_at <= now)
        if not due:
            return 0

        self._pending = [call for call in self._pending if call.due_at > now]
        for call in due:
            logger.debug("Deferred '{}' firing at t={}", call.label, now)
            call.callback()
        return len(due)

    def suspend(self) -> int:
        """Park every pending callback with its remaining delay."""
        for call in sorted(self._pending):
            self._parked.append((max(0, call.due_at - self._now), call))
        parked = len(self._pending)
        self._pending = []
        return parked

    def restore(self, now: int) -> int:
        """Re-arm parked callbacks relative to `now`."""
        self._now = now
        restored = 0
        for remaining, call in self._parked:
            call.due_at = now + remaining
            self._pending.append(call)
            restored += 1
        self._parked = []
        return restored

    def cancel_all(self) -> int:
        """Drop pending and parked callbacks."""
        dropped = len(self._pending) + len(self._parked)
        self._pending = []
        self._parked = []
        if dropped:
            logger.debug("Cancelled {} deferred callback(s)", dropped)
        return dropped
