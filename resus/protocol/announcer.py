"""
Announcer interface.

The engine emits symbolic cues and never waits on rendering. Audio, speech
and haptics belong to whatever implements `emit`. A broken announcer must
never stop the protocol clock, so every call goes through `safe_emit`.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Protocol

from loguru import logger
from rich.console import Console


class Cue(str, Enum):
    """Symbolic cues emitted by the engine."""

    CPR_STARTED = "cpr_started"
    PAUSED = "paused"
    RESUMED = "resumed"
    RHYTHM_CHECK_WARNING = "rhythm_check_warning"
    RHYTHM_CHECK_DUE = "rhythm_check_due"
    SHOCKABLE_RHYTHM = "shockable_rhythm"
    NON_SHOCKABLE_RHYTHM = "non_shockable_rhythm"
    SHOCK_DELIVERED = "shock_delivered"
    EPI_PREPARE = "epi_prepare"
    EPI_DUE = "epi_due"
    AMIODARONE_DUE = "amiodarone_due"
    EPI_GIVEN = "epi_given"
    AMIODARONE_GIVEN = "amiodarone_given"
    CHECK_REVERSIBLE_CAUSES = "check_reversible_causes"
    ROSC = "rosc"


class Priority(str, Enum):
    HIGH = "high"
    NORMAL = "normal"


CUE_SCRIPTS: dict[Cue, str] = {
    Cue.CPR_STARTED: "CPR started. Begin compressions.",
    Cue.PAUSED: "CPR paused",
    Cue.RESUMED: "CPR resumed",
    Cue.RHYTHM_CHECK_WARNING: "Rhythm check in 30 seconds",
    Cue.RHYTHM_CHECK_DUE: "STOP. Rhythm check now.",
    Cue.SHOCKABLE_RHYTHM: "Shockable rhythm. Prepare to shock.",
    Cue.NON_SHOCKABLE_RHYTHM: "Non-shockable rhythm. Resume compressions immediately.",
    Cue.SHOCK_DELIVERED: "Shock delivered. Resume compressions immediately.",
    Cue.EPI_PREPARE: "Prepare epinephrine",
    Cue.EPI_DUE: "Give epinephrine now",
    Cue.AMIODARONE_DUE: "Give amiodarone now",
    Cue.EPI_GIVEN: "Epinephrine given. Continue CPR.",
    Cue.AMIODARONE_GIVEN: "Amiodarone given. Continue CPR.",
    Cue.CHECK_REVERSIBLE_CAUSES: "Check reversible causes",
    Cue.ROSC: "Return of spontaneous circulation. Pulse detected. Stop compressions.",
}


class Announcer(Protocol):
    """Anything that can render a cue."""

    def emit(self, cue: str, priority: str = "normal") -> None: ...


def safe_emit(announcer: Announcer | None, cue: Cue, priority: Priority = Priority.NORMAL) -> None:
    """Fire-and-forget emit. Failures are discarded."""
    if announcer is None:
        return
    try:
        announcer.emit(cue.value, priority.value)
    except Exception as e:
        logger.debug("Announcer failed on '{}': {}", cue.value, e)


class NullAnnouncer:
    """Silent announcer."""

    def emit(self, cue: str, priority: str = "normal") -> None:
        return None


class RecordingAnnouncer:
    """Keeps every cue in order. Used by tests and renderers that poll."""

    def __init__(self):
        self.cues: list[tuple[str, str]] = []

    def emit(self, cue: str, priority: str = "normal") -> None:
        self.cues.append((cue, priority))

    @property
    def names(self) -> list[str]:
        return [cue for cue, _ in self.cues]

    def clear(self) -> None:
        self.cues.clear()


class ConsoleAnnouncer:
    """Prints the spoken phrase for each cue to a Rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def emit(self, cue: str, priority: str = "normal") -> None:
        try:
            text = CUE_SCRIPTS[Cue(cue)]
        except ValueError:
            text = cue
        style = "bold red" if priority == Priority.HIGH.value else "yellow"
        self.console.print(f"[{style}]>> {text}[/{style}]")


class QueueAnnouncer:
    """
    Hands cues to an asyncio queue without blocking.

    A consumer task drains the queue and renders. When the queue is full the
    cue is dropped rather than stalling the tick.
    """

    def __init__(self, maxsize: int = 64):
        self.queue: asyncio.Queue[tuple[str, str]] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def emit(self, cue: str, priority: str = "normal") -> None:
        try:
            self.queue.put_nowait((cue, priority))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.debug("Announcer queue full, dropped '{}'", cue)

    async def drain(self, target: Announcer) -> None:
        """Forward queued cues to `target` until cancelled."""
        while True:
            cue, priority = await self.queue.get()
            try:
                target.emit(cue, priority)
            except Exception as e:
                logger.debug("Announcer target failed on '{}': {}", cue, e)
            finally:
                self.queue.task_done()
