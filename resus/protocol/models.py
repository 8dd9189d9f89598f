"""
Data model shared by the live protocol engine and the training simulator.

Session is the root aggregate for one resuscitation or training run. The
event log is append-only and stamped with logical elapsed seconds, so it is
unaffected by pause/resume gaps.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from resus.protocol.errors import InvalidSessionError


class Phase(str, Enum):
    """Active state of the live protocol state machine."""

    COMPRESSIONS = "compressions"
    RHYTHM_CHECK = "rhythm_check"
    SHOCK = "shock"
    DRUG = "drug"


class Rhythm(str, Enum):
    """Cardiac rhythm."""

    VF = "VF"
    PVT = "pVT"
    PEA = "PEA"
    ASYSTOLE = "asystole"
    ROSC = "ROSC"
    UNKNOWN = "unknown"

    @property
    def is_shockable(self) -> bool:
        return self in (Rhythm.VF, Rhythm.PVT)

    @property
    def is_non_shockable(self) -> bool:
        return self in (Rhythm.PEA, Rhythm.ASYSTOLE)

    @classmethod
    def parse(cls, value: Rhythm | str) -> Rhythm:
        """Coerce a rhythm name, raising InvalidSessionError when unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidSessionError(f"Unknown rhythm: {value!r}") from None


class Drug(str, Enum):
    EPINEPHRINE = "epinephrine"
    AMIODARONE = "amiodarone"


class EventKind(str, Enum):
    """Category of an event log entry."""

    ACTION = "action"
    PROMPT = "prompt"
    RHYTHM_CHANGE = "rhythm_change"
    COMPLICATION = "complication"
    FEEDBACK = "feedback"


class EventAction(str, Enum):
    """Action names written to the event log."""

    CPR_STARTED = "CPR Started"
    RHYTHM_CHECK = "Rhythm Check"
    SHOCKABLE_RHYTHM = "Shockable Rhythm"
    NON_SHOCKABLE_RHYTHM = "Non-Shockable Rhythm"
    SHOCK_DELIVERED = "Shock Delivered"
    EPINEPHRINE_DUE = "Epinephrine Due"
    AMIODARONE_DUE = "Amiodarone Due"
    EPINEPHRINE_GIVEN = "Epinephrine Given"
    AMIODARONE_GIVEN = "Amiodarone Given"
    ROSC_ACHIEVED = "ROSC Achieved"
    REVERSIBLE_CAUSE_ADDRESSED = "Reversible Cause Addressed"
    # Training mode only
    DEFIBRILLATOR_ATTACHED = "Defibrillator Attached"
    RHYTHM_ASSESSED = "Rhythm Assessed"
    RHYTHM_CHANGED = "Rhythm Changed"
    COMPLICATION_TREATED = "Reversible Cause Treated"


@dataclass(frozen=True)
class EventLogEntry:
    """One entry in the session event log."""

    timestamp_seconds: int
    action: str
    details: str | None = None
    kind: EventKind = EventKind.ACTION
    correct: bool | None = None  # Training feedback, None in live mode

    def matches(self, action: EventAction | str) -> bool:
        """Case-insensitive comparison against an action name."""
        name = action.value if isinstance(action, EventAction) else action
        return self.action.lower() == name.lower()


@dataclass
class Session:
    """Root aggregate for one resuscitation run."""

    weight_kg: float
    started_at: datetime | None = None
    elapsed_seconds: int = 0
    cycle_seconds: int = 0
    phase: Phase = Phase.COMPRESSIONS
    rhythm: Rhythm | None = None
    shock_count: int = 0
    epi_doses: int = 0
    last_epi_elapsed_seconds: int | None = None
    amiodarone_given: bool = False
    rosc_achieved: bool = False
    addressed_causes: list[str] = field(default_factory=list)
    event_log: list[EventLogEntry] = field(default_factory=list)

    def __post_init__(self):
        if isinstance(self.weight_kg, bool) or not isinstance(self.weight_kg, (int, float)):
            raise InvalidSessionError(f"Patient weight must be a number, got {self.weight_kg!r}")
        if not math.isfinite(self.weight_kg) or self.weight_kg <= 0:
            raise InvalidSessionError(f"Patient weight must be positive, got {self.weight_kg}")
        if self.rhythm is not None:
            self.rhythm = Rhythm.parse(self.rhythm)

    def append_event(
        self,
        action: EventAction | str,
        details: str | None = None,
        kind: EventKind = EventKind.ACTION,
        correct: bool | None = None,
    ) -> EventLogEntry:
        """Append one entry stamped with the current elapsed seconds."""
        entry = EventLogEntry(
            timestamp_seconds=self.elapsed_seconds,
            action=action.value if isinstance(action, EventAction) else action,
            details=details,
            kind=kind,
            correct=correct,
        )
        self.event_log.append(entry)
        return entry

    def recent_events(self, limit: int = 10) -> list[EventLogEntry]:
        """Most recent entries, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self.event_log[-limit:]))

    def first_event(self, action: EventAction | str) -> EventLogEntry | None:
        for entry in self.event_log:
            if entry.matches(action):
                return entry
        return None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only projection of a live session for renderers."""

    elapsed_seconds: int
    cycle_seconds: int
    phase: Phase
    rhythm: Rhythm | None
    shock_count: int
    epi_doses: int
    last_epi_elapsed_seconds: int | None
    amiodarone_given: bool
    rosc_achieved: bool
    running: bool
    due_drug: Drug | None
    epinephrine_dose_mg: float
    amiodarone_dose_mg: float
    next_shock_j_per_kg: int
    seconds_to_rhythm_check: int
    seconds_to_next_epi: int
    clock: str
