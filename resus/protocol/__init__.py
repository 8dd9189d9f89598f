"""
Live resuscitation protocol.

Components:
- ProtocolEngine: phase state machine, drug timing, event log
- DeferredScheduler: logical-clock follow-up prompts
- Announcer adapters: cue emission, fire-and-forget
- Dosing: weight-based epinephrine, amiodarone and shock energy
- build_debrief: post-arrest quality summary
"""

from resus.protocol.announcer import (
    CUE_SCRIPTS,
    Announcer,
    ConsoleAnnouncer,
    Cue,
    NullAnnouncer,
    Priority,
    QueueAnnouncer,
    RecordingAnnouncer,
    safe_emit,
)
from resus.protocol.debrief import DebriefReport, build_debrief
from resus.protocol.dosing import (
    amiodarone_dose_mg,
    epinephrine_dose_mg,
    format_clock,
    shock_energy_j_per_kg,
    shock_energy_joules,
)
from resus.protocol.engine import ProtocolEngine
from resus.protocol.errors import InvalidSessionError, ResusError
from resus.protocol.models import (
    Drug,
    EventAction,
    EventKind,
    EventLogEntry,
    Phase,
    Rhythm,
    Session,
    SessionSnapshot,
)
from resus.protocol.reversible_causes import CAUSE_GUIDANCE, ReversibleCause
from resus.protocol.scheduler import DeferredScheduler
from resus.protocol.timings import ProtocolTimings

__all__ = [
    # Engine
    "ProtocolEngine",
    "ProtocolTimings",
    "DeferredScheduler",
    # Model
    "Session",
    "SessionSnapshot",
    "EventLogEntry",
    "EventAction",
    "EventKind",
    "Phase",
    "Rhythm",
    "Drug",
    "ReversibleCause",
    "CAUSE_GUIDANCE",
    # Announcer
    "Announcer",
    "Cue",
    "Priority",
    "CUE_SCRIPTS",
    "safe_emit",
    "NullAnnouncer",
    "RecordingAnnouncer",
    "ConsoleAnnouncer",
    "QueueAnnouncer",
    # Dosing
    "epinephrine_dose_mg",
    "amiodarone_dose_mg",
    "shock_energy_j_per_kg",
    "shock_energy_joules",
    "format_clock",
    # Debrief
    "DebriefReport",
    "build_debrief",
    # Errors
    "ResusError",
    "InvalidSessionError",
]
