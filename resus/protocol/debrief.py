"""
Post-arrest team debrief for live sessions.

Pure projection of a Session's event log into quality metrics:
compression fraction, time to first shock/epinephrine, rhythm-check
intervals, critical delays and strengths.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from resus.protocol.models import EventAction, Session

# Assumed hands-off time per rhythm check
RHYTHM_CHECK_PAUSE_SECONDS = 10

EPI_DELAY_THRESHOLD = 180
SHOCK_DELAY_THRESHOLD = 120
RHYTHM_CHECK_INTERVAL_THRESHOLD = 150
GOOD_COMPRESSION_FRACTION = 80.0


@dataclass(frozen=True)
class DebriefReport:
    total_duration_seconds: int
    shock_count: int
    epi_doses: int
    outcome: str  # "ROSC" or "ongoing"
    compression_fraction: float  # percent
    time_to_first_shock: int | None
    time_to_first_epi: int | None
    rhythm_check_intervals: list[int] = field(default_factory=list)
    critical_delays: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)


def build_debrief(session: Session) -> DebriefReport:
    """Summarize a live session for the team debrief."""
    total = session.elapsed_seconds
    rhythm_checks = [e for e in session.event_log if e.matches(EventAction.RHYTHM_CHECK)]

    if total > 0:
        pause_time = len(rhythm_checks) * RHYTHM_CHECK_PAUSE_SECONDS
        compression_fraction = max(0.0, (total - pause_time) / total * 100)
    else:
        compression_fraction = 0.0

    first_shock = session.first_event(EventAction.SHOCK_DELIVERED)
    first_epi = session.first_event(EventAction.EPINEPHRINE_GIVEN)
    time_to_first_shock = first_shock.timestamp_seconds if first_shock else None
    time_to_first_epi = first_epi.timestamp_seconds if first_epi else None

    intervals = [
        later.timestamp_seconds - earlier.timestamp_seconds
        for earlier, later in zip(rhythm_checks, rhythm_checks[1:])
    ]

    delays: list[str] = []
    if time_to_first_epi is not None and time_to_first_epi > EPI_DELAY_THRESHOLD:
        delays.append(f"Epinephrine delayed ({time_to_first_epi // 60} min)")
    if time_to_first_shock is not None and time_to_first_shock > SHOCK_DELAY_THRESHOLD:
        delays.append(f"First shock delayed ({time_to_first_shock // 60} min)")
    if any(interval > RHYTHM_CHECK_INTERVAL_THRESHOLD for interval in intervals):
        delays.append("Rhythm check interval exceeded 2.5 minutes")

    strengths: list[str] = []
    if compression_fraction >= GOOD_COMPRESSION_FRACTION:
        strengths.append("Excellent compression fraction (>=80%)")
    if time_to_first_epi is not None and time_to_first_epi <= EPI_DELAY_THRESHOLD:
        strengths.append("Timely epinephrine administration")
    if time_to_first_shock is not None and time_to_first_shock <= SHOCK_DELAY_THRESHOLD:
        strengths.append("Rapid defibrillation")

    return DebriefReport(
        total_duration_seconds=total,
        shock_count=session.shock_count,
        epi_doses=session.epi_doses,
        outcome="ROSC" if session.rosc_achieved else "ongoing",
        compression_fraction=round(compression_fraction, 1),
        time_to_first_shock=time_to_first_shock,
        time_to_first_epi=time_to_first_epi,
        rhythm_check_intervals=intervals,
        critical_delays=delays,
        strengths=strengths,
    )
