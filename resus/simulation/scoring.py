"""
Performance Scorer.

Converts an event log and the final simulation state into guideline
adherence and an overall score with feedback.

Adherence starts at 100:
    -20  CPR started after 10s
    -15  first shock after 60s (initially shockable rhythm)
    -10  first epinephrine after 180s
    -15  only some reversible causes resolved
    -25  none resolved

Overall (clamped to 0-100):
    50% x adherence
    + 30 outcome bonus for ROSC
    + timing: max(0, 30 - cpr/10 - shock/60 - epi/180)
    + complications: 20 x fraction resolved (20 when there were none)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from resus.protocol.models import EventAction, EventLogEntry, Rhythm
from resus.simulation.scenarios import Scenario
from resus.simulation.state import SimulationState

CPR_START_TARGET = 10
FIRST_SHOCK_TARGET = 60
FIRST_EPI_TARGET = 180

CPR_DELAY_PENALTY = 20
SHOCK_DELAY_PENALTY = 15
EPI_DELAY_PENALTY = 10
PARTIAL_CAUSES_PENALTY = 15
NO_CAUSES_PENALTY = 25

ADHERENCE_WEIGHT = 0.5
ROSC_BONUS = 30
TIMING_MAX = 30
COMPLICATIONS_MAX = 20


@dataclass(frozen=True)
class PerformanceMetrics:
    """Derived on demand, never persisted."""

    time_to_first_compression: int
    time_to_first_shock: int
    time_to_first_epinephrine: int
    compression_fraction: int  # percent
    shocks_delivered: int
    epi_doses_given: int
    guideline_adherence: int  # 0-100
    complications_identified: int
    complications_resolved: int
    overall_score: int  # 0-100
    feedback: tuple[str, ...]


def _first_timestamp(events: Sequence[EventLogEntry], action: EventAction) -> int | None:
    for entry in events:
        if entry.matches(action):
            return entry.timestamp_seconds
    return None


def calculate_performance_metrics(
    event_log: Sequence[EventLogEntry],
    scenario: Scenario,
    final_state: SimulationState,
) -> PerformanceMetrics:
    """
    Score a finished (or abandoned) training run.

    Missing events default to the total elapsed time, except the first shock
    on a non-shockable scenario which defaults to 0.
    """
    elapsed = final_state.elapsed_seconds
    shockable = scenario.initial_rhythm.is_shockable

    cpr_at = _first_timestamp(event_log, EventAction.CPR_STARTED)
    shock_at = _first_timestamp(event_log, EventAction.SHOCK_DELIVERED)
    epi_at = _first_timestamp(event_log, EventAction.EPINEPHRINE_GIVEN)

    time_to_cpr = cpr_at if cpr_at is not None else elapsed
    if shock_at is not None:
        time_to_shock = shock_at
    else:
        time_to_shock = elapsed if shockable else 0
    time_to_epi = epi_at if epi_at is not None else elapsed

    compression_fraction = 80 if cpr_at is not None else 0

    adherence = 100
    feedback: list[str] = []

    if time_to_cpr > CPR_START_TARGET:
        adherence -= CPR_DELAY_PENALTY
        feedback.append(f"CPR started late ({time_to_cpr}s). Should start within 10 seconds.")
    else:
        feedback.append(f"Excellent CPR initiation ({time_to_cpr}s)")

    if shockable and time_to_shock > FIRST_SHOCK_TARGET:
        adherence -= SHOCK_DELAY_PENALTY
        feedback.append(
            f"First shock delayed ({time_to_shock}s). "
            "Should shock within 60 seconds for witnessed VF."
        )

    if time_to_epi > FIRST_EPI_TARGET:
        adherence -= EPI_DELAY_PENALTY
        feedback.append(
            f"Epinephrine delayed ({time_to_epi // 60} min). Should give within 3 minutes."
        )

    complications = list(scenario.complications)
    resolved = [c for c in final_state.resolved_complications if c in complications]
    if complications:
        rate = len(resolved) / len(complications)
        if rate == 1:
            feedback.append("All reversible causes identified and treated")
        elif rate > 0:
            adherence -= PARTIAL_CAUSES_PENALTY
            feedback.append(
                f"Only {len(resolved)}/{len(complications)} reversible causes identified"
            )
        else:
            adherence -= NO_CAUSES_PENALTY
            names = ", ".join(c.value for c in complications)
            feedback.append(f"Failed to identify reversible causes: {names}")
        complication_score = rate * COMPLICATIONS_MAX
    else:
        complication_score = COMPLICATIONS_MAX

    reached_rosc = final_state.current_rhythm == Rhythm.ROSC or final_state.rosc_achieved
    if reached_rosc:
        feedback.append("ROSC achieved! Excellent resuscitation.")
    else:
        feedback.append("Continue resuscitation. Consider ECPR if available.")

    outcome_score = ROSC_BONUS if reached_rosc else 0
    timing_score = max(
        0.0,
        TIMING_MAX - time_to_cpr / 10 - time_to_shock / 60 - time_to_epi / 180,
    )
    overall = adherence * ADHERENCE_WEIGHT + outcome_score + timing_score + complication_score
    overall = min(100.0, max(0.0, overall))

    return PerformanceMetrics(
        time_to_first_compression=time_to_cpr,
        time_to_first_shock=time_to_shock,
        time_to_first_epinephrine=time_to_epi,
        compression_fraction=compression_fraction,
        shocks_delivered=final_state.shock_count,
        epi_doses_given=final_state.epi_doses,
        guideline_adherence=max(0, adherence),
        complications_identified=len(resolved),
        complications_resolved=len(final_state.resolved_complications),
        overall_score=round(overall),
        feedback=tuple(feedback),
    )
