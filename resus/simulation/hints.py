"""
Hint Engine.

Stateless: maps the current simulation state to the single most relevant
corrective suggestion. Rules are checked in priority order and the first
match wins.
"""

from __future__ import annotations

from resus.protocol.models import EventAction
from resus.simulation.state import SimulationState


def _resolution_attempted(state: SimulationState) -> bool:
    if state.resolved_complications:
        return True
    return state.first_event(EventAction.COMPLICATION_TREATED) is not None


def get_hint(state: SimulationState) -> str | None:
    """Return one hint, or None when the trainee is on track."""
    rhythm = state.current_rhythm
    shockable = rhythm.is_shockable
    elapsed = state.elapsed_seconds

    if not state.cpr_started and elapsed > 5:
        return "Hint: Start CPR immediately! Every second counts."

    if shockable and not state.defib_attached and elapsed > 20:
        return "Hint: Attach defibrillator pads for shockable rhythm."

    if shockable and state.defib_attached and not state.rhythm_assessed and elapsed > 30:
        return "Hint: Assess rhythm and prepare to shock."

    if shockable and state.shock_count == 0 and elapsed > 60:
        return "Hint: Deliver first shock for VF/pVT."

    if state.epi_doses == 0 and elapsed > 180:
        return "Hint: Consider epinephrine - it's been 3 minutes."

    unresolved = state.unresolved_complications
    if unresolved and not _resolution_attempted(state) and elapsed > 120:
        return f"Hint: Check for reversible causes. Consider: {unresolved[0].readable}"

    if state.shock_count >= 5 and unresolved:
        return "Hint: Refractory arrest - aggressively treat reversible causes!"

    return None
