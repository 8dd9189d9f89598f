"""
Stochastic rhythm transition model for training.

Rules are evaluated top to bottom. Each eligible rule draws once from the
supplied random source and transitions when the draw is below its
probability; otherwise evaluation falls through to the next rule, and
finally to "stay". ROSC is absorbing.

    VF/pVT   shocks>=3, epi>=2, all resolved          40% -> ROSC
             shocks>=5, not all resolved              30% -> PEA
             shocks>=8                                20% -> asystole
    PEA      epi>=2, all resolved, t>=240s            50% -> ROSC
             t>=360s, not all resolved                40% -> asystole
    asystole epi>=3, all resolved, t>=300s            10% -> ROSC
"""

from __future__ import annotations

from dataclasses import dataclass

from resus.protocol.models import Rhythm
from resus.simulation.scenarios import RandomSource
from resus.simulation.state import SimulationState


@dataclass(frozen=True)
class TransitionRule:
    target: Rhythm
    probability: float
    description: str


VF_ROSC = TransitionRule(Rhythm.ROSC, 0.4, "3+ shocks, 2+ epi, causes resolved")
VF_TO_PEA = TransitionRule(Rhythm.PEA, 0.3, "5+ shocks with unresolved causes")
VF_TO_ASYSTOLE = TransitionRule(Rhythm.ASYSTOLE, 0.2, "8+ shocks")
PEA_ROSC = TransitionRule(Rhythm.ROSC, 0.5, "2+ epi, causes resolved, 4+ min")
PEA_TO_ASYSTOLE = TransitionRule(Rhythm.ASYSTOLE, 0.4, "6+ min with unresolved causes")
ASYSTOLE_ROSC = TransitionRule(Rhythm.ROSC, 0.1, "3+ epi, causes resolved, 5+ min")


def eligible_rules(state: SimulationState) -> list[TransitionRule]:
    """Rules whose preconditions hold, in evaluation order."""
    rhythm = state.current_rhythm
    resolved = state.all_complications_resolved
    shocks = state.shock_count
    epi = state.epi_doses
    elapsed = state.elapsed_seconds

    rules: list[TransitionRule] = []
    if rhythm.is_shockable:
        if shocks >= 3 and epi >= 2 and resolved:
            rules.append(VF_ROSC)
        if shocks >= 5 and not resolved:
            rules.append(VF_TO_PEA)
        if shocks >= 8:
            rules.append(VF_TO_ASYSTOLE)
    elif rhythm == Rhythm.PEA:
        if epi >= 2 and resolved and elapsed >= 240:
            rules.append(PEA_ROSC)
        if elapsed >= 360 and not resolved:
            rules.append(PEA_TO_ASYSTOLE)
    elif rhythm == Rhythm.ASYSTOLE:
        if epi >= 3 and resolved and elapsed >= 300:
            rules.append(ASYSTOLE_ROSC)
    return rules


def next_rhythm(state: SimulationState, rng: RandomSource) -> Rhythm:
    """
    Draw the rhythm for the next evaluation point.

    Args:
        state: Current simulation state (not modified)
        rng: Uniform [0, 1) source; pass a seeded random.Random or a stub

    Returns:
        The new rhythm, or the current one when nothing fires
    """
    for rule in eligible_rules(state):
        if rng.random() < rule.probability:
            return rule.target
    return state.current_rhythm
