"""
Mutable training-simulation state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from resus.protocol.models import Rhythm, Session
from resus.protocol.reversible_causes import ReversibleCause
from resus.simulation.scenarios import Scenario


@dataclass(kw_only=True)
class SimulationState(Session):
    """Session extended with trainee progress for one scenario run."""

    scenario: Scenario
    complications: list[ReversibleCause] = field(default_factory=list)
    resolved_complications: list[ReversibleCause] = field(default_factory=list)
    compression_quality: int = 0  # 0-100
    cpr_started: bool = False
    defib_attached: bool = False
    rhythm_assessed: bool = False

    @property
    def all_complications_resolved(self) -> bool:
        return all(c in self.resolved_complications for c in self.complications)

    @property
    def unresolved_complications(self) -> list[ReversibleCause]:
        return [c for c in self.complications if c not in self.resolved_complications]

    @property
    def current_rhythm(self) -> Rhythm:
        return self.rhythm or self.scenario.initial_rhythm


def initialize_simulation(scenario: Scenario) -> SimulationState:
    """Fresh state for a scenario: rhythm pre-set, complications copied."""
    return SimulationState(
        weight_kg=scenario.weight,
        rhythm=scenario.initial_rhythm,
        scenario=scenario,
        complications=list(scenario.complications),
    )
