"""
Training simulation.

Provides:
- Scenario catalog (VF, PEA, asystole with reversible causes)
- Stochastic rhythm model with an injectable random source
- Performance scoring against guideline timing targets
- Priority-ordered hints
- TrainingSimulator tying them to the tick source
"""

from resus.simulation.hints import get_hint
from resus.simulation.rhythm_model import eligible_rules, next_rhythm
from resus.simulation.scenarios import (
    SCENARIOS,
    RandomSource,
    Scenario,
    get_all_scenarios,
    get_scenario,
    make_scenario,
    random_scenario,
)
from resus.simulation.scoring import PerformanceMetrics, calculate_performance_metrics
from resus.simulation.simulator import SimulationConfig, TrainingSimulator
from resus.simulation.state import SimulationState, initialize_simulation

__all__ = [
    "Scenario",
    "SCENARIOS",
    "RandomSource",
    "get_all_scenarios",
    "get_scenario",
    "make_scenario",
    "random_scenario",
    "SimulationState",
    "initialize_simulation",
    "next_rhythm",
    "eligible_rules",
    "PerformanceMetrics",
    "calculate_performance_metrics",
    "get_hint",
    "SimulationConfig",
    "TrainingSimulator",
]
