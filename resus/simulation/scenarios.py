"""
Training scenarios.

A Scenario is immutable input created once at simulation start. Bad input
(non-positive weight, unknown rhythm or cause) fails validation before any
training begins. Constructing `Scenario` directly raises pydantic's
ValidationError; `make_scenario` and `get_scenario` raise InvalidSessionError,
the same error as every other construction failure.
"""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from resus.protocol.errors import InvalidSessionError
from resus.protocol.models import Rhythm
from resus.protocol.reversible_causes import ReversibleCause


class RandomSource(Protocol):
    """Anything with a uniform `random()` in [0, 1)."""

    def random(self) -> float: ...


class Scenario(BaseModel):
    """A cardiac arrest training scenario."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    initial_rhythm: Rhythm
    complications: tuple[ReversibleCause, ...] = ()
    age_months: int = Field(ge=0)
    weight: float = Field(gt=0, description="Patient weight in kg")
    backstory: str = ""
    learning_objectives: tuple[str, ...] = ()

    @field_validator("initial_rhythm")
    @classmethod
    def _arrest_rhythm(cls, v: Rhythm) -> Rhythm:
        if v in (Rhythm.ROSC, Rhythm.UNKNOWN):
            raise ValueError(f"initial rhythm must be an arrest rhythm, got {v.value}")
        return v

    @field_validator("complications")
    @classmethod
    def _unique(cls, v: tuple[ReversibleCause, ...]) -> tuple[ReversibleCause, ...]:
        return tuple(dict.fromkeys(v))

    @property
    def is_shockable(self) -> bool:
        return self.initial_rhythm.is_shockable

    @property
    def age_display(self) -> str:
        years, months = divmod(self.age_months, 12)
        return f"{years}y {months}m"


# =============================================================================
# Built-in catalog
# =============================================================================

SCENARIOS: tuple[Scenario, ...] = (
    Scenario(
        id="vf_witnessed",
        name="Witnessed VF Arrest",
        initial_rhythm=Rhythm.VF,
        complications=(),
        age_months=84,  # 7 years
        weight=25,
        backstory="A 7-year-old child collapsed during soccer practice. "
        "Bystander CPR started immediately.",
        learning_objectives=(
            "Immediate defibrillation for witnessed VF",
            "High-quality CPR with minimal interruptions",
            "Epinephrine timing after 2nd shock",
        ),
    ),
    Scenario(
        id="pea_hypovolemia",
        name="PEA from Hypovolemia",
        initial_rhythm=Rhythm.PEA,
        complications=(ReversibleCause.HYPOVOLEMIA,),
        age_months=36,
        weight=14,
        backstory="A 3-year-old with severe diarrhea for 3 days. Found unresponsive at home.",
        learning_objectives=(
            "Recognize PEA and avoid defibrillation",
            "Identify hypovolemia as reversible cause",
            "Aggressive fluid resuscitation during CPR",
        ),
    ),
    Scenario(
        id="asystole_hypoxia",
        name="Asystole from Respiratory Failure",
        initial_rhythm=Rhythm.ASYSTOLE,
        complications=(ReversibleCause.HYPOXIA,),
        age_months=18,
        weight=11,
        backstory="An 18-month-old with severe bronchiolitis. "
        "Progressive respiratory distress led to arrest.",
        learning_objectives=(
            "Recognize hypoxic arrest (asystole)",
            "Prioritize airway and ventilation",
            "Early epinephrine in asystole",
        ),
    ),
    Scenario(
        id="vf_hyperkalemia",
        name="VF with Hyperkalemia",
        initial_rhythm=Rhythm.VF,
        complications=(ReversibleCause.HYPERKALEMIA,),
        age_months=120,
        weight=32,
        backstory="A 10-year-old with chronic kidney disease missed dialysis for 3 days. "
        "Collapsed at home.",
        learning_objectives=(
            "Recognize hyperkalemia as reversible cause",
            "Administer calcium chloride during CPR",
            "Consider sodium bicarbonate and insulin/glucose",
        ),
    ),
    Scenario(
        id="pea_tension_pneumo",
        name="PEA from Tension Pneumothorax",
        initial_rhythm=Rhythm.PEA,
        complications=(ReversibleCause.TENSION_PNEUMOTHORAX,),
        age_months=96,
        weight=28,
        backstory="An 8-year-old involved in motor vehicle collision. "
        "Chest trauma with respiratory distress progressing to arrest.",
        learning_objectives=(
            "Recognize tension pneumothorax clinically",
            "Perform needle decompression during CPR",
            "Reassess after decompression",
        ),
    ),
    Scenario(
        id="refractory_vf",
        name="Refractory VF",
        initial_rhythm=Rhythm.VF,
        complications=(ReversibleCause.HYPOTHERMIA, ReversibleCause.TOXINS),
        age_months=60,
        weight=20,
        backstory="A 5-year-old found in cold water after 10 minutes. "
        "Core temperature 28C. Possible ingestion.",
        learning_objectives=(
            "Recognize refractory VF",
            "Consider double sequential defibrillation",
            "Manage hypothermia and toxins",
            "Know when to consider ECPR",
        ),
    ),
)


def make_scenario(**fields) -> Scenario:
    """Build a custom scenario, raising InvalidSessionError on bad input."""
    try:
        return Scenario(**fields)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'scenario'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidSessionError(f"Invalid scenario: {problems}") from e


def get_all_scenarios() -> list[Scenario]:
    return list(SCENARIOS)


def get_scenario(scenario_id: str) -> Scenario:
    """Look up a built-in scenario by id."""
    for scenario in SCENARIOS:
        if scenario.id == scenario_id:
            return scenario
    known = ", ".join(s.id for s in SCENARIOS)
    raise InvalidSessionError(f"Unknown scenario '{scenario_id}'. Known: {known}")


def random_scenario(rng: RandomSource) -> Scenario:
    index = min(int(rng.random() * len(SCENARIOS)), len(SCENARIOS) - 1)
    return SCENARIOS[index]
