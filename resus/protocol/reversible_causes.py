"""
Reversible causes of cardiac arrest (the Hs and Ts).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ReversibleCause(str, Enum):
    HYPOXIA = "hypoxia"
    HYPOVOLEMIA = "hypovolemia"
    H_PLUS = "h_plus"  # acidosis
    HYPOKALEMIA = "hypokalemia"
    HYPERKALEMIA = "hyperkalemia"
    HYPOTHERMIA = "hypothermia"
    TENSION_PNEUMOTHORAX = "tension_pneumothorax"
    CARDIAC_TAMPONADE = "cardiac_tamponade"
    TOXINS = "toxins"
    THROMBOSIS_PULMONARY = "thrombosis_pulmonary"
    THROMBOSIS_CORONARY = "thrombosis_coronary"

    @property
    def label(self) -> str:
        return CAUSE_GUIDANCE[self].label

    @property
    def readable(self) -> str:
        """Tag with underscores replaced, e.g. 'tension pneumothorax'."""
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class CauseGuidance:
    label: str
    group: str  # "H" or "T"
    treatment: str


CAUSE_GUIDANCE: dict[ReversibleCause, CauseGuidance] = {
    ReversibleCause.HYPOXIA: CauseGuidance("Hypoxia", "H", "Check oxygen, ventilation"),
    ReversibleCause.HYPOVOLEMIA: CauseGuidance("Hypovolemia", "H", "Fluid bolus, blood products"),
    ReversibleCause.H_PLUS: CauseGuidance(
        "Hydrogen ion (Acidosis)", "H", "Ventilation, sodium bicarb if severe"
    ),
    ReversibleCause.HYPOKALEMIA: CauseGuidance("Hypokalemia", "H", "Check K+, replace potassium"),
    ReversibleCause.HYPERKALEMIA: CauseGuidance(
        "Hyperkalemia", "H", "Calcium chloride, sodium bicarb, insulin/glucose"
    ),
    ReversibleCause.HYPOTHERMIA: CauseGuidance("Hypothermia", "H", "Warm patient if cold"),
    ReversibleCause.TENSION_PNEUMOTHORAX: CauseGuidance(
        "Tension Pneumothorax", "T", "Needle decompression"
    ),
    ReversibleCause.CARDIAC_TAMPONADE: CauseGuidance(
        "Tamponade (Cardiac)", "T", "Pericardiocentesis"
    ),
    ReversibleCause.TOXINS: CauseGuidance("Toxins", "T", "Antidotes if known ingestion"),
    ReversibleCause.THROMBOSIS_PULMONARY: CauseGuidance(
        "Thrombosis (PE)", "T", "Consider thrombolytics"
    ),
    ReversibleCause.THROMBOSIS_CORONARY: CauseGuidance(
        "Thrombosis (Coronary)", "T", "Consider thrombolytics"
    ),
}


def causes_in_group(group: str) -> list[ReversibleCause]:
    """All causes in the 'H' or 'T' group, in checklist order."""
    return [cause for cause, info in CAUSE_GUIDANCE.items() if info.group == group]
