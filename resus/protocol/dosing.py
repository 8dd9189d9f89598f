"""
Weight-based dosing for pediatric cardiac arrest.

- Epinephrine: 0.01 mg/kg IV/IO (1:10,000), rounded to 2 decimals
- Amiodarone: 5 mg/kg IV/IO, max 300 mg first dose
- Defibrillation: 2 J/kg first shock, +2 J/kg each subsequent shock
"""

from __future__ import annotations

EPINEPHRINE_MG_PER_KG = 0.01
AMIODARONE_MG_PER_KG = 5.0
AMIODARONE_MAX_MG = 300.0
FIRST_SHOCK_J_PER_KG = 2
SHOCK_STEP_J_PER_KG = 2


def epinephrine_dose_mg(weight_kg: float) -> float:
    """Epinephrine dose in mg for a patient weight."""
    return round(EPINEPHRINE_MG_PER_KG * weight_kg, 2)


def amiodarone_dose_mg(weight_kg: float) -> float:
    """Amiodarone dose in mg, capped at 300 mg."""
    return min(AMIODARONE_MG_PER_KG * weight_kg, AMIODARONE_MAX_MG)


def shock_energy_j_per_kg(shock_number: int) -> int:
    """
    Energy dose for the nth shock (1-based).

    shock 1 -> 2 J/kg, shock 2 -> 4 J/kg, shock 3 -> 6 J/kg
    """
    if shock_number < 1:
        raise ValueError(f"shock_number must be >= 1, got {shock_number}")
    return FIRST_SHOCK_J_PER_KG + (shock_number - 1) * SHOCK_STEP_J_PER_KG


def shock_energy_joules(shock_number: int, weight_kg: float) -> float:
    """Absolute energy for the nth shock, rounded to whole joules."""
    return round(shock_energy_j_per_kg(shock_number) * weight_kg)


def format_clock(seconds: int) -> str:
    """Format elapsed seconds as MM:SS."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"
