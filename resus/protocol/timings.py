"""
Protocol timing thresholds.

All values are in logical seconds (ticks), never wall-clock time.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProtocolTimings:
    """Thresholds for the live protocol clock."""

    # 2-minute compression cycle
    cycle_seconds: int = 120
    rhythm_check_warning_seconds: int = 90  # "rhythm check in 30 seconds"

    # Epinephrine every 3 minutes, prepare 15s ahead
    epi_interval_seconds: int = 180
    epi_warning_lead_seconds: int = 15

    # Hs and Ts reminder every 4 minutes
    reversible_causes_interval_seconds: int = 240

    # Deferred drug prompts, let the previous announcement finish first
    nonshockable_drug_delay_seconds: int = 2
    post_shock_epi_delay_seconds: int = 2
    post_shock_amiodarone_delay_seconds: int = 4

    @property
    def epi_warning_seconds(self) -> int:
        return self.epi_interval_seconds - self.epi_warning_lead_seconds
