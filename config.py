"""
Configuration settings for the resus-clock engine and terminal trainer.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from resus.protocol.timings import ProtocolTimings
from resus.simulation.simulator import SimulationConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RESUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level for the stderr sink",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path (rotated)",
    )

    # ========================================
    # Clock
    # ========================================
    tick_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Wall-clock period between ticks",
    )
    event_display_limit: int = Field(
        default=10,
        ge=1,
        description="How many recent events the display window shows",
    )
    announcer_enabled: bool = Field(
        default=True,
        description="Emit cues to the announcer",
    )

    # ========================================
    # Protocol Timings (seconds)
    # ========================================
    cycle_seconds: int = Field(default=120, gt=0)
    rhythm_check_warning_seconds: int = Field(default=90, gt=0)
    epi_interval_seconds: int = Field(default=180, gt=0)
    epi_warning_lead_seconds: int = Field(default=15, ge=0)
    reversible_causes_interval_seconds: int = Field(default=240, gt=0)
    nonshockable_drug_delay_seconds: int = Field(default=2, ge=0)
    post_shock_epi_delay_seconds: int = Field(default=2, ge=0)
    post_shock_amiodarone_delay_seconds: int = Field(default=4, ge=0)

    # ========================================
    # Training Simulation
    # ========================================
    sim_action_seconds: int = Field(
        default=10,
        ge=0,
        description="Simulated seconds consumed by one trainee action",
    )
    sim_rhythm_checkpoint_seconds: int = Field(
        default=120,
        gt=0,
        description="Elapsed-time checkpoint for rhythm re-evaluation",
    )
    sim_hints_enabled: bool = Field(default=True)
    default_compression_quality: int = Field(default=85, ge=0, le=100)

    def protocol_timings(self) -> ProtocolTimings:
        """Build the timing table consumed by the live engine."""
        return ProtocolTimings(
            cycle_seconds=self.cycle_seconds,
            rhythm_check_warning_seconds=self.rhythm_check_warning_seconds,
            epi_interval_seconds=self.epi_interval_seconds,
            epi_warning_lead_seconds=self.epi_warning_lead_seconds,
            reversible_causes_interval_seconds=self.reversible_causes_interval_seconds,
            nonshockable_drug_delay_seconds=self.nonshockable_drug_delay_seconds,
            post_shock_epi_delay_seconds=self.post_shock_epi_delay_seconds,
            post_shock_amiodarone_delay_seconds=self.post_shock_amiodarone_delay_seconds,
        )

    def simulation_config(self) -> SimulationConfig:
        """Build the simulator configuration."""
        return SimulationConfig(
            rhythm_checkpoint_seconds=self.sim_rhythm_checkpoint_seconds,
            default_compression_quality=self.default_compression_quality,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
