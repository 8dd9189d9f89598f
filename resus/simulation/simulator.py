"""
Training Simulator.

Runs one scenario in training mode: trainee actions mutate the
SimulationState and append to its event log, the tick source advances
simulated time, and the rhythm model is re-evaluated after each shock or
drug and at every elapsed-time checkpoint. Reaching ROSC stops the clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from resus.clock import TickSource
from resus.protocol.dosing import (
    amiodarone_dose_mg,
    epinephrine_dose_mg,
    format_clock,
    shock_energy_j_per_kg,
)
from resus.protocol.models import EventAction, EventKind, Rhythm
from resus.protocol.reversible_causes import ReversibleCause
from resus.simulation.hints import get_hint
from resus.simulation.rhythm_model import next_rhythm
from resus.simulation.scenarios import RandomSource, Scenario
from resus.simulation.scoring import PerformanceMetrics, calculate_performance_metrics
from resus.simulation.state import SimulationState, initialize_simulation


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration for training runs."""

    rhythm_checkpoint_seconds: int = 120
    default_compression_quality: int = 85


class TrainingSimulator:
    """Drives a SimulationState from trainee actions and ticks."""

    def __init__(
        self,
        scenario: Scenario,
        rng: RandomSource,
        clock: TickSource | None = None,
        config: SimulationConfig | None = None,
    ):
        self.scenario = scenario
        self.rng = rng
        self.config = config or SimulationConfig()
        self.state = initialize_simulation(scenario)
        self.clock = clock or TickSource()
        self._finished = False
        self.clock.subscribe(self.tick)

    @property
    def rhythm(self) -> Rhythm:
        return self.state.current_rhythm

    @property
    def is_over(self) -> bool:
        return self._finished or self.state.rosc_achieved

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def start(self) -> bool:
        if self.is_over or not self.clock.start():
            return False
        self.state.started_at = datetime.now()
        logger.info("Simulation '{}' started ({})", self.scenario.id, self.rhythm.value)
        return True

    def pause(self) -> bool:
        return not self.is_over and self.clock.pause()

    def resume(self) -> bool:
        return not self.is_over and self.clock.resume()

    def advance(self, seconds: int) -> int:
        """Run the clock forward; returns ticks actually delivered."""
        return self.clock.step(seconds)

    def tick(self) -> None:
        """One simulated second. Never raises."""
        if self.is_over or not self.clock.is_running:
            return
        try:
            self.state.elapsed_seconds += 1
            if self.state.elapsed_seconds % self.config.rhythm_checkpoint_seconds == 0:
                self.evaluate_rhythm()
        except Exception:
            logger.exception("Error during simulation tick at t={}", self.state.elapsed_seconds)

    # ------------------------------------------------------------------
    # Trainee actions
    # ------------------------------------------------------------------

    def start_cpr(self, quality: int | None = None) -> bool:
        if self.is_over or self.state.cpr_started:
            return self._reject("start_cpr", "CPR already started")
        q = self.config.default_compression_quality if quality is None else quality
        self.state.cpr_started = True
        self.state.compression_quality = max(0, min(100, q))
        self.state.append_event(
            EventAction.CPR_STARTED,
            f"Compressions at quality {self.state.compression_quality}%",
            correct=True,
        )
        return True

    def attach_defibrillator(self) -> bool:
        if self.is_over or self.state.defib_attached:
            return self._reject("attach_defibrillator", "pads already attached")
        self.state.defib_attached = True
        self.state.append_event(EventAction.DEFIBRILLATOR_ATTACHED, "Pads on, monitor rhythm")
        return True

    def assess_rhythm(self) -> Rhythm | None:
        """Look at the monitor; returns the rhythm shown, None when over."""
        if self.is_over:
            return None
        self.state.rhythm_assessed = True
        self.state.append_event(EventAction.RHYTHM_ASSESSED, self.rhythm.value)
        return self.rhythm

    def deliver_shock(self) -> bool:
        """Shock at the next energy step. Requires pads."""
        if self.is_over:
            return self._reject("deliver_shock", "simulation over")
        if not self.state.defib_attached:
            return self._reject("deliver_shock", "defibrillator not attached")

        s = self.state
        s.shock_count += 1
        appropriate = self.rhythm.is_shockable
        details = f"Shock {s.shock_count}: {shock_energy_j_per_kg(s.shock_count)} J/kg"
        if not appropriate:
            details += f" - {self.rhythm.value} is not shockable"
        s.append_event(EventAction.SHOCK_DELIVERED, details, correct=appropriate)
        self.evaluate_rhythm()
        return True

    def give_epinephrine(self) -> bool:
        if self.is_over:
            return self._reject("give_epinephrine", "simulation over")
        s = self.state
        s.epi_doses += 1
        s.last_epi_elapsed_seconds = s.elapsed_seconds
        s.append_event(
            EventAction.EPINEPHRINE_GIVEN,
            f"{epinephrine_dose_mg(s.weight_kg):g} mg IV/IO (dose {s.epi_doses})",
            correct=True,
        )
        self.evaluate_rhythm()
        return True

    def give_amiodarone(self) -> bool:
        if self.is_over or self.state.amiodarone_given:
            return self._reject("give_amiodarone", "already given or simulation over")
        s = self.state
        s.amiodarone_given = True
        appropriate = self.rhythm.is_shockable and s.shock_count >= 3
        s.append_event(
            EventAction.AMIODARONE_GIVEN,
            f"{amiodarone_dose_mg(s.weight_kg):g} mg IV/IO",
            correct=appropriate,
        )
        self.evaluate_rhythm()
        return True

    def treat_complication(self, cause: ReversibleCause | str) -> bool:
        """
        Treat a suspected reversible cause.

        Treating a cause the patient does not have is logged as incorrect.
        """
        if self.is_over:
            return self._reject("treat_complication", "simulation over")
        try:
            parsed = ReversibleCause(cause)
        except ValueError:
            return self._reject("treat_complication", f"unknown cause {cause!r}")
        s = self.state
        if parsed in s.resolved_complications:
            return self._reject("treat_complication", f"{parsed.value} already resolved")

        present = parsed in s.complications
        if present:
            s.resolved_complications.append(parsed)
            details = parsed.label
        else:
            details = f"{parsed.label} (not present)"
        s.append_event(
            EventAction.COMPLICATION_TREATED,
            details,
            kind=EventKind.COMPLICATION,
            correct=present,
        )
        return True

    # ------------------------------------------------------------------
    # Model, hints, scoring
    # ------------------------------------------------------------------

    def evaluate_rhythm(self) -> Rhythm:
        """Apply one draw of the rhythm model."""
        current = self.rhythm
        if self.is_over:
            return current

        new = next_rhythm(self.state, self.rng)
        if new != current:
            self.state.rhythm = new
            self.state.append_event(
                EventAction.RHYTHM_CHANGED,
                f"{current.value} -> {new.value}",
                kind=EventKind.RHYTHM_CHANGE,
            )
            logger.debug("Rhythm {} -> {} at {}", current.value, new.value,
                         format_clock(self.state.elapsed_seconds))
            if new == Rhythm.ROSC:
                self.state.rosc_achieved = True
                self.clock.stop()
                logger.info("Simulation '{}' reached ROSC at {}", self.scenario.id,
                            format_clock(self.state.elapsed_seconds))
        return new

    def hint(self) -> str | None:
        return get_hint(self.state)

    def metrics(self) -> PerformanceMetrics:
        return calculate_performance_metrics(self.state.event_log, self.scenario, self.state)

    def finish(self) -> PerformanceMetrics:
        """End the run and score it."""
        self._finished = True
        self.clock.stop()
        return self.metrics()

    def _reject(self, op: str, reason: str) -> bool:
        logger.debug("Rejected {}: {}", op, reason)
        return False
