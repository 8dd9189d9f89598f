"""
Live Protocol State Machine.

Drives a live pediatric cardiac-arrest event:

    compressions -> rhythm_check -> {shock | compressions} -> drug -> compressions

with ROSC reachable from any state as an absorbing terminal.

Each tick (1 logical second):
1. elapsed_seconds += 1
2. cycle_seconds += 1, 90s pre-warning, forced rhythm check at 120s
3. epinephrine prepare/due relative to the last dose (or arrest start)
4. reversible-causes reminder every 240s
then due deferred prompts fire.

Operator errors (e.g. delivering a shock outside the shock phase) are
rejected as no-ops: nothing is mutated, nothing is logged, False is returned.
Nothing in the tick path raises.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger

from resus.clock import ClockState, TickSource
from resus.protocol.announcer import Announcer, Cue, Priority, safe_emit
from resus.protocol.dosing import (
    amiodarone_dose_mg,
    epinephrine_dose_mg,
    format_clock,
    shock_energy_j_per_kg,
    shock_energy_joules,
)
from resus.protocol.errors import InvalidSessionError
from resus.protocol.models import (
    Drug,
    EventAction,
    EventKind,
    EventLogEntry,
    Phase,
    Rhythm,
    Session,
    SessionSnapshot,
)
from resus.protocol.reversible_causes import ReversibleCause
from resus.protocol.scheduler import DeferredScheduler
from resus.protocol.timings import ProtocolTimings


class ProtocolEngine:
    """
    Pure state machine for a live resuscitation.

    The UI only observes it through `snapshot()` and the event log; cues go
    to the announcer, fire-and-forget.
    """

    def __init__(
        self,
        weight_kg: float,
        announcer: Announcer | None = None,
        clock: TickSource | None = None,
        timings: ProtocolTimings | None = None,
        event_display_limit: int = 10,
    ):
        """
        Args:
            weight_kg: Patient weight, must be positive
            announcer: Cue renderer (optional)
            clock: Tick source to subscribe to (a 1s TickSource by default)
            timings: Protocol thresholds (defaults follow the guideline)
            event_display_limit: Size of the newest-first display window
        """
        self.session = Session(weight_kg=weight_kg)
        self.announcer = announcer
        self.timings = timings or ProtocolTimings()
        self.clock = clock or TickSource()
        self.scheduler = DeferredScheduler()
        self.event_display_limit = event_display_limit
        self._torn_down = False
        self.clock.subscribe(self.tick)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def weight_kg(self) -> float:
        return self.session.weight_kg

    @property
    def epinephrine_dose_mg(self) -> float:
        return epinephrine_dose_mg(self.session.weight_kg)

    @property
    def amiodarone_dose_mg(self) -> float:
        return amiodarone_dose_mg(self.session.weight_kg)

    @property
    def is_running(self) -> bool:
        return self.clock.is_running and not self.session.rosc_achieved

    @property
    def started(self) -> bool:
        return self.session.started_at is not None

    @property
    def due_drug(self) -> Drug | None:
        """Medication the drug phase is asking for, None outside it."""
        if self.session.phase != Phase.DRUG:
            return None
        return self._preferred_drug()

    @property
    def event_log(self) -> list[EventLogEntry]:
        """Full authoritative log, oldest first."""
        return list(self.session.event_log)

    def recent_events(self, limit: int | None = None) -> list[EventLogEntry]:
        """Display window, newest first."""
        return self.session.recent_events(self.event_display_limit if limit is None else limit)

    def seconds_since_epi_reference(self) -> int:
        """Seconds since the last epinephrine dose, or since arrest start."""
        reference = self.session.last_epi_elapsed_seconds or 0
        return self.session.elapsed_seconds - reference

    def epi_window_elapsed(self) -> bool:
        s = self.session
        if s.last_epi_elapsed_seconds is None:
            return True
        return s.elapsed_seconds - s.last_epi_elapsed_seconds >= self.timings.epi_interval_seconds

    def _preferred_drug(self) -> Drug:
        s = self.session
        if not s.amiodarone_given and s.shock_count >= 3 and s.epi_doses >= s.shock_count:
            return Drug.AMIODARONE
        return Drug.EPINEPHRINE

    def snapshot(self) -> SessionSnapshot:
        s = self.session
        return SessionSnapshot(
            elapsed_seconds=s.elapsed_seconds,
            cycle_seconds=s.cycle_seconds,
            phase=s.phase,
            rhythm=s.rhythm,
            shock_count=s.shock_count,
            epi_doses=s.epi_doses,
            last_epi_elapsed_seconds=s.last_epi_elapsed_seconds,
            amiodarone_given=s.amiodarone_given,
            rosc_achieved=s.rosc_achieved,
            running=self.is_running,
            due_drug=self.due_drug,
            epinephrine_dose_mg=self.epinephrine_dose_mg,
            amiodarone_dose_mg=self.amiodarone_dose_mg,
            next_shock_j_per_kg=shock_energy_j_per_kg(s.shock_count + 1),
            seconds_to_rhythm_check=max(0, self.timings.cycle_seconds - s.cycle_seconds),
            seconds_to_next_epi=max(
                0, self.timings.epi_interval_seconds - self.seconds_since_epi_reference()
            ),
            clock=format_clock(s.elapsed_seconds),
        )

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start the arrest clock and log CPR start."""
        if self._torn_down or self.started:
            return self._reject("start", "session already started")
        if self.clock.state != ClockState.IDLE:
            return self._reject("start", f"clock is {self.clock.state.value}")

        self.session.started_at = datetime.now()
        self.session.phase = Phase.COMPRESSIONS
        self.clock.start()
        self._log(EventAction.CPR_STARTED, "High-quality compressions at 100-120/min")
        self._emit(Cue.CPR_STARTED, Priority.HIGH)
        logger.info("Arrest clock started (weight {} kg)", self.session.weight_kg)
        return True

    def pause(self) -> bool:
        if self.session.rosc_achieved or not self.clock.pause():
            return self._reject("pause", "clock not running")
        parked = self.scheduler.suspend()
        self._emit(Cue.PAUSED)
        logger.info("Paused at {} ({} deferred prompt(s) parked)",
                    format_clock(self.session.elapsed_seconds), parked)
        return True

    def resume(self) -> bool:
        if self.session.rosc_achieved or not self.clock.resume():
            return self._reject("resume", "clock not paused")
        self.scheduler.restore(self.session.elapsed_seconds)
        self._emit(Cue.RESUMED)
        logger.info("Resumed at {}", format_clock(self.session.elapsed_seconds))
        return True

    def teardown(self) -> None:
        """Discard the session: stop ticking and drop deferred prompts."""
        if self._torn_down:
            return
        self.scheduler.cancel_all()
        self.clock.stop()
        self.clock.unsubscribe(self.tick)
        self._torn_down = True
        logger.info("Session torn down at {}", format_clock(self.session.elapsed_seconds))

    # ------------------------------------------------------------------
    # Tick path
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Advance one logical second. Never raises."""
        if self._torn_down or not self.is_running:
            return
        try:
            self._advance()
        except Exception:
            logger.exception("Error during tick at t={}", self.session.elapsed_seconds)

    def _advance(self) -> None:
        s = self.session
        s.elapsed_seconds += 1

        self._check_cycle()
        self._check_epinephrine()
        self._check_reversible_causes()

        self.scheduler.advance(s.elapsed_seconds)

    def _check_cycle(self) -> None:
        s = self.session
        s.cycle_seconds += 1

        if s.cycle_seconds == self.timings.rhythm_check_warning_seconds and s.phase == Phase.COMPRESSIONS:
            self._emit(Cue.RHYTHM_CHECK_WARNING)

        if s.cycle_seconds >= self.timings.cycle_seconds:
            self._enter_rhythm_check("Automatic 2-minute rhythm check")

    def _check_epinephrine(self) -> None:
        if self.session.phase != Phase.COMPRESSIONS:
            return

        since = self.seconds_since_epi_reference()
        if since == self.timings.epi_warning_seconds:
            self._emit(Cue.EPI_PREPARE)
        if since >= self.timings.epi_interval_seconds:
            self._prompt_drug(Drug.EPINEPHRINE)

    def _check_reversible_causes(self) -> None:
        elapsed = self.session.elapsed_seconds
        if elapsed > 0 and elapsed % self.timings.reversible_causes_interval_seconds == 0:
            self._emit(Cue.CHECK_REVERSIBLE_CAUSES)

    def _enter_rhythm_check(self, details: str) -> None:
        s = self.session
        s.cycle_seconds = 0
        self._emit(Cue.RHYTHM_CHECK_DUE, Priority.HIGH)
        if s.phase != Phase.RHYTHM_CHECK:
            s.phase = Phase.RHYTHM_CHECK
            self._log(EventAction.RHYTHM_CHECK, details, kind=EventKind.PROMPT)

    def _prompt_drug(self, drug: Drug) -> None:
        """Move compressions -> drug. Stale prompts (phase moved on) are ignored."""
        s = self.session
        if s.rosc_achieved or s.phase != Phase.COMPRESSIONS:
            logger.debug("Skipping {} prompt in phase {}", drug.value, s.phase.value)
            return
        if drug == Drug.AMIODARONE and s.amiodarone_given:
            return

        s.phase = Phase.DRUG
        if drug == Drug.AMIODARONE:
            self._log(EventAction.AMIODARONE_DUE, f"{self.amiodarone_dose_mg:g} mg IV/IO",
                      kind=EventKind.PROMPT)
            self._emit(Cue.AMIODARONE_DUE, Priority.HIGH)
        else:
            self._log(EventAction.EPINEPHRINE_DUE, f"{self.epinephrine_dose_mg:g} mg IV/IO",
                      kind=EventKind.PROMPT)
            self._emit(Cue.EPI_DUE, Priority.HIGH)

    def _schedule_drug_prompt(self, delay: int, drug: Drug) -> None:
        self.scheduler.schedule(delay, lambda: self._prompt_drug(drug), label=f"{drug.value}_prompt")

    # ------------------------------------------------------------------
    # Operator actions
    # ------------------------------------------------------------------

    def initiate_rhythm_check(self) -> bool:
        """Manual compressions -> rhythm_check."""
        if not self._can_act("initiate_rhythm_check"):
            return False
        if self.session.phase != Phase.COMPRESSIONS:
            return self._reject("initiate_rhythm_check", f"phase is {self.session.phase.value}")
        self._enter_rhythm_check("Manual rhythm check")
        return True

    def classify_rhythm(self, rhythm: Rhythm | str) -> bool:
        """
        Record the operator's rhythm assessment.

        VF/pVT -> shock phase. PEA/asystole -> back to compressions with the
        cycle reset, and an epinephrine prompt 2s later when the epinephrine
        window is open. ROSC is routed to achieve_rosc().
        """
        if not self._can_act("classify_rhythm"):
            return False
        s = self.session
        if s.phase != Phase.RHYTHM_CHECK:
            return self._reject("classify_rhythm", f"phase is {s.phase.value}")
        try:
            parsed = Rhythm.parse(rhythm)
        except InvalidSessionError as e:
            return self._reject("classify_rhythm", str(e))

        if parsed == Rhythm.ROSC:
            return self.achieve_rosc()
        if parsed == Rhythm.UNKNOWN:
            return self._reject("classify_rhythm", "rhythm not determined")

        s.rhythm = parsed
        if parsed.is_shockable:
            s.phase = Phase.SHOCK
            self._log(EventAction.SHOCKABLE_RHYTHM, f"{parsed.value} detected")
            self._emit(Cue.SHOCKABLE_RHYTHM, Priority.HIGH)
            return True

        s.phase = Phase.COMPRESSIONS
        s.cycle_seconds = 0
        self._log(EventAction.NON_SHOCKABLE_RHYTHM, f"{parsed.value} - continue CPR")
        self._emit(Cue.NON_SHOCKABLE_RHYTHM, Priority.HIGH)
        if self.epi_window_elapsed():
            self._schedule_drug_prompt(self.timings.nonshockable_drug_delay_seconds, Drug.EPINEPHRINE)
        return True

    def deliver_shock(self) -> bool:
        """shock -> compressions. Logs shock number and energy."""
        if not self._can_act("deliver_shock"):
            return False
        s = self.session
        if s.phase != Phase.SHOCK:
            return self._reject("deliver_shock", f"phase is {s.phase.value}")

        s.shock_count += 1
        s.phase = Phase.COMPRESSIONS
        s.cycle_seconds = 0
        n = s.shock_count
        self._log(
            EventAction.SHOCK_DELIVERED,
            f"Shock {n}: {shock_energy_j_per_kg(n)} J/kg ({shock_energy_joules(n, s.weight_kg):g} J)",
        )
        self._emit(Cue.SHOCK_DELIVERED, Priority.HIGH)

        if n == 2 and s.epi_doses == 0:
            self._schedule_drug_prompt(self.timings.post_shock_epi_delay_seconds, Drug.EPINEPHRINE)
        if n == 3 and not s.amiodarone_given:
            self._schedule_drug_prompt(self.timings.post_shock_amiodarone_delay_seconds, Drug.AMIODARONE)
        return True

    def give_drug(self) -> bool:
        """Administer whichever medication the drug phase calls for."""
        if self.session.phase == Phase.DRUG and self._preferred_drug() == Drug.AMIODARONE:
            return self.give_amiodarone()
        return self.give_epinephrine()

    def give_epinephrine(self) -> bool:
        if not self._can_act("give_epinephrine"):
            return False
        s = self.session
        if s.phase != Phase.DRUG:
            return self._reject("give_epinephrine", f"phase is {s.phase.value}")

        s.epi_doses += 1
        s.last_epi_elapsed_seconds = s.elapsed_seconds
        s.phase = Phase.COMPRESSIONS
        self._log(EventAction.EPINEPHRINE_GIVEN, f"{self.epinephrine_dose_mg:g} mg IV/IO (1:10,000)")
        self._emit(Cue.EPI_GIVEN)
        return True

    def give_amiodarone(self) -> bool:
        if not self._can_act("give_amiodarone"):
            return False
        s = self.session
        if s.phase != Phase.DRUG:
            return self._reject("give_amiodarone", f"phase is {s.phase.value}")
        if s.amiodarone_given:
            return self._reject("give_amiodarone", "already given")

        s.amiodarone_given = True
        s.phase = Phase.COMPRESSIONS
        self._log(EventAction.AMIODARONE_GIVEN, f"{self.amiodarone_dose_mg:g} mg IV/IO")
        self._emit(Cue.AMIODARONE_GIVEN)
        return True

    def achieve_rosc(self) -> bool:
        """Any state -> ROSC. Stops the clock and drops deferred prompts."""
        if not self._can_act("achieve_rosc"):
            return False
        s = self.session
        s.rosc_achieved = True
        s.rhythm = Rhythm.ROSC
        self.scheduler.cancel_all()
        self.clock.stop()
        self._log(EventAction.ROSC_ACHIEVED, "Pulse detected - post-arrest care")
        self._emit(Cue.ROSC, Priority.HIGH)
        logger.info("ROSC at {}", format_clock(s.elapsed_seconds))
        return True

    def address_reversible_cause(self, cause: ReversibleCause | str) -> bool:
        """Tick off one of the Hs and Ts on the checklist."""
        if not self._can_act("address_reversible_cause"):
            return False
        try:
            parsed = ReversibleCause(cause)
        except ValueError:
            return self._reject("address_reversible_cause", f"unknown cause {cause!r}")
        if parsed.value in self.session.addressed_causes:
            return self._reject("address_reversible_cause", f"{parsed.value} already addressed")

        self.session.addressed_causes.append(parsed.value)
        self._log(EventAction.REVERSIBLE_CAUSE_ADDRESSED, parsed.label)
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _can_act(self, op: str) -> bool:
        if self._torn_down:
            return self._reject(op, "session torn down")
        if not self.started:
            return self._reject(op, "session not started")
        if self.session.rosc_achieved:
            return self._reject(op, "ROSC achieved")
        return True

    def _reject(self, op: str, reason: str) -> bool:
        logger.debug("Rejected {}: {}", op, reason)
        return False

    def _log(self, action: EventAction, details: str | None = None,
             kind: EventKind = EventKind.ACTION) -> EventLogEntry:
        return self.session.append_event(action, details, kind=kind)

    def _emit(self, cue: Cue, priority: Priority = Priority.NORMAL) -> None:
        safe_emit(self.announcer, cue, priority)
