"""
Unit tests for the hint engine priority rules.
"""

from resus.protocol.reversible_causes import ReversibleCause
from resus.simulation import get_hint, get_scenario, initialize_simulation


def fresh(scenario_id="vf_witnessed", elapsed=0, **progress):
    state = initialize_simulation(get_scenario(scenario_id))
    state.elapsed_seconds = elapsed
    for name, value in progress.items():
        setattr(state, name, value)
    return state


class TestPriorityOrder:
    def test_no_hint_at_start(self):
        assert get_hint(fresh(elapsed=5)) is None

    def test_start_cpr_first(self):
        hint = get_hint(fresh(elapsed=6))
        assert hint == "Hint: Start CPR immediately! Every second counts."

    def test_cpr_outranks_everything(self):
        state = fresh(elapsed=400)
        assert "Start CPR" in get_hint(state)

    def test_attach_pads_for_shockable(self):
        hint = get_hint(fresh(elapsed=21, cpr_started=True))
        assert hint == "Hint: Attach defibrillator pads for shockable rhythm."

    def test_no_pads_hint_for_pea(self):
        state = fresh("pea_hypovolemia", elapsed=21, cpr_started=True)
        assert get_hint(state) is None

    def test_assess_rhythm(self):
        state = fresh(elapsed=31, cpr_started=True, defib_attached=True)
        assert get_hint(state) == "Hint: Assess rhythm and prepare to shock."

    def test_first_shock(self):
        state = fresh(elapsed=61, cpr_started=True, defib_attached=True, rhythm_assessed=True)
        assert get_hint(state) == "Hint: Deliver first shock for VF/pVT."

    def test_epinephrine_after_three_minutes(self):
        state = fresh(elapsed=181, cpr_started=True, defib_attached=True,
                      rhythm_assessed=True, shock_count=1)
        assert get_hint(state) == "Hint: Consider epinephrine - it's been 3 minutes."

    def test_thresholds_are_strict(self):
        state = fresh(elapsed=180, cpr_started=True, defib_attached=True,
                      rhythm_assessed=True, shock_count=1)
        assert get_hint(state) is None


class TestReversibleCauseHints:
    def test_names_first_unresolved_cause(self):
        state = fresh("pea_hypovolemia", elapsed=121, cpr_started=True, epi_doses=1)
        assert get_hint(state) == "Hint: Check for reversible causes. Consider: hypovolemia"

    def test_readable_cause_name(self):
        state = fresh("pea_tension_pneumo", elapsed=121, cpr_started=True, epi_doses=1)
        assert get_hint(state).endswith("Consider: tension pneumothorax")

    def test_suppressed_after_a_treatment_attempt(self):
        state = fresh("pea_hypovolemia", elapsed=121, cpr_started=True, epi_doses=1)
        state.append_event("Reversible Cause Treated", "Toxins (not present)")
        assert get_hint(state) is None

    def test_refractory_arrest(self):
        state = fresh(
            "refractory_vf", elapsed=200, cpr_started=True, defib_attached=True,
            rhythm_assessed=True, shock_count=5, epi_doses=2,
            resolved_complications=[ReversibleCause.HYPOTHERMIA],
        )
        assert get_hint(state) == "Hint: Refractory arrest - aggressively treat reversible causes!"

    def test_on_track_with_everything_resolved(self):
        state = fresh(
            "refractory_vf", elapsed=200, cpr_started=True, defib_attached=True,
            rhythm_assessed=True, shock_count=5, epi_doses=2,
            resolved_complications=[ReversibleCause.HYPOTHERMIA, ReversibleCause.TOXINS],
        )
        assert get_hint(state) is None
