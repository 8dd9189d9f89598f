"""
Unit tests for weight-based dosing helpers.
"""

import pytest

from resus.protocol.dosing import (
    amiodarone_dose_mg,
    epinephrine_dose_mg,
    format_clock,
    shock_energy_j_per_kg,
    shock_energy_joules,
)


class TestEpinephrine:
    def test_twenty_kg(self):
        assert epinephrine_dose_mg(20) == 0.2

    def test_rounded_to_two_decimals(self):
        assert epinephrine_dose_mg(13.7) == 0.14
        assert epinephrine_dose_mg(3.2) == 0.03


class TestAmiodarone:
    def test_twenty_kg(self):
        assert amiodarone_dose_mg(20) == 100

    def test_capped_at_300(self):
        assert amiodarone_dose_mg(80) == 300
        assert amiodarone_dose_mg(60) == 300


class TestShockEnergy:
    @pytest.mark.parametrize("n,expected", [(1, 2), (2, 4), (3, 6), (5, 10)])
    def test_energy_steps(self, n, expected):
        assert shock_energy_j_per_kg(n) == expected

    def test_joules_for_weight(self):
        assert shock_energy_joules(1, 20) == 40
        assert shock_energy_joules(3, 25) == 150

    def test_shock_number_must_be_positive(self):
        with pytest.raises(ValueError):
            shock_energy_j_per_kg(0)


def test_format_clock():
    assert format_clock(0) == "00:00"
    assert format_clock(65) == "01:05"
    assert format_clock(600) == "10:00"
