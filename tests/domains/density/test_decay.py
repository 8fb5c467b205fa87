"""Unit tests for report time decay."""

from datetime import timedelta

import pytest

from src.domains.density.config import DecaySettings
from src.domains.density.decay import age_minutes, decay_multiplier, decayed_average
from tests.conftest import NOW, report


class TestDecayMultiplier:
    def test_fresh_report_full_weight(self):
        assert decay_multiplier(0) == 1.0

    def test_halfway(self):
        assert decay_multiplier(60) == pytest.approx(0.5)

    def test_floor_reached(self):
        assert decay_multiplier(90) == pytest.approx(0.4)
        assert decay_multiplier(119) == pytest.approx(0.4)
        assert decay_multiplier(500) == pytest.approx(0.4)

    def test_bounded_and_non_increasing(self):
        ages = [i * 0.5 for i in range(0, 400)]
        values = [decay_multiplier(a) for a in ages]
        assert all(0.4 <= v <= 1.0 for v in values)
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_negative_age_treated_as_fresh(self):
        assert decay_multiplier(-5) == 1.0

    def test_custom_settings(self):
        settings = DecaySettings(floor=0.2, window_minutes=60)
        assert decay_multiplier(30, settings) == pytest.approx(0.5)
        assert decay_multiplier(55, settings) == pytest.approx(0.2)

    def test_invalid_floor_rejected(self):
        with pytest.raises(ValueError):
            DecaySettings(floor=0)


class TestAgeMinutes:
    def test_past(self):
        assert age_minutes(NOW - timedelta(minutes=15), NOW) == pytest.approx(15)

    def test_future_clamped(self):
        assert age_minutes(NOW + timedelta(minutes=5), NOW) == 0


class TestDecayedAverage:
    def test_mixed_weights(self):
        rows = [report("p1", "low", 0), report("p1", "critical", 60)]
        # (1*1.0 + 4*0.5) / (1.0 + 0.5)
        assert decayed_average(rows, NOW) == pytest.approx(2.0)

    def test_single_report_invariant_to_age(self):
        assert decayed_average([report("p1", "critical", 0)], NOW) == pytest.approx(4.0)
        assert decayed_average([report("p1", "critical", 119)], NOW) == pytest.approx(4.0)

    def test_unmapped_rows_ignored(self):
        rows = [report("p1", "high", 0), report("p1", "swarming", 0)]
        assert decayed_average(rows, NOW) == pytest.approx(3.0)

    def test_only_unmapped_rows(self):
        assert decayed_average([report("p1", "???", 0)], NOW) is None

    def test_empty(self):
        assert decayed_average([], NOW) is None
