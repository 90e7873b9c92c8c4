"""
Tests for EvmTracker.
"""

import pytest

from wsb.managers.evm_tracker import _ratio

from conftest import tid


class TestEvmTracker:
    """Test EVM figures computed from the root and leaf statuses."""

    def test_empty_project(self, tracker, store):
        """Undefined ratios come out as 0.0."""
        assert tracker.completion_percentage(store) == 0.0
        assert tracker.earned_value(store) == 0.0
        assert tracker.spi(store) == 0.0
        assert tracker.cpi(store) == 0.0
        assert tracker.sv(store) == 0.0
        assert tracker.cv(store) == 0.0

    def test_nothing_done(self, engine, tracker, sample_store):
        engine.set_planned_value(tid("2.1"), 10.0, sample_store)
        engine.set_actual_cost(tid("2.1"), 4.0, sample_store)

        assert tracker.completion_percentage(sample_store) == 0.0
        assert tracker.earned_value(sample_store) == 0.0
        assert tracker.spi(sample_store) == 0.0
        assert tracker.sv(sample_store) == -10.0
        assert tracker.cpi(sample_store) == 0.0
        assert tracker.cv(sample_store) == -4.0

    def test_half_done(self, engine, tracker, sample_store):
        """Completion counts work packages, not summary tasks."""
        engine.set_planned_value(tid("1.1"), 20.0, sample_store)
        engine.set_planned_value(tid("2.1"), 10.0, sample_store)
        engine.set_planned_value(tid("2.2"), 10.0, sample_store)
        engine.set_actual_cost(tid("2.1"), 8.0, sample_store)
        engine.set_actual_cost(tid("2.2"), 12.0, sample_store)
        engine.mark_done(tid("2.1"), sample_store)
        engine.mark_done(tid("2.2"), sample_store)

        assert tracker.completion_percentage(sample_store) == 0.5
        assert tracker.earned_value(sample_store) == 20.0
        assert tracker.spi(sample_store) == 0.5
        assert tracker.sv(sample_store) == -20.0
        assert tracker.cpi(sample_store) == 1.0
        assert tracker.cv(sample_store) == 0.0

    def test_all_done(self, engine, tracker, sample_store):
        engine.set_planned_value(tid("3.1"), 8.0, sample_store)
        engine.set_actual_cost(tid("3.1"), 10.0, sample_store)
        for task in engine.tasks(sample_store):
            engine.mark_done(task.id, sample_store)

        assert tracker.completion_percentage(sample_store) == 1.0
        assert tracker.earned_value(sample_store) == 8.0
        assert tracker.spi(sample_store) == 1.0
        assert tracker.cpi(sample_store) == pytest.approx(0.8)
        assert tracker.cv(sample_store) == -2.0

    def test_summary(self, engine, tracker, sample_store):
        engine.set_planned_value(tid("1.1"), 4.0, sample_store)
        engine.set_actual_cost(tid("1.1"), 2.0, sample_store)
        engine.mark_done(tid("1.1"), sample_store)

        summary = tracker.summary(sample_store)

        assert summary.planned_value == 4.0
        assert summary.actual_cost == 2.0
        assert summary.completion_percentage == 0.25
        assert summary.earned_value == 1.0
        assert summary.spi == 0.25
        assert summary.sv == -3.0
        assert summary.cpi == 0.5
        assert summary.cv == -1.0
        assert set(summary.model_dump()) == {
            "planned_value",
            "actual_cost",
            "completion_percentage",
            "earned_value",
            "spi",
            "sv",
            "cpi",
            "cv",
        }


class TestRatio:
    """Test the division helper behind SPI, CPI and completion."""

    def test_zero_denominator(self):
        assert _ratio(5.0, 0.0) == 0.0

    @pytest.mark.parametrize(
        "numerator, denominator",
        [(float("nan"), 1.0), (float("inf"), float("inf")), (1e308 * 10, -1e308 * 10)],
    )
    def test_nan_quotient(self, numerator, denominator):
        assert _ratio(numerator, denominator) == 0.0

    def test_regular_quotient(self):
        assert _ratio(3.0, 4.0) == 0.75
