"""Tests for whole-system evaluation."""

import logging
import math

import pytest

from tipset.estimator import estimate_row_value
from tipset.evaluator import evaluate_system
from tipset.models import (
    FULL_OPTION,
    DegenerateProbabilityModel,
    Event,
    InvalidConfiguration,
    MalformedEvent,
    combinations,
)


class TestEvaluateSystem:
    def test_all_singles_is_one_row(self, sample_events):
        system = [("1",), ("2",), ("X",), ("1",)]
        assert evaluate_system(system, sample_events, 8000) == pytest.approx(
            estimate_row_value("12X1", sample_events, 8000)
        )

    def test_sums_every_row(self, sample_events):
        system = [("1", "X"), ("2",), FULL_OPTION, ("1",)]
        rows = combinations(system)
        assert len(rows) == 6
        expected = math.fsum(estimate_row_value(r, sample_events, 8000) for r in rows)
        assert evaluate_system(system, sample_events, 8000) == pytest.approx(expected)

    def test_all_full_expands_to_27_rows(self, sample_events):
        events = sample_events[:3]
        system = [FULL_OPTION] * 3
        rows = combinations(system)
        assert len(rows) == 27
        expected = math.fsum(
            estimate_row_value(r, events, 1000, integrate=False) for r in rows
        )
        assert evaluate_system(system, events, 1000, integrate=False) == pytest.approx(expected)

    def test_no_events(self):
        """The empty system has one empty row with an empty-sum variance of zero."""
        assert evaluate_system([], [], 1000, degenerate="zero") == 0.0

    def test_length_mismatch(self, sample_events):
        with pytest.raises(MalformedEvent):
            evaluate_system([("1",)], sample_events, 1000)

    def test_unknown_policy(self, sample_events):
        with pytest.raises(InvalidConfiguration):
            evaluate_system([("1",)] * 4, sample_events, 1000, degenerate="ignore")


class TestDegeneratePolicy:
    @pytest.fixture
    def certain_event(self) -> list[Event]:
        return [Event(1, "Certain", (0.9, 0.05, 0.05), (1.0, 0.0, 0.0))]

    def test_raise_policy_propagates(self, certain_event):
        with pytest.raises(DegenerateProbabilityModel):
            evaluate_system([("1", "X")], certain_event, 1000)

    def test_zero_policy_skips_row(self, certain_event):
        assert evaluate_system([("1", "X")], certain_event, 1000, degenerate="zero") == 0.0

    def test_zero_policy_keeps_other_rows(self, sample_events):
        events = [Event(0, "Certain", (0.9, 0.05, 0.05), (1.0, 0.0, 0.0))] + sample_events[:1]
        # Rows "11", "1X": variance comes from the second event, so neither is degenerate
        value = evaluate_system([("1",), ("1", "X")], events, 1000, degenerate="zero")
        expected = (
            estimate_row_value("11", events, 1000)
            + estimate_row_value("1X", events, 1000)
        )
        assert value == pytest.approx(expected)

    def test_zero_policy_logs_skipped_row(self, certain_event, caplog):
        with caplog.at_level(logging.DEBUG, logger="tipset.evaluator"):
            evaluate_system([("1",)], certain_event, 1000, degenerate="zero")
        assert "Degenerate row 1 counted as zero" in caplog.text
