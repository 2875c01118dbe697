"""Tests for the system data model."""

import pytest

from tipset.models import (
    FULL_OPTION,
    HALF_OPTIONS,
    SINGLE_OPTIONS,
    Event,
    HedgeType,
    MalformedEvent,
    SearchState,
    combinations,
    outcome_index,
    stake_cost,
)


class TestCombinations:
    def test_no_events_gives_one_empty_row(self):
        assert combinations([]) == [""]

    def test_cross_product_order(self):
        assert combinations([["a", "b"], ["c", "d"]]) == ["ac", "ad", "bc", "bd"]

    def test_all_full_three_events(self):
        rows = combinations([FULL_OPTION] * 3)
        assert len(rows) == 27
        assert len(set(rows)) == 27
        assert rows[0] == "111"
        assert rows[-1] == "222"

    def test_singles_give_one_row(self):
        assert combinations([("1",), ("X",), ("2",)]) == ["1X2"]


class TestStakeCost:
    def test_no_hedges(self):
        assert stake_cost(0, 0) == 1

    def test_mixed(self):
        assert stake_cost(2, 1) == 12

    def test_full_only(self):
        assert stake_cost(0, 3) == 27


class TestHedgeType:
    def test_from_outcome_set_size(self):
        assert HedgeType.of(("1",)) == HedgeType.SINGLE
        assert HedgeType.of(("1", "2")) == HedgeType.HALF
        assert HedgeType.of(FULL_OPTION) == HedgeType.FULL

    def test_empty_outcome_set_rejected(self):
        with pytest.raises(MalformedEvent):
            HedgeType.of(())

    def test_option_tables_match_types(self):
        assert all(HedgeType.of(o) == HedgeType.SINGLE for o in SINGLE_OPTIONS)
        assert all(HedgeType.of(o) == HedgeType.HALF for o in HALF_OPTIONS)


class TestEvent:
    def test_validate_accepts_valid(self, sample_events):
        for event in sample_events:
            event.validate()

    def test_validate_rejects_out_of_range_probability(self):
        event = Event(1, "Bad", (1.2, 0.0, 0.0), (0.4, 0.3, 0.3))
        with pytest.raises(MalformedEvent, match="probabilities"):
            event.validate()

    def test_validate_rejects_negative_share(self):
        event = Event(1, "Bad", (0.4, 0.3, 0.3), (0.5, 0.6, -0.1))
        with pytest.raises(MalformedEvent, match="shares"):
            event.validate()

    def test_validate_rejects_wrong_length(self):
        event = Event(1, "Bad", (0.5, 0.5), (0.4, 0.3, 0.3))
        with pytest.raises(MalformedEvent):
            event.validate()

    def test_favourite(self, sample_events):
        assert [e.favourite() for e in sample_events] == ["1", "2", "X", "1"]

    def test_favourite_tie_prefers_first(self):
        event = Event(1, "Tie", (0.4, 0.4, 0.2), (0.3, 0.3, 0.4))
        assert event.favourite() == "1"

    def test_probability_and_share_lookup(self, sample_events):
        event = sample_events[0]
        assert event.probability("X") == 0.30
        assert event.share("2") == 0.25

    def test_unknown_symbol(self):
        with pytest.raises(MalformedEvent):
            outcome_index("3")


class TestSearchState:
    def _state(self) -> SearchState:
        return SearchState.from_system([FULL_OPTION, ("1", "X"), ("2",)])

    def test_from_system_derives_types(self):
        state = self._state()
        assert state.types == (HedgeType.FULL, HedgeType.HALF, HedgeType.SINGLE)

    def test_counts(self):
        state = self._state()
        assert state.count(HedgeType.FULL) == 1
        assert state.count(HedgeType.HALF) == 1
        assert state.count(HedgeType.SINGLE) == 1

    def test_row_count_matches_rows(self):
        state = self._state()
        assert state.row_count == 6
        assert len(state.rows()) == 6

    def test_replace_returns_new_state(self):
        state = self._state()
        changed = state.replace(2, ("X",))
        assert changed.system[2] == ("X",)
        assert state.system[2] == ("2",)

    def test_clone_is_equal_not_identical(self):
        state = self._state()
        copy = state.clone()
        assert copy == state
        assert copy is not state

    def test_labels(self):
        assert self._state().labels() == ["1X2", "1X", "2"]
