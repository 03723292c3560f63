"""Tests for the transition table."""

import pytest

from dfakit.machine.alphabet import Alphabet
from dfakit.machine.errors import InvalidState, InvalidToken
from dfakit.machine.states import StateRegistry
from dfakit.machine.transitions import TransitionTable


@pytest.fixture
def alphabet():
    return Alphabet.from_string("01")


@pytest.fixture
def states():
    return StateRegistry.from_outputs({"S0": 0, "S1": 1, "S2": 2})


class TestTransitionTable:
    """Tests for TransitionTable."""

    def test_lookup(self, alphabet, states):
        table = TransitionTable({"S0": {"0": "S0", "1": "S1"}}, alphabet, states)

        assert table.lookup("S0", "1") == "S1"

    def test_lookup_missing_pair_is_none(self, alphabet, states):
        """A missing entry is not an error at this layer."""
        table = TransitionTable({"S0": {"0": "S0"}}, alphabet, states)

        assert table.lookup("S0", "1") is None
        assert table.lookup("S2", "0") is None

    def test_unknown_source_state(self, alphabet, states):
        with pytest.raises(InvalidState, match="transition's initial state") as exc_info:
            TransitionTable({"S5": {"0": "S2"}}, alphabet, states)

        assert exc_info.value.state == "S5"

    def test_unknown_token(self, alphabet, states):
        with pytest.raises(InvalidToken) as exc_info:
            TransitionTable({"S0": {"0": "S0", "x": "S1"}}, alphabet, states)

        assert exc_info.value.token == "x"

    def test_unknown_target_state(self, alphabet, states):
        with pytest.raises(InvalidState, match="transition's subsequent state") as exc_info:
            TransitionTable({"S0": {"0": "S2", "1": "S8"}}, alphabet, states)

        assert exc_info.value.state == "S8"

    def test_token_checked_before_target(self, alphabet, states):
        """Within one entry the token is validated first."""
        with pytest.raises(InvalidToken):
            TransitionTable({"S0": {"x": "S8"}}, alphabet, states)

    def test_source_checked_before_its_entries(self, alphabet, states):
        with pytest.raises(InvalidState):
            TransitionTable({"S5": {"x": "S0"}}, alphabet, states)

    def test_check_against_other_registry(self, alphabet, states):
        table = TransitionTable({"S0": {"1": "S2"}}, alphabet, states)

        with pytest.raises(InvalidState):
            table.check(alphabet, StateRegistry.from_outputs({"S0": 0}))

    def test_missing(self, alphabet, states):
        table = TransitionTable(
            {"S0": {"0": "S0", "1": "S1"}, "S1": {"0": "S2"}}, alphabet, states
        )

        assert table.missing(alphabet, states) == [
            ("S1", "1"),
            ("S2", "0"),
            ("S2", "1"),
        ]

    def test_items_and_len(self, alphabet, states):
        table = TransitionTable({"S0": {"0": "S0", "1": "S1"}}, alphabet, states)

        assert list(table.items()) == [("S0", "0", "S0"), ("S0", "1", "S1")]
        assert len(table) == 2

    def test_table_is_read_only(self, alphabet, states):
        raw = {"S0": {"0": "S0"}}
        table = TransitionTable(raw, alphabet, states)
        raw["S0"]["1"] = "S1"

        assert table.lookup("S0", "1") is None
        with pytest.raises(TypeError):
            table.row("S0")["1"] = "S1"
