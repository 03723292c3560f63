"""Tests for the finite state machine engine."""

import pytest

from dfakit.machine.alphabet import Alphabet
from dfakit.machine.engine import FiniteStateMachine, RunResult
from dfakit.machine.errors import (
    InvalidFinalState,
    InvalidState,
    InvalidToken,
    MachineErrorKind,
    NoTransition,
)
from dfakit.machine.states import StateRegistry
from dfakit.machine.transitions import TransitionTable


@pytest.fixture
def partial_machine():
    """Machine with a non-accepting state and a missing transition.

    start -a-> middle -b-> end; middle is not accepting and has no 'a' edge.
    """
    alphabet = Alphabet.from_string("ab")
    states = StateRegistry.from_outputs({"start": "idle", "middle": None, "end": "done"})
    transitions = TransitionTable(
        {"start": {"a": "middle", "b": "start"}, "middle": {"b": "end"}},
        alphabet,
        states,
    )
    return FiniteStateMachine(alphabet, states, "start", transitions, name="partial")


class TestConstruction:
    """Construction-time validation."""

    def test_invalid_initial_state(self):
        alphabet = Alphabet.from_string("01")
        states = StateRegistry.from_outputs({"S0": 0})
        transitions = TransitionTable({"S0": {"0": "S0"}}, alphabet, states)

        with pytest.raises(InvalidState, match="The initial state is invalid"):
            FiniteStateMachine(alphabet, states, "S5", transitions)

    def test_transitions_rechecked_against_machine_alphabet(self):
        states = StateRegistry.from_outputs({"S0": 0})
        transitions = TransitionTable({"S0": {"x": "S0"}}, Alphabet.from_string("x"), states)

        with pytest.raises(InvalidToken):
            FiniteStateMachine(Alphabet.from_string("01"), states, "S0", transitions)

    def test_exposes_components(self, mod_three_machine):
        assert mod_three_machine.name == "mod-three"
        assert mod_three_machine.initial_state == "S0"
        assert mod_three_machine.states.names == ["S0", "S1", "S2"]
        assert mod_three_machine.missing_transitions() == []


class TestProcess:
    """Tests for process()."""

    @pytest.mark.parametrize(
        "binary,expected",
        [
            ("110", 0),
            ("1000011111", 0),
            ("111111111111110000001", int("111111111111110000001", 2) % 3),
            ("1", 1),
            ("10", 2),
        ],
    )
    def test_mod_three(self, mod_three_machine, binary, expected):
        assert mod_three_machine.process(binary) == expected

    def test_empty_input_returns_initial_output(self, mod_three_machine):
        assert mod_three_machine.process("") == 0

    def test_output_type_round_trips(self, mod_three_machine, greetings_machine):
        assert isinstance(mod_three_machine.process("1"), int)
        assert greetings_machine.process("xyxxy") == "hello"
        assert greetings_machine.process("y") == "goodbye"

    def test_invalid_token_aborts(self, mod_three_machine):
        with pytest.raises(InvalidToken) as exc_info:
            mod_three_machine.process("x111115")

        assert exc_info.value.token == "x"
        assert exc_info.value.kind == MachineErrorKind.INVALID_TOKEN

    def test_invalid_token_late_in_input_is_not_skipped(self, mod_three_machine):
        with pytest.raises(InvalidToken) as exc_info:
            mod_three_machine.process("11105")

        assert exc_info.value.token == "5"

    def test_no_transition(self, partial_machine):
        with pytest.raises(NoTransition) as exc_info:
            partial_machine.process("aa")

        assert exc_info.value.state == "middle"
        assert exc_info.value.token == "a"

    def test_no_transition_from_state_without_row(self, partial_machine):
        with pytest.raises(NoTransition) as exc_info:
            partial_machine.process("aba")

        assert exc_info.value.state == "end"

    def test_non_accepting_final_state(self, partial_machine):
        with pytest.raises(InvalidFinalState) as exc_info:
            partial_machine.process("bba")

        assert exc_info.value.state == "middle"

    def test_repeated_calls_are_independent(self, mod_three_machine):
        """No state carries over from one call to the next."""
        first = mod_three_machine.process("1")
        mod_three_machine.process("10")
        assert mod_three_machine.process("1") == first

    def test_failed_run_does_not_affect_next_run(self, partial_machine):
        with pytest.raises(InvalidFinalState):
            partial_machine.process("a")

        assert partial_machine.process("ab") == "done"


class TestStep:
    """Tests for step() with explicit state passing."""

    def test_step(self, mod_three_machine):
        assert mod_three_machine.step("S1", "0") == "S2"

    def test_step_invalid_token(self, mod_three_machine):
        with pytest.raises(InvalidToken):
            mod_three_machine.step("S0", "2")

    def test_step_no_transition(self, partial_machine):
        with pytest.raises(NoTransition):
            partial_machine.step("middle", "a")


class TestRun:
    """Tests for run(), the non-raising form."""

    def test_accepted_run(self, mod_three_machine):
        result = mod_three_machine.run("110")

        assert isinstance(result, RunResult)
        assert result.ok
        assert result.output == 0
        assert result.kind is None
        assert result.path == ("S0", "S1", "S0", "S0")
        assert result.final_state == "S0"
        assert result.unwrap() == 0

    def test_empty_run_path(self, mod_three_machine):
        result = mod_three_machine.run("")

        assert result.path == ("S0",)
        assert result.output == 0

    @pytest.mark.parametrize(
        "input_string,kind,final_state",
        [
            ("abx", MachineErrorKind.INVALID_TOKEN, "end"),
            ("aa", MachineErrorKind.NO_TRANSITION, "middle"),
            ("a", MachineErrorKind.INVALID_FINAL_STATE, "middle"),
        ],
    )
    def test_rejected_runs(self, partial_machine, input_string, kind, final_state):
        result = partial_machine.run(input_string)

        assert not result.ok
        assert result.kind == kind
        assert result.output is None
        assert result.final_state == final_state

    def test_unwrap_raises_stored_error(self, partial_machine):
        result = partial_machine.run("a")

        with pytest.raises(InvalidFinalState):
            result.unwrap()

    def test_accepts(self, partial_machine):
        assert partial_machine.accepts("ab")
        assert partial_machine.accepts("")
        assert not partial_machine.accepts("a")

    def test_run_matches_process(self, greetings_machine):
        for word in ("", "x", "y", "xyxxy", "yy", "yxy"):
            assert greetings_machine.run(word).output == greetings_machine.process(word)
