"""
Deterministic finite-state machine engine.

Composes an alphabet, a state registry, an initial state and a transition
table. All cross-references are validated once, at construction; a run can
then only fail because of its input:

- InvalidToken: an input character is outside the alphabet
- NoTransition: the table has no entry for (current state, token)
- InvalidFinalState: the input ends in a non-accepting state

The engine keeps no "current state" between calls. Each run tracks its
state locally, so one instance can be shared by concurrent callers.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from dfakit.machine.alphabet import Alphabet
from dfakit.machine.errors import (
    InvalidFinalState,
    InvalidToken,
    MachineError,
    MachineErrorKind,
    NoTransition,
)
from dfakit.machine.states import StateRegistry
from dfakit.machine.transitions import TransitionTable

if TYPE_CHECKING:
    from dfakit.machine.schema import MachineDefinition

logger = logging.getLogger(__name__)

INITIAL_STATE_INVALID = "The initial state is invalid"


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of running one input through a machine.

    ``path`` lists every state visited, starting with the initial state.
    On failure it stops at the state where the run aborted.
    """

    input: str
    path: Tuple[str, ...]
    output: Any = None
    error: Optional[MachineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[MachineErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def final_state(self) -> str:
        return self.path[-1]

    def unwrap(self) -> Any:
        """Return the output, or raise the error that aborted the run."""
        if self.error is not None:
            raise self.error
        return self.output


class FiniteStateMachine:
    """
    A validated DFA producing an output for each accepted input.

    Example:
        ```python
        machine = FiniteStateMachine(
            alphabet=Alphabet.from_string("01"),
            states=states,
            initial_state="S0",
            transitions=TransitionTable(table, alphabet, states),
        )
        machine.process("110")   # output of the state "110" ends in
        machine.run("2").kind    # MachineErrorKind.INVALID_TOKEN
        ```
    """

    def __init__(
        self,
        alphabet: Alphabet,
        states: StateRegistry,
        initial_state: str,
        transitions: TransitionTable,
        name: str = "machine",
    ):
        states.require(initial_state, INITIAL_STATE_INVALID)
        transitions.check(alphabet, states)

        self.name = name
        self.alphabet = alphabet
        self.states = states
        self.initial_state = initial_state
        self.transitions = transitions

        logger.info(
            f"FiniteStateMachine '{name}' initialized with {len(states)} states, "
            f"{len(alphabet)} tokens and {len(transitions)} transitions"
        )

    @classmethod
    def from_definition(cls, definition: "MachineDefinition") -> "FiniteStateMachine":
        """Build a machine from a validated definition."""
        return definition.build()

    def step(self, state: str, token: str) -> str:
        """
        Apply one transition.

        Args:
            state: Current state
            token: Input token

        Returns:
            The next state

        Raises:
            InvalidToken: If the token is not in the alphabet
            NoTransition: If no transition is defined for (state, token)
        """
        if not self.alphabet.contains(token):
            raise InvalidToken(token)
        target = self.transitions.lookup(state, token)
        if target is None:
            raise NoTransition(state, token)
        return target

    def _final_output(self, state: str) -> Any:
        descriptor = self.states.descriptor(state)
        if not descriptor.allow_final:
            raise InvalidFinalState(state)
        return descriptor.output

    def process(self, input: str) -> Any:
        """
        Run an input string and return the output of the state it ends in.

        Tokens are the characters of ``input``, consumed left to right. The
        first invalid token aborts the run.

        Raises:
            InvalidToken: If a character is not in the alphabet
            NoTransition: If a (state, token) pair has no transition
            InvalidFinalState: If the final state is not accepting
        """
        state = self.initial_state
        for token in input:
            state = self.step(state, token)
        return self._final_output(state)

    def run(self, input: str) -> RunResult:
        """
        Run an input string without raising.

        Returns:
            RunResult with the output, or with the error that aborted the run
        """
        path: List[str] = [self.initial_state]
        try:
            for token in input:
                path.append(self.step(path[-1], token))
            output = self._final_output(path[-1])
        except MachineError as e:
            logger.debug(f"Machine '{self.name}' rejected {input!r}: {e.kind.value}")
            return RunResult(input=input, path=tuple(path), error=e)

        logger.debug(f"Machine '{self.name}' accepted {input!r} in '{path[-1]}'")
        return RunResult(input=input, path=tuple(path), output=output)

    def accepts(self, input: str) -> bool:
        """Check whether an input runs to an accepting state."""
        return self.run(input).ok

    def missing_transitions(self) -> List[Tuple[str, str]]:
        """List the (state, token) pairs without a defined transition."""
        return self.transitions.missing(self.alphabet, self.states)

    def __repr__(self) -> str:
        return (
            f"FiniteStateMachine(name={self.name!r}, initial_state={self.initial_state!r}, "
            f"states={self.states.names!r})"
        )
