"""
Transition table.

Maps (state, token) to the next state. Consistency with the alphabet and
the state registry is checked when the table is built; a missing
(state, token) entry is legal and only reported when a run reaches it.
"""

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from dfakit.machine.alphabet import Alphabet
from dfakit.machine.errors import InvalidToken
from dfakit.machine.states import StateRegistry

SOURCE_STATE_INVALID = "The transition's initial state is invalid"
TARGET_STATE_INVALID = "The transition's subsequent state is invalid"


class TransitionTable:
    """
    Validated transition function.

    Example:
        ```python
        table = TransitionTable(
            {"S0": {"0": "S0", "1": "S1"}, "S1": {"0": "S1", "1": "S0"}},
            alphabet=Alphabet.from_string("01"),
            states=StateRegistry.from_outputs({"S0": "even", "S1": "odd"}),
        )
        table.lookup("S0", "1")  # "S1"
        table.lookup("S0", "2")  # None
        ```
    """

    def __init__(
        self,
        table: Mapping[str, Mapping[str, str]],
        alphabet: Alphabet,
        states: StateRegistry,
    ):
        self._table: Mapping[str, Mapping[str, str]] = MappingProxyType(
            {source: MappingProxyType(dict(row)) for source, row in table.items()}
        )
        self.check(alphabet, states)

    def check(self, alphabet: Alphabet, states: StateRegistry) -> None:
        """
        Validate every entry against an alphabet and a state registry.

        Sources are checked in order; within a source each token is checked
        before its target state.

        Raises:
            InvalidState: If a source or target state is not registered
            InvalidToken: If a token is not in the alphabet
        """
        for source, row in self._table.items():
            states.require(source, SOURCE_STATE_INVALID)
            for token, target in row.items():
                if not alphabet.contains(token):
                    raise InvalidToken(token)
                states.require(target, TARGET_STATE_INVALID)

    def lookup(self, state: str, token: str) -> Optional[str]:
        """Get the next state for (state, token), or None if undefined."""
        row = self._table.get(state)
        if row is None:
            return None
        return row.get(token)

    def row(self, state: str) -> Mapping[str, str]:
        """Get all outgoing transitions of a state (empty if none)."""
        return self._table.get(state, MappingProxyType({}))

    def missing(self, alphabet: Alphabet, states: StateRegistry) -> List[Tuple[str, str]]:
        """List the (state, token) pairs that have no transition."""
        return [
            (state, token)
            for state in states.names
            for token in alphabet
            if self.lookup(state, token) is None
        ]

    def items(self) -> Iterator[Tuple[str, str, str]]:
        """Iterate over (source, token, target) triples."""
        for source, row in self._table.items():
            for token, target in row.items():
                yield source, token, target

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {source: dict(row) for source, row in self._table.items()}

    def __len__(self) -> int:
        return sum(len(row) for row in self._table.values())

    def __repr__(self) -> str:
        return f"TransitionTable({self.as_dict()!r})"
