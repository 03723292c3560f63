"""
State registry.

Each registered state carries a descriptor that is one of two variants:

- Accepting(output): the state may end a run and yields ``output``
- NonAccepting(): ending a run here is an error

``allow_final`` is derived from the variant and cannot be set on its own.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from dfakit.machine.errors import InvalidState


@dataclass(frozen=True)
class Accepting:
    """A state that may be final, with the output it produces."""

    output: Any

    @property
    def allow_final(self) -> bool:
        return True


@dataclass(frozen=True)
class NonAccepting:
    """A state that may not be final."""

    @property
    def allow_final(self) -> bool:
        return False

    @property
    def output(self) -> None:
        return None


StateDescriptor = Union[Accepting, NonAccepting]


def describe(output: Optional[Any]) -> StateDescriptor:
    """Descriptor for a configured output: accepting iff output is not None."""
    if output is None:
        return NonAccepting()
    return Accepting(output)


class StateRegistry:
    """
    Registry of valid state names and their descriptors.

    Example:
        ```python
        states = StateRegistry.from_outputs({"S0": 0, "trap": None})
        states.descriptor("S0")    # Accepting(output=0)
        states.descriptor("trap")  # NonAccepting()
        ```
    """

    def __init__(self, descriptors: Mapping[str, StateDescriptor]):
        self._descriptors: Dict[str, StateDescriptor] = dict(descriptors)

    @classmethod
    def from_outputs(cls, outputs: Mapping[str, Optional[Any]]) -> "StateRegistry":
        """Build a registry from a mapping of state name to optional output."""
        return cls({name: describe(output) for name, output in outputs.items()})

    def has(self, name: str) -> bool:
        """Check whether a state is registered."""
        return name in self._descriptors

    def require(self, name: str, message: str) -> None:
        """
        Ensure a state is registered.

        Raises:
            InvalidState: With ``message`` if the state is unknown
        """
        if name not in self._descriptors:
            raise InvalidState(name, message)

    def descriptor(self, name: str) -> StateDescriptor:
        """
        Get the descriptor of a registered state.

        Raises:
            InvalidState: If the state is unknown
        """
        try:
            return self._descriptors[name]
        except KeyError:
            raise InvalidState(name) from None

    @property
    def names(self) -> List[str]:
        """Registered state names in configuration order."""
        return list(self._descriptors)

    def accepting(self) -> List[str]:
        """Names of the states that may end a run."""
        return [n for n, d in self._descriptors.items() if d.allow_final]

    def items(self) -> Iterator[Tuple[str, StateDescriptor]]:
        return iter(self._descriptors.items())

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"StateRegistry({self._descriptors!r})"
