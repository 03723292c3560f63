"""Input alphabet: the set of tokens a machine accepts."""

from typing import Any, FrozenSet, Iterable, Iterator


class Alphabet:
    """
    Immutable set of input tokens.

    Tokens are plain strings. The constructor expects already-normalized
    tokens; use ``from_string`` or ``from_values`` to convert raw input.

    Example:
        ```python
        binary = Alphabet.from_string("01")
        assert binary.contains("1")
        assert "x" not in binary
        ```
    """

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Iterable[str]):
        self._tokens: FrozenSet[str] = frozenset(tokens)

    @classmethod
    def from_string(cls, text: str) -> "Alphabet":
        """Build an alphabet with one token per character of ``text``."""
        return cls(list(text))

    @classmethod
    def from_values(cls, values: Iterable[Any]) -> "Alphabet":
        """Build an alphabet from scalar values, stringifying each one."""
        return cls(str(v) for v in values)

    def contains(self, token: str) -> bool:
        """Check whether ``token`` belongs to the alphabet."""
        return token in self._tokens

    @property
    def tokens(self) -> FrozenSet[str]:
        return self._tokens

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"Alphabet({sorted(self._tokens)!r})"
