"""
Machine error taxonomy.

Every consistency or run failure is a distinct exception class so callers
can branch on the class (or on ``kind``) instead of parsing messages:

- InvalidState: a referenced state is not registered (construction only)
- InvalidToken: a token is not in the alphabet (construction or run)
- NoTransition: no transition defined for (state, token) (run only)
- InvalidFinalState: the run ended in a non-accepting state (run only)
"""

from enum import Enum
from typing import Optional


class MachineErrorKind(str, Enum):
    """Checkable kind of a machine error."""

    INVALID_STATE = "invalid_state"
    INVALID_TOKEN = "invalid_token"
    NO_TRANSITION = "no_transition"
    INVALID_FINAL_STATE = "invalid_final_state"


class MachineError(Exception):
    """Base class for all machine construction and run errors."""

    kind: MachineErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidState(MachineError):
    """A state name is absent from the state registry."""

    kind = MachineErrorKind.INVALID_STATE

    def __init__(
        self,
        state: Optional[str] = None,
        message: str = "The provided state name is invalid",
    ):
        self.state = state
        super().__init__(f"{message}: {state!r}" if state is not None else message)


class InvalidToken(MachineError):
    """A token is absent from the input alphabet."""

    kind = MachineErrorKind.INVALID_TOKEN

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"The token is not in the input alphabet: {token!r}")


class NoTransition(MachineError):
    """The transition table has no entry for (state, token)."""

    kind = MachineErrorKind.NO_TRANSITION

    def __init__(self, state: str, token: str):
        self.state = state
        self.token = token
        super().__init__(
            f"There is no allowable transition from {state!r} on {token!r}"
        )


class InvalidFinalState(MachineError):
    """The run ended in a state that is not allowed to be final."""

    kind = MachineErrorKind.INVALID_FINAL_STATE

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"The final state is invalid: {state!r}")
