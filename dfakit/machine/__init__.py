"""
Finite state machine core.

Contains:
- Alphabet, StateRegistry, TransitionTable: validated building blocks
- FiniteStateMachine: the engine, with process/run/step
- Errors: InvalidState, InvalidToken, NoTransition, InvalidFinalState
- Schema: MachineDefinition, the declarative configuration structure
- Parser: MachineParser for YAML/JSON loading, MachineRegistry
"""

from dfakit.machine.alphabet import Alphabet
from dfakit.machine.errors import (
    MachineErrorKind,
    MachineError,
    InvalidState,
    InvalidToken,
    NoTransition,
    InvalidFinalState,
)
from dfakit.machine.states import (
    Accepting,
    NonAccepting,
    StateDescriptor,
    StateRegistry,
    describe,
)
from dfakit.machine.transitions import TransitionTable
from dfakit.machine.engine import FiniteStateMachine, RunResult
from dfakit.machine.schema import StateDefinition, MachineDefinition, build_machine
from dfakit.machine.parser import MachineParser, MachineRegistry

__all__ = [
    # Building blocks
    "Alphabet",
    "Accepting",
    "NonAccepting",
    "StateDescriptor",
    "StateRegistry",
    "describe",
    "TransitionTable",
    # Engine
    "FiniteStateMachine",
    "RunResult",
    # Errors
    "MachineErrorKind",
    "MachineError",
    "InvalidState",
    "InvalidToken",
    "NoTransition",
    "InvalidFinalState",
    # Schema
    "StateDefinition",
    "MachineDefinition",
    "build_machine",
    # Parser
    "MachineParser",
    "MachineRegistry",
]
