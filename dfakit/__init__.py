"""
dfakit - Declarative deterministic finite-state machines.

Build a DFA from an alphabet, a state registry, an initial state and a
transition table; every cross-reference is validated once, at construction.
Ships the mod-three machine (remainder of a binary number modulo three).

Quick Start:
    ```python
    from dfakit import build_machine

    machine = build_machine(
        alphabet="01",
        states={"S0": {"output": 0}, "S1": {"output": 1}, "S2": {"output": 2}},
        initial_state="S0",
        transitions={
            "S0": {"0": "S0", "1": "S1"},
            "S1": {"0": "S2", "1": "S0"},
            "S2": {"0": "S1", "1": "S2"},
        },
    )
    machine.process("110")  # 0
    ```

    Or from a definition file:
    ```python
    from dfakit import MachineParser

    machine = MachineParser.load_machine("mod_three.yaml")
    result = machine.run("x101")
    if not result.ok:
        print(result.kind)  # MachineErrorKind.INVALID_TOKEN
    ```
"""

__version__ = "0.1.0"

# Core configuration
from dfakit.config.settings import DfakitSettings

# Machine core
from dfakit.machine import (
    Alphabet,
    Accepting,
    NonAccepting,
    StateRegistry,
    TransitionTable,
    FiniteStateMachine,
    RunResult,
    MachineErrorKind,
    MachineError,
    InvalidState,
    InvalidToken,
    NoTransition,
    InvalidFinalState,
    MachineDefinition,
    build_machine,
    MachineParser,
    MachineRegistry,
)

# Built-in machines
from dfakit.machines import mod_three, remainder

__all__ = [
    # Version
    "__version__",
    # Configuration
    "DfakitSettings",
    # Machine core
    "Alphabet",
    "Accepting",
    "NonAccepting",
    "StateRegistry",
    "TransitionTable",
    "FiniteStateMachine",
    "RunResult",
    # Errors
    "MachineErrorKind",
    "MachineError",
    "InvalidState",
    "InvalidToken",
    "NoTransition",
    "InvalidFinalState",
    # Definitions
    "MachineDefinition",
    "build_machine",
    "MachineParser",
    "MachineRegistry",
    # Built-in machines
    "mod_three",
    "remainder",
]
