"""
Mod-three machine.

Reads a binary number most significant bit first and ends in the state
whose output is the number's remainder modulo three.
"""

from functools import lru_cache

from dfakit.machine.engine import FiniteStateMachine
from dfakit.machine.schema import MachineDefinition

MOD_THREE = {
    "name": "mod-three",
    "version": "1.0",
    "description": "Remainder of a binary number modulo three",
    "alphabet": ["0", "1"],
    "initial_state": "S0",
    "states": {
        "S0": {"output": 0},
        "S1": {"output": 1},
        "S2": {"output": 2},
    },
    "transitions": {
        "S0": {"0": "S0", "1": "S1"},
        "S1": {"0": "S2", "1": "S0"},
        "S2": {"0": "S1", "1": "S2"},
    },
}


def mod_three() -> MachineDefinition:
    """Definition of the mod-three machine."""
    return MachineDefinition.model_validate(MOD_THREE)


@lru_cache(maxsize=1)
def _shared_machine() -> FiniteStateMachine:
    return mod_three().build()


def remainder(binary: str) -> int:
    """
    Remainder of a binary string modulo three.

    Raises:
        InvalidToken: If ``binary`` contains anything but 0 and 1
    """
    return _shared_machine().process(binary)
