"""Built-in machine definitions."""

from typing import Callable, Dict

from dfakit.machine.schema import MachineDefinition
from dfakit.machines.mod_three import MOD_THREE, mod_three, remainder

BUILTIN_MACHINES: Dict[str, Callable[[], MachineDefinition]] = {
    "mod-three": mod_three,
}

__all__ = [
    "BUILTIN_MACHINES",
    "MOD_THREE",
    "mod_three",
    "remainder",
]
