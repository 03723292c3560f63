"""Pytest fixtures for dfakit tests."""

import pytest
from pathlib import Path


@pytest.fixture
def examples_dir() -> Path:
    """Get path to examples directory."""
    return Path(__file__).parent.parent / "examples"


@pytest.fixture
def mod_three_path(examples_dir: Path) -> Path:
    """Get path to the mod-three definition file."""
    return examples_dir / "mod_three" / "mod_three.yaml"


@pytest.fixture
def greetings_path(examples_dir: Path) -> Path:
    """Get path to the x/y greetings definition (JSON, list-form states)."""
    return examples_dir / "greetings" / "greetings.json"


@pytest.fixture
def trap_path(examples_dir: Path) -> Path:
    """Get path to the no-double-b definition with a non-accepting trap state."""
    return examples_dir / "greetings" / "trap.yaml"


@pytest.fixture
def mod_three_dict():
    """Mod-three definition as a raw dict, the way the web layer configures it."""
    return {
        "name": "mod-three",
        "alphabet": [0, 1],
        "states": {
            "S0": {"output": 0},
            "S1": {"output": 1},
            "S2": {"output": 2},
        },
        "initial_state": "S0",
        "transitions": {
            "S0": {"0": "S0", "1": "S1"},
            "S1": {"0": "S2", "1": "S0"},
            "S2": {"0": "S1", "1": "S2"},
        },
    }


@pytest.fixture
def greetings_dict():
    """Two-symbol machine with string outputs."""
    return {
        "name": "greetings",
        "alphabet": ["x", "y"],
        "states": {
            "S0": {"output": "hello"},
            "S1": {"output": "goodbye"},
        },
        "initial_state": "S0",
        "transitions": {
            "S0": {"x": "S0", "y": "S1"},
            "S1": {"x": "S1", "y": "S0"},
        },
    }


@pytest.fixture
def mod_three_machine(mod_three_dict):
    """Built mod-three machine."""
    from dfakit.machine.schema import MachineDefinition

    return MachineDefinition.model_validate(mod_three_dict).build()


@pytest.fixture
def greetings_machine(greetings_dict):
    """Built greetings machine."""
    from dfakit.machine.schema import MachineDefinition

    return MachineDefinition.model_validate(greetings_dict).build()
