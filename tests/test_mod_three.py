"""Tests for the built-in mod-three machine."""

import random

import pytest

from dfakit.machine.errors import InvalidToken
from dfakit.machines import BUILTIN_MACHINES, mod_three, remainder


def _binary_strings(count: int, seed: int = 3):
    rng = random.Random(seed)
    for _ in range(count):
        length = rng.randint(1, 50)
        yield "".join(rng.choice("01") for _ in range(length))


class TestModThree:
    """The machine's output is the binary value modulo three."""

    def test_definition(self):
        definition = mod_three()

        assert definition.name == "mod-three"
        assert definition.get_accepting_states() == ["S0", "S1", "S2"]
        assert BUILTIN_MACHINES["mod-three"] is mod_three

    @pytest.mark.parametrize(
        "binary,expected",
        [("110", 0), ("1000011111", 0), ("", 0), ("0", 0), ("1", 1), ("10", 2)],
    )
    def test_scenarios(self, binary, expected):
        assert remainder(binary) == expected

    def test_all_short_strings(self):
        machine = mod_three().build()
        for length in range(1, 9):
            for value in range(2 ** length):
                binary = format(value, f"0{length}b")
                assert machine.process(binary) == value % 3

    def test_long_strings(self):
        machine = mod_three().build()
        for binary in _binary_strings(200):
            assert machine.process(binary) == int(binary, 2) % 3

    def test_fifty_ones(self):
        binary = "1" * 50
        assert remainder(binary) == int(binary, 2) % 3

    def test_invalid_input(self):
        with pytest.raises(InvalidToken):
            remainder("x111115")
