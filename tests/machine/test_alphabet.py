"""Tests for the input alphabet."""

from dfakit.machine.alphabet import Alphabet


class TestAlphabet:
    """Tests for Alphabet."""

    def test_from_string_splits_characters(self):
        alphabet = Alphabet.from_string("01")

        assert alphabet.contains("0")
        assert alphabet.contains("1")
        assert len(alphabet) == 2

    def test_from_values_stringifies_scalars(self):
        """Integers in the configuration become string tokens."""
        alphabet = Alphabet.from_values([0, 1])

        assert alphabet.contains("0")
        assert not alphabet.contains(0)
        assert alphabet.tokens == frozenset({"0", "1"})

    def test_duplicates_collapse(self):
        alphabet = Alphabet.from_string("abba")

        assert len(alphabet) == 2

    def test_membership_operator(self):
        alphabet = Alphabet(["x", "y"])

        assert "x" in alphabet
        assert "z" not in alphabet

    def test_iteration_is_sorted(self):
        assert list(Alphabet.from_string("cab")) == ["a", "b", "c"]

    def test_equality(self):
        assert Alphabet.from_string("01") == Alphabet.from_values([1, 0])
        assert Alphabet.from_string("01") != Alphabet.from_string("xy")
