import pytest

from alphabet import Alphabet
from errors import IndexOutOfRange, InvalidSymbol, MalformedCycle
from permutation import Permutation

UPPER = Alphabet()
ROTOR_I = "EKMFLGDQVZNTOWYHXUSPAIBRCJ"


# ---------------------------------------------------------------------------
# Alphabet
# ---------------------------------------------------------------------------

def test_alphabet_maps_both_ways():
    alpha = Alphabet("ABCD")
    assert alpha.size == 4
    assert len(alpha) == 4
    assert alpha.contains("C")
    assert "E" not in alpha
    assert alpha.to_index("C") == 2
    assert alpha.to_symbol(3) == "D"
    assert [alpha.to_symbol(alpha.to_index(ch)) for ch in alpha] == list("ABCD")


def test_alphabet_rejects_unknown_symbol():
    with pytest.raises(InvalidSymbol):
        UPPER.to_index("a")


@pytest.mark.parametrize("index", [-1, 26, 100])
def test_alphabet_does_not_wrap_indices(index):
    with pytest.raises(IndexOutOfRange):
        UPPER.to_symbol(index)


@pytest.mark.parametrize("symbols", ["", "ABA", "AB C", "AB(", "A*"])
def test_alphabet_rejects_bad_symbol_sets(symbols):
    with pytest.raises(InvalidSymbol):
        Alphabet(symbols)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        UPPER.to_index("?")


# ---------------------------------------------------------------------------
# Permutation
# ---------------------------------------------------------------------------

def test_permute_and_invert_follow_cycles():
    perm = Permutation("(BACD)", Alphabet("ABCD"))
    assert perm.size == 4
    assert [perm.permute(i) for i in range(4)] == [2, 0, 3, 1]
    assert [perm.invert(i) for i in range(4)] == [1, 3, 0, 2]
    assert perm.permute("D") == "B"
    assert perm.invert("B") == "D"
    assert perm.derangement()


def test_unnamed_symbols_map_to_themselves():
    perm = Permutation("(BAC)", Alphabet("ABCD"))
    assert perm.permute("D") == "D"
    assert perm.invert(3) == 3
    assert not perm.derangement()


def test_indices_wrap_modulo_size():
    perm = Permutation("(AB)", Alphabet("ABC"))
    assert perm.permute(3) == 1
    assert perm.invert(-3) == 1


def test_round_trip_over_whole_alphabet():
    perm = Permutation.from_wiring(ROTOR_I, UPPER)
    for i in range(UPPER.size):
        assert perm.invert(perm.permute(i)) == i
        assert perm.permute(perm.invert(i)) == i


def test_from_wiring_produces_cycle_notation():
    perm = Permutation.from_wiring(ROTOR_I, UPPER)
    assert str(perm) == "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)"
    assert perm == Permutation("(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)", UPPER)


def test_from_wiring_requires_a_permutation():
    with pytest.raises(MalformedCycle):
        Permutation.from_wiring("AACDEFGHIJKLMNOPQRSTUVWXYZ", UPPER)


def test_identity_and_empty_cycles():
    assert Permutation.identity(UPPER).permute(7) == 7
    assert Permutation("() (AB)", UPPER).permute("A") == "B"


@pytest.mark.parametrize(
    "cycles",
    ["(AB", "AB)", "(AB))", "((AB)", "(AB)(BC)", "(A1)", "(AB) C", "(A B)"],
)
def test_malformed_cycles(cycles):
    with pytest.raises(MalformedCycle):
        Permutation(cycles, UPPER)


def test_from_pairs_builds_an_involution():
    perm = Permutation.from_pairs(["AB", ("C", "D")], UPPER)
    assert perm.permute("A") == "B"
    assert perm.permute("D") == "C"
    assert perm.permute("Z") == "Z"
    assert perm.involution()
    assert not Permutation.from_wiring(ROTOR_I, UPPER).involution()


@pytest.mark.parametrize(
    "pairs, error",
    [
        (["AA"], MalformedCycle),
        (["AB", "BC"], MalformedCycle),
        (["ABC"], MalformedCycle),
        ([("A", "B", "C")], MalformedCycle),
        ([["H", "Q", "E"]], MalformedCycle),
        ([5], MalformedCycle),
        ([("A", 1)], MalformedCycle),
        (["A1"], InvalidSymbol),
    ],
)
def test_from_pairs_rejects_bad_pairs(pairs, error):
    with pytest.raises(error):
        Permutation.from_pairs(pairs, UPPER)
