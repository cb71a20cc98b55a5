import pytest

from alphabet import Alphabet
from errors import IndexOutOfRange, InvalidOperation, InvalidSymbol
from permutation import Permutation
from rotor_and_reflector import Rotor, RotorKind, fixed_rotor, moving_rotor, reflector

UPPER = Alphabet()
ROTOR_I = Permutation.from_wiring("EKMFLGDQVZNTOWYHXUSPAIBRCJ", UPPER)
REFLECTOR_B = Permutation.from_wiring("YRUHQSLDPXNGOKMIEBFZCWVJAT", UPPER)


def test_kinds_and_capabilities():
    rotor = moving_rotor("I", ROTOR_I, "Q")
    fixed = fixed_rotor("Beta", ROTOR_I)
    refl = reflector("B", REFLECTOR_B)

    assert rotor.kind is RotorKind.MOVING and rotor.rotates()
    assert fixed.kind is RotorKind.FIXED and not fixed.rotates()
    assert refl.reflecting() and not refl.rotates()
    assert rotor.name == "I"
    assert rotor.size == 26
    assert rotor.alphabet is UPPER


def test_convert_forward_uses_setting_offset():
    rotor = moving_rotor("I", ROTOR_I, "Q")
    assert rotor.convert_forward(0) == 4          # A -> E
    rotor.set("B")
    assert rotor.setting == 1
    # (permute((0 + 1) % 26) - 1) % 26 = K - 1 = J
    assert rotor.convert_forward(0) == 9


@pytest.mark.parametrize("setting", [0, 5, 25])
def test_backward_undoes_forward_at_fixed_setting(setting):
    rotor = moving_rotor("I", ROTOR_I, "Q")
    rotor.set(setting)
    for i in range(26):
        assert rotor.convert_backward(rotor.convert_forward(i)) == i


def test_ring_shifts_wiring_against_setting():
    plain = moving_rotor("I", ROTOR_I, "Q")
    ringed = moving_rotor("I", ROTOR_I, "Q")
    ringed.set_ring("B")
    ringed.set("B")
    for i in range(26):
        assert ringed.convert_forward(i) == plain.convert_forward(i)
        assert ringed.convert_backward(i) == plain.convert_backward(i)


def test_notch_follows_visible_setting():
    rotor = moving_rotor("VI", ROTOR_I, "ZM")
    assert not rotor.at_notch()
    rotor.set("M")
    assert rotor.at_notch()
    rotor.set_ring("C")
    assert rotor.at_notch()
    rotor.set("Z")
    assert rotor.at_notch()


def test_advance_wraps_around():
    rotor = moving_rotor("I", ROTOR_I, "Q")
    rotor.set(25)
    rotor.advance()
    assert rotor.setting == 0


def test_fixed_rotors_never_move_or_notch():
    fixed = fixed_rotor("Beta", ROTOR_I)
    fixed.set("Q")
    fixed.advance()
    assert fixed.setting == 16
    assert not fixed.at_notch()


def test_reflector_has_a_single_position():
    refl = reflector("B", REFLECTOR_B)
    refl.set(0)
    refl.set("A")
    refl.set_ring(0)
    for bad in (1, "B"):
        with pytest.raises(InvalidOperation):
            refl.set(bad)
        with pytest.raises(InvalidOperation):
            refl.set_ring(bad)
    refl.advance()
    assert refl.setting == 0
    assert not refl.at_notch()


def test_set_validates_position():
    rotor = moving_rotor("I", ROTOR_I, "Q")
    with pytest.raises(IndexOutOfRange):
        rotor.set(26)
    with pytest.raises(InvalidSymbol):
        rotor.set("a")


def test_notches_must_be_alphabet_symbols_on_moving_rotors():
    with pytest.raises(InvalidSymbol):
        moving_rotor("X", ROTOR_I, "q")
    with pytest.raises(InvalidOperation):
        Rotor("Y", ROTOR_I, RotorKind.FIXED, "A")


def test_copy_is_independent():
    rotor = moving_rotor("I", ROTOR_I, "Q")
    dup = rotor.copy()
    dup.set("K")
    assert rotor.setting == 0
    assert dup.permutation is rotor.permutation
