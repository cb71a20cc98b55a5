# rotor_and_reflector.py
from __future__ import annotations

import copy
from enum import Enum

from alphabet import Alphabet
from debug import Debug
from errors import InvalidOperation, InvalidSymbol, IndexOutOfRange
from permutation import Permutation

debug = Debug()


class RotorKind(Enum):
    FIXED = "fixed"
    MOVING = "moving"
    REFLECTOR = "reflector"


class Rotor:
    """One wheel: a named wiring plus a rotational setting.

    The three kinds share this record and differ only in what ``advance``,
    ``at_notch``, ``set`` and ``set_ring`` do; those methods branch on
    ``kind``. Build instances with :func:`fixed_rotor`, :func:`moving_rotor`
    or :func:`reflector`.
    """

    def __init__(
        self,
        name: str,
        perm: Permutation,
        kind: RotorKind = RotorKind.FIXED,
        notches: str = "",
    ) -> None:
        if kind is not RotorKind.MOVING and notches:
            raise InvalidOperation(f"{kind.value} rotor {name!r} cannot have notches")
        bad = [ch for ch in notches if ch not in perm.alphabet]
        if bad:
            raise InvalidSymbol(f"Notch characters {''.join(bad)!r} not in alphabet")

        self.name = name
        self.kind = kind
        self.permutation = perm
        self.notches: frozenset[str] = frozenset(notches)
        self._setting = 0
        self.ring_setting = 0

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    @property
    def size(self) -> int:
        return self.permutation.size

    @property
    def setting(self) -> int:
        return self._setting

    def rotates(self) -> bool:
        return self.kind is RotorKind.MOVING

    def reflecting(self) -> bool:
        return self.kind is RotorKind.REFLECTOR

    # ── position & ring helpers ──────────────────────────────────
    def _position(self, posn: int | str) -> int:
        if isinstance(posn, str):
            return self.alphabet.to_index(posn)
        if not (0 <= posn < self.size):
            raise IndexOutOfRange(f"Position {posn} out of range 0–{self.size - 1}")
        return posn

    def set(self, posn: int | str) -> None:
        """Turn the rotor so that index (or symbol) *posn* shows in the window."""
        posn = self._position(posn)
        if self.kind is RotorKind.REFLECTOR and posn != 0:
            raise InvalidOperation("reflector has only one position")
        self._setting = posn

    def set_ring(self, ring: int | str) -> None:
        """Apply a ring offset (Ringstellung); index 0 is the neutral ring."""
        ring = self._position(ring)
        if self.kind is RotorKind.REFLECTOR and ring != 0:
            raise InvalidOperation("reflector has no ring setting")
        self.ring_setting = ring

    # ── stepping ─────────────────────────────────────────────────
    def at_notch(self) -> bool:
        if self.kind is not RotorKind.MOVING:
            return False
        return self.alphabet.symbols[self._setting] in self.notches

    def advance(self) -> None:
        """Step a moving rotor by one position; other kinds ignore the call."""
        if self.kind is RotorKind.MOVING:
            self._setting = (self._setting + 1) % self.size
            debug.log("stepping", f"{self.name} -> {self._setting}")

    # ── signal paths ─────────────────────────────────────────────
    def convert_forward(self, sig: int) -> int:
        offset = self._setting - self.ring_setting
        mapped = self.permutation.permute((sig + offset) % self.size)
        out = (mapped - offset) % self.size
        debug.log("rotor", f"{self.name} fwd {sig}->{out}")
        return out

    def convert_backward(self, sig: int) -> int:
        offset = self._setting - self.ring_setting
        mapped = self.permutation.invert((sig + offset) % self.size)
        out = (mapped - offset) % self.size
        debug.log("rotor", f"{self.name} bwd {sig}->{out}")
        return out

    # ── niceties ─────────────────────────────────────────────────
    def copy(self) -> "Rotor":
        """Independent copy; the wiring is shared since it never changes."""
        return copy.copy(self)

    def __repr__(self) -> str:
        notch = f" notches={''.join(sorted(self.notches))}" if self.notches else ""
        return (
            f"<Rotor {self.name} {self.kind.value} pos={self._setting}"
            f" ring={self.ring_setting}{notch}>"
        )


def fixed_rotor(name: str, perm: Permutation) -> Rotor:
    return Rotor(name, perm, RotorKind.FIXED)


def moving_rotor(name: str, perm: Permutation, notches: str) -> Rotor:
    return Rotor(name, perm, RotorKind.MOVING, notches)


def reflector(name: str, perm: Permutation) -> Rotor:
    return Rotor(name, perm, RotorKind.REFLECTOR)
