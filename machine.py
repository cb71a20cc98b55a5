# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from alphabet import Alphabet
from debug import Debug
from errors import (
    ConfigError,
    IndexOutOfRange,
    InvalidLength,
    InvalidOperation,
    UnknownRotorName,
)
from permutation import Permutation
from rotor_and_reflector import Rotor

debug = Debug()


@dataclass(frozen=True, slots=True)
class Step:
    """What a trace sink sees for one converted symbol."""

    settings: str                 # window letters, slot 1 .. n-1, after stepping
    path: tuple[int, int, int, int]   # input, after plugboard, after rotors, output


class Machine:
    """A rotor machine with *num_rotors* slots and *pawls* stepping pawls.

    Slot 0 holds the reflector, slot ``num_rotors - 1`` the fast rotor.
    *all_rotors* is the catalog; it is never modified, ``insert_rotors``
    binds private copies of the named wheels.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Mapping[str, Rotor] | Iterable[Rotor],
        *,
        trace: Callable[[Step], None] | None = None,
    ) -> None:
        if num_rotors < 2:
            raise InvalidOperation("a machine needs at least 2 rotor slots")
        if not (0 <= pawls < num_rotors):
            raise InvalidOperation(f"pawls must be in 0–{num_rotors - 1}, got {pawls}")

        if isinstance(all_rotors, Mapping):
            catalog = dict(all_rotors)
        else:
            catalog = {}
            for rotor in all_rotors:
                if rotor.name in catalog:
                    raise ConfigError(f"Duplicate rotor name {rotor.name!r}")
                catalog[rotor.name] = rotor
        for rotor in catalog.values():
            if rotor.alphabet != alphabet:
                raise InvalidOperation(f"Rotor {rotor.name!r} uses a different alphabet")

        self._alphabet = alphabet
        self._num_rotors = num_rotors
        self._pawls = pawls
        self._all_rotors: dict[str, Rotor] = catalog
        self._slots: list[Rotor] = []
        self._plugboard = Permutation.identity(alphabet)
        self.trace = trace

    # ── accessors ────────────────────────────────────────────────
    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def num_pawls(self) -> int:
        return self._pawls

    @property
    def all_rotors(self) -> Mapping[str, Rotor]:
        return MappingProxyType(self._all_rotors)

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    def get_rotor(self, k: int) -> Rotor:
        """Rotor #K; #0 is the reflector, #(num_rotors-1) the fast rotor."""
        self._require_rotors()
        return self._slots[k]

    def settings(self) -> str:
        """Current window letters of slots 1 .. n-1."""
        self._require_rotors()
        return "".join(self._alphabet.to_symbol(r.setting) for r in self._slots[1:])

    # ── configuration ────────────────────────────────────────────
    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots, left to right, with copies of the named rotors.

        Every bound rotor starts at setting 0 with a neutral ring.
        """
        if len(names) != self._num_rotors:
            raise InvalidLength(f"Expected {self._num_rotors} rotor names, got {len(names)}")

        slots = []
        for name in names:
            try:
                template = self._all_rotors[name]
            except KeyError:
                raise UnknownRotorName(f"No rotor named {name!r} in catalog") from None
            rotor = template.copy()
            rotor.set(0)
            rotor.set_ring(0)
            slots.append(rotor)

        self._slots = slots
        debug.log("machine", f"slots {[r.name for r in slots]}")

    def set_rotors(self, setting: Sequence[str]) -> None:
        """Set slots 1 .. n-1 from SETTING, leftmost non-reflector first."""
        self._apply_window(setting, Rotor.set)

    def set_rings(self, rings: Sequence[str]) -> None:
        """Set ring offsets of slots 1 .. n-1, same layout as ``set_rotors``."""
        self._apply_window(rings, Rotor.set_ring)

    def _apply_window(self, letters: Sequence[str], apply: Callable[[Rotor, int], None]) -> None:
        self._require_rotors()
        if len(letters) != self._num_rotors - 1:
            raise InvalidLength(
                f"Expected {self._num_rotors - 1} symbols, got {len(letters)}"
            )
        positions = [self._alphabet.to_index(ch) for ch in letters]
        for rotor, posn in zip(self._slots[1:], positions):
            if rotor.reflecting() and posn != 0:
                raise InvalidOperation("reflector has only one position")
        for rotor, posn in zip(self._slots[1:], positions):
            apply(rotor, posn)

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self._alphabet:
            raise InvalidOperation("plugboard uses a different alphabet")
        if not plugboard.involution():
            raise InvalidOperation("plugboard must consist of swaps only")
        self._plugboard = plugboard
        debug.log("plugboard", str(plugboard))

    # ── stepping logic  ─────────────────────────────────────────
    def _advance_rotors(self) -> None:
        """Advance rotors one key-press.

        A rotor steps when its right neighbour sits at a notch, and also on
        the following position when the neighbour it drove was itself at a
        notch: the historical double step.
        """
        slots = self._slots
        next_at_notch = False
        for i in range(self._num_rotors - self._pawls, self._num_rotors - 1):
            if slots[i + 1].at_notch():
                slots[i].advance()
                next_at_notch = True
            elif next_at_notch:
                slots[i].advance()
                next_at_notch = False
        slots[-1].advance()

    def _apply_rotors(self, c: int) -> int:
        for rotor in reversed(self._slots):
            c = rotor.convert_forward(c)
        for rotor in self._slots[1:]:
            c = rotor.convert_backward(c)
        return c

    # ── encipher ────────────────────────────────────────────────
    def convert(self, c: int | str) -> int | str:
        """Advance the machine, then encipher index (or symbol) C."""
        if isinstance(c, str):
            return self._alphabet.to_symbol(self.convert(self._alphabet.to_index(c)))

        self._require_rotors()
        if not (0 <= c < self._alphabet.size):
            raise IndexOutOfRange(f"Signal {c} out of range 0–{self._alphabet.size - 1}")

        self._advance_rotors()
        plugged = self._plugboard.permute(c)
        rotated = self._apply_rotors(plugged)
        out = self._plugboard.permute(rotated)

        if self.trace is not None:
            self.trace(Step(self.settings(), (c, plugged, rotated, out)))
        return out

    def convert_message(self, msg: str) -> str:
        """Encipher MSG symbol by symbol, continuing from the current settings.

        Nothing moves unless every symbol of MSG is in the alphabet.
        """
        signals = [self._alphabet.to_index(ch) for ch in msg]
        out = [self._alphabet.to_symbol(self.convert(sig)) for sig in signals]
        return "".join(out)

    # ── helpers ─────────────────────────────────────────────────
    def _require_rotors(self) -> None:
        if not self._slots:
            raise InvalidOperation("no rotors inserted")

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self._slots) or "empty"
        return f"<Machine {names} plug={self._plugboard}>"
