# permutation.py
from __future__ import annotations

from collections.abc import Sequence

from alphabet import Alphabet
from debug import Debug
from errors import InvalidSymbol, MalformedCycle

debug = Debug()


def parse_cycles(cycles: str, alphabet: Alphabet) -> list[str]:
    """Split ``"(AELT) (BKNW) (S)"`` into ``["AELT", "BKNW", "S"]``.

    Whitespace may separate cycles but not appear inside one. Every symbol
    must belong to *alphabet* and may be named at most once overall.
    """
    result: list[str] = []
    used: set[str] = set()
    current: list[str] | None = None

    for pos, ch in enumerate(cycles):
        if ch == "(":
            if current is not None:
                raise MalformedCycle(f"Nested '(' at column {pos} in {cycles!r}")
            current = []
        elif ch == ")":
            if current is None:
                raise MalformedCycle(f"Unmatched ')' at column {pos} in {cycles!r}")
            result.append("".join(current))
            current = None
        elif ch.isspace():
            if current is not None:
                raise MalformedCycle(f"Whitespace inside a cycle in {cycles!r}")
        elif current is None:
            raise MalformedCycle(f"Symbol {ch!r} outside of any cycle in {cycles!r}")
        else:
            if ch not in alphabet:
                raise MalformedCycle(f"Symbol {ch!r} not in alphabet")
            if ch in used:
                raise MalformedCycle(f"Symbol {ch!r} appears in more than one place")
            used.add(ch)
            current.append(ch)

    if current is not None:
        raise MalformedCycle(f"Unterminated cycle in {cycles!r}")
    return result


class Permutation:
    """A permutation of an alphabet's indices, given as disjoint cycles.

    Indices not named in any cycle map to themselves.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self.alphabet = alphabet
        self.size = alphabet.size

        # integer lookup tables
        self._fwd = list(range(self.size))
        self._rev = list(range(self.size))

        self.cycles: tuple[str, ...] = tuple(c for c in parse_cycles(cycles, alphabet) if c)
        for cycle in self.cycles:
            idx = [alphabet.to_index(ch) for ch in cycle]
            for a, b in zip(idx, idx[1:] + idx[:1]):
                self._fwd[a] = b
                self._rev[b] = a

    # ── alternative constructors ─────────────────────────────────
    @classmethod
    def identity(cls, alphabet: Alphabet) -> "Permutation":
        return cls("", alphabet)

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string, where ``wiring[i]`` is the image of symbol i."""
        if sorted(wiring) != sorted(alphabet.symbols):
            raise MalformedCycle("wiring must be a permutation of alphabet")

        seen: set[str] = set()
        cycles: list[str] = []
        for start in alphabet:
            if start in seen:
                continue
            cycle = []
            ch = start
            while ch not in seen:
                seen.add(ch)
                cycle.append(ch)
                ch = wiring[alphabet.to_index(ch)]
            cycles.append("(" + "".join(cycle) + ")")
        return cls(" ".join(cycles), alphabet)

    @classmethod
    def from_pairs(
        cls,
        pairs: Sequence[str | tuple[str, str]],
        alphabet: Alphabet,
    ) -> "Permutation":
        """Build a plugboard-style involution from swaps like ``["AB", "CD"]``."""
        used: set[str] = set()
        cycles: list[str] = []

        for raw in pairs:
            # normalise to (a, b)
            if not isinstance(raw, Sequence) or len(raw) != 2:
                raise MalformedCycle(f"Pair {raw!r} must be exactly 2 symbols")
            a, b = raw
            if not (isinstance(a, str) and isinstance(b, str)):
                raise MalformedCycle(f"Pair {raw!r} must hold symbols")

            if a == b:
                raise MalformedCycle(f"Plugboard cannot map a symbol to itself: {a}")
            if a not in alphabet or b not in alphabet:
                bad = a if a not in alphabet else b
                raise InvalidSymbol(f"Symbol {bad!r} not in alphabet")
            if a in used or b in used:
                dup = a if a in used else b
                raise MalformedCycle(f"Character {dup!r} already used in plugboard")

            cycles.append(f"({a}{b})")
            used.update((a, b))
        return cls(" ".join(cycles), alphabet)

    # ── mapping ──────────────────────────────────────────────────
    def _wrap(self, p: int) -> int:
        return p % self.size

    def permute(self, p: int | str) -> int | str:
        """Image of index (or symbol) *p*. Indices are taken modulo size."""
        if isinstance(p, str):
            return self.alphabet.to_symbol(self._fwd[self.alphabet.to_index(p)])
        out = self._fwd[self._wrap(p)]
        debug.log("permutation", f"{p}->{out}")
        return out

    def invert(self, c: int | str) -> int | str:
        """Pre-image of index (or symbol) *c*. Indices are taken modulo size."""
        if isinstance(c, str):
            return self.alphabet.to_symbol(self._rev[self.alphabet.to_index(c)])
        out = self._rev[self._wrap(c)]
        debug.log("permutation", f"{c}<-{out}")
        return out

    def derangement(self) -> bool:
        """True iff no index maps to itself."""
        return all(i != j for i, j in enumerate(self._fwd))

    def involution(self) -> bool:
        """True iff applying the permutation twice is the identity."""
        return all(self._fwd[j] == i for i, j in enumerate(self._fwd))

    # ── niceties ─────────────────────────────────────────────────
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self.alphabet == other.alphabet and self._fwd == other._fwd

    def __hash__(self) -> int:
        return hash((self.alphabet, tuple(self._fwd)))

    def __str__(self) -> str:
        return " ".join(f"({c})" for c in self.cycles)

    def __repr__(self) -> str:
        return f"<Permutation {self}>"
