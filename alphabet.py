# alphabet.py
from __future__ import annotations

from collections.abc import Iterator

from debug import Debug
from errors import IndexOutOfRange, InvalidSymbol

debug = Debug()

# symbols that would clash with cycle notation or message framing
_RESERVED = set("()*")


class Alphabet:
    """An ordered set of distinct symbols numbered 0 .. size-1."""

    __slots__ = ("symbols", "_index")

    def __init__(self, symbols: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ") -> None:
        if not symbols:
            raise InvalidSymbol("Alphabet must contain at least one symbol")
        seen: set[str] = set()
        for ch in symbols:
            if ch.isspace() or ch in _RESERVED:
                raise InvalidSymbol(f"Symbol {ch!r} may not appear in an alphabet")
            if ch in seen:
                raise InvalidSymbol(f"Symbol {ch!r} appears twice in alphabet")
            seen.add(ch)

        self.symbols: str = symbols
        self._index: dict[str, int] = {ch: i for i, ch in enumerate(symbols)}

    @property
    def size(self) -> int:
        return len(self.symbols)

    def contains(self, symbol: str) -> bool:
        return symbol in self._index

    # symbol → integer signal
    def to_index(self, symbol: str) -> int:
        try:
            return self._index[symbol]
        except (KeyError, TypeError):
            raise InvalidSymbol(
                f"Invalid character {symbol!r} for current alphabet."
            ) from None

    # integer signal → symbol
    def to_symbol(self, index: int) -> str:
        if not (0 <= index < self.size):
            hi = self.size - 1
            raise IndexOutOfRange(f"Signal {index} out of range 0–{hi}")
        debug.log("alphabet", f"{index}->{self.symbols[index]}")
        return self.symbols[index]

    # ── container protocol ───────────────────────────────────────
    def __len__(self) -> int:
        return self.size

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.symbols)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self.symbols == other.symbols

    def __hash__(self) -> int:
        return hash(self.symbols)

    def __repr__(self) -> str:
        return f"<Alphabet {self.symbols!r}>"
