# utilities.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from alphabet import Alphabet
from errors import ConfigError, EnigmaError
from permutation import Permutation
from rotor_and_reflector import Rotor, RotorKind

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_num_re = re.compile(r"^([A-Za-z]+)(\d+)$")
_roman = {"I": 1, "II": 2, "III": 3, "IV": 4, "V": 5, "VI": 6, "VII": 7, "VIII": 8}

Alpha26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _nat_key(name: str):
    """Natural‑sort rotor names so I, II, …, VIII, Beta, Gamma, R1, R2, R10 …"""
    if name in _roman:
        return (0, "", _roman[name])
    m = _num_re.match(name)
    if m:
        prefix, num = m.groups()
        return (1, prefix, int(num))
    return (2, name, 0)


def sorted_names(names) -> List[str]:
    return sorted(names, key=_nat_key)


# ────────────────────────────────────────────────────────────────────────
#  1. Text preprocessing
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str, alphabet: Alphabet) -> str:
    """Drop whitespace and upper‑case letters the alphabet only has in capitals.

    Anything else is passed through untouched so the machine can reject it.
    """
    out: List[str] = []
    for ch in msg:
        if ch.isspace():
            continue
        if ch not in alphabet and ch.upper() in alphabet:
            ch = ch.upper()
        out.append(ch)
    return "".join(out)


def format_groups(text: str, block: int = 5) -> str:
    """Split *text* into space separated groups of *block* symbols."""
    if block <= 0:
        return text
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


# ────────────────────────────────────────────────────────────────────────
#  2. Catalog
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Catalog:
    """Everything a Machine needs from the outside: alphabet, slot and pawl
    counts, and the named wheels available to put in the slots."""

    alphabet: Alphabet
    num_rotors: int
    pawls: int
    rotors: Mapping[str, Rotor] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotors", MappingProxyType(dict(self.rotors)))

    def names(self, kind: RotorKind | None = None) -> List[str]:
        return sorted_names(
            n for n, r in self.rotors.items() if kind is None or r.kind is kind
        )


def _build_rotor(name: str, entry: Mapping[str, Any], alpha: Alphabet) -> Rotor:
    if not isinstance(entry, Mapping):
        raise ConfigError(f"Rotor {name!r}: entry must be an object, got {type(entry).__name__}")
    try:
        kind = RotorKind(entry.get("kind", "moving"))
    except ValueError:
        raise ConfigError(f"Rotor {name!r}: unknown kind {entry.get('kind')!r}") from None

    if "wiring" in entry:
        perm = Permutation.from_wiring(entry["wiring"], alpha)
    else:
        perm = Permutation(entry.get("cycles", ""), alpha)

    if kind is RotorKind.REFLECTOR and not perm.derangement():
        raise ConfigError(f"Reflector {name!r} must not map any symbol to itself")
    return Rotor(name, perm, kind, entry.get("notches", ""))


def build_catalog(data: Mapping[str, Any]) -> Catalog:
    """Turn a decoded catalog document into a :class:`Catalog`."""
    if not isinstance(data, Mapping):
        raise ConfigError(f"Catalog must be an object, got {type(data).__name__}")
    required = {"alphabet", "num_rotors", "pawls", "rotors"}
    missing = required - data.keys()
    if missing:
        raise ConfigError(f"Missing keys in catalog: {', '.join(sorted(missing))}")
    if not isinstance(data["alphabet"], str):
        raise ConfigError("Catalog alphabet must be a string")
    if not isinstance(data["rotors"], Mapping):
        raise ConfigError("Catalog rotors must be an object mapping names to rotors")

    try:
        alpha = Alphabet(data["alphabet"])
        rotors = {
            name: _build_rotor(name, entry, alpha)
            for name, entry in data["rotors"].items()
        }
    except ConfigError:
        raise
    except (EnigmaError, TypeError) as e:
        raise ConfigError(f"Bad catalog: {e}") from e

    try:
        num_rotors, pawls = int(data["num_rotors"]), int(data["pawls"])
    except (TypeError, ValueError):
        raise ConfigError(
            f"num_rotors and pawls must be integers, got {data['num_rotors']!r} {data['pawls']!r}"
        ) from None
    if not (1 < num_rotors and 0 <= pawls < num_rotors):
        raise ConfigError(f"Need 1 < num_rotors and 0 <= pawls < num_rotors, got {num_rotors} {pawls}")
    return Catalog(alpha, num_rotors, pawls, rotors)


def load_catalog(path: str | Path) -> Catalog:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read catalog {path}: {e}") from e
    return build_catalog(data)


# ────────────────────────────────────────────────────────────────────────
#  3. Wheel database
# ────────────────────────────────────────────────────────────────────────

# name: (kind, wiring, notches)
HISTORICAL_WHEELS: Dict[str, Tuple[str, str, str]] = {
    "I":      ("moving",    "EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    "II":     ("moving",    "AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    "III":    ("moving",    "BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    "IV":     ("moving",    "ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    "V":      ("moving",    "VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
    "VI":     ("moving",    "JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),
    "VII":    ("moving",    "NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),
    "VIII":   ("moving",    "FKQHTLXOCBJSPDZRAMEWNIUYGV", "ZM"),
    "Beta":   ("fixed",     "LEYJVCNIXWPBQMDRTAKZGFUHOS", ""),
    "Gamma":  ("fixed",     "FSOKANUERHMBTIYCWLQPZXVGJD", ""),
    "B":      ("reflector", "YRUHQSLDPXNGOKMIEBFZCWVJAT", ""),
    "C":      ("reflector", "FVPJIAOYEDRZXWGCTKUQSBNMHL", ""),
    "B-thin": ("reflector", "ENKQAUYWJICOPBLMDXZVFTHRGS", ""),
    "C-thin": ("reflector", "RDOBJNTKVEHMLFCWZAXGYIPSUQ", ""),
}


def builtin_catalog(num_rotors: int = 5, pawls: int = 3) -> Catalog:
    """The service wheels, arranged by default like a four-rotor naval machine:
    reflector, one fixed Greek wheel, three moving rotors."""
    return build_catalog({
        "alphabet": Alpha26,
        "num_rotors": num_rotors,
        "pawls": pawls,
        "rotors": {
            name: {"kind": kind, "wiring": wiring, "notches": notches}
            for name, (kind, wiring, notches) in HISTORICAL_WHEELS.items()
        },
    })


__all__ = [
    "Catalog",
    "build_catalog",
    "builtin_catalog",
    "load_catalog",
    "preprocess_message",
    "format_groups",
]
