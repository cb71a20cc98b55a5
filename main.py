# main.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

import alphabet
import machine
import permutation
import rotor_and_reflector
from debug import Debug
from errors import ConfigError, EnigmaError, UnknownRotorName
from machine import Machine, Step
from permutation import Permutation
from utilities import (
    Catalog,
    builtin_catalog,
    format_groups,
    load_catalog,
    preprocess_message,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()

DEFAULT_CONFIG = Path("enigma_config.json")


@dataclass(slots=True)
class Config:
    """Runtime switches for the command line front end."""

    block: int = 5                  # display group size, 0 = no grouping
    verbose: bool = False           # log every step through the machine


# ────────────────────────────────────────────────────────────────────────
#  1. Settings loading helpers
# ────────────────────────────────────────────────────────────────────────


def load_config(path: str | Path) -> dict:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read settings {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Settings {path} must hold an object, got {type(data).__name__}")
    required = {"rotors", "setting"}
    missing = required - data.keys()
    if missing:
        raise ConfigError(f"Missing keys in config: {', '.join(sorted(missing))}")
    check_settings(data)
    return data


def check_settings(cfg: Dict[str, Any]) -> None:
    """Reject values of the wrong type before they reach the machine."""
    rotors = cfg.get("rotors")
    if rotors is not None and (
        not isinstance(rotors, list) or not all(isinstance(r, str) for r in rotors)
    ):
        raise ConfigError(f"'rotors' must be a list of names, got {rotors!r}")
    for key in ("setting", "rings", "catalog"):
        if cfg.get(key) is not None and not isinstance(cfg[key], str):
            raise ConfigError(f"{key!r} must be a string, got {cfg[key]!r}")
    plugs = cfg.get("plugboard")
    if plugs is not None and not isinstance(plugs, (str, list)):
        raise ConfigError(f"'plugboard' must be a string or a list of pairs, got {plugs!r}")


def parse_plugboard(plugs: str | Sequence[str] | None, catalog: Catalog) -> Permutation:
    """Accept ``"(AB) (CD)"``, ``"AB CD"`` or ``["AB", "CD"]``."""
    alpha = catalog.alphabet
    if not plugs:
        return Permutation.identity(alpha)
    if isinstance(plugs, str) and "(" in plugs:
        perm = Permutation(plugs, alpha)
        bad = [c for c in perm.cycles if len(c) != 2]
        if bad:
            raise ConfigError(f"Plugboard cycles must be pairs, got ({bad[0]})")
        return perm
    if isinstance(plugs, str):
        plugs = plugs.split()
    return Permutation.from_pairs(list(plugs), alpha)


def check_arrangement(catalog: Catalog, names: Sequence[str]) -> None:
    """Reject rotor orders the machine could load but not run sensibly.

    Slot 0 holds a reflector, the rightmost *pawls* slots hold moving
    rotors, and everything in between is a fixed, non-reflecting wheel.
    """
    n, pawls = catalog.num_rotors, catalog.pawls
    if len(names) != n:
        raise ConfigError(f"Need exactly {n} rotor names, got {len(names)}")
    for name in names:
        if name not in catalog.rotors:
            raise UnknownRotorName(f"No rotor named {name!r} in catalog")
    dup = {nm for nm in names if names.count(nm) > 1}
    if dup:
        raise ConfigError(f"Rotor {sorted(dup)[0]!r} used more than once")

    if not catalog.rotors[names[0]].reflecting():
        raise ConfigError(f"First rotor {names[0]!r} must be a reflector")
    for i, name in enumerate(names[1:], start=1):
        rotor = catalog.rotors[name]
        if rotor.reflecting():
            raise ConfigError(f"Reflector {name!r} may only sit in the first slot")
        if i >= n - pawls and not rotor.rotates():
            raise ConfigError(f"Slot {i} needs a moving rotor, {name!r} is fixed")
        if i < n - pawls and rotor.rotates():
            raise ConfigError(f"Slot {i} has no pawl, {name!r} is a moving rotor")


# ────────────────────────────────────────────────────────────────────────
#  2. MachineContext – wraps a Machine & reset logic
# ────────────────────────────────────────────────────────────────────────


class MachineContext:
    """A thin wrapper so we do not pass six objects around."""

    def __init__(
        self,
        catalog: Catalog,
        rotor_names: Sequence[str],
        setting: str,
        *,
        rings: str | None = None,
        plugs: str | Sequence[str] | None = None,
        trace: Callable[[Step], None] | None = None,
    ) -> None:
        check_arrangement(catalog, rotor_names)

        self.catalog = catalog
        self.rotor_names = list(rotor_names)
        self.setting = setting
        self.rings = rings or catalog.alphabet.symbols[0] * (catalog.num_rotors - 1)

        self.machine = Machine(
            catalog.alphabet,
            catalog.num_rotors,
            catalog.pawls,
            catalog.rotors,
            trace=trace,
        )
        self.machine.insert_rotors(self.rotor_names)
        self.machine.set_plugboard(parse_plugboard(plugs, catalog))
        self.rewind()

    @classmethod
    def from_config(
        cls,
        cfg: Dict[str, Any],
        catalog: Catalog | None = None,
        trace: Callable[[Step], None] | None = None,
    ) -> "MachineContext":
        """Build a MachineContext from a saved JSON dictionary."""
        check_settings(cfg)
        if catalog is None:
            catalog = load_catalog(cfg["catalog"]) if cfg.get("catalog") else builtin_catalog()
        return cls(
            catalog,
            cfg["rotors"],
            cfg["setting"],
            rings=cfg.get("rings"),
            plugs=cfg.get("plugboard"),
            trace=trace,
        )

    # ––– helpers ––––––––––––––––––––––––––––––––––––––––––––––––

    def rewind(self) -> None:
        """Put rings and rotors back to the configured starting position."""
        self.machine.set_rings(self.rings)
        self.machine.set_rotors(self.setting)

    def encipher(self, text: str) -> str:
        """Encipher *text*, continuing from wherever the rotors stand."""
        return self.machine.convert_message(preprocess_message(text, self.catalog.alphabet))


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    p.add_argument("-m", "--message", metavar="TEXT", help="Text to convert. If omitted, lines are read from --infile or stdin.")
    p.add_argument("--infile", type=Path, help="Read message lines from this file.")
    p.add_argument("--config", metavar="FILE", help=f"Load machine settings from JSON (default: {DEFAULT_CONFIG} if present).")
    p.add_argument("--catalog", metavar="FILE", help="Rotor catalog JSON. Default: built-in service wheels.")
    p.add_argument("--rotors", help='Rotor names, reflector first, e.g. "B Beta III IV I".')
    p.add_argument("--setting", help="Initial window letters, leftmost first, e.g. AXLE.")
    p.add_argument("--rings", help="Ring settings, same layout as --setting.")
    p.add_argument("--plugboard", help='Plugboard swaps, e.g. "(HQ) (EX)" or "HQ EX".')
    p.add_argument("--block", type=int, default=5, help="Output group size, 0 for none. Default: 5")
    p.add_argument("-v", "--verbose", action="store_true", help="Log rotor settings and signal path for every symbol.")
    p.add_argument("--log-file", metavar="FILE", help="Also write log output to FILE.")
    p.add_argument("--debug", action="append", default=[], choices=Debug.COMPONENTS, metavar="COMPONENT", help=f"Log internals of COMPONENT at DEBUG level; repeatable. One of: {', '.join(Debug.COMPONENTS)}.")
    return p.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> dict:
    """Merge the settings file (if any) with command line overrides."""
    cfg_dict: dict = {}
    if args.config:
        cfg_dict = load_config(args.config)
    elif DEFAULT_CONFIG.exists():
        cfg_dict = load_config(DEFAULT_CONFIG)

    if args.catalog:
        cfg_dict["catalog"] = args.catalog
    if args.rotors:
        cfg_dict["rotors"] = args.rotors.split()
    for key in ("setting", "rings", "plugboard"):
        value = getattr(args, key)
        if value is not None:
            cfg_dict[key] = value

    missing = {"rotors", "setting"} - cfg_dict.keys()
    if missing:
        raise ConfigError(f"No {' or '.join(sorted(missing))} given (use --config or flags)")
    return cfg_dict


def read_lines(args: argparse.Namespace) -> Iterable[str]:
    if args.message is not None:
        return [args.message]
    if args.infile:
        return args.infile.read_text(encoding="utf-8").splitlines()
    return (line.rstrip("\n") for line in sys.stdin)


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def run(args: argparse.Namespace, out=sys.stdout) -> None:
    cfg = Config(block=args.block, verbose=args.verbose)
    cfg_dict = settings_from_args(args)

    catalog = load_catalog(cfg_dict["catalog"]) if cfg_dict.get("catalog") else builtin_catalog()
    trace = debug.sink(catalog.alphabet) if cfg.verbose else None
    ctx = MachineContext.from_config(cfg_dict, catalog, trace)

    converted: List[str] = []
    for line in read_lines(args):
        converted.append(format_groups(ctx.encipher(line), cfg.block))
    print("\n".join(converted), file=out)


def enable_components(components: Iterable[str]) -> None:
    """Switch on component logging in every module of the engine."""
    components = list(components)
    for module in (alphabet, permutation, rotor_and_reflector, machine):
        module.debug.enable(*components)
    if components:
        debug.logger.setLevel(logging.DEBUG)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    level = logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING
    Debug.setup(level, log_to=args.log_file)
    enable_components(args.debug)
    try:
        run(args)
    except EnigmaError as e:
        raise SystemExit(f"❌  {e}") from None


if __name__ == "__main__":
    main()
