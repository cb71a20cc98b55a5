# settings_generator.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import Dict, List

from errors import EnigmaError
from rotor_and_reflector import RotorKind
from utilities import Catalog, builtin_catalog, load_catalog

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def daily_key(catalog: Catalog, rng: Random | SystemRandom, max_pairs: int = 10) -> Dict:
    """Pick a legal rotor order, window letters, rings and plug pairs."""
    alpha = catalog.alphabet.symbols
    n, pawls = catalog.num_rotors, catalog.pawls

    reflectors = catalog.names(RotorKind.REFLECTOR)
    fixed = catalog.names(RotorKind.FIXED)
    moving = catalog.names(RotorKind.MOVING)
    if not reflectors or len(fixed) < n - 1 - pawls or len(moving) < pawls:
        raise EnigmaError("Catalog does not hold enough wheels of each kind")

    rotors = [rng.choice(reflectors)]
    rotors += rng.sample(fixed, n - 1 - pawls)
    rotors += rng.sample(moving, pawls)

    return {
        "rotors": rotors,
        "setting": "".join(rng.choices(alpha, k=n - 1)),
        "rings": "".join(rng.choices(alpha, k=n - 1)),
        "plugboard": choose_pairs(alpha, max_pairs, rng),
    }


def parse_cli(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a daily rotor machine key")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--catalog", type=Path, help="Rotor catalog JSON (default: built-in wheels)")
    p.add_argument("--pairs", type=int, default=10, help="Plugboard pairs (default: 10)")
    p.add_argument(
        "--outfile",
        type=Path,
        default=Path("enigma_config.json"),
        help="Destination JSON file (default: enigma_config.json)",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv=None) -> None:
    args = parse_cli(argv)
    try:
        catalog = load_catalog(args.catalog) if args.catalog else builtin_catalog()
        cfg = daily_key(catalog, build_rng(args.seed), args.pairs)
    except EnigmaError as e:
        sys.exit(f"❌  {e}")
    if args.catalog:
        cfg["catalog"] = str(args.catalog)

    args.outfile.write_text(json.dumps(cfg, indent=2), encoding="utf-8")
    print(f"✅  Wrote {args.outfile}\n"
        f"   rotors      : {' '.join(cfg['rotors'])}\n"
        f"   setting     : {cfg['setting']}\n"
        f"   rings       : {cfg['rings']}\n"
        f"   plug pairs  : {len(cfg['plugboard'])}")


if __name__ == "__main__":
    main()
