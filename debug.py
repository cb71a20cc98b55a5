# debug.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:  # pragma: no cover
    from alphabet import Alphabet
    from machine import Step


class Debug:
    _root_configured: bool = False          # class-level guard
    COMPONENTS = ("alphabet", "permutation", "rotor", "stepping", "plugboard", "machine")

    def __init__(self, name: str = "ENIGMA") -> None:
        self.logger = logging.getLogger(name)
        self.enabled = True        # global switch

        # default component map, all off
        self.components: Dict[str, bool] = dict.fromkeys(self.COMPONENTS, False)

    @classmethod
    def setup(cls, level: int = logging.INFO, *, log_to: str | None = None) -> None:
        """
        Configure the root logger once. If `log_to` is given, messages also
        stream to that file. Later calls are ignored.
        """
        if cls._root_configured:
            return
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if log_to:
            handlers.append(logging.FileHandler(log_to, encoding="utf-8"))

        logging.basicConfig(
            level=level,
            format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
        )
        cls._root_configured = True

    # ── logging API ──────────────────────────────────────────────
    def log(self, component: str, message: str) -> None:
        if self.enabled and self.components.get(component, False):
            self.logger.debug("[%s] %s", component.upper(), message)

    def trace(self, step: "Step", alphabet: "Alphabet") -> None:
        """Log one machine step as ``[AXLE] H -> H -> Q -> Q``."""
        path = " -> ".join(alphabet.to_symbol(i) for i in step.path)
        self.logger.info("[%s] %s", step.settings, path)

    def sink(self, alphabet: "Alphabet"):
        """Return a one-argument callable suitable for ``Machine(trace=...)``."""
        return lambda step: self.trace(step, alphabet)

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = False

    def toggle(self, component: str) -> None:
        self._require(component)
        self.components[component] = not self.components[component]

    def toggle_global(self, state: bool) -> None:
        """Switch every component on/off at once."""
        self.enabled = state

    def status(self) -> Dict[str, bool]:
        """Return a *copy* of the current component map."""
        return self.components.copy()

    # ── helpers ──────────────────────────────────────────────────
    def _require(self, component: str) -> None:
        if component not in self.components:
            raise ValueError(f"No such component: {component!r}")

    # nicety for `print(dbg)`
    def __repr__(self) -> str:
        active = [k for k, v in self.components.items() if v]
        return f"<Debug enabled={self.enabled} active={active}>"
