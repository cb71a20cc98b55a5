# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every failure reported by the machine and its parts."""


class InvalidSymbol(EnigmaError):
    pass


class IndexOutOfRange(EnigmaError):
    pass


class UnknownRotorName(EnigmaError):
    pass


class InvalidLength(EnigmaError):
    pass


class InvalidOperation(EnigmaError):
    pass


class MalformedCycle(EnigmaError):
    pass


class ConfigError(EnigmaError):
    """Raised by the settings / catalog layer, never by the core itself."""
