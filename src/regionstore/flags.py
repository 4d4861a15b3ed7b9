"""Typed region flags and the registry that marshals them.

Region flags are stored on disk as ``name: value`` pairs whose value shape
depends on the flag type. A :class:`FlagRegistry` knows the types; the region
file only ever sees the marshalled form.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import FlagConflictError

logger = logging.getLogger(__name__)


def _is_finite_number(raw: Any) -> bool:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return False
    return isinstance(raw, int) or math.isfinite(raw)


class State(Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class Flag:
    name: str

    def marshal(self, value: Any) -> Any:
        return value

    def unmarshal(self, raw: Any) -> Any:
        """Return the typed value, or None if ``raw`` is not valid for this flag."""
        raise NotImplementedError


@dataclass(frozen=True)
class StateFlag(Flag):
    def marshal(self, value: State) -> str:
        return value.value

    def unmarshal(self, raw: Any) -> Optional[State]:
        if isinstance(raw, str):
            try:
                return State(raw.strip().lower())
            except ValueError:
                return None
        return None


@dataclass(frozen=True)
class BooleanFlag(Flag):
    def unmarshal(self, raw: Any) -> Optional[bool]:
        return raw if isinstance(raw, bool) else None


@dataclass(frozen=True)
class IntegerFlag(Flag):
    def unmarshal(self, raw: Any) -> Optional[int]:
        if not _is_finite_number(raw):
            return None
        return int(raw)


@dataclass(frozen=True)
class DoubleFlag(Flag):
    def unmarshal(self, raw: Any) -> Optional[float]:
        if not _is_finite_number(raw):
            return None
        try:
            return float(raw)
        except OverflowError:
            return None


@dataclass(frozen=True)
class StringFlag(Flag):
    def unmarshal(self, raw: Any) -> Optional[str]:
        if raw is None or isinstance(raw, (dict, list)):
            return None
        return str(raw)


@dataclass(frozen=True)
class UnknownFlag(Flag):
    """Placeholder for a flag nobody registered. Keeps the raw value as-is."""

    def unmarshal(self, raw: Any) -> Any:
        return raw


class FlagRegistry:
    """Registry of flag types, keyed by case-insensitive name."""

    def __init__(self, flags: Iterable[Flag] = ()) -> None:
        self._flags: Dict[str, Flag] = {}
        for flag in flags:
            self.register(flag)

    def register(self, flag: Flag) -> None:
        key = flag.name.lower()
        if key in self._flags:
            raise FlagConflictError(f"A flag named '{flag.name}' is already registered")
        self._flags[key] = flag

    def get(self, name: str) -> Optional[Flag]:
        return self._flags.get(name.lower())

    def __len__(self) -> int:
        return len(self._flags)

    def unmarshal(self, raw: Mapping[Any, Any], create_unknown: bool = False) -> Dict[Flag, Any]:
        """Turn a ``name -> raw value`` mapping into typed flag values.

        Unregistered names become :class:`UnknownFlag` entries when
        ``create_unknown`` is set and are dropped otherwise. Values a flag
        cannot parse are dropped.
        """
        values: Dict[Flag, Any] = {}
        for key, value in raw.items():
            if value is None:
                continue
            name = str(key)
            flag = self.get(name)
            if flag is None:
                if not create_unknown:
                    logger.debug("Skipping unregistered flag '%s'", name)
                    continue
                flag = UnknownFlag(name)
            parsed = flag.unmarshal(value)
            if parsed is None:
                logger.debug("Dropping unparseable value %r for flag '%s'", value, name)
                continue
            values[flag] = parsed
        return values


def marshal_flags(flags: Mapping[Flag, Any]) -> Dict[str, Any]:
    """Inverse of :meth:`FlagRegistry.unmarshal`, ordered by flag name."""
    out: Dict[str, Any] = {}
    for flag in sorted(flags, key=lambda f: f.name):
        value = flags[flag]
        if value is None:
            continue
        out[flag.name] = flag.marshal(value)
    return out


# Common flags, registered by default_registry()
BUILD = StateFlag("build")
PVP = StateFlag("pvp")
ENTRY = StateFlag("entry")
EXIT = StateFlag("exit")
GREETING = StringFlag("greeting")
FAREWELL = StringFlag("farewell")
NOTIFY_ENTER = BooleanFlag("notify-enter")
HEAL_AMOUNT = IntegerFlag("heal-amount")
HEAL_DELAY = IntegerFlag("heal-delay")
PRICE = DoubleFlag("price")


def default_registry() -> FlagRegistry:
    return FlagRegistry(
        [BUILD, PVP, ENTRY, EXIT, GREETING, FAREWELL, NOTIFY_ENTER, HEAL_AMOUNT, HEAL_DELAY, PRICE]
    )
