"""Compatibility quirks for ROMs written against different interpreters."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Iterable


class ConfigurationError(ValueError):
    """Raised when emulator parameters are malformed; nothing has run yet."""


@dataclass(frozen=True)
class Quirks:
    """Independent toggles, each altering exactly one opcode family.

    ``shift``  8xy6/8xyE shift Vx in place instead of reading Vy.
    ``logic``  8xy1/8xy2/8xy3 clear VF.
    ``jump``   Bnnn adds Vx (x = high nibble of nnn) instead of V0.
    ``index``  Fx55/Fx65 leave I unchanged.
    ``clip``   Dxyn discards pixels past the screen edge instead of wrapping.
    """

    shift: bool = False
    logic: bool = False
    jump: bool = False
    index: bool = False
    clip: bool = False

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if not isinstance(value, bool):
                raise ConfigurationError(f"quirk '{item.name}' must be a bool, got {value!r}")

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "Quirks":
        """Build quirks from names such as ``["shift", "clip"]``."""

        known = set(cls.names())
        enabled: dict[str, bool] = {}
        for name in names:
            key = name.strip().lower().removesuffix("_quirks")
            if key not in known:
                raise ConfigurationError(f"unknown quirk '{name}' (expected one of {', '.join(sorted(known))})")
            enabled[key] = True
        return cls(**enabled)

    def enabled_names(self) -> tuple[str, ...]:
        return tuple(name for name in self.names() if getattr(self, name))

    def with_quirk(self, name: str, enabled: bool) -> "Quirks":
        if name not in self.names():
            raise ConfigurationError(f"unknown quirk '{name}'")
        return replace(self, **{name: enabled})
