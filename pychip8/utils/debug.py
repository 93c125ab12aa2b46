"""Category-gated debug output controlled by ``CHIP8_DEBUG``.

``CHIP8_DEBUG=cpu,timer`` enables those categories; ``all`` enables every
category. The variable is read once and cached until ``reload_categories()``.
"""

from __future__ import annotations

import os
from typing import FrozenSet

ENVIRONMENT_VARIABLE = "CHIP8_DEBUG"
_PREFIX = "CHIP8"

_categories: FrozenSet[str] | None = None


def parse_categories(value: str) -> FrozenSet[str]:
    return frozenset(part.strip().lower() for part in value.split(",") if part.strip())


def _active_categories() -> FrozenSet[str]:
    global _categories
    if _categories is None:
        _categories = parse_categories(os.environ.get(ENVIRONMENT_VARIABLE, ""))
    return _categories


def reload_categories() -> None:
    """Forget the cached categories so the next call re-reads the environment."""

    global _categories
    _categories = None


def debug_enabled(category: str | None = None) -> bool:
    active = _active_categories()
    if not active:
        return False
    return category is None or "all" in active or category.lower() in active


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[{_PREFIX}][{category}] {message}")
