"""Category-filtered debug logging for the CHIP-8 emulator.

Categories are enabled through the ``CHIP8_DEBUG`` environment variable, e.g.
``CHIP8_DEBUG=cpu,input`` or ``CHIP8_DEBUG=all``. Messages go to stdout as
``[CHIP8][category] message``.
"""

from __future__ import annotations

import os

ENV_VAR = "CHIP8_DEBUG"
CATEGORIES = ("cpu", "input", "timer", "loader", "trace", "perf")

_enabled: frozenset[str] | None = None


def parse_categories(value: str) -> frozenset[str]:
    return frozenset(filter(None, (part.strip().lower() for part in value.split(","))))


def reload_categories() -> frozenset[str]:
    """Re-read ``CHIP8_DEBUG``; used after the environment changes at runtime."""

    global _enabled
    _enabled = parse_categories(os.environ.get(ENV_VAR, ""))
    return _enabled


def debug_enabled(category: str | None = None) -> bool:
    enabled = _enabled if _enabled is not None else reload_categories()
    if not enabled:
        return False
    return category is None or "all" in enabled or category.lower() in enabled


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")
