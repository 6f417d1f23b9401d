"""Utility functions for reading settings from the environment."""

import logging
import os
from typing import Final, Tuple

logger = logging.getLogger("certgate.utils.environment")

_TRUTHY: Final[Tuple[str, ...]] = ("true", "1", "yes", "y", "on")
_FALSY: Final[Tuple[str, ...]] = ("false", "0", "no", "n", "off")


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def env_str(name: str, default: str = "") -> str:
    """Return the stripped value of *name*, or *default* when unset/blank."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def env_bool(name: str, default: bool) -> bool:
    """
    Interpret *name* as a boolean flag.

    Unset or unrecognised values fall back to *default*; an unrecognised
    value is logged so that typos such as ``CERTGATE_BROWSER_AUTH=ture`` do
    not go unnoticed.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    logger.warning("Ignoring unrecognised boolean %s=%r; using %s", name, raw, default)
    return default


def env_int(name: str) -> int | None:
    """Return *name* as ``int``, ``None`` when unset.  Raises ``ValueError`` on junk."""
    raw = env_str(name)
    if not raw:
        return None
    return int(raw)


def env_list(name: str) -> list[str]:
    """Split a comma separated variable, dropping empty items."""
    return [item.strip() for item in env_str(name).split(",") if item.strip()]
