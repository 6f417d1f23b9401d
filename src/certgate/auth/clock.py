"""Injected time source.

Token expiry and the ``valid_until`` sent to the authority are computed from
a :class:`Clock` passed in by the caller, so tests can pin "now" with
:func:`fixed_clock` instead of patching :mod:`time`.

>>> fixed_clock(1_700_000_000.0)()
1700000000.0
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that returns the current UNIX time in seconds."""

    def __call__(self) -> float: ...


def default_clock() -> float:
    return time.time()


def fixed_clock(now: float) -> Clock:
    """Return a clock that always reports *now*."""
    return lambda: now
