"""Anti-forgery ``state`` values for the browser OAuth flow.

The *state* parameter protects the user against CSRF on the callback.  Values
produced here are drawn from :pymod:`secrets` and only contain RFC 3986
unreserved characters, so they survive a round trip through a query string
untouched.

Single use is **not** enforced here: nothing rejects a replayed state.  An
HTTP layer that wants replay protection has to remember consumed values.

Full state values are never logged.
"""

from __future__ import annotations

import logging
import secrets
from typing import Final

_LOG = logging.getLogger("certgate.auth.state")

_STATE_LEN: Final[int] = 32
_MIN_STATE_LEN: Final[int] = 16
_ALLOWED_CHARS: Final[str] = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789"
    "-._~"
)


def generate_state(length: int = _STATE_LEN) -> str:
    """Generate an unpredictable, URL-safe state value.

    Parameters
    ----------
    length:
        Number of characters, at least 16 (default 32).

    Returns
    -------
    str
        The generated state.
    """
    if length < _MIN_STATE_LEN:
        raise ValueError(f"state length must be at least {_MIN_STATE_LEN} characters")
    state = "".join(secrets.choice(_ALLOWED_CHARS) for _ in range(length))
    _LOG.debug("Generated state %s****", state[:4])
    return state
