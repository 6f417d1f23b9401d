"""Logging helpers shared by the client and the providers."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def mask_sensitive(value: str | None, keep: int = 4) -> str:
    """Return *value* with everything after the first *keep* characters hidden.

    >>> mask_sensitive("ya29.a0AfH6SMBx", 4)
    'ya29****'
    """
    if not value:
        return "<empty>"
    if len(value) <= keep:
        return "****"
    return f"{value[:keep]}****"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure root logging for the command line client.

    Log records go to *stderr* so they never mix with the prompts on stdout.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=_FORMAT, stream=sys.stderr, force=True)
    # urllib3 is chatty at DEBUG and echoes request lines
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)
    return logging.getLogger("certgate")
