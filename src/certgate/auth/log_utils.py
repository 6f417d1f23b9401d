"""Structured logging helpers for identity providers.

This module purposefully restricts **which** contextual attributes are attached
to log records in order to avoid accidentally leaking secrets.  All helpers
ONLY inject the following *non-sensitive* fields:

- ``provider``       – Name of the provider (``google``, ``testprovider``…)
- ``client_id``      – OAuth client identifier (first 8 chars kept)
- ``username``       – Resolved local username, when already known

Access tokens, authorization codes and client secrets are never accepted.

Usage
-----
>>> from certgate.auth.log_utils import get_auth_logger
>>> log = get_auth_logger(provider="google", client_id="1234567890.apps")
>>> log.info("Exchanging authorization code")
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping


class _AuthLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted auth context into log records."""

    extra_keys = ("provider", "client_id", "username")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if not extra or extra.get(k) is None:
                continue
            if k == "client_id":
                extra_clean[k] = str(extra[k])[:8]
            else:
                extra_clean[k] = extra[k]
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # merge but do not overwrite call-site provided extras
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        return msg, kwargs


def get_auth_logger(
    *,
    base_logger_name: str = "certgate.auth",
    provider: str | None = None,
    client_id: str | None = None,
    username: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter pre-filled with auth context."""
    logger = logging.getLogger(base_logger_name)
    return _AuthLoggerAdapter(
        logger,
        {
            "provider": provider,
            "client_id": client_id,
            "username": username,
        },
    )
