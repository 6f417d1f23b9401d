"""Typed, immutable records produced by identity providers."""

from __future__ import annotations

from dataclasses import dataclass

from certgate.auth.clock import Clock, default_clock


@dataclass(frozen=True, slots=True)
class IdentityToken:
    """Bearer credential returned by ``Provider.exchange``.

    An unexpired token is not an authorized one; only ``Provider.valid``
    makes that decision.
    """

    access_token: str
    expiry: float
    token_type: str = "Bearer"

    def is_expired(self, *, clock: Clock = default_clock) -> bool:
        """Return *True* once ``now >= expiry``."""
        return clock() >= self.expiry


@dataclass(frozen=True, slots=True)
class Session:
    """Authorization URL bound to the caller's anti-forgery ``state``."""

    auth_url: str
    state: str
