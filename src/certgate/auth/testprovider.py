"""Stub provider for integration tests.

Every operation succeeds without touching the network, so the surrounding
signing workflow can be exercised without a real identity provider.  Never
configure it on a production authority.
"""

from __future__ import annotations

import logging
from typing import ClassVar, Final
from urllib.parse import urlencode

from certgate.auth.clock import Clock, default_clock
from certgate.auth.config import AuthConfig
from certgate.auth.models import IdentityToken, Session

_LOG = logging.getLogger("certgate.auth.testprovider")

AUTH_URL: Final[str] = "https://www.example.com/auth"
ACCESS_TOKEN: Final[str] = "token"
USERNAME: Final[str] = "test"
TOKEN_LIFETIME: Final[int] = 3600


class TestProvider:
    """Always-succeeds provider with the fixed username ``"test"``."""

    __test__ = False  # keep pytest from collecting this class

    name: ClassVar[str] = "testprovider"

    def __init__(self, config: AuthConfig | None = None, *, clock: Clock = default_clock) -> None:
        self._clock = clock
        _LOG.warning("Using %s: every identity is accepted", self.name)

    def start_session(self, state: str) -> Session:
        return Session(auth_url=f"{AUTH_URL}?{urlencode({'state': state})}", state=state)

    def exchange(self, code: str) -> IdentityToken:
        return IdentityToken(access_token=ACCESS_TOKEN, expiry=self._clock() + TOKEN_LIFETIME)

    def valid(self, token: IdentityToken) -> bool:
        # Expiry still applies; nothing else is checked.
        return not token.is_expired(clock=self._clock)

    def revoke(self, token: IdentityToken) -> None:
        return None

    def username(self, token: IdentityToken) -> str:
        return USERNAME
