"""Identity-provider core package.

This namespace hosts the **HTTP-agnostic** pieces a certificate authority
uses to decide who may receive a certificate.

Sub-modules
-----------
clock
    Test-friendly time abstraction.
state
    Unpredictable anti-forgery ``state`` values.
models
    Immutable ``IdentityToken`` and ``Session`` records.
errors
    Exception types raised by providers.
config
    ``AuthConfig`` settings value.
provider
    The ``Provider`` protocol.
oauth / google / testprovider
    Concrete providers.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience, together with
:func:`new_provider`, which picks the implementation named in the config.
"""

from __future__ import annotations

from .clock import Clock, default_clock  # noqa: F401
from .config import AuthConfig  # noqa: F401
from .errors import ConfigurationError, ExchangeError, RevocationError  # noqa: F401
from .google import GoogleProvider  # noqa: F401
from .log_utils import get_auth_logger  # noqa: F401
from .models import IdentityToken, Session  # noqa: F401
from .oauth import OAuthProvider  # noqa: F401
from .provider import Provider  # noqa: F401
from .state import generate_state  # noqa: F401
from .testprovider import TestProvider  # noqa: F401

__all__ = [
    # clock
    "Clock",
    "default_clock",
    # config
    "AuthConfig",
    # errors
    "ConfigurationError",
    "ExchangeError",
    "RevocationError",
    # models
    "IdentityToken",
    "Session",
    # providers
    "Provider",
    "OAuthProvider",
    "GoogleProvider",
    "TestProvider",
    "new_provider",
    # state
    "generate_state",
    # logging helpers
    "get_auth_logger",
]

_PROVIDERS: dict[str, type] = {
    GoogleProvider.name: GoogleProvider,
    OAuthProvider.name: OAuthProvider,
    TestProvider.name: TestProvider,
}


def new_provider(config: AuthConfig, *, clock: Clock = default_clock) -> Provider:
    """Construct the provider named by ``config.provider``.

    Raises
    ------
    ConfigurationError
        Unknown provider name, or the provider rejected the settings.
    """
    try:
        cls = _PROVIDERS[config.provider.lower()]
    except KeyError:
        raise ConfigurationError(f"unknown auth provider: {config.provider!r}") from None
    return cls(config, clock=clock)
