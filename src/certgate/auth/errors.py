"""Exception types raised by identity providers.

Only lightweight, **data-carrying** exceptions live here so that the CLI and
any HTTP layer in front of a provider can turn them into user-friendly
messages.  Validation failures are deliberately absent: ``Provider.valid``
answers ``False`` instead of raising.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when settings are missing or contradictory at construction time."""


class ProviderError(RuntimeError):
    """Base class for failures of a remote identity-provider call."""

    code = "provider_error"

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider: str = provider
        self.status_code: int | None = status_code

    def to_payload(self) -> dict[str, str | int]:
        """Return a JSON-serialisable payload **without secrets**."""
        payload: dict[str, str | int] = {
            "error": self.code,
            "provider": self.provider,
            "message": str(self),
        }
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        return payload


class ExchangeError(ProviderError):
    """Authorization code was rejected or the provider was unreachable.

    Not retried: the caller must start a new session.
    """

    code = "exchange_failed"


class RevocationError(ProviderError):
    """Remote revocation failed.  Certificates already issued stay valid."""

    code = "revocation_failed"
