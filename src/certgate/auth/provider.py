"""The identity-provider contract.

Every provider turns an external identity proof into an
:class:`~certgate.auth.models.IdentityToken` and makes the accept/reject
decision for it.  Implementations are immutable once constructed and may be
shared between any number of sessions.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from certgate.auth.models import IdentityToken, Session


@runtime_checkable
class Provider(Protocol):
    """Capability set shared by all identity providers."""

    @property
    def name(self) -> str:
        """Stable implementation identifier, never used for trust decisions."""
        ...

    def start_session(self, state: str) -> Session:
        """Return the URL the user must visit; *state* is embedded verbatim."""
        ...

    def exchange(self, code: str) -> IdentityToken:
        """Trade an authorization code for a token.

        Raises
        ------
        ExchangeError
            The code was rejected or the provider could not be reached.
        """
        ...

    def valid(self, token: IdentityToken) -> bool:
        """Return *True* only if *token* is unexpired and authorized.

        Never raises: remote failures count as *invalid*.
        """
        ...

    def revoke(self, token: IdentityToken) -> None:
        """Best-effort remote revocation; raises ``RevocationError`` on failure."""
        ...

    def username(self, token: IdentityToken) -> str:
        """Local username for *token*, ``""`` when it cannot be resolved."""
        ...
