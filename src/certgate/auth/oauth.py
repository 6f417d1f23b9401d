"""Generic OAuth 2.0 identity provider.

:class:`OAuthProvider` drives the authorization-code flow against any
provider exposing the usual endpoint quartet:

* authorization endpoint – where the user signs in (``start_session``)
* token endpoint – code exchange (``exchange``)
* token-introspection endpoint – audience check (``valid``)
* profile endpoint – email and organisational domain (``valid``, ``username``)
* revocation endpoint – ``revoke``

Endpoints come from ``AuthConfig.provider_opts``; subclasses such as
:class:`~certgate.auth.google.GoogleProvider` pin them to a vendor.

Trust decisions fail closed: any transport or decoding error inside
:meth:`OAuthProvider.valid` yields ``False``.  Tokens, codes and the client
secret are never logged.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Final
from urllib.parse import urlencode

import requests

from certgate.auth.clock import Clock, default_clock
from certgate.auth.config import AuthConfig
from certgate.auth.errors import ConfigurationError, ExchangeError, RevocationError
from certgate.auth.log_utils import get_auth_logger
from certgate.auth.models import IdentityToken, Session
from certgate.utils.logging import mask_sensitive

_LOG = logging.getLogger("certgate.auth.oauth")

_HTTP_TIMEOUT: Final[tuple[int, int]] = (5, 20)
_DEFAULT_EXPIRES_IN: Final[int] = 3600


class OAuthProvider:
    """Provider backed by a remote OAuth 2.0 identity service."""

    name: ClassVar[str] = "oauth"

    # Endpoint defaults; empty means "must be configured".
    auth_url: ClassVar[str] = ""
    token_url: ClassVar[str] = ""
    tokeninfo_url: ClassVar[str] = ""
    userinfo_url: ClassVar[str] = ""
    revoke_url: ClassVar[str] = ""

    default_scopes: ClassVar[tuple[str, ...]] = ("openid", "email", "profile")
    # Profile claim carrying the organisational domain.
    domain_claim: ClassVar[str] = "hd"
    # Authorization URL parameter hinting the required domain.
    domain_hint_param: ClassVar[str] = "hd"

    def __init__(self, config: AuthConfig, *, clock: Clock = default_clock) -> None:
        whitelist = frozenset(u.strip() for u in config.users_whitelist if u.strip())
        domain = config.domain.strip()
        if not domain and not whitelist:
            raise ConfigurationError(
                f"{self.name}: either a domain or a users whitelist must be specified"
            )
        if not config.oauth_client_id:
            raise ConfigurationError(f"{self.name}: OAuth client id is not configured")

        endpoints: dict[str, str] = {}
        for key in ("auth_url", "token_url", "tokeninfo_url", "userinfo_url", "revoke_url"):
            value = config.provider_opts.get(key) or getattr(type(self), key)
            if not value:
                raise ConfigurationError(f"{self.name}: endpoint {key} is not configured")
            endpoints[key] = value

        self._client_id: str = config.oauth_client_id
        self._client_secret: str = config.oauth_client_secret
        self._redirect_url: str = config.oauth_callback_url
        self._scopes: tuple[str, ...] = config.scopes or self.default_scopes
        self._domain: str = domain
        self._whitelist: frozenset[str] = whitelist
        self._endpoints: dict[str, str] = endpoints
        self._clock: Clock = clock
        self._log = get_auth_logger(
            base_logger_name=f"certgate.auth.{self.name}",
            provider=self.name,
            client_id=self._client_id,
        )

    # ------------------------------------------------------------------ #
    # Provider API                                                       #
    # ------------------------------------------------------------------ #
    def start_session(self, state: str) -> Session:
        """Build the authorization URL; no network call is made."""
        params: dict[str, str] = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_url,
            "response_type": "code",
            "scope": " ".join(self._scopes),
            "state": state,
        }
        if self._domain:
            params[self.domain_hint_param] = self._domain
        url = f"{self._endpoints['auth_url']}?{urlencode(params)}"
        self._log.debug("Started session state=%s", mask_sensitive(state, 4))
        return Session(auth_url=url, state=state)

    def exchange(self, code: str) -> IdentityToken:
        """Exchange *code* for an :class:`IdentityToken` (single attempt)."""
        payload: dict[str, str] = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self._client_id,
            "redirect_uri": self._redirect_url,
        }
        if self._client_secret:
            payload["client_secret"] = self._client_secret  # noqa: S105

        try:
            resp = requests.post(
                self._endpoints["token_url"],
                data=payload,
                headers={"Accept": "application/json"},
                timeout=_HTTP_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise ExchangeError(f"Token request failed: {exc}", provider=self.name) from exc

        if not resp.ok:
            raise ExchangeError(
                f"Token endpoint returned {resp.status_code}: {resp.text[:200]}",
                provider=self.name,
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise ExchangeError("Token response is not JSON", provider=self.name) from exc

        if not isinstance(data, dict):
            raise ExchangeError("Token response is not a JSON object", provider=self.name)

        access_token = data.get("access_token")
        if not access_token:
            raise ExchangeError("Token response missing access_token", provider=self.name)

        try:
            expires_in = int(data.get("expires_in") or _DEFAULT_EXPIRES_IN)
        except (TypeError, ValueError):
            raise ExchangeError(
                f"Token response has an invalid expires_in: {data.get('expires_in')!r}",
                provider=self.name,
            ) from None
        token = IdentityToken(
            access_token=access_token,
            expiry=self._clock() + expires_in,
            token_type=data.get("token_type") or "Bearer",
        )
        self._log.info(
            "Exchanged authorization code %s (expires in %ss)",
            mask_sensitive(code, 4),
            expires_in,
        )
        return token

    def valid(self, token: IdentityToken) -> bool:
        """Decide whether *token* may be trusted.  Fails closed."""
        if token.is_expired(clock=self._clock):
            self._log.debug("Rejecting expired token")
            return False

        profile = self._userinfo(token)

        if self._whitelist:
            email = self._email_from(profile)
            local_part = email.split("@", 1)[0]
            if not email or (email not in self._whitelist and local_part not in self._whitelist):
                self._log.info("Rejecting token: %r is not whitelisted", email or "<unknown>")
                return False

        tokeninfo = self._tokeninfo(token)
        if tokeninfo is None:
            return False
        if self._client_id not in self._audiences_from(tokeninfo):
            self._log.warning("Rejecting token issued for another client")
            return False

        if self._domain:
            if profile is None:
                return False
            if profile.get(self.domain_claim) != self._domain:
                self._log.info(
                    "Rejecting token: domain %r does not match %r",
                    profile.get(self.domain_claim),
                    self._domain,
                )
                return False

        self._user_log(profile).debug("Accepted token")
        return True

    def revoke(self, token: IdentityToken) -> None:
        """Revoke *token* upstream.  Raises :class:`RevocationError` on failure."""
        try:
            resp = requests.post(
                self._endpoints["revoke_url"],
                params={"token": token.access_token},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=_HTTP_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise RevocationError(f"Revocation request failed: {exc}", provider=self.name) from exc
        if not resp.ok:
            raise RevocationError(
                f"Revocation endpoint returned {resp.status_code}",
                provider=self.name,
                status_code=resp.status_code,
            )
        self._log.info("Revoked token %s", mask_sensitive(token.access_token, 4))

    def email(self, token: IdentityToken) -> str:
        """Verified email address of the token owner, ``""`` if unknown."""
        return self._email_from(self._userinfo(token))

    def username(self, token: IdentityToken) -> str:
        """Local part of :meth:`email`; ``""`` means *not authorized*."""
        return self.email(token).split("@", 1)[0]

    # ---------------- internal helpers --------------------------------- #
    def _get_json(self, url: str, **kwargs: Any) -> dict[str, Any] | None:
        try:
            resp = requests.get(url, timeout=_HTTP_TIMEOUT, **kwargs)
        except requests.RequestException as exc:
            self._log.warning("Request to %s failed: %s", url, exc)
            return None
        if not resp.ok:
            self._log.warning("Request to %s returned %s", url, resp.status_code)
            return None
        try:
            data = resp.json()
        except ValueError:
            self._log.warning("Response from %s is not JSON", url)
            return None
        return data if isinstance(data, dict) else None

    def _userinfo(self, token: IdentityToken) -> dict[str, Any] | None:
        return self._get_json(
            self._endpoints["userinfo_url"],
            headers={"Authorization": f"Bearer {token.access_token}"},
        )

    def _tokeninfo(self, token: IdentityToken) -> dict[str, Any] | None:
        return self._get_json(
            self._endpoints["tokeninfo_url"],
            params={"access_token": token.access_token},
        )

    def _user_log(self, profile: dict[str, Any] | None):
        username = self._email_from(profile).split("@", 1)[0]
        return get_auth_logger(
            base_logger_name=f"certgate.auth.{self.name}",
            provider=self.name,
            client_id=self._client_id,
            username=username or None,
        )

    @staticmethod
    def _email_from(profile: dict[str, Any] | None) -> str:
        if not profile:
            return ""
        if profile.get("email_verified") is False or profile.get("verified_email") is False:
            return ""
        return str(profile.get("email") or "")

    @staticmethod
    def _audiences_from(tokeninfo: dict[str, Any]) -> list[str]:
        # Google reports "audience"; RFC 7662 servers report "aud" (string or
        # list) or "client_id".
        value = tokeninfo.get("audience") or tokeninfo.get("aud") or tokeninfo.get("client_id")
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [str(value)] if value else []
