"""Provider configuration.

A single :class:`AuthConfig` value is built once at startup (usually through
:meth:`AuthConfig.from_env`) and handed to :func:`certgate.auth.new_provider`.
Nothing in the auth package reads the environment on its own.

Environment variables
---------------------
CERTGATE_AUTH_PROVIDER
    ``google`` (default), ``oauth`` or ``testprovider``.
CERTGATE_OAUTH_CLIENT_ID / CERTGATE_OAUTH_CLIENT_SECRET
    OAuth client credentials.
CERTGATE_OAUTH_CALLBACK_URL
    Redirect URL registered with the identity provider.
CERTGATE_OAUTH_SCOPES
    Comma separated scopes; provider defaults apply when unset.
CERTGATE_AUTH_DOMAIN
    Organisational domain users must belong to.
CERTGATE_USERS_WHITELIST
    Comma separated list of allowed usernames/emails.
CERTGATE_OAUTH_<NAME>_URL
    Endpoint overrides for the generic ``oauth`` provider
    (``AUTH``, ``TOKEN``, ``TOKENINFO``, ``USERINFO``, ``REVOKE``).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from certgate.utils.environment import env_list, env_str

_ENDPOINT_OPTS = ("auth_url", "token_url", "tokeninfo_url", "userinfo_url", "revoke_url")


@dataclass(frozen=True)
class AuthConfig:
    """Settings consumed by provider constructors."""

    provider: str = "google"
    oauth_client_id: str = ""
    oauth_client_secret: str = ""
    oauth_callback_url: str = ""
    scopes: tuple[str, ...] = ()
    provider_opts: dict[str, str] = field(default_factory=dict)
    users_whitelist: tuple[str, ...] = ()

    @property
    def domain(self) -> str:
        return self.provider_opts.get("domain", "")

    @classmethod
    def from_env(cls) -> "AuthConfig":
        opts: dict[str, str] = {}
        domain = env_str("CERTGATE_AUTH_DOMAIN")
        if domain:
            opts["domain"] = domain
        for key in _ENDPOINT_OPTS:
            value = env_str(f"CERTGATE_OAUTH_{key.upper()}")
            if value:
                opts[key] = value
        return cls(
            provider=env_str("CERTGATE_AUTH_PROVIDER", "google").lower(),
            oauth_client_id=env_str("CERTGATE_OAUTH_CLIENT_ID"),
            oauth_client_secret=env_str("CERTGATE_OAUTH_CLIENT_SECRET"),
            oauth_callback_url=env_str("CERTGATE_OAUTH_CALLBACK_URL"),
            scopes=tuple(env_list("CERTGATE_OAUTH_SCOPES")),
            provider_opts=opts,
            users_whitelist=tuple(env_list("CERTGATE_USERS_WHITELIST")),
        )
