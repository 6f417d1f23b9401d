"""Google account provider.

Users sign in with a Google account; access can be limited to a Google
Workspace domain (reported by Google as the ``hd`` claim) and/or to an
explicit users whitelist.
"""

from __future__ import annotations

from typing import ClassVar

from certgate.auth.oauth import OAuthProvider

USERINFO_EMAIL_SCOPE = "https://www.googleapis.com/auth/userinfo.email"
USERINFO_PROFILE_SCOPE = "https://www.googleapis.com/auth/userinfo.profile"


class GoogleProvider(OAuthProvider):
    """:class:`OAuthProvider` pinned to Google's OAuth 2.0 endpoints."""

    name: ClassVar[str] = "google"

    auth_url: ClassVar[str] = "https://accounts.google.com/o/oauth2/auth"
    token_url: ClassVar[str] = "https://oauth2.googleapis.com/token"
    tokeninfo_url: ClassVar[str] = "https://www.googleapis.com/oauth2/v2/tokeninfo"
    userinfo_url: ClassVar[str] = "https://www.googleapis.com/oauth2/v2/userinfo"
    revoke_url: ClassVar[str] = "https://oauth2.googleapis.com/revoke"

    default_scopes: ClassVar[tuple[str, ...]] = (USERINFO_EMAIL_SCOPE, USERINFO_PROFILE_SCOPE)
    domain_claim: ClassVar[str] = "hd"
    domain_hint_param: ClassVar[str] = "hd"
