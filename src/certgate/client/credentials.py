"""Interactive credential acquisition.

The result is a ready-to-send ``Authorization`` header value.  Nothing is
validated here: the authority (through its provider) decides whether the
credential is any good.
"""

from __future__ import annotations

import base64
import getpass
import logging
import webbrowser
from typing import Callable, Final

_LOG = logging.getLogger("certgate.client.credentials")

BEARER_AUTH_PREFIX: Final[str] = "Bearer "
BASIC_AUTH_PREFIX: Final[str] = "Basic "

Prompt = Callable[[str], str]


class CredentialError(RuntimeError):
    """No usable credential was entered."""


def basic_auth(username: str, password: str) -> str:
    encoded = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return BASIC_AUTH_PREFIX + encoded


class CredentialAcquirer:
    """Obtain a bearer token (browser mode) or a username/password pair."""

    def __init__(
        self,
        *,
        browser_auth: bool,
        entry_url: str,
        prompt: Prompt = input,
        secret_prompt: Prompt = getpass.getpass,
        open_browser: Callable[[str], bool] = webbrowser.open,
        output: Callable[[str], None] = print,
    ) -> None:
        self.browser_auth = browser_auth
        self.entry_url = entry_url
        self._prompt = prompt
        self._secret_prompt = secret_prompt
        self._open_browser = open_browser
        self._output = output

    def acquire(self) -> str:
        """Run the configured mode and return the header value."""
        try:
            if self.browser_auth:
                return self._bearer()
            return self._basic()
        except (EOFError, KeyboardInterrupt):
            raise CredentialError("credential prompt interrupted") from None

    def _bearer(self) -> str:
        try:
            opened = self._open_browser(self.entry_url)
        except webbrowser.Error as exc:
            _LOG.debug("Browser launch failed: %s", exc)
            opened = False
        if opened:
            self._output(f"Your browser has been opened to visit {self.entry_url}")
        else:
            self._output(
                f"Error launching web browser. Go to {self.entry_url} in your web browser"
            )
        token = self._prompt("Enter token: ").strip()
        if not token:
            raise CredentialError("no token entered")
        return BEARER_AUTH_PREFIX + token

    def _basic(self) -> str:
        username = self._prompt("Username: ").strip()
        if not username:
            raise CredentialError("no username entered")
        password = self._secret_prompt("Password: ")
        if not password:
            raise CredentialError("no password entered")
        _LOG.debug("Using password authentication for %s", username)
        return basic_auth(username, password)
