"""Signing request to the certificate authority.

Wire format::

    POST <ca>/sign
    Authorization: Bearer <token> | Basic <base64>
    {"key": "<openssh public key>", "valid_until": "<RFC 3339, UTC>"}

    200 {"status": "ok", "response": "<openssh certificate>"}

Any other status code or body is an error.  The request is sent exactly
once; the credential came from an interactive prompt and is not replayed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Final

import asyncssh
import requests

from certgate.auth.clock import Clock, default_clock
from certgate.client.config import ClientConfig

_LOG = logging.getLogger("certgate.client.signer")

_HTTP_TIMEOUT: Final[tuple[int, int]] = (5, 30)


class SigningError(RuntimeError):
    """The authority refused to sign or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _valid_until(config: ClientConfig, clock: Clock) -> str:
    until = datetime.fromtimestamp(clock(), tz=timezone.utc) + config.validity
    return until.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def sign_public_key(
    public_key: str,
    credentials: str,
    config: ClientConfig,
    *,
    clock: Clock = default_clock,
) -> asyncssh.SSHCertificate:
    """Ask the authority to sign *public_key*; return the parsed certificate."""
    url = f"{config.ca}/sign"
    body = {"key": public_key, "valid_until": _valid_until(config, clock)}
    try:
        resp = requests.post(
            url,
            json=body,
            headers={"Authorization": credentials, "Accept": "application/json"},
            verify=config.validate_tls_certificate,
            timeout=_HTTP_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise SigningError(f"Error sending signing request to {url}: {exc}") from exc

    if not resp.ok:
        raise SigningError(
            f"Bad response from server: {resp.status_code} {resp.text[:200]}".rstrip(),
            status_code=resp.status_code,
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise SigningError("Unable to parse response from server") from exc
    if not isinstance(data, dict) or data.get("status") != "ok":
        message = data.get("response") if isinstance(data, dict) else None
        raise SigningError(f"Error signing key: {message or 'unexpected response'}")

    response = data.get("response")
    if not isinstance(response, str):
        raise SigningError(
            f"Authority returned an unusable certificate: expected a string, got {type(response).__name__}"
        )
    if not response:
        raise SigningError("Authority returned an unusable certificate: empty response")
    try:
        cert = asyncssh.import_certificate(response)
    except (asyncssh.KeyImportError, ValueError) as exc:
        raise SigningError(f"Authority returned an unusable certificate: {exc}") from exc
    _LOG.info("Certificate signed by %s", config.ca)
    return cert
