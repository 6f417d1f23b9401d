"""SSH key pair generation."""

from __future__ import annotations

import logging
from typing import Final

import asyncssh

_LOG = logging.getLogger("certgate.client.keys")

DEFAULT_RSA_SIZE: Final[int] = 2048
DEFAULT_ECDSA_SIZE: Final[int] = 256
_ECDSA_CURVES: Final[dict[int, str]] = {
    256: "ecdsa-sha2-nistp256",
    384: "ecdsa-sha2-nistp384",
    521: "ecdsa-sha2-nistp521",
}


class KeyGenerationError(ValueError):
    """The requested key could not be generated."""


def generate_key(key_type: str, key_size: int | None = None) -> asyncssh.SSHKey:
    """Generate a private key of *key_type*.

    *key_size* defaults per type (2048 for RSA, 256 for ECDSA) and is ignored
    for ed25519.  The public half is available through
    ``key.export_public_key()``.
    """
    key_type = key_type.lower()
    if key_type == "ed25519":
        alg, kwargs = "ssh-ed25519", {}
    elif key_type == "rsa":
        alg, kwargs = "ssh-rsa", {"key_size": key_size or DEFAULT_RSA_SIZE}
    elif key_type == "ecdsa":
        size = key_size or DEFAULT_ECDSA_SIZE
        if size not in _ECDSA_CURVES:
            raise KeyGenerationError(
                f"unsupported ecdsa key size {size}; valid sizes are 256, 384, 521"
            )
        alg, kwargs = _ECDSA_CURVES[size], {}
    else:
        raise KeyGenerationError(f"unsupported key type {key_type!r}")

    try:
        key = asyncssh.generate_private_key(alg, **kwargs)
    except (asyncssh.KeyGenerationError, ValueError) as exc:
        raise KeyGenerationError(f"cannot generate {key_type} key: {exc}") from exc
    _LOG.debug("Generated %s key", alg)
    return key


def public_key_line(key: asyncssh.SSHKey) -> str:
    """OpenSSH ``authorized_keys`` line for the public half of *key*."""
    return key.export_public_key("openssh").decode("ascii").strip()
