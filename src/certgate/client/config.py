"""Client signing configuration.

:class:`ClientConfig` is built once (defaults, then environment, then CLI
flags) and passed to :class:`~certgate.client.workflow.SigningWorkflow`.

Environment variables
---------------------
CERTGATE_CA                  Authority base URL.
CERTGATE_KEY_TYPE            ``rsa`` | ``ecdsa`` | ``ed25519``.
CERTGATE_KEY_SIZE            Key size in bits (ignored for ed25519).
CERTGATE_VALIDITY            Requested validity, e.g. ``24h`` or ``1h30m``.
CERTGATE_VALIDATE_TLS        Verify the authority's TLS certificate.
CERTGATE_BROWSER_AUTH        Browser token flow (true) or password prompt.
CERTGATE_PUBLIC_FILE_PREFIX  Save ``<prefix>.pub`` / ``<prefix>-cert.pub``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Final, Literal

from certgate.auth.errors import ConfigurationError
from certgate.utils.environment import env_bool, env_int, env_str

KeyType = Literal["rsa", "ecdsa", "ed25519"]

KEY_TYPES: Final[tuple[str, ...]] = ("rsa", "ecdsa", "ed25519")
DEFAULT_CA: Final[str] = "http://localhost:10000"
DEFAULT_VALIDITY: Final[timedelta] = timedelta(hours=24)

_DURATION_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNITS: Final[dict[str, float]] = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_duration(value: str) -> timedelta:
    """Parse a Go-style duration string (``"24h"``, ``"1h30m"``, ``"90s"``).

    A bare number is read as seconds.
    """
    text = value.strip().lower()
    if not text:
        raise ValueError("empty duration")
    if re.fullmatch(r"\d+(?:\.\d+)?", text):
        return timedelta(seconds=float(text))
    pos = 0
    seconds = 0.0
    for match in _DURATION_RE.finditer(text):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return timedelta(seconds=seconds)


@dataclass
class ClientConfig:
    """Settings for one signing run."""

    ca: str = DEFAULT_CA
    key_type: str = "rsa"
    key_size: int | None = None
    validity: timedelta = field(default=DEFAULT_VALIDITY)
    validate_tls_certificate: bool = True
    browser_auth: bool = True
    public_file_prefix: str = ""

    def __post_init__(self) -> None:
        self.key_type = self.key_type.lower()
        if self.key_type not in KEY_TYPES:
            raise ConfigurationError(
                f"unsupported key type {self.key_type!r}; expected one of {', '.join(KEY_TYPES)}"
            )
        if isinstance(self.validity, str):
            try:
                self.validity = parse_duration(self.validity)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from None
        if self.validity <= timedelta(0):
            raise ConfigurationError("validity must be positive")
        if not self.ca:
            raise ConfigurationError("certificate authority address is not configured")
        self.ca = self.ca.rstrip("/")

    @classmethod
    def from_env(cls, **overrides: object) -> "ClientConfig":
        """Build a config from ``CERTGATE_*`` variables; *overrides* win when not ``None``."""
        try:
            key_size = env_int("CERTGATE_KEY_SIZE")
        except ValueError:
            raise ConfigurationError("CERTGATE_KEY_SIZE must be an integer") from None
        values: dict[str, object] = {
            "ca": env_str("CERTGATE_CA", DEFAULT_CA),
            "key_type": env_str("CERTGATE_KEY_TYPE", "rsa"),
            "key_size": key_size,
            "validity": env_str("CERTGATE_VALIDITY") or DEFAULT_VALIDITY,
            "validate_tls_certificate": env_bool("CERTGATE_VALIDATE_TLS", True),
            "browser_auth": env_bool("CERTGATE_BROWSER_AUTH", True),
            "public_file_prefix": env_str("CERTGATE_PUBLIC_FILE_PREFIX"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
