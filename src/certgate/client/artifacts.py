"""Optional on-disk copies of the public key and certificate."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import asyncssh

_LOG = logging.getLogger("certgate.client.artifacts")

_MODE = 0o644


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_bytes(data)
    tmp.chmod(_MODE)
    os.replace(tmp, path)  # atomic on POSIX


def save_public_files(
    prefix: str,
    key: asyncssh.SSHKey,
    cert: asyncssh.SSHCertificate,
) -> list[Path]:
    """Write ``<prefix>.pub`` and ``<prefix>-cert.pub``.

    An empty *prefix* disables saving and returns an empty list.
    """
    if not prefix:
        return []
    base = os.path.expanduser(prefix)
    written = [Path(base + ".pub"), Path(base + "-cert.pub")]
    _write(written[0], key.export_public_key("openssh"))
    _write(written[1], cert.export_certificate("openssh"))
    _LOG.info("Saved %s", ", ".join(str(p) for p in written))
    return written
