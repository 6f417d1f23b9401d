"""Shared fixtures: a fake ``requests`` transport and throwaway SSH keys.

No test in this suite talks to the network or to a real agent.
"""

from __future__ import annotations

import time
from typing import Callable

import asyncssh
import pytest
import requests

from tests.fakes import FakeHTTP


@pytest.fixture()
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHTTP:
    """Replace ``requests.get`` and ``requests.post`` with a :class:`FakeHTTP`."""
    http = FakeHTTP()
    monkeypatch.setattr(requests, "get", http.get, raising=True)
    monkeypatch.setattr(requests, "post", http.post, raising=True)
    return http


@pytest.fixture(scope="session")
def ca_key() -> asyncssh.SSHKey:
    """Signing key of a pretend certificate authority."""
    return asyncssh.generate_private_key("ssh-ed25519")


@pytest.fixture()
def make_certificate(ca_key: asyncssh.SSHKey) -> Callable[..., asyncssh.SSHCertificate]:
    """Return a factory issuing user certificates signed by :func:`ca_key`."""

    def _make(
        user_key: asyncssh.SSHKey,
        *,
        principal: str = "test",
        valid_for: int = 3600,
    ) -> asyncssh.SSHCertificate:
        now = int(time.time())
        return ca_key.generate_user_certificate(
            user_key,
            f"{principal}-cert",
            principals=[principal],
            valid_after=now - 120,
            valid_before=now + valid_for,
        )

    return _make


def pytest_addoption(parser):
    """Add integration option to pytest."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless ``--integration`` is given.

    Tests also marked ``ci_safe`` stub the authority, the identity provider
    and the agent, so they always run.
    """
    if config.getoption("--integration"):
        return
    skip_integration = pytest.mark.skip(reason="Need --integration option to run")
    for item in items:
        if "integration" in item.keywords and "ci_safe" not in item.keywords:
            item.add_marker(skip_integration)
