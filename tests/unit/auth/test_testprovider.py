"""Unit tests for the stub provider and the provider factory."""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urlparse

import pytest

from certgate.auth import (
    AuthConfig,
    ConfigurationError,
    GoogleProvider,
    IdentityToken,
    Provider,
    TestProvider,
    get_auth_logger,
    new_provider,
)
from certgate.auth.clock import fixed_clock
from tests.fakes import FakeHTTP


# --------------------------------------------------------------------------- #
# TestProvider                                                                #
# --------------------------------------------------------------------------- #
def test_stub_round_trip_without_network(fake_http: FakeHTTP) -> None:
    provider = TestProvider()
    token = provider.exchange("anything")

    assert provider.name == "testprovider"
    assert provider.valid(token) is True
    assert provider.username(token) == "test"
    assert provider.revoke(token) is None
    assert fake_http.calls == []


def test_stub_session_embeds_state() -> None:
    provider = TestProvider()
    first = provider.start_session("one")
    second = provider.start_session("two")
    assert first.auth_url != second.auth_url
    assert parse_qs(urlparse(first.auth_url).query)["state"] == ["one"]


def test_stub_rejects_expired_tokens() -> None:
    provider = TestProvider(clock=fixed_clock(5_000.0))
    assert provider.valid(IdentityToken(access_token="token", expiry=5_000.0)) is False


def test_stub_tokens_expire_after_an_hour() -> None:
    token = TestProvider(clock=fixed_clock(100.0)).exchange("code")
    assert token.expiry == 3_700.0
    assert TestProvider(clock=fixed_clock(3_700.0)).valid(token) is False


def test_stub_satisfies_protocol() -> None:
    assert isinstance(TestProvider(), Provider)


# --------------------------------------------------------------------------- #
# new_provider                                                                #
# --------------------------------------------------------------------------- #
def test_factory_selects_by_name() -> None:
    google = new_provider(
        AuthConfig(provider="Google", oauth_client_id="cid", users_whitelist=("alice",))
    )
    assert isinstance(google, GoogleProvider)
    assert isinstance(new_provider(AuthConfig(provider="testprovider")), TestProvider)


def test_factory_unknown_provider() -> None:
    with pytest.raises(ConfigurationError, match="unknown auth provider"):
        new_provider(AuthConfig(provider="ldap"))


def test_factory_propagates_construction_errors() -> None:
    with pytest.raises(ConfigurationError):
        new_provider(AuthConfig(provider="google", oauth_client_id="cid"))


def test_auth_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CERTGATE_AUTH_PROVIDER", "GOOGLE")
    monkeypatch.setenv("CERTGATE_OAUTH_CLIENT_ID", "cid")
    monkeypatch.setenv("CERTGATE_AUTH_DOMAIN", "example.com")
    monkeypatch.setenv("CERTGATE_USERS_WHITELIST", "alice, bob,,")
    monkeypatch.setenv("CERTGATE_OAUTH_TOKEN_URL", "https://idp.example.com/token")

    cfg = AuthConfig.from_env()
    assert cfg.provider == "google"
    assert cfg.domain == "example.com"
    assert cfg.users_whitelist == ("alice", "bob")
    assert cfg.provider_opts["token_url"] == "https://idp.example.com/token"


# --------------------------------------------------------------------------- #
# logging                                                                     #
# --------------------------------------------------------------------------- #
def test_auth_logger_only_injects_whitelisted_context(caplog: pytest.LogCaptureFixture) -> None:
    log = get_auth_logger(provider="google", client_id="1234567890abcdef", username=None)
    with caplog.at_level(logging.INFO, logger="certgate.auth"):
        log.info("hello")
    record = caplog.records[-1]
    assert record.provider == "google"
    assert record.client_id == "12345678"
    assert not hasattr(record, "username")
