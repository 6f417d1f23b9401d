"""Tests for environment helpers and log masking."""

import logging

import pytest

from certgate.utils.environment import env_bool, env_int, env_list, env_str
from certgate.utils.logging import mask_sensitive, setup_logging


@pytest.mark.parametrize(
    "raw,expected",
    [("true", True), ("YES", True), (" 1 ", True), ("off", False), ("0", False), ("n", False)],
)
def test_env_bool_recognised(monkeypatch, raw, expected):
    monkeypatch.setenv("CERTGATE_FLAG", raw)
    assert env_bool("CERTGATE_FLAG", not expected) is expected


def test_env_bool_unset_uses_default(monkeypatch):
    monkeypatch.delenv("CERTGATE_FLAG", raising=False)
    assert env_bool("CERTGATE_FLAG", True) is True
    monkeypatch.setenv("CERTGATE_FLAG", "   ")
    assert env_bool("CERTGATE_FLAG", False) is False


def test_env_bool_typo_warns(monkeypatch, caplog):
    monkeypatch.setenv("CERTGATE_FLAG", "ture")
    with caplog.at_level(logging.WARNING, logger="certgate.utils.environment"):
        assert env_bool("CERTGATE_FLAG", False) is False
    assert "CERTGATE_FLAG" in caplog.text


def test_env_str_strips_and_defaults(monkeypatch):
    monkeypatch.setenv("CERTGATE_NAME", "  value ")
    assert env_str("CERTGATE_NAME") == "value"
    monkeypatch.setenv("CERTGATE_NAME", "")
    assert env_str("CERTGATE_NAME", "fallback") == "fallback"


def test_env_int(monkeypatch):
    monkeypatch.delenv("CERTGATE_SIZE", raising=False)
    assert env_int("CERTGATE_SIZE") is None
    monkeypatch.setenv("CERTGATE_SIZE", "4096")
    assert env_int("CERTGATE_SIZE") == 4096
    monkeypatch.setenv("CERTGATE_SIZE", "big")
    with pytest.raises(ValueError):
        env_int("CERTGATE_SIZE")


def test_env_list(monkeypatch):
    monkeypatch.setenv("CERTGATE_USERS", "alice, bob,,  carol ")
    assert env_list("CERTGATE_USERS") == ["alice", "bob", "carol"]
    monkeypatch.delenv("CERTGATE_USERS")
    assert env_list("CERTGATE_USERS") == []


@pytest.mark.parametrize(
    "value,keep,expected",
    [
        (None, 4, "<empty>"),
        ("", 4, "<empty>"),
        ("abc", 4, "****"),
        ("ya29.a0AfH6SMBx", 4, "ya29****"),
        ("Bearer secret", 7, "Bearer ****"),
    ],
)
def test_mask_sensitive(value, keep, expected):
    assert mask_sensitive(value, keep) == expected


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    urllib3_level = logging.getLogger("urllib3").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("urllib3").setLevel(urllib3_level)


def test_setup_logging_levels(restore_root_logging):
    setup_logging(verbose=True)
    assert logging.getLogger().level == logging.DEBUG
    setup_logging(verbose=False)
    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("urllib3").level == logging.WARNING
