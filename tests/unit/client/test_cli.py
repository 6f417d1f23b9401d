"""Tests for the ``certgate`` command line entry point."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from certgate import cli
from certgate.client.workflow import WorkflowFatal, WorkflowState


class _RecordingWorkflow:
    configs: list = []
    fail: bool = False

    def __init__(self, config) -> None:
        type(self).configs.append(config)

    def run(self):
        if type(self).fail:
            raise WorkflowFatal("Error signing key: boom", state=WorkflowState.KEYS_GENERATED)
        return None


@pytest.fixture()
def workflow(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "CERTGATE_CA",
        "CERTGATE_KEY_TYPE",
        "CERTGATE_KEY_SIZE",
        "CERTGATE_VALIDITY",
        "CERTGATE_VALIDATE_TLS",
        "CERTGATE_BROWSER_AUTH",
        "CERTGATE_PUBLIC_FILE_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)
    _RecordingWorkflow.configs = []
    _RecordingWorkflow.fail = False
    monkeypatch.setattr(cli, "SigningWorkflow", _RecordingWorkflow)
    monkeypatch.setattr(cli, "setup_logging", lambda verbose: logging.getLogger("certgate"))
    return _RecordingWorkflow


def test_defaults(workflow) -> None:
    assert cli.main([]) == 0
    config = workflow.configs[0]
    assert config.ca == "http://localhost:10000"
    assert config.key_type == "rsa"
    assert config.validity == timedelta(hours=24)
    assert config.browser_auth is True
    assert config.validate_tls_certificate is True


def test_flags_override_environment(workflow, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CERTGATE_CA", "https://env.example.com")
    monkeypatch.setenv("CERTGATE_KEY_TYPE", "ecdsa")
    argv = [
        "--ca", "https://flag.example.com/",
        "--key-type", "ed25519",
        "--validity", "1h30m",
        "--no-browser-auth",
        "--insecure-skip-tls-verify",
        "--public-file-prefix", "~/.ssh/id_certgate",
    ]
    assert cli.main(argv) == 0
    config = workflow.configs[0]
    assert config.ca == "https://flag.example.com"
    assert config.key_type == "ed25519"
    assert config.validity == timedelta(minutes=90)
    assert config.browser_auth is False
    assert config.validate_tls_certificate is False
    assert config.public_file_prefix == "~/.ssh/id_certgate"


def test_environment_used_when_flag_absent(workflow, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CERTGATE_VALIDATE_TLS", "false")
    monkeypatch.setenv("CERTGATE_KEY_SIZE", "4096")
    assert cli.main([]) == 0
    assert workflow.configs[0].validate_tls_certificate is False
    assert workflow.configs[0].key_size == 4096


def test_configuration_error_exits_one(workflow, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("CERTGATE_KEY_SIZE", "large")
    assert cli.main([]) == 1
    assert "CERTGATE_KEY_SIZE" in capsys.readouterr().err
    assert workflow.configs == []


def test_workflow_failure_exits_one(workflow, capsys) -> None:
    workflow.fail = True
    assert cli.main([]) == 1
    assert "boom" in capsys.readouterr().err


def test_invalid_validity_is_rejected_by_parser(workflow) -> None:
    with pytest.raises(SystemExit) as info:
        cli.main(["--validity", "tomorrow"])
    assert info.value.code == 2
