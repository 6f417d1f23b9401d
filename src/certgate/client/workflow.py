"""The client signing workflow.

A run walks through the states below strictly in order and never goes back::

    INIT -> CREDENTIALS_OBTAINED -> KEYS_GENERATED -> CERTIFICATE_SIGNED
         -> CERTIFICATE_INSTALLED -> ARTIFACTS_SAVED -> DONE

Credentials are collected before any key material exists, and the agent is
only contacted once the authority has returned a certificate.  The identity
is loaded into the agent *before* artifacts are written, so a failing disk
write still leaves a usable identity behind.

Every step failure raises :class:`WorkflowFatal`.  Completed steps are not
rolled back.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, TypeVar

import asyncssh

from certgate.auth.clock import Clock, default_clock
from certgate.client.agent import AgentError, install_certificate
from certgate.client.artifacts import save_public_files
from certgate.client.config import ClientConfig
from certgate.client.credentials import CredentialAcquirer, CredentialError
from certgate.client.keys import KeyGenerationError, generate_key, public_key_line
from certgate.client.signer import SigningError, sign_public_key
from certgate.utils.logging import mask_sensitive

_LOG = logging.getLogger("certgate.client.workflow")

KeyGenerator = Callable[[str, int | None], asyncssh.SSHKey]
Signer = Callable[[str, str, ClientConfig], asyncssh.SSHCertificate]
Installer = Callable[[asyncssh.SSHKey, asyncssh.SSHCertificate], None]

_T = TypeVar("_T")

# Failures the steps report on their own; anything else is logged with a
# traceback before being turned into WorkflowFatal.
_STEP_ERRORS = (CredentialError, KeyGenerationError, SigningError, AgentError, OSError)


class WorkflowState(enum.Enum):
    INIT = "init"
    CREDENTIALS_OBTAINED = "credentials_obtained"
    KEYS_GENERATED = "keys_generated"
    CERTIFICATE_SIGNED = "certificate_signed"
    CERTIFICATE_INSTALLED = "certificate_installed"
    ARTIFACTS_SAVED = "artifacts_saved"
    DONE = "done"


class WorkflowFatal(RuntimeError):
    """A step failed; the run is over.  ``state`` is the last state reached."""

    def __init__(self, message: str, *, state: WorkflowState) -> None:
        super().__init__(message)
        self.state = state


@dataclass
class WorkflowResult:
    """What a successful run produced."""

    key: asyncssh.SSHKey
    certificate: asyncssh.SSHCertificate
    saved_files: list[Path] = field(default_factory=list)


class SigningWorkflow:
    """Obtain credentials, get a key signed and load it into the agent."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        acquirer: CredentialAcquirer | None = None,
        key_generator: KeyGenerator = generate_key,
        signer: Signer | None = None,
        installer: Installer | None = None,
        output: Callable[[str], None] = print,
        clock: Clock = default_clock,
    ) -> None:
        self.config = config
        self.acquirer = acquirer or CredentialAcquirer(
            browser_auth=config.browser_auth, entry_url=config.ca, output=output
        )
        self._generate_key = key_generator
        self._sign = signer or (
            lambda pub, creds, cfg: sign_public_key(pub, creds, cfg, clock=clock)
        )
        lifetime = int(config.validity.total_seconds())
        self._install = installer or (
            lambda key, cert: install_certificate(key, cert, lifetime=lifetime)
        )
        self._output = output
        self.state = WorkflowState.INIT

    def _advance(self, state: WorkflowState) -> None:
        _LOG.debug("Workflow %s -> %s", self.state.value, state.value)
        self.state = state

    def _fatal(self, message: str, exc: Exception) -> WorkflowFatal:
        if isinstance(exc, _STEP_ERRORS):
            _LOG.error("%s (state=%s): %s", message, self.state.value, exc)
        else:
            _LOG.exception("%s (state=%s): unexpected error", message, self.state.value)
        return WorkflowFatal(f"{message}: {exc}", state=self.state)

    def _step(self, message: str, func: Callable[..., _T], *args: Any) -> _T:
        try:
            return func(*args)
        except Exception as exc:
            raise self._fatal(message, exc) from exc

    def run(self) -> WorkflowResult:
        """Execute every step; raises :class:`WorkflowFatal` on the first failure."""
        if self.state is not WorkflowState.INIT:
            raise RuntimeError("a SigningWorkflow can only run once")

        creds = self._step("Error obtaining credentials", self.acquirer.acquire)
        _LOG.debug("Obtained credentials %s", mask_sensitive(creds, 7))
        self._advance(WorkflowState.CREDENTIALS_OBTAINED)

        self._output("Generating new key pair")
        key = self._step(
            "Error generating key pair",
            self._generate_key,
            self.config.key_type,
            self.config.key_size,
        )
        self._advance(WorkflowState.KEYS_GENERATED)

        cert = self._step("Error signing key", self._sign, public_key_line(key), creds, self.config)
        self._advance(WorkflowState.CERTIFICATE_SIGNED)

        self._step("Error installing certificate", self._install, key, cert)
        self._advance(WorkflowState.CERTIFICATE_INSTALLED)

        saved = self._step(
            "Error saving public files",
            save_public_files,
            self.config.public_file_prefix,
            key,
            cert,
        )
        self._advance(WorkflowState.ARTIFACTS_SAVED)

        self._advance(WorkflowState.DONE)
        self._output("Credentials added.")
        return WorkflowResult(key=key, certificate=cert, saved_files=saved)
