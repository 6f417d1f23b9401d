"""Loading a signed identity into the local SSH agent.

The agent is reached through ``SSH_AUTH_SOCK`` (or an explicit path).  The
connection is opened right before the identity is added and closed
afterwards whatever happens.
"""

from __future__ import annotations

import asyncio
import logging
import os

import asyncssh

_LOG = logging.getLogger("certgate.client.agent")


class AgentError(RuntimeError):
    """The agent could not be reached or refused the identity."""


async def _add_identity(
    agent_path: str,
    key: asyncssh.SSHKey,
    cert: asyncssh.SSHCertificate,
    lifetime: int | None,
) -> None:
    try:
        agent = await asyncssh.connect_agent(agent_path)
    except (OSError, asyncssh.Error) as exc:
        raise AgentError(f"Error connecting to agent at {agent_path}: {exc}") from exc
    if agent is None:
        raise AgentError(f"Error connecting to agent at {agent_path}")
    try:
        await agent.add_keys([(key, cert)], lifetime=lifetime)
    except (OSError, ValueError, asyncssh.Error) as exc:
        raise AgentError(f"Agent refused the identity: {exc}") from exc
    finally:
        agent.close()
        await agent.wait_closed()


def install_certificate(
    key: asyncssh.SSHKey,
    cert: asyncssh.SSHCertificate,
    *,
    lifetime: int | None = None,
    agent_path: str | None = None,
) -> None:
    """Add *key* with its *cert* to the agent.

    *lifetime* (seconds) tells the agent when to forget the identity; it is
    normally the validity requested from the authority.

    Raises
    ------
    AgentError
        No agent, connection failure, or the certificate is not for *key*.
    """
    if cert.key.public_data != key.public_data:
        raise AgentError("certificate was issued for a different key")
    if lifetime is not None and lifetime <= 0:
        raise AgentError("identity lifetime must be positive")
    path = agent_path or os.environ.get("SSH_AUTH_SOCK", "")
    if not path:
        raise AgentError("SSH_AUTH_SOCK is not set; is an agent running?")
    asyncio.run(_add_identity(path, key, cert, lifetime))
    _LOG.info(
        "Added certificate for %s to agent (lifetime %ss)",
        ",".join(cert.principals) or "<any>",
        lifetime if lifetime is not None else "unlimited",
    )
