"""
NATS Connection Factory

Creates a NATS client and the JetStream context used for all provisioning
calls, optionally scoped to a JetStream domain.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional, Union

import nats
from nats.aio.client import Client
from nats.errors import Error as NatsError
from nats.js import JetStreamContext

from wadm_nats.config import ConnectOptions, NatsConfig
from wadm_nats.credentials import Anonymous, AuthMode, build_auth
from wadm_nats.errors import NatsConnectionError
from wadm_nats.telemetry import create_span, increment_counter, record_latency

logger = logging.getLogger(__name__)


class ConnectionHandle(NamedTuple):
    """Connected client and its JetStream context"""
    client: Client
    context: JetStreamContext


async def _on_disconnected():
    logger.warning("Disconnected from NATS server")


async def _on_reconnected():
    logger.info("Reconnected to NATS server")


async def _on_closed():
    logger.info("NATS connection closed")


async def _on_error(error):
    logger.error(f"NATS error: {error}")


def _connect_options(auth: AuthMode, options: ConnectOptions) -> Dict[str, Any]:
    connect_opts = {
        "error_cb": _on_error,
        "disconnected_cb": _on_disconnected,
        "reconnected_cb": _on_reconnected,
        "closed_cb": _on_closed,
    }
    connect_opts.update(options.to_dict())
    # The initial connect bails on the first failure; reconnects are
    # enabled once the connection is up
    connect_opts["allow_reconnect"] = False
    connect_opts.update(auth.connect_options())
    return connect_opts


async def connect(url: str,
                  domain: Optional[str] = None,
                  seed: Optional[str] = None,
                  jwt: Optional[str] = None,
                  creds_path: Optional[Union[str, Path]] = None,
                  *,
                  options: Optional[ConnectOptions] = None) -> ConnectionHandle:
    """Connect to NATS and derive a JetStream context

    With no credentials the connection is anonymous. Otherwise ``seed`` and
    ``jwt`` (inline values or file paths) or ``creds_path`` alone select the
    auth mode. The connection is attempted once and fails on the first
    refusal; retries are up to the caller. Once connected, the transport
    reconnects on its own when ``options.allow_reconnect`` is set.

    Args:
        url: NATS server URL
        domain: JetStream domain to scope the context to
        seed: nkey seed or path to a seed file
        jwt: User JWT or path to a JWT file
        creds_path: Path to a .creds file
        options: Transport options, defaults to ``ConnectOptions()``

    Returns:
        ConnectionHandle: (client, context) pair

    Raises:
        CredentialError: If the credential inputs are invalid
        NatsConnectionError: If the connection or authentication fails
    """
    if seed is None and jwt is None and creds_path is None:
        auth = Anonymous()
    else:
        auth = await build_auth(seed, jwt, creds_path)

    options = options or ConnectOptions()
    attrs = {"auth": type(auth).__name__}
    start_time = time.time()

    with create_span("wadm_nats.connect", {"url": url, **attrs}):
        try:
            client = await nats.connect(servers=[url], **_connect_options(auth, options))
        except (NatsError, OSError, ValueError, asyncio.TimeoutError) as e:
            increment_counter("wadm_nats.connect.errors", 1, attrs)
            logger.error(f"Failed to connect to NATS server {url}: {e!r}")
            raise NatsConnectionError(f"Failed to connect to NATS server {url}: {e!r}", url=url) from e

    client.options["allow_reconnect"] = options.allow_reconnect

    record_latency("wadm_nats.connect.latency", (time.time() - start_time) * 1000, attrs)
    increment_counter("wadm_nats.connect.success", 1, attrs)

    if domain:
        context = client.jetstream(domain=domain)
        logger.info(f"Connected to NATS server {url} using JetStream domain {domain}")
    else:
        context = client.jetstream()
        logger.info(f"Connected to NATS server {url}")

    return ConnectionHandle(client, context)


async def connect_from_config(config: NatsConfig) -> ConnectionHandle:
    """Connect using a ``NatsConfig``"""
    return await connect(
        config.url,
        domain=config.js_domain,
        seed=config.seed,
        jwt=config.jwt,
        creds_path=config.creds_path,
        options=config.options,
    )
