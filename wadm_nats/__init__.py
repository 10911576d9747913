"""
wadm NATS Connection & JetStream Provisioning

Connects to a NATS server (anonymously, with an nkey seed + JWT, or with a
.creds file) and makes sure the JetStream resources wadm depends on exist:
- work queue, status and notify streams
- versioned key-value buckets

All ensure operations are idempotent: existing resources are returned
unchanged, missing ones are created with fixed settings.
"""

from wadm_nats.config import ConnectOptions, NatsConfig
from wadm_nats.connection import ConnectionHandle, connect, connect_from_config
from wadm_nats.credentials import (
    Anonymous,
    AuthMode,
    CredentialsFile,
    SeedAndJwt,
    build_auth,
    resolve_jwt,
    resolve_seed,
)
from wadm_nats.errors import (
    CredentialError,
    NatsConnectionError,
    ProvisioningError,
    WadmNatsError,
)
from wadm_nats.kv import ensure_kv_bucket
from wadm_nats.streams import (
    DEFAULT_EXPIRY_TIME,
    ensure_notify_stream,
    ensure_status_stream,
    ensure_stream,
)

__version__ = "0.1.0"

__all__ = [
    "ConnectOptions",
    "NatsConfig",
    "ConnectionHandle",
    "connect",
    "connect_from_config",
    "Anonymous",
    "AuthMode",
    "CredentialsFile",
    "SeedAndJwt",
    "build_auth",
    "resolve_jwt",
    "resolve_seed",
    "CredentialError",
    "NatsConnectionError",
    "ProvisioningError",
    "WadmNatsError",
    "ensure_kv_bucket",
    "DEFAULT_EXPIRY_TIME",
    "ensure_notify_stream",
    "ensure_status_stream",
    "ensure_stream",
]
