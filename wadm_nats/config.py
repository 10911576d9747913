"""
Configuration settings for the NATS connection
"""
import os
from typing import Dict, Any, Optional
from dataclasses import dataclass, field


DEFAULT_NATS_URL = "nats://127.0.0.1:4222"


@dataclass
class ConnectOptions:
    """Transport-level connection options"""
    name: str = "wadm"
    connect_timeout: float = 2.0
    max_reconnect_attempts: int = 60
    reconnect_time_wait: float = 2.0
    allow_reconnect: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to ``nats.connect`` keyword arguments"""
        return {
            "name": self.name,
            "connect_timeout": self.connect_timeout,
            "max_reconnect_attempts": self.max_reconnect_attempts,
            "reconnect_time_wait": self.reconnect_time_wait,
            "allow_reconnect": self.allow_reconnect,
        }


@dataclass
class NatsConfig:
    """Connection settings: broker URL, JetStream domain and credentials"""
    url: str = DEFAULT_NATS_URL
    js_domain: Optional[str] = None
    seed: Optional[str] = None
    jwt: Optional[str] = None
    creds_path: Optional[str] = None
    options: ConnectOptions = field(default_factory=ConnectOptions)

    @classmethod
    def from_env(cls) -> "NatsConfig":
        """Create config from environment variables"""
        return cls(
            url=os.getenv("WADM_NATS_URL", DEFAULT_NATS_URL),
            js_domain=os.getenv("WADM_JS_DOMAIN") or None,
            seed=os.getenv("WADM_NATS_NKEY") or None,
            jwt=os.getenv("WADM_NATS_JWT") or None,
            creds_path=os.getenv("WADM_NATS_CREDS_FILE") or None,
            options=ConnectOptions(
                name=os.getenv("WADM_NATS_CLIENT_NAME", "wadm"),
                connect_timeout=float(os.getenv("WADM_NATS_CONNECT_TIMEOUT", "2")),
                max_reconnect_attempts=int(os.getenv("WADM_NATS_MAX_RECONNECTS", "60")),
                reconnect_time_wait=float(os.getenv("WADM_NATS_RECONNECT_WAIT", "2")),
            ),
        )

    @property
    def has_credentials(self) -> bool:
        return any(value is not None for value in (self.seed, self.jwt, self.creds_path))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging; secrets are masked"""
        return {
            "url": self.url,
            "js_domain": self.js_domain,
            "seed": "***" if self.seed else None,
            "jwt": "***" if self.jwt else None,
            "creds_path": self.creds_path,
            **self.options.to_dict(),
        }
