"""
Tests for connection configuration
"""
import os
from unittest.mock import patch

from wadm_nats.config import DEFAULT_NATS_URL, ConnectOptions, NatsConfig


class TestConnectOptions:
    """Test transport options"""

    def test_default_values(self):
        options = ConnectOptions()
        assert options.name == "wadm"
        assert options.connect_timeout == 2.0
        assert options.max_reconnect_attempts == 60
        assert options.reconnect_time_wait == 2.0
        assert options.allow_reconnect is True

    def test_to_dict(self):
        options = ConnectOptions(name="test", allow_reconnect=False)
        assert options.to_dict() == {
            "name": "test",
            "connect_timeout": 2.0,
            "max_reconnect_attempts": 60,
            "reconnect_time_wait": 2.0,
            "allow_reconnect": False,
        }


class TestNatsConfig:
    """Test NATS configuration"""

    def test_defaults_from_empty_env(self):
        with patch.dict(os.environ, clear=True):
            config = NatsConfig.from_env()
        assert config.url == DEFAULT_NATS_URL
        assert config.js_domain is None
        assert config.has_credentials is False
        assert config.options == ConnectOptions()

    def test_config_from_env(self):
        with patch.dict(os.environ, {
            "WADM_NATS_URL": "nats://nats.example.com:4222",
            "WADM_JS_DOMAIN": "leaf",
            "WADM_NATS_NKEY": "/secrets/wadm.nk",
            "WADM_NATS_JWT": "/secrets/wadm.jwt",
            "WADM_NATS_CONNECT_TIMEOUT": "5",
            "WADM_NATS_MAX_RECONNECTS": "10",
            "WADM_NATS_RECONNECT_WAIT": "0.5",
            "WADM_NATS_CLIENT_NAME": "wadm-1",
        }, clear=True):
            config = NatsConfig.from_env()

        assert config.url == "nats://nats.example.com:4222"
        assert config.js_domain == "leaf"
        assert config.seed == "/secrets/wadm.nk"
        assert config.jwt == "/secrets/wadm.jwt"
        assert config.creds_path is None
        assert config.has_credentials is True
        assert config.options.connect_timeout == 5.0
        assert config.options.max_reconnect_attempts == 10
        assert config.options.reconnect_time_wait == 0.5
        assert config.options.name == "wadm-1"

    def test_empty_values_treated_as_unset(self):
        with patch.dict(os.environ, {"WADM_JS_DOMAIN": "", "WADM_NATS_CREDS_FILE": ""}, clear=True):
            config = NatsConfig.from_env()
        assert config.js_domain is None
        assert config.creds_path is None

    def test_to_dict_masks_secrets(self):
        config = NatsConfig(seed="SUAAAA", jwt="abc.def.ghi")
        config_dict = config.to_dict()

        assert config_dict["seed"] == "***"
        assert config_dict["jwt"] == "***"
        assert config_dict["url"] == DEFAULT_NATS_URL
        assert config_dict["name"] == "wadm"
