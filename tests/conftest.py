"""
Shared test fixtures
"""
import nkeys
import pytest
from nats.js.errors import BucketNotFoundError, NotFoundError


@pytest.fixture
def user_seed():
    return bytes(nkeys.encode_seed(bytes(range(32)), nkeys.PREFIX_BYTE_USER)).decode().rstrip("=")


@pytest.fixture
def user_jwt():
    return (
        "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
        "eyJ2aWRlb0lkIjoiUWpVaUxYSnVjMjl0IiwiaWF0IjoxNjIwNjAzNDY5fQ."
        "2PKx6y2ym6IWbeM6zFgHOkDnZEtGTR3YgYlQ2_Jki5g"
    )


class FakeKeyValue:
    """Bucket handle returned by FakeJetStream"""

    def __init__(self, config):
        self.bucket = config.bucket
        self.config = config


class FakeJetStream:
    """In-memory stand-in for a JetStream context"""

    def __init__(self):
        self.streams = {}
        self.buckets = {}
        self.add_stream_calls = 0
        self.create_key_value_calls = 0

    async def stream_info(self, name):
        if name not in self.streams:
            raise NotFoundError(code=404, description="stream not found")
        return self.streams[name]

    async def add_stream(self, config=None, **params):
        self.add_stream_calls += 1
        self.streams[config.name] = config
        return config

    async def key_value(self, bucket):
        if bucket not in self.buckets:
            raise BucketNotFoundError(code=404, description="stream not found")
        return self.buckets[bucket]

    async def create_key_value(self, config=None, **params):
        self.create_key_value_calls += 1
        kv = FakeKeyValue(config)
        self.buckets[config.bucket] = kv
        return kv


@pytest.fixture
def fake_js():
    return FakeJetStream()
