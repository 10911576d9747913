"""
Tests for key-value bucket provisioning
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from nats.errors import TimeoutError as NatsTimeoutError
from nats.js.api import StorageType
from nats.js.errors import APIError, BucketNotFoundError

from wadm_nats.errors import ProvisioningError
from wadm_nats.kv import ensure_kv_bucket
from wadm_nats.streams import STREAM_NAME_IN_USE


@pytest.fixture
def mock_js():
    js = MagicMock()
    js.key_value = AsyncMock(side_effect=BucketNotFoundError())
    js.create_key_value = AsyncMock(return_value=MagicMock(name="kv"))
    return js


class TestEnsureKvBucket:
    """Test ensure_kv_bucket()"""

    @pytest.mark.asyncio
    async def test_creates_missing_bucket(self, mock_js):
        kv = await ensure_kv_bucket(mock_js, "wadm_state", 1)

        assert kv is mock_js.create_key_value.return_value
        config = mock_js.create_key_value.call_args.kwargs["config"]
        assert config.bucket == "wadm_state"
        assert config.history == 1
        assert config.replicas == 1
        assert config.storage == StorageType.FILE

    @pytest.mark.asyncio
    async def test_existing_bucket_returned(self, mock_js):
        existing = MagicMock(name="existing_kv")
        mock_js.key_value.side_effect = None
        mock_js.key_value.return_value = existing

        assert await ensure_kv_bucket(mock_js, "wadm_state", 5) is existing
        mock_js.create_key_value.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_first_history_wins(self, fake_js):
        first = await ensure_kv_bucket(fake_js, "links", 20)
        second = await ensure_kv_bucket(fake_js, "links", 5)

        assert second is first
        assert second.config.history == 20
        assert fake_js.create_key_value_calls == 1

    @pytest.mark.asyncio
    async def test_creation_failure(self, mock_js):
        mock_js.create_key_value.side_effect = APIError(code=500, description="insufficient resources")

        with pytest.raises(ProvisioningError, match="links") as exc_info:
            await ensure_kv_bucket(mock_js, "links", 20)

        assert exc_info.value.resource == "links"

    @pytest.mark.asyncio
    async def test_concurrent_creation_uses_existing(self, mock_js):
        existing = MagicMock(name="existing_kv")
        mock_js.key_value.side_effect = [BucketNotFoundError(), existing]
        mock_js.create_key_value.side_effect = APIError(
            code=400, err_code=STREAM_NAME_IN_USE, description="stream name already in use"
        )

        assert await ensure_kv_bucket(mock_js, "links", 20) is existing

    @pytest.mark.asyncio
    @pytest.mark.parametrize("history", [0, -1, 65])
    async def test_invalid_history_for_new_bucket(self, mock_js, history):
        with pytest.raises(ProvisioningError, match="Invalid history"):
            await ensure_kv_bucket(mock_js, "links", history)

        mock_js.create_key_value.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("history", [0, 65, 100])
    async def test_existing_bucket_ignores_history(self, fake_js, history):
        first = await ensure_kv_bucket(fake_js, "links", 20)

        assert await ensure_kv_bucket(fake_js, "links", history) is first
        assert fake_js.create_key_value_calls == 1

    @pytest.mark.asyncio
    async def test_fetch_timeout(self, mock_js):
        mock_js.key_value.side_effect = NatsTimeoutError()

        with pytest.raises(ProvisioningError, match="look up") as exc_info:
            await ensure_kv_bucket(mock_js, "links", 20)

        assert exc_info.value.resource == "links"
        assert isinstance(exc_info.value.__cause__, NatsTimeoutError)
        mock_js.create_key_value.assert_not_awaited()
