"""Tests for host state stores."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from docflow.routing.stores import InMemoryStateStore, RedisStateStore, StateStoreError


class TestInMemoryStateStore:
    @pytest.mark.asyncio
    async def test_set_get_delete(self):
        store = InMemoryStateStore()

        await store.set("auto_session_state", '{"isActive": true}')
        assert await store.get("auto_session_state") == '{"isActive": true}'

        assert await store.delete("auto_session_state") is True
        assert await store.get("auto_session_state") is None
        assert await store.delete("auto_session_state") is False


class TestRedisStateStore:
    """Tests for RedisStateStore against a mocked client."""

    @pytest.fixture
    def redis(self) -> AsyncMock:
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_keys_are_prefixed(self, redis):
        store = RedisStateStore(redis, key_prefix="test", ttl_seconds=60)

        await store.set("auto_session_state", "{}")

        redis.set.assert_awaited_once_with("test:state:auto_session_state", "{}", ex=60)

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self, redis):
        redis.get.return_value = b'{"isActive": false}'
        store = RedisStateStore(redis)

        assert await store.get("k") == '{"isActive": false}'
        redis.get.assert_awaited_once_with("docflow:state:k")

    @pytest.mark.asyncio
    async def test_get_missing(self, redis):
        redis.get.return_value = None
        assert await RedisStateStore(redis).get("k") is None

    @pytest.mark.asyncio
    async def test_delete(self, redis):
        redis.delete.return_value = 1
        assert await RedisStateStore(redis).delete("k") is True

    @pytest.mark.asyncio
    async def test_redis_errors_wrapped(self, redis):
        redis.get.side_effect = RedisConnectionError("connection refused")

        with pytest.raises(StateStoreError, match="Failed to read k"):
            await RedisStateStore(redis).get("k")

    @pytest.mark.asyncio
    async def test_close(self, redis):
        await RedisStateStore(redis).close()
        redis.aclose.assert_awaited_once()
