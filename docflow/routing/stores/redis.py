"""Redis implementation of StateStore."""

from redis.asyncio import Redis
from redis.exceptions import RedisError

from docflow.observability.logging import get_logger
from docflow.routing.stores.interface import StateStore, StateStoreError

logger = get_logger(__name__)


class RedisStateStore(StateStore):
    """Redis-backed StateStore.

    Key format: {prefix}:state:{key}
    """

    def __init__(
        self,
        redis: Redis,
        key_prefix: str = "docflow",
        ttl_seconds: int | None = None,
    ) -> None:
        """Initialize Redis state store.

        Args:
            redis: Redis client instance
            key_prefix: Prefix for Redis keys
            ttl_seconds: Optional expiry applied on every write
        """
        self._redis = redis
        self._key_prefix = key_prefix
        self._ttl = ttl_seconds

    def _make_key(self, key: str) -> str:
        return f"{self._key_prefix}:state:{key}"

    async def get(self, key: str) -> str | None:
        try:
            value = await self._redis.get(self._make_key(key))
        except RedisError as e:
            raise StateStoreError(f"Failed to read {key}: {e}") from e
        if value is None:
            return None
        return value.decode() if isinstance(value, bytes) else value

    async def set(self, key: str, value: str) -> None:
        try:
            await self._redis.set(self._make_key(key), value, ex=self._ttl)
        except RedisError as e:
            raise StateStoreError(f"Failed to write {key}: {e}") from e
        logger.debug("state_saved", key=key, ttl_seconds=self._ttl)

    async def delete(self, key: str) -> bool:
        try:
            deleted = await self._redis.delete(self._make_key(key))
        except RedisError as e:
            raise StateStoreError(f"Failed to delete {key}: {e}") from e
        return bool(deleted)

    async def close(self) -> None:
        await self._redis.aclose()
