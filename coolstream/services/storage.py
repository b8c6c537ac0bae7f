"""
Redis Key-Value Store
Per-user namespaced persistence for library records
"""
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

import redis.asyncio as redis
from redis.exceptions import RedisError, WatchError

from coolstream.core.config import settings
from coolstream.core.exceptions import StorageError
from coolstream.utils.helpers import sanitize_user_id

logger = logging.getLogger(__name__)

Mutator = Callable[[Optional[str]], Union[Optional[str], Awaitable[Optional[str]]]]


class KeyValueStore:
    """
    Async key-value adapter over Redis.

    Every logical key is stored as ``prefix:user_id:key``. Redis failures
    surface as StorageError; callers decide how to degrade.
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
        max_retries: Optional[int] = None,
    ):
        self._redis_client = client
        self.prefix = prefix or settings.STORAGE_PREFIX
        self.max_retries = max_retries if max_retries is not None else settings.STORAGE_MAX_RETRIES

    async def get_client(self) -> redis.Redis:
        """Get or create Redis client"""
        if self._redis_client is None:
            self._redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True
            )
        return self._redis_client

    def namespaced(self, user_id: Optional[str], key: str) -> str:
        """Full Redis key for a user's logical key"""
        return f"{self.prefix}:{sanitize_user_id(user_id)}:{key}"

    async def read(self, user_id: Optional[str], key: str) -> Optional[str]:
        """
        Read a raw value

        Returns:
            Stored string or None if absent
        """
        name = self.namespaced(user_id, key)
        try:
            client = await self.get_client()
            return await client.get(name)
        except (RedisError, OSError) as e:
            raise StorageError(f"Read failed for {name}: {e}") from e

    async def write(self, user_id: Optional[str], key: str, raw: str) -> None:
        """Overwrite a raw value"""
        name = self.namespaced(user_id, key)
        try:
            client = await self.get_client()
            await client.set(name, raw)
        except (RedisError, OSError) as e:
            raise StorageError(f"Write failed for {name}: {e}") from e

    async def remove(self, user_id: Optional[str], *keys: str) -> None:
        """Delete one or more logical keys for a user"""
        if not keys:
            return

        names = [self.namespaced(user_id, key) for key in keys]
        try:
            client = await self.get_client()
            await client.delete(*names)
        except (RedisError, OSError) as e:
            raise StorageError(f"Remove failed for {', '.join(names)}: {e}") from e

    async def update(self, user_id: Optional[str], key: str, mutate: Mutator) -> Optional[str]:
        """
        Optimistic read-modify-write of a single key.

        ``mutate`` receives the current raw value and returns the new raw
        value, or None to leave the key untouched. If another writer changes
        the key between the read and the write, the transaction is retried
        against the fresh value.

        Returns:
            The value left in the store
        """
        name = self.namespaced(user_id, key)
        try:
            client = await self.get_client()
            async with client.pipeline(transaction=True) as pipe:
                for attempt in range(1, self.max_retries + 1):
                    try:
                        await pipe.watch(name)
                        current = await pipe.get(name)

                        new_value = mutate(current)
                        if inspect.isawaitable(new_value):
                            new_value = await new_value

                        if new_value is None:
                            await pipe.unwatch()
                            return current

                        pipe.multi()
                        pipe.set(name, new_value)
                        await pipe.execute()
                        return new_value

                    except WatchError:
                        logger.debug("Concurrent write on %s (attempt %d/%d)", name, attempt, self.max_retries)
                        continue
        except (RedisError, OSError) as e:
            raise StorageError(f"Update failed for {name}: {e}") from e

        raise StorageError(f"Update failed for {name}: too many concurrent writers")

    async def ping(self) -> bool:
        """Check that Redis answers"""
        try:
            client = await self.get_client()
            return bool(await client.ping())
        except (RedisError, OSError) as e:
            logger.error(f"Storage ping failed: {e}")
            return False

    async def close(self):
        """Close Redis connection"""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None


_kv_store: Optional[KeyValueStore] = None


def get_kv_store() -> KeyValueStore:
    """Get the process-wide key-value store"""
    global _kv_store
    if _kv_store is None:
        _kv_store = KeyValueStore()
    return _kv_store
