"""
Redis caching utilities for the application.

Only the serialized driver list is cached. Visit accounting always reads
from the database, and every write invalidates the list.
"""
from typing import Optional, Dict, Any, List
import json
import logging

import redis
from pydantic import BaseModel, TypeAdapter

from dhaba_ledger.schemas.driver import Driver

logger = logging.getLogger(__name__)

DRIVER_LIST_KEY = "drivers:all"
# Bumped on every invalidation; a refill only lands if it has not moved
DRIVER_LIST_GENERATION_KEY = "drivers:gen"

_driver_list_adapter = TypeAdapter(List[Driver])


class CacheError(Exception):
    """Raised when a Redis operation fails."""
    pass


class RedisClient:
    """Redis client wrapper with connection pooling and error handling."""

    def __init__(
        self,
        url: str,
        password: Optional[str] = None,
        db: int = 0,
        socket_timeout: int = 5,
        socket_connect_timeout: int = 5,
        retry_on_timeout: bool = True,
    ):
        """Initialize the Redis client.

        Args:
            url: Redis connection URL
            password: Optional password overriding the one in the URL
            db: Database index
            socket_timeout: Seconds to wait for a reply
            socket_connect_timeout: Seconds to wait for a connection
            retry_on_timeout: Retry a command once on timeout
        """
        self._url = url
        self._redis = redis.Redis.from_url(
            url,
            password=password,
            db=db,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_connect_timeout,
            retry_on_timeout=retry_on_timeout,
            decode_responses=True,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RedisClient":
        return cls(**config)

    def ping(self) -> bool:
        try:
            return bool(self._redis.ping())
        except redis.RedisError as e:
            raise CacheError(f"Redis ping failed: {str(e)}") from e

    def close(self):
        """Close the Redis connection pool."""
        self._redis.close()

    def get(self, key: str) -> Optional[Any]:
        """Get a JSON value from Redis.

        Returns:
            The decoded value or None if not found
        """
        try:
            value = self._redis.get(key)
        except redis.RedisError as e:
            raise CacheError(f"Redis get operation failed: {str(e)}") from e
        if value is None:
            return None
        return json.loads(value)

    def delete(self, key: str) -> bool:
        """Delete a key from Redis.

        Returns:
            True if the key was deleted, False if it didn't exist
        """
        try:
            return self._redis.delete(key) > 0
        except redis.RedisError as e:
            raise CacheError(f"Redis delete operation failed: {str(e)}") from e

    def get_raw(self, key: str) -> Optional[str]:
        """Get a value from Redis without JSON decoding."""
        try:
            return self._redis.get(key)
        except redis.RedisError as e:
            raise CacheError(f"Redis get operation failed: {str(e)}") from e

    def incr(self, key: str) -> int:
        try:
            return int(self._redis.incr(key))
        except redis.RedisError as e:
            raise CacheError(f"Redis incr operation failed: {str(e)}") from e

    def set_if_unchanged(
        self, watch_key: str, expected: str, key: str, value: Any, expire: int = 3600
    ) -> bool:
        """Set a JSON value only while `watch_key` still holds `expected`.

        A missing `watch_key` counts as "0". Uses WATCH/MULTI so a change to
        `watch_key` before EXEC aborts the write.

        Returns:
            True if the value was written, False if `watch_key` had moved on
        """
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        payload = json.dumps(value)
        try:
            with self._redis.pipeline() as pipe:
                pipe.watch(watch_key)
                if (pipe.get(watch_key) or "0") != expected:
                    pipe.unwatch()
                    return False
                pipe.multi()
                pipe.set(key, payload, ex=expire)
                pipe.execute()
                return True
        except redis.WatchError:
            return False
        except redis.RedisError as e:
            raise CacheError(f"Redis conditional set failed: {str(e)}") from e


class DriverListCache:
    """Caches the full driver list with explicit invalidation on writes."""

    def __init__(self, client: RedisClient, ttl: int = 30):
        self.client = client
        self.ttl = ttl

    def get_all(self) -> Optional[List[Driver]]:
        try:
            cached = self.client.get(DRIVER_LIST_KEY)
        except CacheError as e:
            logger.warning(f"Driver list cache read failed, using database: {str(e)}")
            return None
        if cached is None:
            return None
        return _driver_list_adapter.validate_python(cached)

    def generation(self) -> Optional[str]:
        """
        Current list generation, read before querying the database for a
        refill. None means Redis could not be read and the refill is skipped.
        """
        try:
            return self.client.get_raw(DRIVER_LIST_GENERATION_KEY) or "0"
        except CacheError as e:
            logger.warning(f"Driver list generation read failed: {str(e)}")
            return None

    def set_all(self, drivers: List[Driver], generation: Optional[str]) -> bool:
        """
        Store the list unless a write invalidated it after `generation` was read.

        Returns:
            True if the list was cached
        """
        if generation is None:
            return False
        payload = _driver_list_adapter.dump_python(drivers, mode="json")
        try:
            stored = self.client.set_if_unchanged(
                DRIVER_LIST_GENERATION_KEY, generation, DRIVER_LIST_KEY, payload, expire=self.ttl
            )
        except CacheError as e:
            logger.warning(f"Driver list cache write failed: {str(e)}")
            return False
        if not stored:
            logger.debug("Driver list changed while it was being read; not caching it")
        return stored

    def invalidate(self) -> None:
        try:
            # Bump first so an in-flight refill cannot land after the delete
            self.client.incr(DRIVER_LIST_GENERATION_KEY)
            self.client.delete(DRIVER_LIST_KEY)
        except CacheError as e:
            # The entry still expires after ttl seconds
            logger.error(f"Driver list cache invalidation failed: {str(e)}")
