"""Cache Backends - Key/value stores with per-entry TTL."""
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

from redis import Redis
from redis.exceptions import RedisError

from match_engine.errors import CacheError

logger = logging.getLogger(__name__)


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


class CacheBackend(ABC):
    """
    Minimal Get/Set-with-TTL contract the ResultCache builds on.

    Values are JSON-compatible (dicts, lists, floats). ``get`` returns None
    for absent or expired keys. Implementations raise CacheError when the
    underlying store cannot be reached.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def stats(self) -> Dict[str, Any]:
        return {}


class InMemoryCacheBackend(CacheBackend):
    """
    Thread-safe in-process store with lazy TTL expiry and LRU eviction.

    Expired entries are dropped when read; once ``capacity`` is exceeded the
    least recently used entry is evicted.
    """

    def __init__(self, capacity: int = 10_000, clock: Callable[[], float] = time.monotonic):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self._evictions = 0
        self._expirations = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                self._expirations += 1
                return None
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)
            self._entries.move_to_end(key)
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted {evicted[:48]} (capacity {self.capacity})")

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "backend": "memory",
                "entries": len(self._entries),
                "capacity": self.capacity,
                "evictions": self._evictions,
                "expirations": self._expirations,
            }


class RedisCacheBackend(CacheBackend):
    """
    Shared store on Redis. Entries are JSON envelopes written with SETEX, so
    Redis enforces the TTL.

    ``cache.capacity`` does not apply here; bounding memory with LRU eviction
    is left to the server's ``maxmemory`` and ``maxmemory-policy`` (for
    example ``allkeys-lru``).
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        key_prefix: str = "match_engine:",
        client: Optional[Redis] = None
    ):
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self._available = False

        if client is not None:
            self._redis = client
            self._available = True
            return

        try:
            self._redis = Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._redis.ping()
            self._available = True
            logger.info(f"Result cache connected to Redis at {_sanitize_url(redis_url)}")
        except RedisError as e:
            logger.warning(f"Result cache Redis unavailable: {e}")
            self._redis = None

    @property
    def is_available(self) -> bool:
        return self._available and self._redis is not None

    def _make_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _client(self) -> Redis:
        if not self.is_available:
            raise CacheError(f"Redis at {_sanitize_url(self.redis_url)} is unavailable")
        return self._redis

    def get(self, key: str) -> Optional[Any]:
        try:
            data = self._client().get(self._make_key(key))
        except RedisError as e:
            raise CacheError(f"Error reading from cache: {e}") from e
        if not data:
            return None
        try:
            return json.loads(data).get("data")
        except (json.JSONDecodeError, AttributeError) as e:
            logger.warning(f"Discarding corrupt cache entry {key[:48]}: {e}")
            return None

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        entry = {
            "data": value,
            "cached_at": datetime.now(timezone.utc).isoformat(),
            "ttl_seconds": ttl_seconds,
        }
        try:
            self._client().setex(self._make_key(key), ttl_seconds, json.dumps(entry))
        except RedisError as e:
            raise CacheError(f"Error writing to cache: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._client().delete(self._make_key(key))
        except RedisError as e:
            raise CacheError(f"Error deleting from cache: {e}") from e

    def clear(self) -> None:
        client = self._client()
        try:
            cursor = 0
            deleted = 0
            while True:
                cursor, keys = client.scan(cursor=cursor, match=f"{self.key_prefix}*", count=100)
                if keys:
                    client.delete(*keys)
                    deleted += len(keys)
                if cursor == 0:
                    break
            logger.info(f"Cleared {deleted} entries from cache")
        except RedisError as e:
            raise CacheError(f"Error clearing cache: {e}") from e

    def stats(self) -> Dict[str, Any]:
        if not self.is_available:
            return {"backend": "redis", "available": False}
        try:
            info = self._redis.info()
        except RedisError as e:
            return {"backend": "redis", "available": False, "error": str(e)}
        return {
            "backend": "redis",
            "available": True,
            "used_memory_human": info.get("used_memory_human", "unknown"),
        }
