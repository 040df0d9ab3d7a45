"""
Result Cache - TTL cache with single-flight computation.

Concurrent callers asking for the same missing key share one computation:
the first caller runs compute_fn, the rest wait for its outcome. Failed
computations are never stored, and the flight is released so the next
caller can retry.

Backend failures (CacheError) degrade to computing directly; a request is
never failed only because the cache is unreachable.
"""
import logging
import threading
from typing import Any, Callable, Dict, Optional

from match_engine.cache.backends import CacheBackend, InMemoryCacheBackend
from match_engine.errors import CacheError, MatchTimeoutError

logger = logging.getLogger(__name__)


class _Flight:
    """One in-progress computation that followers wait on."""
    __slots__ = ("event", "value", "error")

    def __init__(self):
        self.event = threading.Event()
        self.value: Any = None
        self.error: Optional[BaseException] = None


class ResultCache:
    """
    Cache owned by the orchestrator (constructor-injected, never global).

    Writers to the same key are serialized through a flight; different keys
    proceed independently.
    """

    def __init__(
        self,
        backend: Optional[CacheBackend] = None,
        default_ttl_seconds: int = 3600,
        name: str = "results"
    ):
        self.backend = backend if backend is not None else InMemoryCacheBackend()
        self.default_ttl_seconds = default_ttl_seconds
        self.name = name
        self._flights: Dict[str, _Flight] = {}
        self._lock = threading.Lock()
        self._counters = {"hits": 0, "misses": 0, "computations": 0, "shared": 0, "bypassed": 0, "timeouts": 0}

    def _count(self, counter: str) -> None:
        with self._lock:
            self._counters[counter] += 1

    def _safe_get(self, key: str) -> Optional[Any]:
        try:
            return self.backend.get(key)
        except CacheError as e:
            self._count("bypassed")
            logger.warning(f"Cache '{self.name}' read failed, computing directly: {e}")
            return None

    def _safe_set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            self.backend.set(key, value, ttl_seconds)
        except CacheError as e:
            self._count("bypassed")
            logger.warning(f"Cache '{self.name}' write failed, result not cached: {e}")

    def get(self, key: str) -> Optional[Any]:
        return self._safe_get(key)

    def get_or_compute(
        self,
        key: str,
        ttl_seconds: Optional[int],
        compute_fn: Callable[[], Any],
        should_cache: Optional[Callable[[Any], bool]] = None,
        wait_timeout: Optional[float] = None
    ) -> Any:
        """
        Return the cached value for key, computing it at most once per flight.

        Args:
            key: Canonical cache key
            ttl_seconds: Entry lifetime, or None for the cache default
            compute_fn: Zero-argument callable producing a JSON-compatible value
            should_cache: Optional predicate; values it rejects are returned
                but not stored
            wait_timeout: Longest a follower waits on another caller's flight;
                None waits until the flight completes

        Raises:
            Whatever compute_fn raised, to the leader and every waiting follower
            MatchTimeoutError: a follower's wait_timeout elapsed first
        """
        value = self._safe_get(key)
        if value is not None:
            self._count("hits")
            return value

        with self._lock:
            flight = self._flights.get(key)
            leader = flight is None
            if leader:
                flight = _Flight()
                self._flights[key] = flight
                self._counters["misses"] += 1
            else:
                self._counters["shared"] += 1

        if not leader:
            if not flight.event.wait(wait_timeout):
                self._count("timeouts")
                raise MatchTimeoutError(
                    f"Gave up after {wait_timeout:.2f}s waiting on in-flight computation of {key[:48]}"
                )
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            # A flight that completed between our miss and taking the lock has already stored it
            value = self._safe_get(key)
            if value is None:
                self._count("computations")
                value = compute_fn()
                if should_cache is None or should_cache(value):
                    ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl_seconds
                    self._safe_set(key, value, ttl)
            flight.value = value
            return value
        except BaseException as e:
            flight.error = e
            raise
        finally:
            with self._lock:
                self._flights.pop(key, None)
            flight.event.set()

    def invalidate(self, key: str) -> None:
        try:
            self.backend.delete(key)
        except CacheError as e:
            logger.warning(f"Cache '{self.name}' delete failed: {e}")

    def clear(self) -> None:
        try:
            self.backend.clear()
        except CacheError as e:
            logger.warning(f"Cache '{self.name}' clear failed: {e}")

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            stats = dict(self._counters)
            stats["in_flight"] = len(self._flights)
        stats["name"] = self.name
        stats["default_ttl_seconds"] = self.default_ttl_seconds
        stats["backend"] = self.backend.stats()
        return stats
