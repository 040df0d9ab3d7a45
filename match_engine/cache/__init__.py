"""Cache Module - Result caching with single-flight semantics."""
from match_engine.cache.backends import (
    CacheBackend,
    InMemoryCacheBackend,
    RedisCacheBackend,
)
from match_engine.cache.result_cache import ResultCache

__all__ = [
    'CacheBackend',
    'InMemoryCacheBackend',
    'RedisCacheBackend',
    'ResultCache'
]
