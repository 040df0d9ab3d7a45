from dataclasses import dataclass

from match_engine.cache.backends import CacheBackend, InMemoryCacheBackend, RedisCacheBackend
from match_engine.cache.result_cache import ResultCache
from match_engine.config_loader import AppConfig, CacheConfig
from match_engine.data_store import DataStore
from match_engine.llm.interfaces import EmbeddingProvider
from match_engine.llm.openai_service import OpenAIEmbeddingService
from match_engine.llm.retry import RetryPolicy
from match_engine.matching_service import MatchingService
from match_engine.scorer.service import WeightedScorer


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The data store is supplied by the caller; everything else is built
    from configuration.
    """
    config: AppConfig
    embedding_provider: EmbeddingProvider
    result_cache: ResultCache
    matching_service: MatchingService

    @classmethod
    def build(cls, config: AppConfig, data_store: DataStore) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            data_store: Source of candidate and job records

        Returns:
            Fully wired AppContext instance
        """
        embedding_provider = OpenAIEmbeddingService.from_config(
            config.llm,
            retry_policy=RetryPolicy.from_config(config.retry),
        )

        result_cache = ResultCache(
            backend=cls._build_cache_backend(config.cache),
            default_ttl_seconds=config.cache.result_ttl_seconds,
        )

        matching_service = MatchingService(
            data_store=data_store,
            embedding_provider=embedding_provider,
            result_cache=result_cache,
            scorer=WeightedScorer(config.matching.scorer),
            config=config.matching,
            embedding_ttl_seconds=config.cache.embedding_ttl_seconds,
        )

        return cls(
            config=config,
            embedding_provider=embedding_provider,
            result_cache=result_cache,
            matching_service=matching_service,
        )

    @staticmethod
    def _build_cache_backend(cache_config: CacheConfig) -> CacheBackend:
        """Build the configured cache backend."""
        if cache_config.backend == "redis":
            return RedisCacheBackend(
                redis_url=cache_config.redis_url,
                password=cache_config.redis_password,
            )
        return InMemoryCacheBackend(capacity=cache_config.capacity)
