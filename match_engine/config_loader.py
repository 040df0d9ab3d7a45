import yaml
import os
from typing import Optional, Literal
from pydantic import BaseModel, Field


class LlmConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    embedding_model: str = "text-embedding-ada-002"
    embedding_dimensions: int = 1536
    request_timeout_seconds: float = 10.0  # Per attempt, not per call


class RetryConfig(BaseModel):
    """Backoff curve for embedding provider calls."""
    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=1.0, ge=0.0)
    multiplier: float = Field(default=2.0, ge=1.0)
    max_delay_seconds: float = Field(default=30.0, ge=0.0)
    jitter_seconds: float = Field(default=0.5, ge=0.0)


class CacheConfig(BaseModel):
    backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    redis_password: Optional[str] = None
    capacity: int = Field(default=10_000, gt=0)  # LRU bound for the in-memory backend
    result_ttl_seconds: int = Field(default=3600, gt=0)
    embedding_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)


class WeightingConfig(BaseModel):
    """
    Relative weight of each match factor.

    Weights need not sum to 1; the scorer normalizes by their sum.
    """
    skills: float = Field(default=0.4, ge=0.0)
    experience: float = Field(default=0.3, ge=0.0)
    education: float = Field(default=0.2, ge=0.0)
    description: float = Field(default=0.1, ge=0.0)


class ScorerConfig(BaseModel):
    """
    Configuration for the WeightedScorer.

    Penalties are multiplicative confidence fractions applied when a
    weighted factor could not be computed from the available data.
    """
    missing_embedding_penalty: float = Field(default=0.7, ge=0.0, le=1.0)
    missing_experience_penalty: float = Field(default=0.85, ge=0.0, le=1.0)
    missing_education_penalty: float = Field(default=0.9, ge=0.0, le=1.0)
    missing_skills_penalty: float = Field(default=0.85, ge=0.0, le=1.0)


class MatchingConfig(BaseModel):
    """
    Top-level matching configuration.

    Query defaults (threshold, max results, weighting) are applied when a
    MatchQuery leaves them unset.
    """
    similarity_threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    max_results: int = Field(default=50, gt=0)
    weighting: WeightingConfig = Field(default_factory=WeightingConfig)
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)

    # Worker pool size also bounds concurrent calls to the embedding provider
    max_workers: int = Field(default=8, gt=0)
    deadline_seconds: Optional[float] = 30.0
    partial_results: bool = False  # Return best-effort batches on deadline instead of failing


class AppConfig(BaseModel):
    llm: LlmConfig = Field(default_factory=LlmConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    # Allow env var override for the embedding credentials and endpoint
    env_api_key = os.environ.get("OPENAI_API_KEY")
    if env_api_key:
        data.setdefault('llm', {})
        data['llm']['api_key'] = env_api_key

    env_base_url = os.environ.get("EMBEDDING_BASE_URL")
    if env_base_url:
        data.setdefault('llm', {})
        data['llm']['base_url'] = env_base_url

    # Allow env var override for Redis URL
    env_redis_url = os.environ.get("REDIS_URL")
    if env_redis_url:
        data.setdefault('cache', {})
        data['cache']['redis_url'] = env_redis_url

    return AppConfig(**data)
