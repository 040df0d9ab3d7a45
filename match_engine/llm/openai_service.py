"""
OpenAI Embedding Service - EmbeddingProvider implementation using the OpenAI API.

Each call is retried under a RetryPolicy with a per-attempt timeout. No
text-to-vector caching happens here; that belongs to the ResultCache.
"""
from typing import List, Optional
import logging

import openai
from openai import OpenAI

from match_engine.config_loader import LlmConfig
from match_engine.errors import ProviderError, ValidationError
from match_engine.llm.interfaces import EmbeddingProvider
from match_engine.llm.retry import RetryPolicy

logger = logging.getLogger(__name__)


class OpenAIEmbeddingService(EmbeddingProvider):
    """
    OpenAI Embedding Service.

    Stateless apart from the HTTP client, so a single instance is safely
    shared across worker threads.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        embedding_model: str = "text-embedding-ada-002",
        embedding_dimensions: int = 1536,
        request_timeout_seconds: float = 10.0,
        retry_policy: Optional[RetryPolicy] = None,
        client: Optional[OpenAI] = None
    ):
        if client is None:
            client_kwargs = {}
            if api_key:
                client_kwargs['api_key'] = api_key
            if base_url:
                client_kwargs['base_url'] = base_url
            # Retries are owned by the RetryPolicy, not the SDK
            client_kwargs['max_retries'] = 0
            client = OpenAI(**client_kwargs)

        self.client = client
        self.embedding_model = embedding_model
        self.embedding_dimensions = embedding_dimensions
        self.request_timeout_seconds = request_timeout_seconds
        self.retry_policy = retry_policy or RetryPolicy()

    @classmethod
    def from_config(cls, llm_config: LlmConfig, retry_policy: Optional[RetryPolicy] = None) -> "OpenAIEmbeddingService":
        return cls(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            embedding_model=llm_config.embedding_model,
            embedding_dimensions=llm_config.embedding_dimensions,
            request_timeout_seconds=llm_config.request_timeout_seconds,
            retry_policy=retry_policy,
        )

    def _create_embedding(self, text: str) -> List[float]:
        kwargs = {
            'input': text,
            'model': self.embedding_model,
            'timeout': self.request_timeout_seconds,
        }
        # ada-002 rejects the dimensions parameter; newer models accept it
        if not self.embedding_model.endswith("ada-002"):
            kwargs['dimensions'] = self.embedding_dimensions
        response = self.client.embeddings.create(**kwargs)
        return list(response.data[0].embedding)

    def get_embedding(self, text: str) -> List[float]:
        """Generate embedding vector for text."""
        if not text or not text.strip():
            raise ValidationError("Cannot embed empty text")

        try:
            embedding = self.retry_policy.call(self._create_embedding, text)
        except (openai.OpenAIError, TimeoutError, ConnectionError) as e:
            retryable = self.retry_policy.is_retryable(e)
            logger.error(
                f"Embedding generation failed ({'retries exhausted' if retryable else 'not retryable'}): {e}"
            )
            raise ProviderError(f"Embedding generation failed: {e}", last_error=e) from e

        if len(embedding) != self.embedding_dimensions:
            raise ProviderError(
                f"Provider returned {len(embedding)} dimensions, expected {self.embedding_dimensions}"
            )
        return embedding
