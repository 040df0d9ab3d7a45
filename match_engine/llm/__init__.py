"""LLM Module - Embedding providers and retry policy."""
from match_engine.llm.interfaces import EmbeddingProvider
from match_engine.llm.openai_service import OpenAIEmbeddingService
from match_engine.llm.retry import RetryPolicy

__all__ = ['EmbeddingProvider', 'OpenAIEmbeddingService', 'RetryPolicy']
