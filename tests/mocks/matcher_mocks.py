#!/usr/bin/env python3
"""
Test Mock Implementations - Fake embedding providers for testing.

These fakes provide deterministic behavior and call-count instrumentation
for unit tests without calling external APIs.
"""
from typing import Dict, Iterable, List, Optional
import hashlib
import threading
import time

import numpy as np

from match_engine.errors import ProviderError, ValidationError
from match_engine.llm.interfaces import EmbeddingProvider


class FakeEmbeddingProvider(EmbeddingProvider):
    """
    Deterministic embedding provider.

    Vectors are seeded from a SHA256 of the text so identical text always
    yields the identical vector across runs and processes.
    """

    embedding_model = "fake-embedding"

    def __init__(
        self,
        embedding_dimensions: int = 16,
        delay_seconds: float = 0.0,
        fail_texts: Optional[Iterable[str]] = None,
        slow_texts: Optional[Dict[str, float]] = None
    ):
        self.embedding_dimensions = embedding_dimensions
        self.delay_seconds = delay_seconds
        self.fail_texts = set(fail_texts or [])
        self.slow_texts = dict(slow_texts or {})
        self.calls: List[str] = []
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)

    def get_embedding(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise ValidationError("Cannot embed empty text")
        with self._lock:
            self.calls.append(text)
        delay = self.slow_texts.get(text, self.delay_seconds)
        if delay:
            time.sleep(delay)
        if text in self.fail_texts:
            raise ProviderError(f"Provider unavailable for {text[:20]!r}", last_error=ConnectionError("refused"))

        seed = int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)
        rng = np.random.default_rng(seed)
        vec = rng.normal(size=self.embedding_dimensions)
        vec = vec / np.linalg.norm(vec)
        return vec.tolist()


class FixedEmbeddingProvider(EmbeddingProvider):
    """Returns a caller-chosen vector per text; unknown text gets a constant vector."""

    embedding_model = "fixed-embedding"

    def __init__(self, vectors: dict, embedding_dimensions: int = 3):
        self.vectors = vectors
        self.embedding_dimensions = embedding_dimensions

    def get_embedding(self, text: str) -> List[float]:
        return list(self.vectors.get(text, [1.0] + [0.0] * (self.embedding_dimensions - 1)))
