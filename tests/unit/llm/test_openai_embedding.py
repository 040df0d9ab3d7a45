#!/usr/bin/env python3
"""
Test suite for OpenAIEmbeddingService.
The OpenAI client is mocked; no network calls are made.
"""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai

from match_engine.config_loader import LlmConfig
from match_engine.errors import ErrorKind, ProviderError, ValidationError
from match_engine.llm import OpenAIEmbeddingService, RetryPolicy


def embedding_response(vector):
    return SimpleNamespace(data=[SimpleNamespace(embedding=vector)])


class TestOpenAIEmbeddingService(unittest.TestCase):

    def setUp(self):
        self.client = MagicMock()
        self.policy = RetryPolicy(max_attempts=3, jitter=0, sleep=lambda _: None)
        self.service = OpenAIEmbeddingService(
            embedding_model="text-embedding-3-small",
            embedding_dimensions=3,
            request_timeout_seconds=4,
            retry_policy=self.policy,
            client=self.client,
        )

    def test_01_returns_vector(self):
        self.client.embeddings.create.return_value = embedding_response([0.1, 0.2, 0.3])

        self.assertEqual(self.service.get_embedding("react developer"), [0.1, 0.2, 0.3])

        kwargs = self.client.embeddings.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "text-embedding-3-small")
        self.assertEqual(kwargs["dimensions"], 3)
        self.assertEqual(kwargs["timeout"], 4)

    def test_02_ada_omits_dimensions(self):
        service = OpenAIEmbeddingService(
            embedding_model="text-embedding-ada-002", embedding_dimensions=2, client=self.client,
            retry_policy=self.policy,
        )
        self.client.embeddings.create.return_value = embedding_response([0.5, 0.5])
        service.get_embedding("text")
        self.assertNotIn("dimensions", self.client.embeddings.create.call_args.kwargs)

    def test_03_blank_text_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.get_embedding("   ")
        self.client.embeddings.create.assert_not_called()

    def test_04_transient_failure_retried(self):
        self.client.embeddings.create.side_effect = [
            ConnectionError("reset"),
            embedding_response([1.0, 0.0, 0.0]),
        ]
        self.assertEqual(self.service.get_embedding("text"), [1.0, 0.0, 0.0])
        self.assertEqual(self.client.embeddings.create.call_count, 2)

    def test_05_exhausted_retries_raise_provider_error(self):
        timeout = openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1/embeddings"))
        self.client.embeddings.create.side_effect = timeout

        with self.assertRaises(ProviderError) as ctx:
            self.service.get_embedding("text")

        self.assertEqual(ctx.exception.kind, ErrorKind.PROVIDER)
        self.assertIs(ctx.exception.last_error, timeout)
        self.assertEqual(self.client.embeddings.create.call_count, 3)

    def test_06_wrong_dimension_is_provider_error(self):
        self.client.embeddings.create.return_value = embedding_response([0.1, 0.2])
        with self.assertRaises(ProviderError):
            self.service.get_embedding("text")

    def test_07_from_config(self):
        config = LlmConfig(api_key="test", embedding_model="text-embedding-3-large", embedding_dimensions=3072)
        service = OpenAIEmbeddingService.from_config(config, self.policy)
        self.assertEqual(service.embedding_model, "text-embedding-3-large")
        self.assertEqual(service.embedding_dimensions, 3072)
        self.assertIs(service.retry_policy, self.policy)


if __name__ == '__main__':
    unittest.main()
