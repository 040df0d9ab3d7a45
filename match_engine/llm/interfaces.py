"""
Embedding Provider Interface - Abstract base for text embedding services.

The matching engine only depends on this contract, not on any specific
provider (OpenAI, Ollama, a local model, etc.).
"""
from abc import ABC, abstractmethod
from typing import List


class EmbeddingProvider(ABC):
    """
    Abstract Interface for Text Embedding Providers.
    """

    embedding_model: str = "unknown"
    embedding_dimensions: int = 0

    @abstractmethod
    def get_embedding(self, text: str) -> List[float]:
        """
        Generate a vector embedding of exactly ``embedding_dimensions`` floats.

        Raises:
            ValidationError: text is empty
            ProviderError: the provider failed after its retry budget
        """
        pass
