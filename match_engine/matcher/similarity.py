#!/usr/bin/env python3
"""
Similarity Calculator - Cosine similarity between vectors.
"""
from typing import Sequence

import numpy as np

from match_engine.errors import DimensionMismatchError


class SimilarityCalculator:
    """Calculate cosine similarity between vectors."""

    @staticmethod
    def calculate(vec1: Sequence[float], vec2: Sequence[float]) -> float:
        """
        Calculate raw cosine similarity between two vectors.

        Args:
            vec1: First vector
            vec2: Second vector

        Returns:
            Cosine similarity in [-1.0, 1.0], or 0.0 if either vector is all-zero

        Raises:
            DimensionMismatchError: if the vectors differ in length
        """
        a = np.asarray(vec1, dtype=np.float64)
        b = np.asarray(vec2, dtype=np.float64)

        if a.shape != b.shape:
            raise DimensionMismatchError(
                f"Cannot compare vectors of length {a.size} and {b.size}"
            )

        norm1 = float(np.linalg.norm(a))
        norm2 = float(np.linalg.norm(b))
        if norm1 == 0.0 or norm2 == 0.0:
            return 0.0

        raw_cosine = float(np.dot(a, b)) / (norm1 * norm2)
        return max(-1.0, min(1.0, raw_cosine))

    @staticmethod
    def rescale(similarity: float) -> float:
        """Map cosine similarity from [-1, 1] onto [0, 1]."""
        return max(0.0, min(1.0, (similarity + 1.0) / 2.0))


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    return SimilarityCalculator.calculate(vec1, vec2)
