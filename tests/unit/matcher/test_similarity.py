#!/usr/bin/env python3
"""
Test suite for cosine similarity.
"""

import unittest

import numpy as np

from match_engine.errors import DimensionMismatchError, ErrorKind
from match_engine.matcher.similarity import SimilarityCalculator, cosine_similarity


class TestSimilarityCalculator(unittest.TestCase):
    """Test cosine similarity edge cases and properties."""

    def test_identical_vectors(self):
        self.assertAlmostEqual(SimilarityCalculator.calculate([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]), 1.0)

    def test_opposite_vectors(self):
        self.assertAlmostEqual(SimilarityCalculator.calculate([1.0, 0.0], [-1.0, 0.0]), -1.0)

    def test_orthogonal_vectors(self):
        self.assertAlmostEqual(SimilarityCalculator.calculate([1.0, 0.0], [0.0, 5.0]), 0.0)

    def test_magnitude_independent(self):
        a = SimilarityCalculator.calculate([1.0, 2.0], [2.0, 1.0])
        b = SimilarityCalculator.calculate([10.0, 20.0], [0.2, 0.1])
        self.assertAlmostEqual(a, b)

    def test_zero_vector_is_zero_not_nan(self):
        result = SimilarityCalculator.calculate([0.0, 0.0, 0.0], [1.0, 2.0, 3.0])
        self.assertEqual(result, 0.0)
        self.assertEqual(SimilarityCalculator.calculate([0.0, 0.0], [0.0, 0.0]), 0.0)

    def test_dimension_mismatch_raises(self):
        with self.assertRaises(DimensionMismatchError) as ctx:
            SimilarityCalculator.calculate([1.0, 2.0], [1.0, 2.0, 3.0])
        self.assertEqual(ctx.exception.kind, ErrorKind.DIMENSION_MISMATCH)

    def test_symmetry_on_random_vectors(self):
        rng = np.random.default_rng(7)
        for _ in range(50):
            a = rng.normal(size=32).tolist()
            b = rng.normal(size=32).tolist()
            self.assertEqual(cosine_similarity(a, b), cosine_similarity(b, a))

    def test_bounds_on_random_vectors(self):
        rng = np.random.default_rng(11)
        for _ in range(50):
            a = rng.normal(size=8)
            b = rng.normal(size=8)
            sim = SimilarityCalculator.calculate(a, b)
            self.assertGreaterEqual(sim, -1.0)
            self.assertLessEqual(sim, 1.0)

    def test_rescale(self):
        self.assertEqual(SimilarityCalculator.rescale(-1.0), 0.0)
        self.assertEqual(SimilarityCalculator.rescale(0.0), 0.5)
        self.assertEqual(SimilarityCalculator.rescale(1.0), 1.0)


if __name__ == '__main__':
    unittest.main()
