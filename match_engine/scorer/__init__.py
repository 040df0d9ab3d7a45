#!/usr/bin/env python3
"""
Scoring Module - Weighted multi-factor scoring.

Public API:
- WeightedScorer: Scores one candidate-job pair
- MatchResult / MatchMetrics / MatchBatch: Result structures
- MatchWeighting: Factor weights

Modules:

- models.py: Data structures (MatchResult, MatchBatch, MatchWeighting)
- factors.py: Skill, experience, education and description factors
- ranking.py: Threshold filtering, tie-break ordering and batch metrics
- service.py: WeightedScorer
"""

from match_engine.scorer.models import MatchBatch, MatchMetrics, MatchResult, MatchWeighting
from match_engine.scorer.service import WeightedScorer

__all__ = ['WeightedScorer', 'MatchResult', 'MatchMetrics', 'MatchBatch', 'MatchWeighting']
