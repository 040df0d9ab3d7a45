#!/usr/bin/env python3
"""
Ranking - Filtering, ordering, truncation and batch metrics.

Sorting happens once all results are collected, so the output order is a
function of the input snapshot only, never of worker completion order.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from match_engine.scorer.models import MatchMetrics, MatchResult


def _activity_ts(result: MatchResult) -> float:
    if result.activity_at is None:
        return float("-inf")
    at = result.activity_at
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    return at.timestamp()


def rank_matches(results: Iterable[MatchResult]) -> List[MatchResult]:
    """
    Order by score, then skill match, then most recent activity, all
    descending. Remaining ties keep their input order (sorted() is stable).
    """
    return sorted(
        results,
        key=lambda r: (-r.score, -r.skill_match, -_activity_ts(r)),
    )


def apply_threshold(results: Iterable[MatchResult], threshold: Optional[float]) -> List[MatchResult]:
    """Keep results whose score reaches threshold (0-1) on the 0-100 scale."""
    if threshold is None:
        return list(results)
    cutoff = threshold * 100.0
    return [r for r in results if r.score >= cutoff]


def calculate_metrics(matches: List[MatchResult]) -> MatchMetrics:
    """Arithmetic means over matches; an empty set yields all zeros."""
    if not matches:
        return MatchMetrics()
    n = len(matches)
    return MatchMetrics(
        average_score=sum(m.score for m in matches) / n,
        skill_match_rate=sum(m.skill_match for m in matches) / n,
        confidence_score=sum(m.confidence for m in matches) / n,
    )


def select_top(
    results: Iterable[MatchResult],
    threshold: Optional[float],
    max_results: int
) -> List[MatchResult]:
    """Threshold, rank and truncate in one pass."""
    return rank_matches(apply_threshold(results, threshold))[:max_results]
