#!/usr/bin/env python3
"""
Factor Calculations - The four per-pair match factors.

Each function returns (value, computed) where value is in [0, 1] and
computed is False when the candidate side lacked the data needed, in which
case the value is 0.0 and the scorer lowers its confidence.
"""

from typing import FrozenSet, Optional, Sequence, Tuple

from match_engine.matcher.models import EducationLevel, ExperienceLevel
from match_engine.matcher.similarity import SimilarityCalculator

# Closeness by absolute level distance; anything further scores 0
EXPERIENCE_CLOSENESS = {0: 1.0, 1: 0.5}


def calculate_skill_match(
    candidate_skills: FrozenSet[str],
    job_skills: FrozenSet[str]
) -> Tuple[float, bool]:
    """
    Fraction of the job's required skills the candidate holds.

    A job that requires no skills imposes no penalty (1.0).
    """
    if not job_skills:
        return 1.0, True
    if not candidate_skills:
        return 0.0, False
    return len(candidate_skills & job_skills) / len(job_skills), True


def calculate_experience_match(
    candidate_level: Optional[ExperienceLevel],
    job_level: Optional[ExperienceLevel]
) -> Tuple[float, bool]:
    """Exact level 1.0, one level off 0.5, two or more 0.0."""
    if job_level is None:
        return 1.0, True
    if candidate_level is None:
        return 0.0, False
    distance = abs(int(candidate_level) - int(job_level))
    return EXPERIENCE_CLOSENESS.get(distance, 0.0), True


def calculate_education_match(
    candidate_level: Optional[EducationLevel],
    job_minimum: Optional[EducationLevel]
) -> Tuple[float, bool]:
    """1.0 if the candidate meets or exceeds the job's minimum degree."""
    if job_minimum is None or job_minimum == EducationLevel.NONE:
        return 1.0, True
    if candidate_level is None:
        return 0.0, False
    return (1.0 if candidate_level >= job_minimum else 0.0), True


def calculate_description_match(
    candidate_embedding: Optional[Sequence[float]],
    job_embedding: Optional[Sequence[float]]
) -> Tuple[float, bool]:
    """Cosine similarity of the two embeddings rescaled to [0, 1]."""
    if candidate_embedding is None or job_embedding is None:
        return 0.0, False
    raw = SimilarityCalculator.calculate(candidate_embedding, job_embedding)
    return SimilarityCalculator.rescale(raw), True
