"""Matcher Module - Match records, similarity and the matching orchestrator's inputs."""
from match_engine.matcher.models import (
    CandidateProfile, JobPosting, ExperienceLevel, EducationLevel,
    normalize_skill, normalize_skills
)
from match_engine.matcher.similarity import SimilarityCalculator, cosine_similarity

__all__ = [
    'CandidateProfile', 'JobPosting', 'ExperienceLevel', 'EducationLevel',
    'normalize_skill', 'normalize_skills',
    'SimilarityCalculator', 'cosine_similarity'
]
