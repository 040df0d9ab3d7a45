"""
Tests for WeightedScorer composite score and confidence.
"""
from datetime import datetime

import numpy as np
import pytest

from match_engine.config_loader import ScorerConfig
from match_engine.errors import DimensionMismatchError, InsufficientDataError, ValidationError
from match_engine.matcher.models import CandidateProfile, JobPosting
from match_engine.scorer import MatchWeighting, WeightedScorer


SKILLS_ONLY = MatchWeighting(skills=1, experience=0, education=0, description=0)


@pytest.fixture
def scorer():
    return WeightedScorer(ScorerConfig())


@pytest.fixture
def candidate():
    return CandidateProfile(
        id="cand-1",
        skills=["react", "typescript"],
        experience_level="mid",
        education=["BSc Computer Science"],
        last_active_at=datetime(2024, 1, 2),
    )


@pytest.fixture
def job():
    return JobPosting(
        id="job-1",
        required_skills=["react", "typescript", "node"],
        experience_level="senior",
        min_education="bachelor",
        posted_at=datetime(2024, 3, 4),
    )


class TestWeightedScorer:

    def test_skills_only_partial_overlap(self, scorer, candidate, job):
        result = scorer.score(candidate, job, SKILLS_ONLY)

        assert result.skill_match == pytest.approx(2 / 3)
        assert result.score == pytest.approx(66.67, abs=0.01)
        assert result.target_id == "job-1"
        assert result.confidence == 1.0

    def test_weighted_composite(self, scorer, candidate, job):
        weighting = MatchWeighting(skills=2, experience=1, education=1, description=0)
        result = scorer.score(candidate, job, weighting)

        # skills 2/3, experience one level off 0.5, education met 1.0
        expected = 100 * (2 * (2 / 3) + 1 * 0.5 + 1 * 1.0) / 4
        assert result.score == pytest.approx(expected)
        assert result.experience_match == 0.5
        assert result.education_match == 1.0

    def test_weights_are_normalized(self, scorer, candidate, job):
        small = scorer.score(candidate, job, MatchWeighting(1, 1, 1, 0))
        large = scorer.score(candidate, job, MatchWeighting(10, 10, 10, 0))
        assert small.score == pytest.approx(large.score)

    def test_description_similarity_rescaled(self, scorer, candidate, job):
        weighting = MatchWeighting(skills=0, experience=0, education=0, description=1)
        same = scorer.score(candidate, job, weighting, [1.0, 0.0], [1.0, 0.0])
        opposite = scorer.score(candidate, job, weighting, [1.0, 0.0], [-1.0, 0.0])
        assert same.score == pytest.approx(100.0)
        assert opposite.score == pytest.approx(0.0)

    def test_missing_embedding_penalizes_confidence(self, scorer, candidate, job):
        weighting = MatchWeighting(skills=1, experience=1, education=1, description=1)
        result = scorer.score(candidate, job, weighting, candidate_embedding=None, job_embedding=[1.0, 0.0])

        assert result.description_match == 0.0
        assert result.confidence == pytest.approx(0.7)
        assert result.missing_factors == ["description"]

    def test_unweighted_missing_factor_not_penalized(self, scorer, candidate, job):
        result = scorer.score(candidate, job, SKILLS_ONLY)
        assert result.confidence == 1.0
        assert result.missing_factors == []

    def test_penalties_compound(self, scorer, job):
        sparse = CandidateProfile(id="cand-2", skills=["react"])
        weighting = MatchWeighting(1, 1, 1, 1)
        result = scorer.score(sparse, job, weighting)

        assert result.confidence == pytest.approx(0.7 * 0.85 * 0.9)
        assert set(result.missing_factors) == {"experience", "education", "description"}

    def test_zero_weight_sum_is_validation_error(self, scorer, candidate, job):
        with pytest.raises(ValidationError):
            scorer.score(candidate, job, MatchWeighting(0, 0, 0, 0))

    def test_non_finite_weight_is_validation_error(self, scorer, candidate, job):
        with pytest.raises(ValidationError):
            scorer.score(candidate, job, MatchWeighting(float("nan"), 0, 0, 0))
        with pytest.raises(ValidationError):
            scorer.score(candidate, job, MatchWeighting(float("inf"), 1, 0, 0))

    def test_insufficient_data_when_both_sides_empty(self, scorer):
        candidate = CandidateProfile(id="c", description="only prose")
        job = JobPosting(id="j", description="only prose")
        with pytest.raises(InsufficientDataError):
            scorer.score(candidate, job, SKILLS_ONLY, [1.0], [1.0])

    def test_one_side_structured_is_scored(self, scorer, job):
        empty_candidate = CandidateProfile(id="c")
        result = scorer.score(empty_candidate, job, SKILLS_ONLY)
        assert result.score == 0.0
        assert result.confidence < 1.0

    def test_dimension_mismatch_surfaces(self, scorer, candidate, job):
        with pytest.raises(DimensionMismatchError):
            scorer.score(candidate, job, MatchWeighting(1, 1, 1, 1), [1.0, 0.0], [1.0, 0.0, 0.0])

    def test_job_subject_targets_candidate(self, scorer, candidate, job):
        result = scorer.score(candidate, job, SKILLS_ONLY, subject="job")
        assert result.target_id == "cand-1"
        assert result.activity_at == datetime(2024, 1, 2)

    def test_deterministic(self, scorer, candidate, job):
        weighting = MatchWeighting(1, 1, 1, 1)
        a = scorer.score(candidate, job, weighting, [0.3, 0.4, 0.5], [0.5, 0.1, 0.2])
        b = scorer.score(candidate, job, weighting, [0.3, 0.4, 0.5], [0.5, 0.1, 0.2])
        assert a == b

    def test_bounds_over_random_inputs(self, scorer):
        rng = np.random.default_rng(3)
        skills = ["a", "b", "c", "d", "e"]
        levels = ["entry", "junior", "mid", "senior", "lead"]
        degrees = ["high school", "associate", "bachelor", "master", "phd"]
        for i in range(200):
            candidate = CandidateProfile(
                id=f"c{i}",
                skills=list(rng.choice(skills, size=rng.integers(0, 5), replace=False)),
                experience_level=levels[rng.integers(0, 5)],
                education=[degrees[rng.integers(0, 5)]],
            )
            job = JobPosting(
                id=f"j{i}",
                required_skills=list(rng.choice(skills, size=rng.integers(0, 5), replace=False)),
                experience_level=levels[rng.integers(0, 5)],
                min_education=degrees[rng.integers(0, 5)],
            )
            weighting = MatchWeighting(*(rng.random(4) + 0.01))
            embeddings = rng.normal(size=(2, 6)).tolist()
            result = scorer.score(candidate, job, weighting, embeddings[0], embeddings[1])

            assert 0.0 <= result.score <= 100.0
            assert 0.0 <= result.confidence <= 1.0
