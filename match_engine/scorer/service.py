#!/usr/bin/env python3
"""
Scoring Service - Weighted multi-factor scoring of one candidate-job pair.

Composite = 100 * sum(w_i * factor_i) / sum(w_i) over the skills,
experience, education and description factors. Confidence starts at 1.0
and is multiplied by a penalty fraction for each weighted factor that
could not be computed.

Stateless, so one instance is shared across worker threads.
"""

from typing import Literal, Optional, Sequence
import logging

from match_engine.config_loader import ScorerConfig
from match_engine.errors import InsufficientDataError
from match_engine.matcher.models import CandidateProfile, JobPosting
from match_engine.scorer import factors
from match_engine.scorer.models import MatchResult, MatchWeighting

logger = logging.getLogger(__name__)


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


class WeightedScorer:
    """
    Combines skill overlap, experience fit, education fit and description
    similarity into a composite score with a confidence estimate.
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    def score(
        self,
        candidate: CandidateProfile,
        job: JobPosting,
        weighting: MatchWeighting,
        candidate_embedding: Optional[Sequence[float]] = None,
        job_embedding: Optional[Sequence[float]] = None,
        subject: Literal["candidate", "job"] = "candidate"
    ) -> MatchResult:
        """Score a candidate against a job.

        Args:
            candidate: Candidate record
            job: Job record
            weighting: Factor weights (validated here; zero sum is rejected)
            candidate_embedding: Profile embedding, or None if unavailable
            job_embedding: Description embedding, or None if unavailable
            subject: Which side the query is about; the other side becomes
                the result's target

        Returns:
            MatchResult with score in [0, 100] and confidence in [0, 1]

        Raises:
            ValidationError: negative weights or zero weight sum
            InsufficientDataError: neither record carries structured fields
            DimensionMismatchError: embeddings differ in length
        """
        weighting.validate()

        if not candidate.has_structured_data and not job.has_structured_data:
            raise InsufficientDataError(
                f"Candidate {candidate.id} and job {job.id} both lack structured fields"
            )

        skill, skill_ok = factors.calculate_skill_match(candidate.skills, job.required_skills)
        experience, experience_ok = factors.calculate_experience_match(
            candidate.effective_experience_level, job.effective_experience_level
        )
        education, education_ok = factors.calculate_education_match(
            candidate.highest_education, job.min_education
        )
        description, description_ok = factors.calculate_description_match(
            candidate_embedding, job_embedding
        )

        weighted_sum = (
            weighting.skills * skill
            + weighting.experience * experience
            + weighting.education * education
            + weighting.description * description
        )
        composite = _clamp(100.0 * weighted_sum / weighting.total, 0.0, 100.0)

        confidence = 1.0
        missing = []
        checks = [
            ('skills', skill_ok, weighting.skills, self.config.missing_skills_penalty),
            ('experience', experience_ok, weighting.experience, self.config.missing_experience_penalty),
            ('education', education_ok, weighting.education, self.config.missing_education_penalty),
            ('description', description_ok, weighting.description, self.config.missing_embedding_penalty),
        ]
        for name, ok, weight, penalty in checks:
            if not ok and weight > 0:
                confidence *= penalty
                missing.append(name)

        if subject == "candidate":
            target_id, activity_at = job.id, job.activity_at
        else:
            target_id, activity_at = candidate.id, candidate.activity_at

        logger.debug(
            f"Pair {candidate.id}/{job.id}: skill={skill:.2f} exp={experience:.2f} "
            f"edu={education:.2f} desc={description:.2f} score={composite:.1f} conf={confidence:.2f}"
        )

        return MatchResult(
            target_id=target_id,
            score=composite,
            skill_match=skill,
            experience_match=experience,
            education_match=education,
            description_match=description,
            confidence=_clamp(confidence, 0.0, 1.0),
            activity_at=activity_at,
            missing_factors=missing,
        )
