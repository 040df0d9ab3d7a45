#!/usr/bin/env python3
"""
Match Query - Closed set of query options, resolved once against config.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union
import math

from match_engine.config_loader import MatchingConfig
from match_engine.errors import ValidationError
from match_engine.matcher.models import normalize_skills
from match_engine.scorer.models import MatchWeighting
from match_engine.utils import Fingerprinter


@dataclass
class MatchQuery:
    """
    Caller-facing query. Unset options fall back to MatchingConfig defaults.

    Attributes:
        subject_id: Candidate id (for job search) or job id (for candidate search)
        threshold: Minimum composite score on a 0-1 scale
        max_results: Maximum matches to return
        required_skills: Skills the target must hold; a hard filter
        weighting: Factor weights, as MatchWeighting or a dict
    """
    subject_id: str
    threshold: Optional[float] = None
    max_results: Optional[int] = None
    required_skills: Optional[Iterable[str]] = None
    weighting: Optional[Union[MatchWeighting, Dict[str, Any]]] = None

    def resolve(self, config: MatchingConfig) -> "ResolvedQuery":
        """Validate and apply defaults.

        Raises:
            ValidationError: bad subject id, threshold, max_results or weighting
        """
        if not self.subject_id or not str(self.subject_id).strip():
            raise ValidationError("subject_id is required")

        threshold = self.threshold
        if threshold is None:
            threshold = config.similarity_threshold
        elif isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or math.isnan(threshold):
            raise ValidationError(f"threshold must be a number, got {threshold!r}")
        elif not 0.0 <= threshold <= 1.0:
            raise ValidationError(f"threshold must be within [0, 1], got {threshold}")

        max_results = self.max_results
        if max_results is None:
            max_results = config.max_results
        elif isinstance(max_results, bool) or not isinstance(max_results, int):
            raise ValidationError(f"max_results must be an integer, got {max_results!r}")
        elif max_results <= 0:
            raise ValidationError(f"max_results must be > 0, got {max_results}")

        if self.weighting is None:
            weighting = MatchWeighting.from_config(config.weighting)
        elif isinstance(self.weighting, MatchWeighting):
            weighting = self.weighting
        elif isinstance(self.weighting, dict):
            weighting = MatchWeighting.from_dict(self.weighting)
        else:
            raise ValidationError(f"weighting must be a mapping, got {type(self.weighting).__name__}")
        weighting.validate()

        return ResolvedQuery(
            subject_id=str(self.subject_id),
            threshold=float(threshold),
            max_results=max_results,
            required_skills=normalize_skills(self.required_skills),
            weighting=weighting,
        )


@dataclass(frozen=True)
class ResolvedQuery:
    """Fully-defaulted, validated query."""
    subject_id: str
    threshold: float
    max_results: int
    required_skills: FrozenSet[str] = field(default_factory=frozenset)
    weighting: MatchWeighting = field(default_factory=MatchWeighting)

    def filter_fields(self) -> Dict[str, Any]:
        return {
            'threshold': self.threshold,
            'max_results': self.max_results,
            'required_skills': self.required_skills,
            'weighting': self.weighting.as_dict(),
        }

    def fingerprint(self) -> str:
        """Canonical hash of the filter options (subject id excluded)."""
        return Fingerprinter.calculate(self.filter_fields())
