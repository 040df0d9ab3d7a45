#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
import math

from match_engine.config_loader import WeightingConfig
from match_engine.errors import ValidationError


@dataclass(frozen=True)
class MatchWeighting:
    """Relative weight of the four match factors."""
    skills: float = 0.4
    experience: float = 0.3
    education: float = 0.2
    description: float = 0.1

    @classmethod
    def from_config(cls, config: WeightingConfig) -> "MatchWeighting":
        return cls(**config.model_dump())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchWeighting":
        unknown = set(data) - {'skills', 'experience', 'education', 'description'}
        if unknown:
            raise ValidationError(f"Unknown weighting factors: {sorted(unknown)}")
        try:
            return cls(**{k: float(v) for k, v in data.items()})
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid weighting value: {e}") from e

    @property
    def total(self) -> float:
        return self.skills + self.experience + self.education + self.description

    def validate(self) -> "MatchWeighting":
        for name, value in self.as_dict().items():
            if not math.isfinite(value):
                raise ValidationError(f"Weight '{name}' must be a finite number, got {value}")
            if value < 0:
                raise ValidationError(f"Weight '{name}' must be >= 0, got {value}")
        if self.total <= 0:
            raise ValidationError("Weights must not sum to zero")
        return self

    def as_dict(self) -> Dict[str, float]:
        return {
            'skills': self.skills,
            'experience': self.experience,
            'education': self.education,
            'description': self.description,
        }


@dataclass
class MatchResult:
    """Scored candidate-job pair, identified by the non-subject side."""
    target_id: str
    score: float = 0.0  # 0-100
    skill_match: float = 0.0
    experience_match: float = 0.0
    education_match: float = 0.0
    description_match: float = 0.0
    confidence: float = 1.0
    activity_at: Optional[datetime] = None  # tie-break only, not serialized
    missing_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'targetId': self.target_id,
            'score': self.score,
            'skillMatch': self.skill_match,
            'experienceMatch': self.experience_match,
            'educationMatch': self.education_match,
            'descriptionMatch': self.description_match,
            'confidence': self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchResult":
        return cls(
            target_id=data['targetId'],
            score=data['score'],
            skill_match=data['skillMatch'],
            experience_match=data.get('experienceMatch', 0.0),
            education_match=data.get('educationMatch', 0.0),
            description_match=data.get('descriptionMatch', 0.0),
            confidence=data['confidence'],
        )


@dataclass
class MatchMetrics:
    """Averages over the returned (post-filter, post-truncation) matches."""
    average_score: float = 0.0
    skill_match_rate: float = 0.0
    confidence_score: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'averageScore': self.average_score,
            'skillMatchRate': self.skill_match_rate,
            'confidenceScore': self.confidence_score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchMetrics":
        return cls(
            average_score=data.get('averageScore', 0.0),
            skill_match_rate=data.get('skillMatchRate', 0.0),
            confidence_score=data.get('confidenceScore', 0.0),
        )


@dataclass
class MatchBatch:
    """Ranked matches for one subject plus batch metrics."""
    matches: List[MatchResult] = field(default_factory=list)
    metrics: MatchMetrics = field(default_factory=MatchMetrics)
    warnings: List[str] = field(default_factory=list)
    partial: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'matches': [m.to_dict() for m in self.matches],
            'metrics': self.metrics.to_dict(),
        }
        if self.warnings:
            data['warnings'] = list(self.warnings)
        if self.partial:
            data['partial'] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchBatch":
        return cls(
            matches=[MatchResult.from_dict(m) for m in data.get('matches', [])],
            metrics=MatchMetrics.from_dict(data.get('metrics', {})),
            warnings=list(data.get('warnings', [])),
            partial=bool(data.get('partial', False)),
        )
