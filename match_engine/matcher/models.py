#!/usr/bin/env python3
"""
Matcher Models - Candidate and job records supplied by the data store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Iterable, FrozenSet, List, Optional
import re


def normalize_skill(skill: str) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    return re.sub(r"\s+", " ", skill.strip().lower())


def normalize_skills(skills: Optional[Iterable[str]]) -> FrozenSet[str]:
    """Build a deduplicated, normalized skill set, dropping blanks."""
    if not skills:
        return frozenset()
    return frozenset(s for s in (normalize_skill(x) for x in skills if x) if s)


class ExperienceLevel(IntEnum):
    ENTRY = 0
    JUNIOR = 1
    MID = 2
    SENIOR = 3
    LEAD = 4

    @classmethod
    def parse(cls, value) -> Optional["ExperienceLevel"]:
        if value is None or isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliases = {
            'entry': cls.ENTRY, 'entry-level': cls.ENTRY, 'intern': cls.ENTRY,
            'junior': cls.JUNIOR, 'jr': cls.JUNIOR,
            'mid': cls.MID, 'mid-level': cls.MID, 'intermediate': cls.MID,
            'senior': cls.SENIOR, 'sr': cls.SENIOR,
            'lead': cls.LEAD, 'principal': cls.LEAD, 'staff': cls.LEAD,
        }
        if key not in aliases:
            raise ValueError(f"Unknown experience level: {value!r}")
        return aliases[key]

    @classmethod
    def from_years(cls, years: float) -> "ExperienceLevel":
        if years < 1:
            return cls.ENTRY
        if years < 3:
            return cls.JUNIOR
        if years < 6:
            return cls.MID
        if years < 10:
            return cls.SENIOR
        return cls.LEAD


class EducationLevel(IntEnum):
    NONE = 0
    HIGH_SCHOOL = 1
    ASSOCIATE = 2
    BACHELOR = 3
    MASTER = 4
    DOCTORATE = 5

    @classmethod
    def parse(cls, value) -> Optional["EducationLevel"]:
        """Map a free-form degree string ("BSc Computer Science", "PhD") to a level."""
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        patterns = [
            (cls.DOCTORATE, r"\b(phd|ph\.d|doctor|doctorate|dphil)\b"),
            (cls.MASTER, r"\b(master|masters|msc|m\.sc|mba|meng)\b"),
            (cls.BACHELOR, r"\b(bachelor|bachelors|bsc|b\.sc|beng|btech)\b"),
            (cls.ASSOCIATE, r"\b(associate|associates)\b"),
            (cls.HIGH_SCHOOL, r"\b(high school|high_school|ged|diploma)\b"),
            (cls.NONE, r"\b(none)\b"),
        ]
        for level, pattern in patterns:
            if re.search(pattern, text):
                return level
        # Two-letter abbreviations only count as a leading degree name, e.g. "MS Computer Science"
        if not re.search(r"\b(certificate|certification|certified|course|office)\b", text):
            for level, pattern in ((cls.MASTER, r"^(ms|ma|m\.s|m\.a)\b"), (cls.BACHELOR, r"^(bs|ba|b\.s|b\.a)\b")):
                if re.search(pattern, text):
                    return level
        raise ValueError(f"Unknown education level: {value!r}")


@dataclass
class CandidateProfile:
    """Structured candidate record, resume parsing already performed upstream."""
    id: str
    skills: FrozenSet[str] = frozenset()
    experience_level: Optional[ExperienceLevel] = None
    years_experience: Optional[float] = None
    education: List[str] = field(default_factory=list)
    description: str = ""
    last_active_at: Optional[datetime] = None

    def __post_init__(self):
        self.skills = normalize_skills(self.skills)
        self.experience_level = ExperienceLevel.parse(self.experience_level)

    @property
    def effective_experience_level(self) -> Optional[ExperienceLevel]:
        if self.experience_level is not None:
            return self.experience_level
        if self.years_experience is not None:
            return ExperienceLevel.from_years(self.years_experience)
        return None

    @property
    def highest_education(self) -> Optional[EducationLevel]:
        levels = []
        for entry in self.education:
            try:
                level = EducationLevel.parse(entry)
            except ValueError:
                # Certificates and other unranked entries don't count toward degree level
                continue
            if level is not None:
                levels.append(level)
        return max(levels) if levels else None

    @property
    def has_structured_data(self) -> bool:
        return bool(self.skills) or self.effective_experience_level is not None or bool(self.education)

    @property
    def activity_at(self) -> Optional[datetime]:
        return self.last_active_at


@dataclass
class JobPosting:
    """Structured job record."""
    id: str
    required_skills: FrozenSet[str] = frozenset()
    experience_level: Optional[ExperienceLevel] = None
    min_years_experience: Optional[float] = None
    min_education: Optional[EducationLevel] = None
    description: str = ""
    posted_at: Optional[datetime] = None

    def __post_init__(self):
        self.required_skills = normalize_skills(self.required_skills)
        self.experience_level = ExperienceLevel.parse(self.experience_level)
        self.min_education = EducationLevel.parse(self.min_education)

    @property
    def skills(self) -> FrozenSet[str]:
        return self.required_skills

    @property
    def effective_experience_level(self) -> Optional[ExperienceLevel]:
        if self.experience_level is not None:
            return self.experience_level
        if self.min_years_experience is not None:
            return ExperienceLevel.from_years(self.min_years_experience)
        return None

    @property
    def has_structured_data(self) -> bool:
        return (
            bool(self.required_skills)
            or self.effective_experience_level is not None
            or self.min_education is not None
        )

    @property
    def activity_at(self) -> Optional[datetime]:
        return self.posted_at
