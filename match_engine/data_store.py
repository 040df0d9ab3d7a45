#!/usr/bin/env python3
"""
Data Store - Read contract for candidate and job records.

Persistence is owned elsewhere; the engine only needs these four reads.
InMemoryDataStore backs tests and the command-line runner.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional
import json
import logging
import os

import yaml

from match_engine.errors import RecordNotFoundError, ValidationError
from match_engine.matcher.models import CandidateProfile, JobPosting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolFilter:
    """Narrows a pool listing; stores may apply it or return a superset."""
    required_skills: FrozenSet[str] = field(default_factory=frozenset)
    exclude_ids: FrozenSet[str] = field(default_factory=frozenset)


class DataStore(ABC):
    """Abstract read interface over candidate and job records."""

    @abstractmethod
    def get_candidate(self, candidate_id: str) -> CandidateProfile:
        """Raises RecordNotFoundError if absent."""
        pass

    @abstractmethod
    def get_job(self, job_id: str) -> JobPosting:
        """Raises RecordNotFoundError if absent."""
        pass

    @abstractmethod
    def list_candidate_pool(self, pool_filter: PoolFilter) -> List[CandidateProfile]:
        pass

    @abstractmethod
    def list_job_pool(self, pool_filter: PoolFilter) -> List[JobPosting]:
        pass


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _candidate_from_dict(data: Dict[str, Any]) -> CandidateProfile:
    return CandidateProfile(
        id=str(data['id']),
        skills=data.get('skills') or [],
        experience_level=data.get('experience_level'),
        years_experience=data.get('years_experience'),
        education=list(data.get('education') or []),
        description=data.get('description') or "",
        last_active_at=_parse_datetime(data.get('last_active_at')),
    )


def _job_from_dict(data: Dict[str, Any]) -> JobPosting:
    return JobPosting(
        id=str(data['id']),
        required_skills=data.get('required_skills') or data.get('skills') or [],
        experience_level=data.get('experience_level'),
        min_years_experience=data.get('min_years_experience'),
        min_education=data.get('min_education'),
        description=data.get('description') or "",
        posted_at=_parse_datetime(data.get('posted_at')),
    )


class InMemoryDataStore(DataStore):
    """Dict-backed store. Pool order is insertion order, which is stable."""

    def __init__(
        self,
        candidates: Optional[Iterable[CandidateProfile]] = None,
        jobs: Optional[Iterable[JobPosting]] = None
    ):
        self._candidates: Dict[str, CandidateProfile] = {c.id: c for c in (candidates or [])}
        self._jobs: Dict[str, JobPosting] = {j.id: j for j in (jobs or [])}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryDataStore":
        """
        Build a store from plain records.

        Raises:
            ValidationError: a record is missing its id or carries an
                unparseable level, degree or timestamp
        """
        try:
            candidates = [_candidate_from_dict(c) for c in data.get('candidates', [])]
            jobs = [_job_from_dict(j) for j in data.get('jobs', [])]
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid record in data set: {e}") from e
        return cls(candidates=candidates, jobs=jobs)

    @classmethod
    def from_file(cls, path: str) -> "InMemoryDataStore":
        """Load a YAML or JSON fixture with top-level 'candidates' and 'jobs' lists."""
        with open(path, "r") as f:
            if os.path.splitext(path)[1].lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        store = cls.from_dict(data or {})
        logger.info(f"Loaded {len(store._candidates)} candidates and {len(store._jobs)} jobs from {path}")
        return store

    def add_candidate(self, candidate: CandidateProfile) -> None:
        self._candidates[candidate.id] = candidate

    def add_job(self, job: JobPosting) -> None:
        self._jobs[job.id] = job

    def get_candidate(self, candidate_id: str) -> CandidateProfile:
        try:
            return self._candidates[candidate_id]
        except KeyError:
            raise RecordNotFoundError(f"Candidate {candidate_id} not found") from None

    def get_job(self, job_id: str) -> JobPosting:
        try:
            return self._jobs[job_id]
        except KeyError:
            raise RecordNotFoundError(f"Job {job_id} not found") from None

    def list_candidate_pool(self, pool_filter: PoolFilter) -> List[CandidateProfile]:
        return [
            c for c in self._candidates.values()
            if c.id not in pool_filter.exclude_ids and pool_filter.required_skills <= c.skills
        ]

    def list_job_pool(self, pool_filter: PoolFilter) -> List[JobPosting]:
        return [
            j for j in self._jobs.values()
            if j.id not in pool_filter.exclude_ids and pool_filter.required_skills <= j.required_skills
        ]
