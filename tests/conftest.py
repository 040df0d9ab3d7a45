"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

from datetime import datetime

import pytest

from match_engine.cache import InMemoryCacheBackend, ResultCache
from match_engine.config_loader import MatchingConfig
from match_engine.data_store import InMemoryDataStore
from match_engine.matcher.models import CandidateProfile, JobPosting
from match_engine.matching_service import MatchingService
from tests.mocks.matcher_mocks import FakeEmbeddingProvider


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "concurrency: marks tests that exercise worker threads and deadlines"
    )


@pytest.fixture
def candidates():
    return [
        CandidateProfile(
            id="cand-frontend",
            skills=["React", "TypeScript", "CSS"],
            experience_level="mid",
            education=["BSc Computer Science"],
            description="Frontend engineer building React and TypeScript apps",
            last_active_at=datetime(2024, 5, 1),
        ),
        CandidateProfile(
            id="cand-fullstack",
            skills=["react", "typescript", "node", "postgres"],
            years_experience=7,
            education=["MSc Software Engineering"],
            description="Full stack engineer with Node services and React frontends",
            last_active_at=datetime(2024, 6, 1),
        ),
        CandidateProfile(
            id="cand-data",
            skills=["python", "sql", "spark"],
            experience_level="senior",
            education=["PhD Statistics"],
            description="Data engineer working on Spark pipelines",
            last_active_at=datetime(2024, 4, 1),
        ),
    ]


@pytest.fixture
def jobs():
    return [
        JobPosting(
            id="job-frontend",
            required_skills=["react", "typescript", "node"],
            experience_level="mid",
            min_education="bachelor",
            description="Build React and TypeScript interfaces backed by Node",
            posted_at=datetime(2024, 6, 10),
        ),
        JobPosting(
            id="job-data",
            required_skills=["python", "spark"],
            experience_level="senior",
            min_education="master",
            description="Own Spark data pipelines in Python",
            posted_at=datetime(2024, 6, 5),
        ),
        JobPosting(
            id="job-anything",
            description="General software role",
            posted_at=datetime(2024, 6, 1),
        ),
    ]


@pytest.fixture
def data_store(candidates, jobs):
    return InMemoryDataStore(candidates=candidates, jobs=jobs)


@pytest.fixture
def fake_provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def result_cache():
    return ResultCache(InMemoryCacheBackend(capacity=1000), default_ttl_seconds=3600)


@pytest.fixture
def matching_config():
    return MatchingConfig(similarity_threshold=0.0, max_results=10, max_workers=4, deadline_seconds=10)


@pytest.fixture
def matching_service(data_store, fake_provider, result_cache, matching_config):
    return MatchingService(
        data_store=data_store,
        embedding_provider=fake_provider,
        result_cache=result_cache,
        config=matching_config,
    )
