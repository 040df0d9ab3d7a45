"""Candidate-job matching engine."""
from match_engine.errors import (
    ErrorKind,
    MatchingError,
    ValidationError,
    ProviderError,
    DimensionMismatchError,
    InsufficientDataError,
    CacheError,
    MatchTimeoutError,
    RecordNotFoundError,
)
from match_engine.matching_service import MatchingService

__all__ = [
    'ErrorKind', 'MatchingError', 'ValidationError', 'ProviderError',
    'DimensionMismatchError', 'InsufficientDataError', 'CacheError',
    'MatchTimeoutError', 'RecordNotFoundError', 'MatchingService'
]
