#!/usr/bin/env python3
"""
Matching Errors - Tagged exception hierarchy for the matching engine.

Every error carries an ErrorKind so callers can branch on the kind of
failure without matching on message text.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    PROVIDER = "provider"
    DIMENSION_MISMATCH = "dimension_mismatch"
    INSUFFICIENT_DATA = "insufficient_data"
    CACHE = "cache"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"


class MatchingError(Exception):
    """Base exception for matching engine errors."""
    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(MatchingError):
    """Raised for malformed queries, weightings or provider input."""
    kind = ErrorKind.VALIDATION


class ProviderError(MatchingError):
    """Raised when the embedding provider fails or exhausts its retries."""
    kind = ErrorKind.PROVIDER

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


class DimensionMismatchError(MatchingError):
    """Raised when vectors of different length are compared."""
    kind = ErrorKind.DIMENSION_MISMATCH


class InsufficientDataError(MatchingError):
    """Raised when a pair has no structured data to score on either side."""
    kind = ErrorKind.INSUFFICIENT_DATA


class CacheError(MatchingError):
    """Raised by cache backends when the underlying store is unreachable."""
    kind = ErrorKind.CACHE


class MatchTimeoutError(MatchingError, TimeoutError):
    """Raised when a batch exceeds its overall deadline."""
    kind = ErrorKind.TIMEOUT


class RecordNotFoundError(MatchingError):
    """Raised when the data store has no record for a subject id."""
    kind = ErrorKind.NOT_FOUND
