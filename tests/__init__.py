#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests run without network access; the embedding provider and Redis
client are replaced with fakes or mocks.

    # Run all tests
    python -m pytest tests/ -v

    # Skip the timing-sensitive concurrency tests
    python -m pytest tests/ -v -m "not concurrency"
"""
