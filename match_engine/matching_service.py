#!/usr/bin/env python3
"""
Matching Service - Top-level candidate/job matching orchestrator.

For one subject (a candidate or a job) this:
1. Validates the query and applies configured defaults
2. Loads the subject and its pool from the data store
3. Drops pool members missing any required skill
4. Fetches embeddings through the ResultCache (provider on miss) and scores
   every pair on a bounded worker pool
5. Thresholds, ranks and truncates, then computes batch metrics

Whole batches are cached by subject id + canonical query fingerprint.
Pairs that cannot be scored are skipped and listed in ``warnings``.
"""
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union
import logging
import threading
import time

from match_engine.cache.result_cache import ResultCache
from match_engine.config_loader import MatchingConfig
from match_engine.data_store import DataStore, PoolFilter
from match_engine.errors import (
    InsufficientDataError,
    MatchTimeoutError,
    ProviderError,
    ValidationError,
)
from match_engine.llm.interfaces import EmbeddingProvider
from match_engine.matcher.models import CandidateProfile, JobPosting
from match_engine.matcher.query import MatchQuery, ResolvedQuery
from match_engine.scorer.models import MatchBatch, MatchResult
from match_engine.scorer.ranking import calculate_metrics, select_top
from match_engine.scorer.service import WeightedScorer
from match_engine.utils import Fingerprinter

logger = logging.getLogger(__name__)

Record = Union[CandidateProfile, JobPosting]
Vector = List[float]

DEFAULT_EMBEDDING_TTL_SECONDS = 24 * 60 * 60
_UNSET: Any = object()


class _PairCancelled(Exception):
    """Worker noticed the batch deadline passed before doing its work."""


@dataclass(frozen=True)
class _Direction:
    """Which side is the subject and how to reach each side's data."""
    subject: str  # "candidate" or "job"
    cache_prefix: str
    load_subject: Callable[[str], Record]
    list_pool: Callable[[PoolFilter], Sequence[Record]]
    target_skills: Callable[[Record], FrozenSet[str]]


class MatchingService:
    """
    Orchestrates embedding lookup, pair scoring and ranking.

    The ResultCache is the only shared mutable state; provider and scorer
    are stateless and shared by every worker.
    """

    def __init__(
        self,
        data_store: DataStore,
        embedding_provider: EmbeddingProvider,
        result_cache: Optional[ResultCache] = None,
        scorer: Optional[WeightedScorer] = None,
        config: Optional[MatchingConfig] = None,
        embedding_ttl_seconds: int = DEFAULT_EMBEDDING_TTL_SECONDS
    ):
        self.store = data_store
        self.provider = embedding_provider
        self.config = config or MatchingConfig()
        self.cache = result_cache or ResultCache()
        self.scorer = scorer or WeightedScorer(self.config.scorer)
        self.embedding_ttl_seconds = embedding_ttl_seconds

        self._jobs_direction = _Direction(
            subject="candidate",
            cache_prefix="candidate_matches",
            load_subject=self.store.get_candidate,
            list_pool=self.store.list_job_pool,
            target_skills=lambda job: job.required_skills,
        )
        self._candidates_direction = _Direction(
            subject="job",
            cache_prefix="job_matches",
            load_subject=self.store.get_job,
            list_pool=self.store.list_candidate_pool,
            target_skills=lambda candidate: candidate.skills,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def find_matching_jobs(
        self,
        candidate_id: str,
        filters: Optional[Dict[str, Any]] = None,
        deadline_seconds: Optional[float] = _UNSET,
        partial_results: Optional[bool] = None
    ) -> MatchBatch:
        """Rank the job pool for a candidate.

        Args:
            candidate_id: Subject candidate
            filters: Optional threshold / max_results / required_skills / weighting
            deadline_seconds: Overall deadline; None disables it, unset uses config
            partial_results: Return a ``partial`` batch on deadline instead of raising

        Raises:
            ValidationError: malformed filters
            RecordNotFoundError: unknown candidate
            MatchTimeoutError: deadline exceeded and partial results disabled
        """
        query = self._build_query(candidate_id, filters)
        return self._find(self._jobs_direction, query, deadline_seconds, partial_results)

    def find_matching_candidates(
        self,
        job_id: str,
        filters: Optional[Dict[str, Any]] = None,
        deadline_seconds: Optional[float] = _UNSET,
        partial_results: Optional[bool] = None
    ) -> MatchBatch:
        """Rank the candidate pool for a job. Same contract as find_matching_jobs."""
        query = self._build_query(job_id, filters)
        return self._find(self._candidates_direction, query, deadline_seconds, partial_results)

    def get_embedding(self, text: str) -> Optional[Vector]:
        """Cached embedding for text, or None for blank text."""
        if not text or not text.strip():
            return None
        key = f"embedding:{self.provider.embedding_model}:{Fingerprinter.content_hash(text)}"
        return self.cache.get_or_compute(
            key,
            self.embedding_ttl_seconds,
            lambda: self.provider.get_embedding(text),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _build_query(subject_id: str, filters: Optional[Dict[str, Any]]) -> MatchQuery:
        filters = dict(filters or {})
        filters.pop('subject_id', None)
        try:
            return MatchQuery(subject_id=subject_id, **filters)
        except TypeError as e:
            raise ValidationError(f"Unsupported filter: {e}") from e

    def _find(
        self,
        direction: _Direction,
        query: MatchQuery,
        deadline_seconds: Optional[float],
        partial_results: Optional[bool]
    ) -> MatchBatch:
        started = time.monotonic()
        resolved = query.resolve(self.config)
        if deadline_seconds is _UNSET:
            deadline_seconds = self.config.deadline_seconds
        if partial_results is None:
            partial_results = self.config.partial_results

        cache_key = f"{direction.cache_prefix}:{resolved.subject_id}:{resolved.fingerprint()}"
        # An identical query already in flight is only waited on for what remains of our own deadline
        wait_timeout = None
        if deadline_seconds is not None:
            wait_timeout = max(0.0, deadline_seconds - (time.monotonic() - started))
        try:
            data = self.cache.get_or_compute(
                cache_key,
                None,
                lambda: self._compute_batch(
                    direction, resolved, started, deadline_seconds, partial_results
                ).to_dict(),
                should_cache=lambda d: not d.get('partial', False),
                wait_timeout=wait_timeout,
            )
        except MatchTimeoutError as e:
            if not partial_results:
                raise
            logger.warning(f"Deadline hit waiting on shared batch for {direction.subject} {resolved.subject_id}: {e}")
            return MatchBatch(
                warnings=[f"Deadline of {deadline_seconds}s exceeded before any pairs were scored"],
                partial=True,
            )
        return MatchBatch.from_dict(data)

    def _compute_batch(
        self,
        direction: _Direction,
        query: ResolvedQuery,
        started: float,
        deadline_seconds: Optional[float],
        partial_results: bool
    ) -> MatchBatch:
        subject = direction.load_subject(query.subject_id)
        pool = direction.list_pool(PoolFilter(required_skills=query.required_skills))

        # Hard filter, applied before any scoring or thresholding
        pool = [t for t in pool if query.required_skills <= direction.target_skills(t)]

        if not pool:
            logger.info(f"No pool members for {direction.subject} {subject.id}")
            return MatchBatch()

        use_embeddings = query.weighting.description > 0
        cancel_event = threading.Event()
        executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="match-worker",
        )
        timed_out = False
        pending = 0
        try:
            subject_future: Optional[Future] = None
            if use_embeddings:
                subject_future = executor.submit(self._embed_for_batch, subject.description, cancel_event)

            pair_futures = [
                executor.submit(
                    self._score_pair, direction, subject, subject_future, target, query, cancel_event
                )
                for target in pool
            ]

            timeout = None
            if deadline_seconds is not None:
                timeout = max(0.0, deadline_seconds - (time.monotonic() - started))
            _, not_done = wait(pair_futures, timeout=timeout)

            if not_done:
                timed_out = True
                pending = len(not_done)
                cancel_event.set()
                for future in not_done:
                    future.cancel()
                if not partial_results:
                    raise MatchTimeoutError(
                        f"Matching for {direction.subject} {subject.id} exceeded "
                        f"{deadline_seconds}s deadline ({len(not_done)}/{len(pair_futures)} pairs pending)"
                    )
                logger.warning(
                    f"Deadline hit for {direction.subject} {subject.id}; "
                    f"returning partial results ({len(not_done)} pairs unscored)"
                )

            results: List[MatchResult] = []
            warnings: List[str] = []
            for future in pair_futures:
                if not future.done() or future.cancelled():
                    continue
                result, warning = future.result()
                if result is not None:
                    results.append(result)
                if warning:
                    warnings.append(warning)

            if timed_out:
                warnings.append(
                    f"Deadline of {deadline_seconds}s exceeded; "
                    f"{pending} pairs were not scored"
                )
        finally:
            executor.shutdown(wait=not timed_out, cancel_futures=True)

        matches = select_top(results, query.threshold, query.max_results)
        metrics = calculate_metrics(matches)

        logger.info(
            f"Matched {direction.subject} {subject.id}: scored {len(results)}/{len(pool)}, "
            f"returned {len(matches)}, skipped {len(warnings)} in {time.monotonic() - started:.2f}s"
        )
        return MatchBatch(matches=matches, metrics=metrics, warnings=warnings, partial=timed_out)

    def _embed_for_batch(self, text: str, cancel_event: threading.Event) -> Optional[Vector]:
        if cancel_event.is_set():
            raise _PairCancelled()
        return self.get_embedding(text)

    def _score_pair(
        self,
        direction: _Direction,
        subject: Record,
        subject_future: Optional[Future],
        target: Record,
        query: ResolvedQuery,
        cancel_event: threading.Event
    ) -> Tuple[Optional[MatchResult], Optional[str]]:
        """Score one pair; returns (result, None) or (None, warning)."""
        try:
            subject_embedding = None
            target_embedding = None
            if subject_future is not None:
                try:
                    subject_embedding = subject_future.result()
                except ProviderError as e:
                    raise ProviderError(f"subject embedding unavailable: {e}", last_error=e.last_error) from e
                target_embedding = self._embed_for_batch(target.description, cancel_event)

            if cancel_event.is_set():
                raise _PairCancelled()

            if direction.subject == "candidate":
                candidate, job = subject, target
                candidate_embedding, job_embedding = subject_embedding, target_embedding
            else:
                candidate, job = target, subject
                candidate_embedding, job_embedding = target_embedding, subject_embedding

            result = self.scorer.score(
                candidate,
                job,
                query.weighting,
                candidate_embedding=candidate_embedding,
                job_embedding=job_embedding,
                subject=direction.subject,
            )
            return result, None

        except (_PairCancelled, CancelledError):
            return None, None
        except InsufficientDataError as e:
            logger.warning(f"Skipping {target.id}: {e}")
            return None, f"{target.id}: insufficient data ({e})"
        except ProviderError as e:
            logger.warning(f"Skipping {target.id}: {e}")
            return None, f"{target.id}: embedding provider error ({e})"
