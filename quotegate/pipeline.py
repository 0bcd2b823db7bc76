"""Submission pipeline: rate limit → duplicate resolution → record write."""
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from quotegate.config import Settings
from quotegate.credibility import load_credibility_table
from quotegate.dedup import CANDIDATE_WINDOW_DAYS, SIMILARITY_THRESHOLD, DedupStats, candidate_cutoff, resolve
from quotegate.errors import AlreadyRecordedError
from quotegate.keywords import match_keywords
from quotegate.models import Statement, StatementRecord, Verdict
from quotegate.ratelimit import RateLimitDecision, SubmissionRateLimiter
from quotegate.store import CandidateSupplier, MemoryStatementStore
from quotegate.writer import CommentRecordWriter

logger = logging.getLogger(__name__)


class IngestStatus(str, Enum):
    RECORDED = "RECORDED"
    RATE_LIMITED = "RATE_LIMITED"
    ALREADY_RECORDED = "ALREADY_RECORDED"


@dataclass
class Submission:
    statement: Statement
    identity: str
    origin: Optional[str] = None  # network address, when known


@dataclass
class IngestOutcome:
    status: IngestStatus
    record: Optional[StatementRecord] = None
    verdict: Optional[Verdict] = None
    rate_limit: Optional[RateLimitDecision] = None
    existing_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is IngestStatus.RECORDED


class IngestionPipeline:
    """Runs one submission to completion: gate, classify, persist.

    Storage failures other than the source-uniqueness conflict propagate;
    nothing is written unless classification succeeded.
    """

    def __init__(
        self,
        limiter: SubmissionRateLimiter,
        candidates: CandidateSupplier,
        writer: CommentRecordWriter,
        threshold: float = SIMILARITY_THRESHOLD,
        window_days: int = CANDIDATE_WINDOW_DAYS,
        time_fn: Optional[Callable[[], float]] = None,
    ):
        self.limiter = limiter
        self.candidates = candidates
        self.writer = writer
        self.threshold = threshold
        self.window_days = window_days
        self._time = time_fn or time.time
        self.stats = DedupStats()

    @classmethod
    def from_settings(cls, settings: Settings, store: Optional[MemoryStatementStore] = None) -> "IngestionPipeline":
        store = store if store is not None else MemoryStatementStore()
        limiter = SubmissionRateLimiter(
            origin_limit=settings.origin_limit,
            identity_limit=settings.identity_limit,
            window_seconds=settings.window,
            sweep_interval=settings.sweep_interval,
        )
        writer = CommentRecordWriter(store, load_credibility_table(settings.credibility_file))
        return cls(
            limiter,
            store,
            writer,
            threshold=settings.similarity_threshold,
            window_days=settings.candidate_window_days,
        )

    def classify(self, statement: Statement) -> Verdict:
        now = datetime.fromtimestamp(self._time(), tz=timezone.utc)
        pool = self.candidates.candidates(statement.subject_id, candidate_cutoff(now, self.window_days))
        return resolve(
            statement.subject_id,
            statement.content,
            pool,
            threshold=self.threshold,
            exact_lookup=self.candidates.find_by_fingerprint,
            stats=self.stats,
        )

    def submit(self, submission: Submission) -> IngestOutcome:
        decision = self.limiter.check_and_record(submission.origin, submission.identity)
        if not decision.allowed:
            logger.info(f"[Pipeline] Rejected submission from {submission.identity}: {decision.axis} limit")
            return IngestOutcome(status=IngestStatus.RATE_LIMITED, rate_limit=decision)

        statement = submission.statement
        if not statement.keywords:
            _, detected = match_keywords(statement.content)
            statement = replace(statement, keywords=detected)

        verdict = self.classify(statement)
        try:
            record = self.writer.write(statement, verdict)
        except AlreadyRecordedError as e:
            logger.info(f"[Pipeline] {e}")
            return IngestOutcome(
                status=IngestStatus.ALREADY_RECORDED,
                verdict=verdict,
                rate_limit=decision,
                existing_id=e.existing_id,
            )
        return IngestOutcome(status=IngestStatus.RECORDED, record=record, verdict=verdict, rate_limit=decision)
