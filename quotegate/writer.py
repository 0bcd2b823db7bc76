"""Persist classified statements."""
import logging
from typing import Optional

from quotegate.credibility import CredibilityTable, load_credibility_table
from quotegate.models import Statement, StatementRecord, Verdict
from quotegate.store import RecordSink

logger = logging.getLogger(__name__)


class CommentRecordWriter:
    """Builds a record from a statement plus its verdict and hands it to the sink.

    Exactly one ``sink.add`` per ``write``; prior records are never touched.
    Sink errors (including AlreadyRecordedError) propagate to the caller.
    """

    def __init__(self, sink: RecordSink, credibility: Optional[CredibilityTable] = None):
        self.sink = sink
        self.credibility = credibility if credibility is not None else load_credibility_table()

    def build(self, statement: Statement, verdict: Verdict) -> StatementRecord:
        return StatementRecord(
            subject_id=statement.subject_id,
            content=statement.content,
            content_hash=statement.content_hash,
            normalized_content=statement.normalized_content,
            source_url=statement.source_url,
            channel=statement.channel,
            source_credibility=self.credibility.score(statement.channel),
            classification=verdict.classification,
            duplicate_group=verdict.duplicate_group,
            duplicate_of=verdict.duplicate_of,
            stated_at=statement.stated_at,
            ingested_at=statement.ingested_at,
            source_name=statement.source_name,
            keywords=list(statement.keywords),
        )

    def write(self, statement: Statement, verdict: Verdict) -> StatementRecord:
        record = self.build(statement, verdict)
        record.id = self.sink.add(record)
        logger.info(
            f"[Writer] Stored statement {record.id} for subject {record.subject_id} "
            f"({record.classification.value}, group={record.duplicate_group})"
        )
        return record
