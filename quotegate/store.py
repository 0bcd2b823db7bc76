"""Storage contracts consumed by the pipeline, plus an in-memory reference store.

The pipeline never talks to a database directly. It needs:

  * a candidate supplier: recent statements for a subject, and a point
    lookup by exact fingerprint;
  * a record sink: accepts a classified record and returns its new id.

``MemoryStatementStore`` implements both and mirrors the constraints a
relational backend would enforce (unique content hash + source URL).
"""
from __future__ import annotations

import itertools
import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Tuple

from quotegate.errors import AlreadyRecordedError
from quotegate.models import Candidate, StatementRecord

logger = logging.getLogger(__name__)


class CandidateSupplier(Protocol):
    def candidates(self, subject_id: int, since: datetime) -> List[Candidate]: ...

    def find_by_fingerprint(self, subject_id: int, content_hash: str) -> Optional[Candidate]: ...


class RecordSink(Protocol):
    def add(self, record: StatementRecord) -> int: ...


def _record_time(record: StatementRecord) -> Optional[datetime]:
    return record.stated_at or record.ingested_at


class MemoryStatementStore:
    """Process-local statement store (tests, CLI, small deployments)."""

    def __init__(self):
        self._records: Dict[int, StatementRecord] = {}
        self._by_source: Dict[Tuple[str, str], int] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: StatementRecord) -> int:
        """Store a record and return its id.

        Raises AlreadyRecordedError when the same content hash was already
        stored from the same source URL; nothing is written in that case.
        """
        key = (record.content_hash, record.source_url)
        with self._lock:
            existing = self._by_source.get(key)
            if existing is not None:
                raise AlreadyRecordedError(record.content_hash, record.source_url, existing)
            record.id = next(self._ids)
            self._records[record.id] = record
            self._by_source[key] = record.id
        logger.debug(f"[Store] Added statement {record.id} for subject {record.subject_id}")
        return record.id

    def get(self, record_id: int) -> Optional[StatementRecord]:
        return self._records.get(record_id)

    def candidates(self, subject_id: int, since: datetime) -> List[Candidate]:
        """Statements for ``subject_id`` made at or after ``since``, in insertion order."""
        pool = []
        for record in list(self._records.values()):
            if record.subject_id != subject_id:
                continue
            when = _record_time(record)
            if when is not None and when < since:
                continue
            pool.append(record.to_candidate())
        return pool

    def find_by_fingerprint(self, subject_id: int, content_hash: str) -> Optional[Candidate]:
        for record in list(self._records.values()):
            if record.subject_id == subject_id and record.content_hash == content_hash:
                return record.to_candidate()
        return None

    def group(self, token: str) -> List[StatementRecord]:
        return [r for r in self._records.values() if r.duplicate_group == token]

    def primary_statements(self, subject_id: int, limit: int = 50) -> List[Tuple[StatementRecord, List[StatementRecord]]]:
        """Primaries for a subject, newest statement first, each with its duplicates."""
        duplicates: Dict[int, List[StatementRecord]] = {}
        primaries = []
        for record in self._records.values():
            if record.subject_id != subject_id:
                continue
            if record.is_primary:
                primaries.append(record)
            else:
                duplicates.setdefault(record.duplicate_of, []).append(record)
        primaries.sort(key=lambda r: (_record_time(r) is not None, _record_time(r)), reverse=True)
        return [(p, duplicates.get(p.id, [])) for p in primaries[:limit]]
