"""Duplicate resolution for incoming statements."""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional

from quotegate.fingerprint import exact_fingerprint, normalize
from quotegate.models import Candidate, Classification, SimilarMatch, Verdict
from quotegate.similarity import length_bound, similarity

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.85
CANDIDATE_WINDOW_DAYS = 90

ExactLookup = Callable[[int, str], Optional[Candidate]]


@dataclass
class DedupStats:
    """Running counters across resolve() calls."""

    total_input: int = 0
    exact_dupes: int = 0
    fuzzy_dupes: int = 0
    unique_output: int = 0

    @property
    def total_duplicates(self) -> int:
        return self.exact_dupes + self.fuzzy_dupes

    def record(self, classification: Classification) -> None:
        self.total_input += 1
        if classification is Classification.EXACT_DUPLICATE:
            self.exact_dupes += 1
        elif classification is Classification.FUZZY_DUPLICATE:
            self.fuzzy_dupes += 1
        else:
            self.unique_output += 1

    def summary(self) -> str:
        return (
            f"{self.total_input} statements → {self.unique_output} unique "
            f"(duplicates {self.total_duplicates}: exact={self.exact_dupes}, fuzzy={self.fuzzy_dupes})"
        )


def candidate_cutoff(now: datetime, window_days: int = CANDIDATE_WINDOW_DAYS) -> datetime:
    """Oldest statement time a candidate pool should reach back to."""
    return now - timedelta(days=window_days)


def new_group_token() -> str:
    return str(uuid.uuid4())


def _linked(classification: Classification, match: Candidate, matches: List[SimilarMatch]) -> Verdict:
    # Always point at the group primary so duplicate chains never form
    return Verdict(
        classification=classification,
        duplicate_of=match.anchor_id,
        duplicate_group=match.group_token,
        matches=matches,
    )


def find_similar(
    normalized: str,
    candidates: Iterable[Candidate],
    threshold: float = SIMILARITY_THRESHOLD,
) -> List[tuple]:
    """Return ``(candidate, score)`` pairs at or above threshold, best first.

    Ties keep pool order (the sort is stable).
    """
    kept = []
    n = len(normalized)
    for cand in candidates:
        # Cheap rejection: the length gap alone keeps it under the threshold
        if length_bound(n, len(cand.normalized_content)) < threshold:
            continue
        score = similarity(normalized, cand.normalized_content)
        if score >= threshold:
            kept.append((cand, score))
    kept.sort(key=lambda pair: pair[1], reverse=True)
    return kept


def resolve(
    subject_id: int,
    content: str,
    candidates: Iterable[Candidate],
    *,
    threshold: float = SIMILARITY_THRESHOLD,
    exact_lookup: Optional[ExactLookup] = None,
    stats: Optional[DedupStats] = None,
) -> Verdict:
    """Classify ``content`` as unique, an exact duplicate or a fuzzy duplicate.

    ``candidates`` must already be scoped to ``subject_id`` and a bounded
    recency window, and must not contain the statement being classified.

    1. Exact: a stored statement with the same trimmed-text fingerprint,
       found via ``exact_lookup`` when given, otherwise by scanning the pool.
    2. Fuzzy: the best pool candidate whose normalized text scores at or
       above ``threshold``.
    3. Otherwise unique, with a freshly minted group token.

    Statements differing only in punctuation/case/particles have distinct
    fingerprints but identical normalized forms; they classify as fuzzy
    duplicates scoring 1.0.
    """
    pool = list(candidates)
    verdict = _classify(subject_id, content, pool, threshold, exact_lookup)
    if stats is not None:
        stats.record(verdict.classification)
    logger.debug(
        f"[Dedup] subject={subject_id} pool={len(pool)} → {verdict.classification.value}"
        + (f" of {verdict.duplicate_of}" if verdict.duplicate_of is not None else "")
    )
    return verdict


def _classify(
    subject_id: int,
    content: str,
    pool: List[Candidate],
    threshold: float,
    exact_lookup: Optional[ExactLookup],
) -> Verdict:
    if not content.strip():
        return Verdict(classification=Classification.UNIQUE, duplicate_group=new_group_token())

    digest = exact_fingerprint(content)
    if exact_lookup is not None:
        exact = exact_lookup(subject_id, digest)
    else:
        exact = next((c for c in pool if c.content_hash == digest), None)
    if exact is not None:
        return _linked(Classification.EXACT_DUPLICATE, exact, [])

    normalized = normalize(content)
    # Nothing left after normalization: no basis for a fuzzy comparison
    if normalized:
        similar = find_similar(normalized, pool, threshold)
        if similar:
            best = similar[0][0]
            matches = [SimilarMatch(id=c.id, similarity=score) for c, score in similar]
            return _linked(Classification.FUZZY_DUPLICATE, best, matches)

    return Verdict(classification=Classification.UNIQUE, duplicate_group=new_group_token())
