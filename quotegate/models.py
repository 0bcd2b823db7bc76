"""Data models for Quotegate."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union

from quotegate.fingerprint import exact_fingerprint, normalize
from quotegate.utils import parse_timestamp, to_utc


class SourceChannel(str, Enum):
    """Channel a statement was published through."""

    NEWS = "NEWS"
    TWITTER = "TWITTER"
    FACEBOOK = "FACEBOOK"
    YOUTUBE = "YOUTUBE"
    KNESSET = "KNESSET"  # official parliamentary record
    INTERVIEW = "INTERVIEW"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str) -> "SourceChannel":
        """Map a channel name (any case) onto a member, OTHER when unknown."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.OTHER


class Classification(str, Enum):
    UNIQUE = "UNIQUE"
    EXACT_DUPLICATE = "EXACT_DUPLICATE"
    FUZZY_DUPLICATE = "FUZZY_DUPLICATE"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class Statement:
    subject_id: int
    content: str  # verbatim, never rewritten
    source_url: str
    channel: SourceChannel = SourceChannel.OTHER
    stated_at: Optional[Union[datetime, str]] = None  # when the subject said it
    ingested_at: datetime = field(default_factory=_utcnow)
    source_name: str = ""
    keywords: List[str] = field(default_factory=list)

    def __post_init__(self):
        # Store comparisons need aware UTC; naive values are taken as UTC
        if isinstance(self.stated_at, str):
            self.stated_at = parse_timestamp(self.stated_at)
        elif self.stated_at is not None:
            self.stated_at = to_utc(self.stated_at)
        self.ingested_at = to_utc(self.ingested_at)

    @property
    def content_hash(self) -> str:
        return exact_fingerprint(self.content)

    @property
    def normalized_content(self) -> str:
        return normalize(self.content)


@dataclass(frozen=True)
class Candidate:
    """A previously stored statement offered to the resolver for comparison."""

    id: int
    normalized_content: str
    content_hash: str
    duplicate_group: Optional[str] = None
    duplicate_of: Optional[int] = None

    @property
    def anchor_id(self) -> int:
        """Id of the group primary this candidate belongs to."""
        return self.duplicate_of if self.duplicate_of is not None else self.id

    @property
    def group_token(self) -> str:
        return self.duplicate_group or str(self.id)


@dataclass(frozen=True)
class SimilarMatch:
    id: int
    similarity: float


@dataclass(frozen=True)
class Verdict:
    classification: Classification
    duplicate_group: str
    duplicate_of: Optional[int] = None
    matches: List[SimilarMatch] = field(default_factory=list)

    @property
    def is_duplicate(self) -> bool:
        return self.classification is not Classification.UNIQUE


@dataclass
class StatementRecord:
    """A fully classified statement as handed to the record sink."""

    subject_id: int
    content: str
    content_hash: str
    normalized_content: str
    source_url: str
    channel: SourceChannel
    source_credibility: int
    classification: Classification
    duplicate_group: str
    duplicate_of: Optional[int] = None
    stated_at: Optional[datetime] = None
    ingested_at: Optional[datetime] = None
    source_name: str = ""
    keywords: List[str] = field(default_factory=list)
    id: Optional[int] = None

    @property
    def is_primary(self) -> bool:
        return self.duplicate_of is None

    def to_candidate(self) -> Candidate:
        if self.id is None:
            raise ValueError("record has not been stored yet")
        return Candidate(
            id=self.id,
            normalized_content=self.normalized_content,
            content_hash=self.content_hash,
            duplicate_group=self.duplicate_group,
            duplicate_of=self.duplicate_of,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "content": self.content,
            "content_hash": self.content_hash,
            "source_url": self.source_url,
            "channel": self.channel.value,
            "source_name": self.source_name,
            "source_credibility": self.source_credibility,
            "classification": self.classification.value,
            "duplicate_group": self.duplicate_group,
            "duplicate_of": self.duplicate_of,
            "stated_at": self.stated_at.isoformat() if self.stated_at else None,
            "ingested_at": self.ingested_at.isoformat() if self.ingested_at else None,
            "keywords": list(self.keywords),
        }
