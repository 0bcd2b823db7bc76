"""Exception types for Quotegate."""
from typing import Optional


class QuotegateError(Exception):
    """Base class for all Quotegate errors."""


class ConfigError(QuotegateError):
    """Raised when settings or the credibility table are invalid."""


class StorageError(QuotegateError):
    """Raised by a record sink when a write fails for reasons other than a conflict."""


class AlreadyRecordedError(QuotegateError):
    """The same statement was already stored from this exact source.

    Distinct from a content duplicate: a restatement from a *different*
    source is recorded (as a duplicate), while the same content from the
    same source URL is rejected by the store's uniqueness constraint.
    """

    def __init__(self, content_hash: str, source_url: str, existing_id: Optional[int] = None):
        self.content_hash = content_hash
        self.source_url = source_url
        self.existing_id = existing_id
        super().__init__(
            f"statement {content_hash[:12]} already recorded from {source_url}"
            + (f" (id={existing_id})" if existing_id is not None else "")
        )
