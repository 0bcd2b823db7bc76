"""Topic keyword detection for submitted statements."""
from typing import List, Sequence, Tuple

# A statement must hit at least one primary keyword to count as on-topic;
# secondary keywords are reported but never sufficient alone.
PRIMARY_KEYWORDS = (
    "חוק גיוס",
    "חוק הגיוס",
    "recruitment law",
    "draft law",
    "גיוס חרדים",
    "haredi draft",
)
SECONDARY_KEYWORDS = (
    "שירות צבאי",
    'צה"ל',
    "IDF",
    "military service",
)


def match_keywords(
    content: str,
    min_primary: int = 1,
    primary: Sequence[str] = PRIMARY_KEYWORDS,
    secondary: Sequence[str] = SECONDARY_KEYWORDS,
) -> Tuple[bool, List[str]]:
    """Return ``(on_topic, matched_keywords)`` using case-insensitive substring search."""
    text = content.lower()
    matched = [kw for kw in primary if kw.lower() in text]
    primary_hits = len(matched)
    matched.extend(kw for kw in secondary if kw.lower() in text)
    return primary_hits >= min_primary, matched
