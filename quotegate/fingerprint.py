"""Text fingerprints: an exact-match digest and a normalized form for fuzzy matching."""
import hashlib
import re

# Characters dropped before fuzzy comparison
PUNCTUATION = ".,!?;:\"'()[]{}"
_PUNCT_RE = re.compile("[" + re.escape(PUNCTUATION) + "]")

# Standalone Hebrew particles carrying no content for comparison purposes
STOP_PARTICLES = frozenset({
    "את", "של", "על", "אל", "עם",
    "ל", "מ", "ב", "כ", "ה", "ש", "ו",
})


def exact_fingerprint(text: str) -> str:
    """SHA-256 hex digest of the trimmed text (64 chars)."""
    return hashlib.sha256(text.strip().encode("utf-8")).hexdigest()


def normalize(text: str) -> str:
    """Case-fold, strip punctuation, drop stop particles and collapse whitespace.

    Idempotent: ``normalize(normalize(x)) == normalize(x)``.
    """
    folded = _PUNCT_RE.sub("", text.casefold())
    tokens = [t for t in folded.split() if t not in STOP_PARTICLES]
    return " ".join(tokens)
