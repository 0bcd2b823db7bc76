"""Source credibility lookups for Quotegate."""
import logging
import os
from typing import Dict, Mapping, Optional

import yaml

from quotegate.errors import ConfigError
from quotegate.models import SourceChannel

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 5
MIN_SCORE = 1
MAX_SCORE = 10
DEFAULT_TABLE_PATH = os.path.join(os.path.dirname(__file__), "credibility.yaml")


class CredibilityTable:
    """Fixed channel → score table with a neutral default."""

    def __init__(self, scores: Mapping[SourceChannel, int], default: int = DEFAULT_SCORE):
        for channel, score in scores.items():
            if not isinstance(channel, SourceChannel):
                raise ConfigError(f"credibility key must be a SourceChannel, got {channel!r}")
            _check_score(score, channel.value)
        _check_score(default, "default")
        self._scores: Dict[SourceChannel, int] = dict(scores)
        self.default = default

    def score(self, channel: SourceChannel) -> int:
        return self._scores.get(channel, self.default)

    def as_dict(self) -> Dict[str, int]:
        return {c.value: s for c, s in self._scores.items()}

    def __len__(self) -> int:
        return len(self._scores)


def _check_score(score, label: str) -> None:
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        raise ConfigError(f"credibility.{label} must be an integer {MIN_SCORE}-{MAX_SCORE}, got {score!r}")


def load_credibility_table(path: Optional[str] = None) -> CredibilityTable:
    """Load a credibility table from YAML (``channels: {NEWS: 7, ...}``).

    Uses the packaged reference table when ``path`` is None.
    """
    yaml_path = path or DEFAULT_TABLE_PATH
    try:
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read credibility table {yaml_path}: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("channels", {}), dict):
        raise ConfigError(f"{yaml_path}: expected a 'channels' mapping")

    scores: Dict[SourceChannel, int] = {}
    for name, score in (data.get("channels") or {}).items():
        try:
            channel = SourceChannel(str(name).strip().upper())
        except ValueError:
            raise ConfigError(f"{yaml_path}: unknown channel {name!r}") from None
        scores[channel] = score
    table = CredibilityTable(scores, default=data.get("default", DEFAULT_SCORE))
    logger.debug(f"[Credibility] Loaded {len(table)} channel scores from {yaml_path}")
    return table
