"""Config file support for Quotegate.

Settings are read from, in increasing priority:
  1. ~/.quotegate.yaml  (user-level)
  2. ./quotegate.yaml   (project-level, overrides user-level)
  3. QUOTEGATE_* environment variables

Example config file:

    # ./quotegate.yaml
    origin-limit: 5
    identity-limit: 10
    window: 60m
    sweep-interval: 5m
    similarity-threshold: 0.85
    candidate-window-days: 90
    credibility-file: ./credibility.yaml
"""
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from quotegate.errors import ConfigError
from quotegate.utils import parse_duration_seconds

logger = logging.getLogger(__name__)

_INT_FIELDS = {"origin_limit", "identity_limit", "candidate_window_days"}
_FLOAT_FIELDS = {"similarity_threshold"}
_DURATION_FIELDS = {"window", "sweep_interval"}
_STR_FIELDS = {"credibility_file"}
_ENV_PREFIX = "QUOTEGATE_"


@dataclass(frozen=True)
class Settings:
    origin_limit: int = 5
    identity_limit: int = 10
    window: int = 3600  # seconds
    sweep_interval: int = 300  # seconds
    similarity_threshold: float = 0.85
    candidate_window_days: int = 90
    credibility_file: Optional[str] = None


def default_paths() -> list:
    return [
        Path.home() / ".quotegate.yaml",
        Path.home() / ".quotegate.yml",
        Path("quotegate.yaml"),
        Path("quotegate.yml"),
    ]


def load_config(paths: Optional[Iterable[Path]] = None) -> Dict[str, Any]:
    """Load raw config from YAML files, later files overriding earlier ones."""
    config: Dict[str, Any] = {}
    for p in (default_paths() if paths is None else paths):
        p = Path(p)
        if not p.is_file():
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"[Config] Failed to load {p}: {e}")
            continue
        if not isinstance(data, dict):
            logger.warning(f"[Config] Ignoring {p}: top level must be a mapping")
            continue
        # Normalize keys: dashes → underscores
        config.update({str(k).replace("-", "_"): v for k, v in data.items()})
        logger.debug(f"[Config] Loaded {p}")
    return config


def load_env_config(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Load config from QUOTEGATE_* environment variables.

    QUOTEGATE_ORIGIN_LIMIT=3 → origin_limit=3, QUOTEGATE_WINDOW=30m → window=1800.
    Unparseable values are skipped with a warning.
    """
    environ = os.environ if environ is None else environ
    config: Dict[str, Any] = {}
    for key, value in environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        field = key[len(_ENV_PREFIX):].lower()
        try:
            if field in _INT_FIELDS:
                config[field] = int(value)
            elif field in _FLOAT_FIELDS:
                config[field] = float(value)
            elif field in _DURATION_FIELDS:
                config[field] = parse_duration_seconds(value)
            elif field in _STR_FIELDS:
                config[field] = value
        except ValueError:
            logger.warning(f"[Config] Ignoring {key}={value!r}: not a valid {field}")
    return config


def _coerce(key: str, value: Any) -> Any:
    try:
        if key in _INT_FIELDS:
            if isinstance(value, bool):
                raise ValueError(value)
            return int(value)
        if key in _FLOAT_FIELDS:
            return float(value)
        if key in _DURATION_FIELDS:
            return parse_duration_seconds(value)
        return None if value is None else str(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid value for {key}: {value!r}") from e


def build_settings(raw: Dict[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    values = {}
    for key, value in raw.items():
        if key not in known:
            logger.warning(f"[Config] Unknown setting '{key}' ignored")
            continue
        values[key] = _coerce(key, value)
    settings = Settings(**values)
    _validate(settings)
    return settings


def _validate(s: Settings) -> None:
    for name in ("origin_limit", "identity_limit", "window", "sweep_interval", "candidate_window_days"):
        if getattr(s, name) <= 0:
            raise ConfigError(f"{name} must be positive")
    if not 0.0 < s.similarity_threshold <= 1.0:
        raise ConfigError("similarity_threshold must be in (0, 1]")


def load_settings(paths: Optional[Iterable[Path]] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    """Effective settings: defaults < config files < environment."""
    raw = load_config(paths)
    raw.update(load_env_config(environ))
    return build_settings(raw)
