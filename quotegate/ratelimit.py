"""Submission rate limiting by origin address and by identity.

Each axis keeps a fixed window per key: the first attempt opens a window of
``window_seconds``; attempts inside it count up to the axis limit; once
``now >= reset_at`` the key starts over. Admit/deny decisions depend only on
that comparison. The periodic sweep just frees memory held by expired keys.

Usage:
    limiter = SubmissionRateLimiter(origin_limit=5, identity_limit=10)
    limiter.start()                     # background sweep (optional)
    decision = limiter.check_and_record("203.0.113.9", "user@example.com")
    if not decision.allowed:
        print(format_rate_limit_error(decision.reset_at, decision.limit))
    limiter.stop()
"""
from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from quotegate.utils import wait_text

logger = logging.getLogger(__name__)

ORIGIN = "origin"
IDENTITY = "identity"
AXES = (ORIGIN, IDENTITY)

DEFAULT_ORIGIN_LIMIT = 5
DEFAULT_IDENTITY_LIMIT = 10
DEFAULT_WINDOW_SECONDS = 3600
DEFAULT_SWEEP_INTERVAL = 300


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    axis: Optional[str] = None  # which axis denied
    limit: Optional[int] = None
    reset_at: Optional[float] = None
    current: Optional[int] = None


ALLOWED = RateLimitDecision(allowed=True)


class SubmissionRateLimiter:
    """Two independent fixed-window counters: per origin address and per identity."""

    def __init__(
        self,
        origin_limit: int = DEFAULT_ORIGIN_LIMIT,
        identity_limit: int = DEFAULT_IDENTITY_LIMIT,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        time_fn: Optional[Callable[[], float]] = None,
    ):
        if origin_limit <= 0 or identity_limit <= 0:
            raise ValueError("rate limits must be positive")
        if window_seconds <= 0 or sweep_interval <= 0:
            raise ValueError("window and sweep interval must be positive")
        self.origin_limit = origin_limit
        self.identity_limit = identity_limit
        self.window_seconds = window_seconds
        self.sweep_interval = sweep_interval
        self._time = time_fn or time.time
        self._entries: Dict[str, Dict[str, RateLimitEntry]] = {ORIGIN: {}, IDENTITY: {}}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    def _limit_for(self, axis: str) -> int:
        return self.origin_limit if axis == ORIGIN else self.identity_limit

    @staticmethod
    def _key(axis: str, key: str) -> str:
        return key.lower() if axis == IDENTITY else key

    def _check(self, axis: str, key: str, now: float) -> RateLimitDecision:
        store = self._entries[axis]
        entry = store.get(key)
        if entry is None:
            return ALLOWED
        if now >= entry.reset_at:
            del store[key]
            return ALLOWED
        limit = self._limit_for(axis)
        if entry.count >= limit:
            return RateLimitDecision(
                allowed=False, axis=axis, limit=limit,
                reset_at=entry.reset_at, current=entry.count,
            )
        return ALLOWED

    def _record(self, axis: str, key: str, now: float) -> None:
        store = self._entries[axis]
        entry = store.get(key)
        if entry is None or now >= entry.reset_at:
            store[key] = RateLimitEntry(count=1, reset_at=now + self.window_seconds)
        else:
            entry.count += 1

    def check_and_record(self, origin: Optional[str], identity: str) -> RateLimitDecision:
        """Admit or deny one submission attempt.

        The origin axis is checked first (only when an origin is known); a
        denial there returns immediately without touching the identity axis.
        The attempt is recorded on both axes only when both admit.
        """
        identity_key = self._key(IDENTITY, identity)
        with self._lock:
            now = self._time()
            if origin:
                decision = self._check(ORIGIN, origin, now)
                if not decision.allowed:
                    logger.info(
                        f"[RateLimit] Origin {origin} over limit ({decision.current}/{decision.limit}), "
                        f"retry in {wait_text(decision.reset_at - now)}"
                    )
                    return decision
            decision = self._check(IDENTITY, identity_key, now)
            if not decision.allowed:
                logger.info(
                    f"[RateLimit] Identity {identity_key} over limit ({decision.current}/{decision.limit}), "
                    f"retry in {wait_text(decision.reset_at - now)}"
                )
                return decision
            if origin:
                self._record(ORIGIN, origin, now)
            self._record(IDENTITY, identity_key, now)
        return ALLOWED

    def entry(self, axis: str, key: str) -> Optional[RateLimitEntry]:
        """Current entry for a key (a copy), or None."""
        with self._lock:
            found = self._entries[axis].get(self._key(axis, key))
            return RateLimitEntry(found.count, found.reset_at) if found else None

    def reset(self, axis: str, key: str) -> bool:
        """Drop one key's window (support/appeals). Returns True if it existed."""
        if axis not in AXES:
            raise ValueError(f"unknown axis {axis!r}; expected one of {AXES}")
        with self._lock:
            removed = self._entries[axis].pop(self._key(axis, key), None) is not None
        if removed:
            logger.info(f"[RateLimit] Reset {axis} key {key}")
        return removed

    def sweep(self) -> int:
        """Delete every expired entry on both axes. Returns how many were removed."""
        removed = 0
        with self._lock:
            now = self._time()
            for store in self._entries.values():
                expired = [k for k, e in store.items() if now >= e.reset_at]
                for k in expired:
                    del store[k]
                removed += len(expired)
        if removed:
            logger.debug(f"[RateLimit] Swept {removed} expired entries")
        return removed

    def status(self) -> dict:
        with self._lock:
            return {
                "origin_tracking": len(self._entries[ORIGIN]),
                "identity_tracking": len(self._entries[IDENTITY]),
                "origin_limit": self.origin_limit,
                "identity_limit": self.identity_limit,
                "window_seconds": self.window_seconds,
                "sweep_interval": self.sweep_interval,
                "sweeping": self.running,
            }

    # Background sweep lifecycle

    @property
    def running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self.sweep_interval):
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"[RateLimit] Sweep failed: {e}")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._sweeper = threading.Thread(target=self._sweep_loop, name="quotegate-sweep", daemon=True)
        self._sweeper.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout)
            self._sweeper = None

    def __enter__(self) -> "SubmissionRateLimiter":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()


def format_rate_limit_error(reset_at: float, limit: int, now: Optional[float] = None) -> str:
    """Hebrew message telling the submitter how long to wait."""
    now = time.time() if now is None else now
    minutes = math.ceil((reset_at - now) / 60)
    prefix = f"חרגת ממספר התגובות המותר ({limit} תגובות לשעה)."
    if minutes <= 1:
        return f"{prefix} נסה שוב בעוד דקה."
    if minutes < 60:
        return f"{prefix} נסה שוב בעוד {minutes} דקות."
    hours = math.ceil(minutes / 60)
    return f"{prefix} נסה שוב בעוד {hours} שעות."
