"""Rate limiter abstractions."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate limit check."""

    allowed: bool
    remaining: int
    reset_at: datetime
    retry_after: int | None = None


class RateLimiter(Protocol):
    """Rate limiter interface keyed by caller identity."""

    def check(self, key: str) -> RateLimitResult:
        """Record a request for key if allowed and return the outcome."""


@dataclass
class InMemoryRateLimiter(RateLimiter):
    """Sliding-window limiter for a single process."""

    max_requests: int
    window_seconds: float
    _requests: dict[str, list[datetime]]

    def __init__(self, max_requests: int, window_seconds: float) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests = {}

    def check(self, key: str) -> RateLimitResult:
        """Allow up to max_requests per window for a key."""
        now = datetime.now(tz=UTC)
        window = timedelta(seconds=self.window_seconds)
        self._prune(now - window)
        requests = [ts for ts in self._requests.get(key, []) if ts > now - window]

        allowed = len(requests) < self.max_requests
        remaining = max(0, self.max_requests - len(requests))
        oldest = requests[0] if requests else now
        reset_at = oldest + window
        retry_after = None
        if not allowed:
            retry_after = math.ceil((reset_at - now).total_seconds())
        else:
            requests.append(now)
        self._requests[key] = requests

        return RateLimitResult(
            allowed=allowed,
            remaining=remaining,
            reset_at=reset_at,
            retry_after=retry_after,
        )

    def clear(self, key: str) -> None:
        """Forget recorded requests for a key."""
        self._requests.pop(key, None)

    def _prune(self, cutoff: datetime) -> None:
        # Timestamps are appended in order, so the last one is the newest.
        expired = [
            key
            for key, requests in self._requests.items()
            if not requests or requests[-1] <= cutoff
        ]
        for key in expired:
            del self._requests[key]
