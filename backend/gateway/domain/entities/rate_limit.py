"""Domain entities for fixed-window rate limiting."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single rate-limit check."""

    allowed: bool
    count: int
    limit: int
    retry_after: int = 0  # seconds until the window resets, set when rejected
