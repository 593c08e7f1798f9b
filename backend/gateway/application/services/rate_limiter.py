"""Fixed-window rate limiter keyed by client identity.

Each ``(client_key, window_index)`` pair owns one counter in the
CounterStore. A request is accepted while the counter is below the limit
and increments it; once the limit is reached further requests are rejected
without touching the counter until the next window starts.
"""

import logging
import time
from collections.abc import Callable, Mapping

from gateway.application.interfaces.counter_store import CounterStore
from gateway.domain.entities import RateLimitDecision

logger = logging.getLogger(__name__)

_DEFAULT_WINDOW_SECONDS = 60
_DEFAULT_MAX_REQUESTS = 20
_ANONYMOUS_CLIENT = "0.0.0.0"
_MAX_CLIENT_KEY_LENGTH = 128


def client_key_from_headers(headers: Mapping[str, str]) -> str:
    """Derive the client identity from proxy headers.

    Prefers the trusted proxy's ``CF-Connecting-IP``, then the first entry of
    ``X-Forwarded-For``, then a fixed placeholder. Keys are capped at 128 characters.
    """
    connecting_ip = (headers.get("cf-connecting-ip") or "").strip()
    if connecting_ip:
        return connecting_ip[:_MAX_CLIENT_KEY_LENGTH]

    forwarded = headers.get("x-forwarded-for") or ""
    first = forwarded.split(",")[0].strip()
    if first:
        return first[:_MAX_CLIENT_KEY_LENGTH]

    return _ANONYMOUS_CLIENT


class RateLimiter:
    """Application service — fixed-window admission control."""

    def __init__(
        self,
        store: CounterStore,
        *,
        window_seconds: int = _DEFAULT_WINDOW_SECONDS,
        max_requests: int = _DEFAULT_MAX_REQUESTS,
        clock: Callable[[], float] = time.time,
    ):
        if window_seconds <= 0 or max_requests <= 0:
            raise ValueError("window_seconds and max_requests must be positive")
        self._store = store
        self._window_seconds = window_seconds
        self._max_requests = max_requests
        self._clock = clock
        self._last_purged_window: int | None = None

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    @property
    def max_requests(self) -> int:
        return self._max_requests

    def bucket_key(self, client_key: str, window_index: int) -> str:
        return f"{client_key}:{window_index}"

    async def check(self, client_key: str) -> RateLimitDecision:
        """Admit or reject one request for ``client_key``."""
        now = int(self._clock())
        window_index = now // self._window_seconds

        await self._purge_stale(window_index)

        count = await self._store.increment_if_below(
            self.bucket_key(client_key, window_index),
            self._max_requests,
            window_index=window_index,
        )
        if count is None:
            retry_after = self._window_seconds - (now % self._window_seconds)
            logger.info(
                "Rate limited client=%s window=%d retry_after=%ds",
                client_key,
                window_index,
                retry_after,
            )
            return RateLimitDecision(
                allowed=False,
                count=self._max_requests,
                limit=self._max_requests,
                retry_after=retry_after,
            )

        return RateLimitDecision(allowed=True, count=count, limit=self._max_requests)

    async def _purge_stale(self, window_index: int) -> None:
        """Drop buckets from earlier windows, at most once per window."""
        if self._last_purged_window == window_index:
            return
        self._last_purged_window = window_index
        try:
            removed = await self._store.purge_before(window_index)
        except Exception as exc:
            logger.warning("Could not purge stale rate-limit buckets: %s", exc)
            return
        if removed:
            logger.debug("Purged %d stale rate-limit buckets", removed)
