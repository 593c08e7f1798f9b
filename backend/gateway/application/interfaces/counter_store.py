"""Abstract interface (port) for durable per-key request counters."""

from abc import ABC, abstractmethod


class CounterStore(ABC):
    """Port for the rate limiter's bucket storage.

    Implementations must serialize the read-check-increment sequence per
    key: two concurrent calls for the same key never both observe the same
    count.
    """

    @abstractmethod
    async def increment_if_below(
        self, key: str, limit: int, *, window_index: int
    ) -> int | None:
        """Increment the counter for ``key`` unless it already reached ``limit``.

        Returns:
            The new count, or None when the counter was at the limit and
            was left unchanged.
        """
        ...

    @abstractmethod
    async def purge_before(self, window_index: int) -> int:
        """Delete buckets belonging to windows older than ``window_index``.

        Returns the number of buckets removed.
        """
        ...
