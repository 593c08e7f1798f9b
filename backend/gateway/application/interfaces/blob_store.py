"""Abstract interface (port) for key-addressed chunk text storage."""

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Port for the object store that holds full chunk text."""

    @abstractmethod
    async def put_text(self, key: str, text: str) -> None:
        """Store ``text`` under ``key``, overwriting any previous content."""
        ...

    @abstractmethod
    async def get_text(self, key: str) -> str | None:
        """Return the text stored under ``key``, or None if it does not exist."""
        ...
