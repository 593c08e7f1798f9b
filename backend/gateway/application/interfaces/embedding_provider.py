"""Abstract interface (port) for embedding generation."""

from abc import ABC, abstractmethod

from gateway.domain.exceptions import UpstreamServiceError


class EmbeddingProvider(ABC):
    """Port for generating text embeddings — implemented in the infrastructure layer."""

    @abstractmethod
    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text, in input order.

        Raises:
            UpstreamServiceError: If the embedding service fails.
        """
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Return the dimensionality of the embedding vectors produced by this provider."""
        ...

    async def generate_query_embedding(self, text: str) -> list[float]:
        """Embed a single query string.

        Raises:
            UpstreamServiceError: If the service returns no vector.
        """
        vectors = await self.generate_embeddings([text])
        if not vectors:
            raise UpstreamServiceError(
                provider="embeddings", status_code=500, message="No query vector returned"
            )
        return vectors[0]
