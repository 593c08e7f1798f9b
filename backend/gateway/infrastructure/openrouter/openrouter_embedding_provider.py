"""OpenRouter embeddings adapter.

Default model: baai/bge-base-en-v1.5 (768 dimensions). The requested
``dimensions`` is sent with every call; the caller validates what comes back.
"""

import logging
from typing import Any

import httpx

from gateway.application.interfaces.embedding_provider import EmbeddingProvider
from gateway.infrastructure.openrouter.base import (
    DEFAULT_APP_NAME,
    DEFAULT_BASE_URL,
    OpenRouterAPI,
)

logger = logging.getLogger(__name__)


class OpenRouterEmbeddingProvider(OpenRouterAPI, EmbeddingProvider):
    """Infrastructure adapter — one ``POST /embeddings`` per batch."""

    provider = "openrouter-embeddings"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        app_name: str = DEFAULT_APP_NAME,
        model: str = "baai/bge-base-en-v1.5",
        model_dimensions: int = 768,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, base_url, app_name, http_client)
        self._model = model
        self._dimensions = model_dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        payload: dict[str, Any] = {
            "model": self._model,
            "input": texts,
            "dimensions": self._dimensions,
        }
        data = await self._post_json("embeddings", payload)

        items = sorted(data.get("data") or [], key=lambda item: item.get("index", 0))
        try:
            vectors = [list(item["embedding"]) for item in items]
        except (KeyError, TypeError) as exc:
            raise self._fail(502, "Malformed embedding item") from exc

        logger.info(
            "Generated %d embeddings (model=%s, dims=%d)",
            len(vectors),
            self._model,
            len(vectors[0]) if vectors else 0,
        )
        return vectors
