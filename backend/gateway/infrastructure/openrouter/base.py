"""Shared HTTP plumbing for the OpenRouter adapters.

Both adapters POST JSON to ``<base_url>/<path>`` and get JSON back. Every
failure mode (transport error, non-200 status, undecodable body, an
``error`` object in a 200 body) surfaces as ``UpstreamServiceError``.
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from gateway.domain.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_APP_NAME = "QEI Public Assistant"
_DEFAULT_TIMEOUT = 120.0


class OpenRouterAPI:
    """Base class holding credentials and the (optional) shared httpx client.

    An injected ``httpx.AsyncClient`` is reused across calls; without one a
    client is opened and closed around each request.
    """

    provider = "openrouter"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        app_name: str = DEFAULT_APP_NAME,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._app_name = app_name
        self._http_client = http_client
        self._timeout = timeout

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "X-Title": self._app_name,
        }

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    def _fail(self, status_code: int, message: str) -> UpstreamServiceError:
        return UpstreamServiceError(provider=self.provider, status_code=status_code, message=message)

    async def _post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            async with self._client() as client:
                response = await client.post(url, headers=self.headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error("%s request to %s failed: %s", self.provider, path, exc)
            raise self._fail(503, str(exc) or type(exc).__name__) from exc

        if response.status_code != 200:
            message = _error_message(response)
            logger.error("%s error %d: %s", self.provider, response.status_code, message[:500])
            raise self._fail(response.status_code, message)

        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise self._fail(502, "Response body is not valid JSON") from exc
        if not isinstance(data, dict):
            raise self._fail(502, "Response body is not a JSON object")

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise self._fail(int(error.get("code") or 500), str(error.get("message") or error))
            raise self._fail(500, str(error))
        return data


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of ``error.message`` from an error response."""
    try:
        error = response.json().get("error")
    except (json.JSONDecodeError, AttributeError):
        return response.text
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text
