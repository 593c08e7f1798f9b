"""OpenRouter chat completions adapter (non-streaming)."""

import logging
from typing import Any

from gateway.application.interfaces.chat_provider import ChatProvider
from gateway.domain.entities import ChatCompletionResult, ChatMessage, TokenUsage
from gateway.infrastructure.openrouter.base import OpenRouterAPI

logger = logging.getLogger(__name__)


class OpenRouterClient(OpenRouterAPI, ChatProvider):
    """Infrastructure adapter — ``POST /chat/completions``."""

    @property
    def provider_name(self) -> str:
        return self.provider

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        payload: dict[str, Any] = {
            "model": model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        data = await self._post_json("chat/completions", payload)
        return self._to_result(data)

    def _to_result(self, data: dict[str, Any]) -> ChatCompletionResult:
        choices = data.get("choices") or []
        if not choices:
            raise self._fail(500, "No choices in response")

        choice = choices[0]
        usage = data.get("usage") or {}
        result = ChatCompletionResult(
            model=data.get("model", ""),
            content=(choice.get("message") or {}).get("content") or "",
            finish_reason=choice.get("finish_reason") or "stop",
            usage=TokenUsage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            ),
            provider=self.provider,
        )
        logger.info(
            "Completion received (model=%s, finish=%s, tokens=%d)",
            result.model,
            result.finish_reason,
            result.usage.total_tokens,
        )
        return result
