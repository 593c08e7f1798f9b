"""Abstract chat provider interface — port for text-generation adapters."""

from abc import ABC, abstractmethod

from gateway.domain.entities import ChatCompletionResult, ChatMessage


class ChatProvider(ABC):
    """Port — defines what the application layer needs from a generation service."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'openrouter')."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        """Send a non-streaming chat completion request.

        Args:
            messages: System and user messages, in order.
            model: The model identifier (e.g. 'meta-llama/llama-3.1-8b-instruct').
            temperature: Sampling temperature (0.0–2.0).
            max_tokens: Maximum tokens in the response.

        Raises:
            UpstreamServiceError: If the provider returns an error.
        """
        ...
