"""Domain entities for the chat flow — framework-independent."""

from dataclasses import dataclass, field


@dataclass
class ChatMessage:
    """A single message sent to the generation service."""

    role: str  # "system" | "user" | "assistant"
    content: str = ""


@dataclass
class TokenUsage:
    """Token usage statistics from a completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatCompletionResult:
    """Result from a generation call."""

    model: str
    content: str
    finish_reason: str  # "stop" | "length" | "error"
    usage: TokenUsage = field(default_factory=TokenUsage)
    provider: str = ""


@dataclass
class Snippet:
    """Retrieved chunk text used to ground one answer. Never returned to callers."""

    title: str
    doc_id: str
    chunk_index: int
    text: str


@dataclass
class SourceRef:
    """Public citation for a snippet — no chunk text, no blob key."""

    ref: str  # "#1", "#2", ...
    title: str
    doc_id: str
    chunk_index: int


@dataclass
class ChatAnswer:
    """Final answer returned by the chat flow."""

    answer: str
    sources: list[SourceRef] = field(default_factory=list)
    refused: bool = False
