"""Sliding-window text chunker with overlapping boundaries."""

_DEFAULT_CHUNK_SIZE = 900  # characters per window
_DEFAULT_CHUNK_OVERLAP = 140  # characters shared by consecutive windows
_DEFAULT_MIN_LENGTH = 60  # trimmed windows this short or shorter are dropped


def chunk_text(
    text: str,
    chunk_size: int = _DEFAULT_CHUNK_SIZE,
    overlap: int = _DEFAULT_CHUNK_OVERLAP,
    min_length: int = _DEFAULT_MIN_LENGTH,
) -> list[str]:
    """Split ``text`` into overlapping windows of at most ``chunk_size`` characters.

    Carriage returns are removed first. Each window is trimmed and kept only
    if it is longer than ``min_length``. The next window starts ``overlap``
    characters before the previous one ended; when that would not move
    forward (overlap >= chunk_size) it starts where the previous one ended.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0 or min_length < 0:
        raise ValueError("overlap and min_length must not be negative")

    normalized = str(text or "").replace("\r", "")
    length = len(normalized)
    chunks: list[str] = []

    start = 0
    while start < length:
        end = min(start + chunk_size, length)
        piece = normalized[start:end].strip()
        if len(piece) > min_length:
            chunks.append(piece)
        if end == length:
            break
        next_start = max(end - overlap, 0)
        start = next_start if next_start > start else end

    return chunks


class TextChunker:
    """Chunker bound to a fixed configuration."""

    def __init__(
        self,
        *,
        chunk_size: int = _DEFAULT_CHUNK_SIZE,
        overlap: int = _DEFAULT_CHUNK_OVERLAP,
        min_length: int = _DEFAULT_MIN_LENGTH,
    ):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.min_length = min_length

    def split(self, text: str) -> list[str]:
        return chunk_text(
            text,
            chunk_size=self.chunk_size,
            overlap=self.overlap,
            min_length=self.min_length,
        )
