"""Stage-coloured console logging for the ingest and chat pipelines.

Each pipeline step is logged with a stage label and colour so one request can
be followed through the terminal:

    POLICY     yellow
    EMBED      blue
    BLOB       green
    UPSERT     cyan
    RETRIEVE   cyan
    GENERATE   magenta

Colours are dropped when ``NO_COLOR`` is set.
"""

import logging
import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_RED = "\033[91m"
_GREEN = "\033[92m"
_YELLOW = "\033[93m"
_BLUE = "\033[94m"
_MAGENTA = "\033[95m"
_CYAN = "\033[96m"
_WHITE = "\033[97m"
_GRAY = "\033[90m"


@dataclass(frozen=True)
class Stage:
    label: str
    color: str


class PipelineStage:
    """Stages of the gateway pipelines."""

    POLICY = Stage("POLICY", _YELLOW)
    EMBED = Stage("EMBED", _BLUE)
    BLOB = Stage("BLOB", _GREEN)
    UPSERT = Stage("UPSERT", _CYAN)
    RETRIEVE = Stage("RETRIEVE", _CYAN)
    GENERATE = Stage("GENERATE", _MAGENTA)
    PIPELINE = Stage("PIPELINE", _WHITE)
    COMPLETE = Stage("COMPLETE", _GREEN)


def _fields(values: dict[str, Any]) -> str:
    return " | ".join(f"{k}={v}" for k, v in values.items())


class PipelineLogger:
    """Logger wrapper that renders pipeline steps with their stage colour.

    Usage:
        plog = PipelineLogger("RagService")
        with plog.timed_step(PipelineStage.EMBED, "Embedding question"):
            vector = await provider.generate_query_embedding(question)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)
        self._colored = "NO_COLOR" not in os.environ

    def _paint(self, text: str, *codes: str) -> str:
        if not self._colored or not codes:
            return text
        return f"{''.join(codes)}{text}{_RESET}"

    def _line(self, stage: Stage, message: str, fields: dict[str, Any], *, mark: str = "") -> str:
        tag = self._paint(f"[{stage.label}]", stage.color, _BOLD)
        line = f"{tag} {self._paint(mark + message, stage.color)}"
        if fields:
            line += " " + self._paint(f"({_fields(fields)})", _GRAY)
        return line

    def step_start(self, stage: Stage, message: str, **fields: Any) -> None:
        self._logger.info(self._line(stage, message, fields))

    def step_complete(self, stage: Stage, message: str, **fields: Any) -> None:
        self._logger.info(self._line(stage, message, fields, mark="done: "))

    def step_error(self, stage: Stage, message: str, error: Exception | None = None) -> None:
        line = f"{self._paint(f'[{stage.label}]', _RED, _BOLD)} {self._paint(message, _RED)}"
        if error is not None:
            line += " " + self._paint(f"{type(error).__name__}: {error}", _DIM)
        self._logger.error(line)

    def detail(self, message: str, **fields: Any) -> None:
        line = "    " + self._paint(message, _GRAY)
        if fields:
            line += " " + self._paint(f"({_fields(fields)})", _DIM)
        self._logger.info(line)

    def stats(self, **fields: Any) -> None:
        self._logger.info("    " + self._paint(_fields(fields), _GRAY))

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **fields: Any) -> Iterator[None]:
        """Log a step's start, then its completion or failure with the elapsed time."""
        self.step_start(stage, message, **fields)
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.step_error(
                stage, f"{message} failed after {time.perf_counter() - started:.2f}s", error=exc
            )
            raise
        self.step_complete(stage, f"{message} ({time.perf_counter() - started:.2f}s)")
