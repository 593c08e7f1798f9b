"""Logging setup for the gateway process.

Each ``log_level_*`` setting controls a group of loggers, so SQL echo or
outbound HTTP chatter can be turned up for debugging without flooding the
pipeline logs (and the other way round).
"""

import logging
import sys

from gateway.config import Settings, get_settings

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Settings field → loggers it governs
_LOGGER_GROUPS: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_pipeline": (
        "RagService",
        "gateway.application.services",
        "gateway.presentation",
    ),
    "log_level_openrouter": ("gateway.infrastructure.openrouter",),
}


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply the configured levels and return them keyed by logger name.

    A stderr handler is attached to the root logger only when nothing else
    (uvicorn, pytest) has installed one.
    """
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {"": root.level}
    for field_name, logger_names in _LOGGER_GROUPS.items():
        level = _parse_level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logging.getLogger(__name__).debug(
        "Log levels applied: %s",
        ", ".join(f"{name or 'root'}={logging.getLevelName(lvl)}" for name, lvl in applied.items()),
    )
    return applied


def _parse_level(raw: str) -> int:
    """Map a level name to its logging constant; unknown names fall back to INFO."""
    level = logging.getLevelName(str(raw).strip().upper())
    return level if isinstance(level, int) else logging.INFO
