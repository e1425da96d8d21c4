"""Process-wide logging setup shared by the app entrypoints."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(level: str) -> int:
    """Map a level name such as ``debug`` to its numeric value, defaulting to INFO."""

    normalized_level = level.strip().upper()
    resolved_level = logging.getLevelName(normalized_level) if normalized_level else None
    if not isinstance(resolved_level, int):
        return logging.INFO
    return resolved_level


def configure_logging(*, level: str) -> None:
    """Install the root handler once with the shared format and requested level."""

    logging.basicConfig(
        level=resolve_log_level(level),
        format=_LOG_FORMAT,
    )
