"""Logging setup shared by the CLI and web drivers."""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | int | None = None, log_file: Path | None = None) -> None:
    """Configure root logging once.

    ``level`` falls back to ``CLICKER_LOG_LEVEL`` and then to WARNING.
    With ``log_file`` set, records also go to that file.
    """
    if level is None:
        level = os.environ.get("CLICKER_LOG_LEVEL", "WARNING")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)
