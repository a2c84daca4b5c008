"""Loguru sink configuration shared by the CLI entry points."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

LOG_FORMAT = "[{time:YYYY-MM-DD HH:mm:ss}] {level}: {name}:{function} - {message}"

_sink_ids: List[int] = []


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> List[int]:
    """Replace loguru's default handler with stderr and optional file sinks.

    Calling it again replaces the sinks added by the previous call.

    Args:
        level: Minimum level for all sinks
        log_dir: Directory for rotating log files; no file sink when empty

    Returns:
        Ids of the sinks that were added
    """
    logger.remove()
    _sink_ids.clear()
    _sink_ids.append(logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT))
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        _sink_ids.append(
            logger.add(
                directory / "fishdex_{time:YYYY-MM-DD}.log",
                level=level.upper(),
                format=LOG_FORMAT,
                rotation="10 MB",
                retention="14 days",
                encoding="utf-8",
            )
        )
    logger.debug(f"Logging configured: level={level.upper()} log_dir={log_dir or '-'}")
    return list(_sink_ids)
