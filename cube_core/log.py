"""
Logging setup for the cube engine (loguru).

The engine logs operation-graph construction at DEBUG and collection
materialisation at TRACE. As a library it starts disabled; applications
opt in:

    from cube_core.log import configure_logging
    configure_logging()                      # uses get_settings().log
"""

from __future__ import annotations
from typing import Optional
import sys

from loguru import logger

from .config import LogSettings, get_settings

_SINK_IDS: list = []

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"


def configure_logging(settings: Optional[LogSettings] = None) -> None:
    """
    Enable cube_core logging and (re)install its sinks.

    Repeated calls replace the sinks added by the previous call.
    """
    settings = settings or get_settings().log

    for sink_id in _SINK_IDS:
        logger.remove(sink_id)
    _SINK_IDS.clear()

    _SINK_IDS.append(
        logger.add(
            sys.stderr,
            level=settings.level,
            format=LOG_FORMAT,
            filter="cube_core",
        )
    )
    if settings.sink:
        _SINK_IDS.append(
            logger.add(
                settings.sink,
                level=settings.level,
                format=LOG_FORMAT,
                rotation=settings.rotation,
                retention=settings.retention,
                filter="cube_core",
                enqueue=True,
            )
        )

    logger.enable("cube_core")
    logger.debug("cube_core logging configured at {}", settings.level)


def disable_logging() -> None:
    logger.disable("cube_core")
