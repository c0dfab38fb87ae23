"""Logging configuration for the media uploader."""

from __future__ import annotations

import logging
from typing import Any

import structlog

LOG_TAG = "Remote Media Uploader"


def configure_logging(debug: bool = False) -> None:
    """Configure stdlib logging and route structlog through it."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


class DebugLog:
    """Failure sink writing ``[tag] message`` lines when debug logging is on."""

    def __init__(self, enabled: bool, *, tag: str = LOG_TAG) -> None:
        self.enabled = enabled
        self.tag = tag
        self._log = structlog.get_logger("uploader.debug")

    def failure(self, event: str, message: str, **fields: Any) -> None:
        if not self.enabled:
            return
        self._log.error(event, message=f"[{self.tag}] {message}", **fields)


__all__ = ["DebugLog", "LOG_TAG", "configure_logging"]
