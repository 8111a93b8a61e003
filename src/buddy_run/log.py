"""Logging setup for the CI log."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from .actions import ActionsPlatform

LOGGER_NAME = "buddy_run"


class SecretMaskingFilter(logging.Filter):
    """Redact every secret registered with the platform."""

    def __init__(self, platform: ActionsPlatform) -> None:
        super().__init__()
        self.platform = platform

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.platform.mask(record.getMessage())
        record.args = None
        return True


class ActionsFormatter(logging.Formatter):
    """Plain messages; debug lines become ``::debug::`` commands."""

    def __init__(self) -> None:
        super().__init__("%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno <= logging.DEBUG:
            return f"::debug::{message}"
        if record.levelno >= logging.ERROR:
            return f"::error::{message}"
        if record.levelno >= logging.WARNING:
            return f"::warning::{message}"
        return message


def configure_logging(
    platform: ActionsPlatform,
    level: str | int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(ActionsFormatter())
    handler.addFilter(SecretMaskingFilter(platform))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
