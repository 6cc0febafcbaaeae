from __future__ import annotations

import logging
import sys
from typing import Optional, Dict, Union

from model_attributes.config import settings

LogContext = Dict[str, Union[str, int, float, bool, None]]

ROOT_LOGGER = 'model_attributes'


def _configure_root() -> None:
    """Attach the package handler once; module loggers propagate to it."""
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    handler.setLevel(getattr(logging, settings.LOG_LEVEL, logging.WARNING))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


class LaravelStyleLogger:
    """Logger that appends ``key=value`` context to each message."""

    def __init__(self, name: str = ROOT_LOGGER) -> None:
        _configure_root()
        self.name = name
        self.logger = logging.getLogger(name)

    def debug(self, message: str, context: Optional[LogContext] = None) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_message(message, context))

    def info(self, message: str, context: Optional[LogContext] = None) -> None:
        self.logger.info(self._format_message(message, context))

    def warning(self, message: str, context: Optional[LogContext] = None) -> None:
        self.logger.warning(self._format_message(message, context))

    def error(self, message: str, context: Optional[LogContext] = None) -> None:
        self.logger.error(self._format_message(message, context))

    def _format_message(self, message: str, context: Optional[LogContext] = None) -> str:
        if not context:
            return message
        return " | ".join([message, *(f"{k}={v}" for k, v in context.items())])


def get_logger(name: Optional[str] = None) -> LaravelStyleLogger:
    """Get a logger under the package namespace."""
    return LaravelStyleLogger(name or ROOT_LOGGER)
