"""
HueMatch Structured Logging
loguru sink setup plus a thin wrapper that attaches ``extra`` fields to records.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from huematch.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message} | {extra}"


class StructuredLogger:
    """Logger for the palette services; every call may carry an ``extra`` dict."""

    def __init__(self, **context: Any):
        self._logger = logger.bind(**context) if context else logger

    @staticmethod
    def configure():
        """Replace loguru's default sink with the configured stdout sink."""
        logger.remove()
        logger.add(
            sys.stdout,
            format=LOG_FORMAT,
            level=config.LOG_LEVEL,
            serialize=config.LOG_SERIALIZE,
        )

    def bind(self, **context: Any) -> "StructuredLogger":
        """Return a logger that adds ``context`` to every record, e.g. a request id."""
        child = StructuredLogger()
        child._logger = self._logger.bind(**context)
        return child

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        target = self._logger.bind(**extra) if extra else self._logger
        # depth=2 reports the caller of info()/warning() rather than this helper
        target.opt(depth=2).log(level, message)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("DEBUG", message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("ERROR", message, extra)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log at ERROR with the active traceback attached."""
        target = self._logger.bind(**extra) if extra else self._logger
        target.opt(depth=1, exception=True).error(message)


_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create the global logger, configuring the sink on first use."""
    global _logger
    if _logger is None:
        StructuredLogger.configure()
        _logger = StructuredLogger()
    return _logger
