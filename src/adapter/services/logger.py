"""
Structured logger

ILogger implementation over the standard library logging module.
Context travels on each record as ``record.context`` and is rendered as
key=value pairs by ContextFormatter.
"""

import logging
from typing import Any, Dict, Optional

from src.app.services.logger import ILogger

AUDIT_LOGGER_NAME = "audit"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s%(context_text)s"


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        context = getattr(record, "context", None) or {}
        record.context_text = "".join(f" {key}={value}" for key, value in context.items() if value is not None)
        return super().format(record)


def configure_logging(level: str = "INFO") -> None:
    """Install the context formatter on the root logger. Safe to call twice."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in root.handlers:
        if isinstance(handler.formatter, ContextFormatter):
            return

    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter(LOG_FORMAT))
    root.addHandler(handler)


class StructuredLogger(ILogger):
    def __init__(
        self,
        name: str = "src",
        context: Optional[Dict[str, Any]] = None,
        audit_logger: Optional[logging.Logger] = None,
    ):
        self._logger = logging.getLogger(name)
        self._audit_logger = audit_logger or logging.getLogger(AUDIT_LOGGER_NAME)
        self._context = dict(context or {})

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, context)

    def warn(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, context)

    def error(
        self,
        message: str,
        error: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = dict(context or {})
        if error is not None:
            merged["error_type"] = type(error).__name__
            merged["error"] = str(error)
            error_code = getattr(error, "code", None)
            if error_code:
                merged["error_code"] = error_code
        self._log(logging.ERROR, message, merged)

    def audit(self, action: str, actor_id: Optional[str], context: Optional[Dict[str, Any]] = None) -> None:
        merged = {**self._context, **(context or {}), "actor_id": actor_id}
        self._audit_logger.info(action, extra={"context": merged})

    def child(self, context: Dict[str, Any]) -> "StructuredLogger":
        return StructuredLogger(
            self._logger.name,
            {**self._context, **context},
            self._audit_logger,
        )

    def _log(self, level: int, message: str, context: Optional[Dict[str, Any]]) -> None:
        self._logger.log(level, message, extra={"context": {**self._context, **(context or {})}})
