import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ILogger(ABC):
    """
    Structured logger port.

    Messages are stable i18n keys; context carries the structured fields.
    Audit entries form their own category, separate from operational logs.
    """

    @abstractmethod
    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def warn(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def error(
        self,
        message: str,
        error: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        pass

    @abstractmethod
    def audit(self, action: str, actor_id: Optional[str], context: Optional[Dict[str, Any]] = None) -> None:
        """Record a security-relevant action performed by actor_id"""
        pass

    @abstractmethod
    def child(self, context: Dict[str, Any]) -> "ILogger":
        """Logger that merges context into every entry"""
        pass


def elapsed_ms(started: float) -> int:
    """Milliseconds since a time.perf_counter() reading"""
    return int((time.perf_counter() - started) * 1000)
