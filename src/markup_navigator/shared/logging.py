"""Structured logging utilities for markup navigation.

Every record emitted through :class:`ContextLogger` carries the component name
and the identity of the document being navigated, so log output from several
open documents can be told apart.
"""

import logging
from typing import Any, Dict, Optional


class ContextLogger:
    """Logger that automatically includes document and component information."""

    def __init__(
        self,
        name: str,
        document_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize context logger.

        Args:
            name: Logger name (typically __name__)
            document_id: Identity of the document the messages relate to
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.document_id = document_id
        self.component = component or name.split(".")[-1]

    def bind(self, document_id: Optional[str]) -> "ContextLogger":
        """Return a logger for the same component bound to another document."""
        return ContextLogger(self.logger.name, document_id, self.component)

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "document_id": self.document_id,
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a message at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log debug message with context info."""
        self.logger.debug(message, extra=self._get_extra(extra), exc_info=exc_info)

    def info(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log info message with context info."""
        self.logger.info(message, extra=self._get_extra(extra), exc_info=exc_info)

    def warning(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log warning message with context info."""
        self.logger.warning(message, extra=self._get_extra(extra), exc_info=exc_info)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log error message with context info."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)

    def exception(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log exception message with context info and traceback."""
        self.logger.exception(message, extra=self._get_extra(extra))


def get_logger(
    name: str,
    document_id: Optional[str] = None,
    component: Optional[str] = None
) -> ContextLogger:
    """Get a context-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        document_id: Optional document identity
        component: Component name for structured logging

    Returns:
        ContextLogger instance
    """
    return ContextLogger(name, document_id, component)
