"""Structlog logger factory and service mixin for zmk-export."""

import logging
from typing import Any

import structlog


def get_struct_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger with the given name.

    Args:
        name: The logger name, usually __name__

    Returns:
        A bound structlog logger instance

    Note: For exception logging with debug stack traces, use this pattern:
        try:
            # some operation
        except Exception as e:
            exc_info = logger.isEnabledFor(logging.DEBUG)
            logger.error("operation_failed", error=str(e), exc_info=exc_info)
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]


class StructlogMixin:
    """Mixin giving services a logger bound to the service name."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Get or create a logger for this service with bound context."""
        if self._logger is None:
            base_logger = get_struct_logger(self.__class__.__module__)
            self._logger = base_logger.bind(service=self.__class__.__name__)
        return self._logger

    def log_operation(
        self, operation: str, **context: Any
    ) -> structlog.stdlib.BoundLogger:
        """Get a logger bound to a specific operation.

        Args:
            operation: Name of the operation being performed
            **context: Additional context for the operation

        Returns:
            Logger bound with operation context
        """
        return self.logger.bind(operation=operation, **context)

    def log_error_with_context(
        self,
        message: str,
        error: Exception,
        **context: Any,
    ) -> None:
        """Log an error with structured context, with a stack trace in debug mode.

        Args:
            message: Error message/event name
            error: The exception that occurred
            **context: Additional context
        """
        exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
        self.logger.error(
            message,
            error=str(error),
            error_type=error.__class__.__name__,
            exc_info=exc_info,
            **context,
        )
