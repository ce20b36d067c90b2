"""
Structured logging configuration for the RFQ Capacity Planner.

Uses structlog for consistent, machine-parseable log output.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from rfq_capacity.config.settings import settings


def setup_logging() -> None:
    """
    Configure structured logging for the application.

    Sets up structlog with appropriate processors based on environment.
    """
    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class RequestLogger:
    """Middleware-style request logging for FastAPI."""

    def __init__(self):
        self.logger = get_logger("request")

    def log_request(self, method: str, path: str, **extra: Any) -> None:
        """Log incoming request."""
        self.logger.info("request_received", method=method, path=path, **extra)

    def log_response(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        **extra: Any,
    ) -> None:
        """Log outgoing response."""
        log_method = self.logger.info if status_code < 400 else self.logger.warning
        log_method(
            "request_completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
            **extra,
        )


class AuditLogger:
    """
    Audit logging for changes to capacity configuration.

    Logs to a separate audit trail so configuration drift can be traced.
    """

    def __init__(self):
        self.logger = get_logger("audit")

    def log_action(
        self,
        action: str,
        resource_type: str,
        resource_id: str | None = None,
        old_values: dict | None = None,
        new_values: dict | None = None,
        metadata: dict | None = None,
    ) -> None:
        """
        Log an auditable action.

        Args:
            action: Action type (create, update)
            resource_type: Type of resource affected
            resource_id: ID of affected resource
            old_values: Previous values (for updates)
            new_values: New values (for creates/updates)
            metadata: Additional context
        """
        self.logger.info(
            "audit_event",
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_values=old_values,
            new_values=new_values,
            metadata=metadata,
        )


class ServiceLogger:
    """
    Service-level logging for business operations.

    Provides consistent logging across service modules.
    """

    def __init__(self, service_name: str):
        self.logger = get_logger(f"service.{service_name}")
        self.service_name = service_name

    def log_operation_start(self, operation: str, **kwargs: Any) -> None:
        """Log start of a business operation."""
        self.logger.info(
            f"{operation}_started",
            service=self.service_name,
            **kwargs,
        )

    def log_operation_complete(
        self,
        operation: str,
        duration_ms: float | None = None,
        **kwargs: Any,
    ) -> None:
        """Log successful completion of an operation."""
        self.logger.info(
            f"{operation}_completed",
            service=self.service_name,
            duration_ms=round(duration_ms, 2) if duration_ms else None,
            **kwargs,
        )

    def log_operation_failed(
        self,
        operation: str,
        error: Exception,
        **kwargs: Any,
    ) -> None:
        """Log failed operation with error details."""
        self.logger.error(
            f"{operation}_failed",
            service=self.service_name,
            error_type=type(error).__name__,
            error_message=str(error),
            **kwargs,
        )


# Global logger instances
request_logger = RequestLogger()
audit_logger = AuditLogger()
