"""
Structured logging utilities for the GCP auth webhook.

This module provides correlation ID tracking and structured log formatting.
Admission reviews use the request UID as correlation ID, namespace
reconciliations use a generated one.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

# Context variable for tracking correlation IDs across async operations
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Paths that should be filtered from access logs (health checks)
HEALTH_CHECK_PATHS = frozenset({"/healthz", "/metrics"})

# Extra record attributes copied into the JSON payload
STRUCTURED_FIELDS = (
    "namespace",
    "resource_kind",
    "resource_name",
    "operation",
    "endpoint",
    "request_uid",
    "allowed",
    "patch_operations",
    "outcome",
    "duration",
    "error_type",
)


class HealthCheckFilter(logging.Filter):
    """
    Logging filter that suppresses health check and metrics endpoint logs.

    These endpoints are hit frequently by Kubernetes liveness checks and monitoring
    systems, generating excessive noise in logs during debugging.
    """

    def __init__(self, suppress_health_logs: bool = True):
        super().__init__()
        self.suppress_health_logs = suppress_health_logs

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.suppress_health_logs:
            return True

        message = record.getMessage()
        return all(path not in message for path in HEALTH_CHECK_PATHS)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get()
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs with correlation ID support.

    Formats log records as structured JSON for better parsing and analysis
    in production monitoring systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """
    Generate a new correlation ID.

    Returns:
        Unique correlation ID string
    """
    return str(uuid.uuid4())[:8]  # Short 8-character ID for readability


def set_correlation_id(corr_id: str) -> str:
    """Set the correlation ID for the current context and return it."""
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str:
    """Get the current correlation ID, or an empty string if none is set."""
    return correlation_id.get("")


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
    log_health_checks: bool = False,
) -> None:
    """
    Set up structured logging for the webhook.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
        correlation_id_enabled: Whether to enable correlation ID tracking
        log_health_checks: Whether to log health check requests (default: False)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter: logging.Formatter = StructuredFormatter()
    elif correlation_id_enabled:
        formatter = logging.Formatter(
            "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())

    if not log_health_checks:
        handler.addFilter(HealthCheckFilter(suppress_health_logs=True))

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Set specific logger levels for third-party libraries
    logging.getLogger("kopf").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("kubernetes").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)

    # Suppress aiohttp access logs which spam with health check requests
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.server").setLevel(logging.WARNING)


class WebhookLogger:
    """
    Logger for reconciliation events with structured data.

    Provides convenient methods for logging common reconciler events
    with proper correlation ID tracking.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log_reconciliation_start(
        self, namespace: str, correlation_id: str | None = None
    ) -> str:
        """
        Log the start of a namespace reconciliation.

        Args:
            namespace: Namespace being reconciled
            correlation_id: Optional correlation ID (will generate if not provided)

        Returns:
            The correlation ID used for this operation
        """
        if correlation_id is None:
            correlation_id = generate_correlation_id()

        set_correlation_id(correlation_id)

        self.logger.debug(
            f"Starting reconciliation for namespace {namespace}",
            extra={"namespace": namespace, "operation": "reconcile_start"},
        )
        return correlation_id

    def log_reconciliation_success(
        self, namespace: str, outcome: str, duration: float
    ) -> None:
        """Log successful reconciliation completion."""
        self.logger.info(
            f"Reconciliation of namespace {namespace} finished: {outcome}",
            extra={
                "namespace": namespace,
                "operation": "reconcile_success",
                "outcome": outcome,
                "duration": duration,
            },
        )

    def log_reconciliation_error(
        self,
        namespace: str,
        error: Exception,
        duration: float,
        exc_info: bool = False,
    ) -> None:
        """Log reconciliation error."""
        self.logger.error(
            f"Reconciliation failed for namespace {namespace}: {error}",
            exc_info=exc_info,
            extra={
                "namespace": namespace,
                "operation": "reconcile_error",
                "error_type": type(error).__name__,
                "duration": duration,
            },
        )

    def info(self, message: str, **kwargs) -> None:
        """Log info message with extra data."""
        self.logger.info(message, extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message with extra data."""
        self.logger.error(message, exc_info=exc_info, extra=kwargs)
