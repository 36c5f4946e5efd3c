"""
Observability utilities for the GCP auth webhook.

This module provides metrics and structured logging capabilities for
production monitoring and troubleshooting.
"""

from .logging import WebhookLogger, setup_structured_logging
from .metrics import get_metrics_registry, metrics_collector

__all__ = [
    "get_metrics_registry",
    "metrics_collector",
    "WebhookLogger",
    "setup_structured_logging",
]
