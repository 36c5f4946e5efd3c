"""
Prometheus metrics for the GCP auth webhook.

This module provides metrics for admission review handling and namespace
secret reconciliation, exposed on the webhook server's /metrics endpoint.
"""

import logging

from aiohttp.web import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# Global metrics registry
_metrics_registry: CollectorRegistry | None = None

# Metrics definitions
ADMISSION_REVIEWS_TOTAL = Counter(
    "gcp_auth_webhook_admission_reviews_total",
    "Total number of admission reviews handled",
    ["endpoint", "result"],
    registry=None,  # Will be set during initialization
)

ADMISSION_REVIEW_DURATION = Histogram(
    "gcp_auth_webhook_admission_review_duration_seconds",
    "Time spent building admission responses",
    ["endpoint"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0],
    registry=None,
)

PATCH_OPERATIONS_TOTAL = Counter(
    "gcp_auth_webhook_patch_operations_total",
    "Total number of JSON patch operations returned",
    ["endpoint"],
    registry=None,
)

NAMESPACE_RECONCILIATIONS_TOTAL = Counter(
    "gcp_auth_webhook_namespace_reconciliations_total",
    "Total number of namespace pull secret reconciliations",
    ["outcome"],
    registry=None,
)


def get_metrics_registry() -> CollectorRegistry:
    """Get or create the global metrics registry."""
    global _metrics_registry

    if _metrics_registry is None:
        _metrics_registry = CollectorRegistry()

        for metric in [
            ADMISSION_REVIEWS_TOTAL,
            ADMISSION_REVIEW_DURATION,
            PATCH_OPERATIONS_TOTAL,
            NAMESPACE_RECONCILIATIONS_TOTAL,
        ]:
            _metrics_registry.register(metric)

    return _metrics_registry


class MetricsCollector:
    """Collects and manages metrics for the webhook."""

    def __init__(self):
        """Initialize metrics collector."""
        self.registry = get_metrics_registry()

    def record_admission(
        self, endpoint: str, result: str, duration: float, patch_operations: int = 0
    ) -> None:
        """
        Record one handled admission review.

        Args:
            endpoint: Endpoint the review arrived on
            result: allowed, denied, rejected or error
            duration: Handling time in seconds
            patch_operations: Number of patch operations returned
        """
        ADMISSION_REVIEWS_TOTAL.labels(endpoint=endpoint, result=result).inc()
        ADMISSION_REVIEW_DURATION.labels(endpoint=endpoint).observe(duration)
        if patch_operations:
            PATCH_OPERATIONS_TOTAL.labels(endpoint=endpoint).inc(patch_operations)

    def record_reconciliation(self, outcome: str) -> None:
        """Record the outcome of one namespace reconciliation."""
        NAMESPACE_RECONCILIATIONS_TOTAL.labels(outcome=outcome).inc()


async def metrics_handler(request: Request) -> Response:
    """Handle /metrics endpoint for Prometheus scraping."""
    try:
        metrics_data = generate_latest(get_metrics_registry())
        return Response(
            body=metrics_data, headers={"Content-Type": CONTENT_TYPE_LATEST}
        )
    except Exception as e:
        logger.error(f"Failed to generate metrics: {e}")
        return Response(
            text=f"Error generating metrics: {type(e).__name__}. Check logs for details.",
            status=500,
        )


# Global metrics collector instance
metrics_collector = MetricsCollector()
