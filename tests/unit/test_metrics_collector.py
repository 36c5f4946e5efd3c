"""
Unit tests for MetricsCollector methods in observability/metrics.py.

Tests the individual methods of MetricsCollector to verify they call the
correct Prometheus metric objects with the correct label values.
"""

from unittest.mock import MagicMock, patch

import pytest

from gcp_auth_webhook.observability.metrics import MetricsCollector


@pytest.fixture
def collector():
    """Create a MetricsCollector with the registry init patched out."""
    with patch(
        "gcp_auth_webhook.observability.metrics.get_metrics_registry",
        return_value=MagicMock(),
    ):
        return MetricsCollector()


class TestRecordAdmission:
    """Test admission review metrics."""

    @patch("gcp_auth_webhook.observability.metrics.PATCH_OPERATIONS_TOTAL")
    @patch("gcp_auth_webhook.observability.metrics.ADMISSION_REVIEW_DURATION")
    @patch("gcp_auth_webhook.observability.metrics.ADMISSION_REVIEWS_TOTAL")
    def test_allowed_review(self, mock_reviews, mock_duration, mock_ops, collector):
        """An allowed review records count, duration and patch size."""
        collector.record_admission("pod", "allowed", 0.002, patch_operations=3)

        mock_reviews.labels.assert_called_with(endpoint="pod", result="allowed")
        mock_reviews.labels().inc.assert_called_once()
        mock_duration.labels.assert_called_with(endpoint="pod")
        mock_duration.labels().observe.assert_called_with(0.002)
        mock_ops.labels.assert_called_with(endpoint="pod")
        mock_ops.labels().inc.assert_called_with(3)

    @patch("gcp_auth_webhook.observability.metrics.PATCH_OPERATIONS_TOTAL")
    @patch("gcp_auth_webhook.observability.metrics.ADMISSION_REVIEW_DURATION")
    @patch("gcp_auth_webhook.observability.metrics.ADMISSION_REVIEWS_TOTAL")
    def test_empty_patch_skips_operation_counter(
        self, mock_reviews, mock_duration, mock_ops, collector
    ):
        collector.record_admission("serviceaccount", "denied", 0.001)

        mock_reviews.labels.assert_called_with(
            endpoint="serviceaccount", result="denied"
        )
        mock_ops.labels.assert_not_called()


class TestRecordReconciliation:
    """Test namespace reconciliation metrics."""

    @patch("gcp_auth_webhook.observability.metrics.NAMESPACE_RECONCILIATIONS_TOTAL")
    def test_outcome_label(self, mock_total, collector):
        collector.record_reconciliation("created")

        mock_total.labels.assert_called_with(outcome="created")
        mock_total.labels().inc.assert_called_once()
