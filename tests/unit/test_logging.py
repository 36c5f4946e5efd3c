"""Unit tests for structured logging helpers."""

import json
import logging

from gcp_auth_webhook.observability.logging import (
    CorrelationIDFilter,
    HealthCheckFilter,
    StructuredFormatter,
    get_correlation_id,
    set_correlation_id,
)


def make_record(message, **extra):
    record = logging.LogRecord(
        name="gcp_auth_webhook.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON log formatting."""

    def test_includes_structured_fields(self):
        record = make_record(
            "Admission review for pod allowed",
            endpoint="pod",
            request_uid="abc",
            patch_operations=3,
            correlation_id="abc",
        )

        payload = json.loads(StructuredFormatter().format(record))

        assert payload["message"] == "Admission review for pod allowed"
        assert payload["level"] == "INFO"
        assert payload["endpoint"] == "pod"
        assert payload["request_uid"] == "abc"
        assert payload["patch_operations"] == 3
        assert payload["correlation_id"] == "abc"

    def test_omits_absent_fields(self):
        payload = json.loads(StructuredFormatter().format(make_record("hello")))

        assert "namespace" not in payload
        assert "outcome" not in payload


class TestFilters:
    """Test logging filters."""

    def test_health_check_filter_drops_health_logs(self):
        check_filter = HealthCheckFilter()

        assert check_filter.filter(make_record('"GET /healthz HTTP/1.1" 200')) is False
        assert check_filter.filter(make_record("POST /mutate")) is True

    def test_health_check_filter_can_be_disabled(self):
        check_filter = HealthCheckFilter(suppress_health_logs=False)

        assert check_filter.filter(make_record("GET /metrics")) is True

    def test_correlation_id_filter(self):
        set_correlation_id("req-42")
        record = make_record("hello")

        CorrelationIDFilter().filter(record)

        assert record.correlation_id == "req-42"
        assert get_correlation_id() == "req-42"
