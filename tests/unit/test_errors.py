"""Unit tests for the webhook error hierarchy."""

from gcp_auth_webhook.errors import (
    ConfigurationError,
    CredentialError,
    DecodeError,
    EmptyBodyError,
    KubernetesAPIError,
    ReconcileError,
    UpdateCheckError,
    WebhookError,
)


class TestWebhookErrors:
    """Test error messages and categorization."""

    def test_empty_body_message(self):
        assert str(EmptyBodyError()) == "empty body"

    def test_decode_error_keeps_cause(self):
        cause = ValueError("bad json")
        error = DecodeError("could not decode admission review: bad json", cause=cause)

        assert error.category == "decode"
        assert error.cause is cause
        assert str(error) == "could not decode admission review: bad json"

    def test_reconcile_error_prefixes_namespace(self):
        error = ReconcileError("secret missing", namespace="team-a")

        assert error.message == "Namespace team-a: secret missing"
        assert error.category == "reconcile"

    def test_kubernetes_error_carries_reason(self):
        error = KubernetesAPIError("create failed", reason="Forbidden")

        assert error.reason == "Forbidden"
        assert "reason: Forbidden" in error.message
        assert "Action required: Check RBAC" in str(error)

    def test_credential_error_is_reconcile_error(self):
        error = CredentialError("no token")

        assert isinstance(error, ReconcileError)
        assert "Credential error: no token" in str(error)

    def test_update_check_error_is_webhook_error(self):
        error = UpdateCheckError("no releases found in releases file")

        assert isinstance(error, WebhookError)
        assert error.category == "update_check"

    def test_configuration_error_default_action(self):
        assert "Review and correct configuration" in str(ConfigurationError("bad"))
