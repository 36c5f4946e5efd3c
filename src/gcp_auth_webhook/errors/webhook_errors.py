"""
Webhook error hierarchy with categorization and user guidance.

This module defines the error types used throughout the webhook, giving
the admission path a clear mapping to HTTP and admission responses and
giving the reconciler a single error type to log and move past.
"""


class WebhookError(Exception):
    """
    Base error class for all webhook-related exceptions.

    Provides categorization and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize webhook error.

        Args:
            message: Human-readable error description
            category: Error category (request, decode, encode, reconcile, ...)
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.user_action = user_action
        self.cause = cause

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class EmptyBodyError(WebhookError):
    """The admission request carried no payload."""

    def __init__(self, message: str = "empty body"):
        super().__init__(message=message, category="request")


class DecodeError(WebhookError):
    """The admission envelope or the embedded object could not be parsed."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message=message, category="decode", cause=cause)


class EncodeError(WebhookError):
    """The admission response could not be serialized."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message=message, category="encode", cause=cause)


class ReconcileError(WebhookError):
    """Error raised when a namespace's pull secret cannot be provisioned."""

    def __init__(
        self,
        message: str,
        namespace: str | None = None,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        if namespace:
            message = f"Namespace {namespace}: {message}"
        super().__init__(
            message=message,
            category="reconcile",
            user_action=user_action,
            cause=cause,
        )
        self.namespace = namespace


class KubernetesAPIError(ReconcileError):
    """Error communicating with Kubernetes API."""

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        namespace: str | None = None,
    ):
        if reason:
            message = f"{message} (reason: {reason})"

        super().__init__(
            message=f"Kubernetes API error: {message}",
            namespace=namespace,
            user_action="Check RBAC permissions and cluster connectivity",
        )
        self.reason = reason


class CredentialError(ReconcileError):
    """Error obtaining a registry token from the credential source."""

    def __init__(
        self,
        message: str,
        namespace: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message=f"Credential error: {message}",
            namespace=namespace,
            user_action=(
                "Check the application default credentials available to the webhook"
            ),
            cause=cause,
        )


class ConfigurationError(WebhookError):
    """Error in webhook configuration."""

    def __init__(self, message: str, user_action: str | None = None):
        super().__init__(
            message=message,
            category="configuration",
            user_action=user_action or "Review and correct configuration",
        )


class UpdateCheckError(WebhookError):
    """The releases feed could not be fetched or understood."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message=message, category="update_check", cause=cause)
