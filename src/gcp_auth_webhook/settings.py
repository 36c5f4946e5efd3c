"""Centralized webhook settings using pydantic-settings.

This module provides a single source of truth for all webhook configuration
loaded from environment variables. Uses pydantic for automatic validation,
type coercion, and documentation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gcp_auth_webhook.constants import (
    HOST_CREDENTIALS_PATH,
    HOST_PROJECT_PATH,
    RELEASES_URL,
    SECRET_NAME,
    SYSTEM_NAMESPACE,
    UPDATE_CHECK_INTERVAL_SECONDS,
    WEBHOOK_NAMESPACE,
)


class Settings(BaseSettings):
    """Webhook configuration loaded from environment variables.

    All settings have sensible defaults for a minikube addon deployment.
    Override via environment variables as documented per field.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )
    log_health_checks: bool = Field(
        default=False,
        validation_alias="LOG_HEALTH_CHECKS",
        description="Log health check and metrics requests",
    )

    # Webhook server
    webhook_host: str = Field(
        default="0.0.0.0",
        validation_alias="WEBHOOK_HOST",
        description="Host address to bind the admission webhook server",
    )
    webhook_port: int = Field(
        default=8443,
        validation_alias="WEBHOOK_PORT",
        description="Port for admission webhook server",
    )
    webhook_tls_enabled: bool = Field(
        default=True,
        validation_alias="WEBHOOK_TLS_ENABLED",
        description="Serve the webhook over HTTPS",
    )
    webhook_cert_file: str = Field(
        default="/etc/webhook/certs/cert",
        validation_alias="WEBHOOK_CERT_FILE",
        description="Path to the serving certificate",
    )
    webhook_key_file: str = Field(
        default="/etc/webhook/certs/key",
        validation_alias="WEBHOOK_KEY_FILE",
        description="Path to the serving private key",
    )

    # Injection
    host_credentials_path: str = Field(
        default=HOST_CREDENTIALS_PATH,
        validation_alias="HOST_CREDENTIALS_PATH",
        description="Host path of the credentials file mounted into pods",
    )
    host_project_path: str = Field(
        default=HOST_PROJECT_PATH,
        validation_alias="HOST_PROJECT_PATH",
        description="Host path of the optional current project ID file",
    )
    sa_require_attached_secret: bool = Field(
        default=False,
        validation_alias="SA_REQUIRE_ATTACHED_SECRET",
        description=(
            "Only reference the pull secret on ServiceAccounts whose secrets "
            "list already names it"
        ),
    )

    # Namespace reconciliation
    secret_name: str = Field(
        default=SECRET_NAME,
        validation_alias="SECRET_NAME",
        description="Name of the image pull secret created in every namespace",
    )
    system_namespace: str = Field(
        default=SYSTEM_NAMESPACE,
        validation_alias="SYSTEM_NAMESPACE",
        description="Cluster system namespace, never mutated or reconciled",
    )
    webhook_namespace: str = Field(
        default=WEBHOOK_NAMESPACE,
        validation_alias="WEBHOOK_NAMESPACE",
        description="Namespace the webhook runs in, never mutated or reconciled",
    )
    namespace_watch_enabled: bool = Field(
        default=True,
        validation_alias="NAMESPACE_WATCH_ENABLED",
        description="Create the pull secret in newly created namespaces",
    )
    backfill_on_startup: bool = Field(
        default=True,
        validation_alias="BACKFILL_ON_STARTUP",
        description="Reconcile all existing namespaces once at startup",
    )

    # Update notification
    update_check_enabled: bool = Field(
        default=True,
        validation_alias="UPDATE_CHECK_ENABLED",
        description="Periodically check for a newer webhook release",
    )
    update_check_url: str = Field(
        default=RELEASES_URL,
        validation_alias="UPDATE_CHECK_URL",
        description="URL of the releases JSON feed",
    )
    update_check_interval_seconds: int = Field(
        default=UPDATE_CHECK_INTERVAL_SECONDS,
        validation_alias="UPDATE_CHECK_INTERVAL_SECONDS",
        description="Interval in seconds between update checks",
    )

    @property
    def excluded_namespaces(self) -> frozenset[str]:
        """Namespaces that are never mutated or reconciled against."""
        return frozenset({self.system_namespace, self.webhook_namespace})


# Global settings instance - initialized once at module import
settings = Settings()
