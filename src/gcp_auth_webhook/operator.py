#!/usr/bin/env python3
"""
GCP Auth Webhook - Main entry point for the kopf-based webhook process.

This process runs:
- The mutating admission webhook server (/mutate, /mutate/sa)
- The namespace watch provisioning the registry pull secret
- A periodic check for newer webhook releases

Usage:
    python -m gcp_auth_webhook.operator
    # Or with kopf directly:
    kopf run -m gcp_auth_webhook.operator --all-namespaces --standalone

Environment Variables:
    See gcp_auth_webhook.settings for the full list.
"""

import asyncio
import logging
import sys

import kopf

from gcp_auth_webhook import __version__
from gcp_auth_webhook.observability.logging import setup_structured_logging
from gcp_auth_webhook.services.credentials import GoogleCredentialSource
from gcp_auth_webhook.services.namespace_reconciler import NamespaceReconciler
from gcp_auth_webhook.services.update_checker import UpdateChecker
from gcp_auth_webhook.settings import settings as webhook_settings
from gcp_auth_webhook.utils.kubernetes import load_kubernetes_config
from gcp_auth_webhook.utils.secret_manager import SecretManager
from gcp_auth_webhook.webhooks.server import WebhookServer, create_ssl_context

# Import the namespace handler module to register it with kopf ONLY if the
# namespace watch is enabled.
if webhook_settings.namespace_watch_enabled:
    from gcp_auth_webhook.handlers import namespace  # noqa: F401


def configure_logging() -> None:
    """Configure structured logging for the webhook based on settings."""
    setup_structured_logging(
        log_level=webhook_settings.log_level.upper(),
        enable_json_formatting=webhook_settings.json_logs,
        correlation_id_enabled=webhook_settings.correlation_ids,
        log_health_checks=webhook_settings.log_health_checks,
    )


@kopf.on.startup()
async def startup_handler(
    settings: kopf.OperatorSettings, memo: kopf.Memo, **_
) -> None:
    """
    Webhook process startup.

    Starts the admission webhook server, prepares the namespace reconciler
    and backfills existing namespaces, and starts the update checker.
    """
    logging.info(f"GCP Auth Webhook {__version__} starting...")

    settings.watching.reconnect_backoff = 1.0
    settings.posting.enabled = False

    load_kubernetes_config()

    ssl_context = None
    if webhook_settings.webhook_tls_enabled:
        ssl_context = create_ssl_context(
            webhook_settings.webhook_cert_file, webhook_settings.webhook_key_file
        )
    server = WebhookServer(
        port=webhook_settings.webhook_port,
        host=webhook_settings.webhook_host,
        ssl_context=ssl_context,
    )
    await server.start()
    memo.webhook_server = server

    if webhook_settings.namespace_watch_enabled:
        try:
            reconciler = NamespaceReconciler(
                credential_source=GoogleCredentialSource(),
                secret_manager=SecretManager(),
            )
            if webhook_settings.backfill_on_startup:
                await reconciler.backfill()
        except Exception:
            # Release the port so a retried startup can bind it again
            await server.stop()
            memo.webhook_server = None
            raise
        memo.namespace_reconciler = reconciler
    else:
        logging.info("Namespace watch DISABLED, pull secrets will not be created")

    if webhook_settings.update_check_enabled:
        memo.update_task = asyncio.create_task(UpdateChecker().run())


@kopf.on.cleanup()
async def cleanup_handler(memo: kopf.Memo, **_) -> None:
    """Stop the webhook server and background tasks."""
    logging.info("Shutting down GCP Auth Webhook...")

    update_task = memo.get("update_task")
    if update_task is not None:
        update_task.cancel()
        try:
            await update_task
        except asyncio.CancelledError:
            pass

    server = memo.get("webhook_server")
    if server is not None:
        await server.stop()


@kopf.on.probe(id="healthz")
async def health_check(memo: kopf.Memo, **_) -> dict[str, str]:
    """
    Health check for Kubernetes liveness checks.

    Returns:
        Dictionary indicating webhook health status
    """
    server = memo.get("webhook_server")
    status = "healthy" if server is not None and server.site is not None else "starting"
    return {"status": status, "webhook": "gcp-auth-webhook"}


def main() -> None:
    """
    Main entry point for the webhook process.

    This function:
    1. Configures logging
    2. Runs kopf cluster-wide and standalone (no peering)
    """
    configure_logging()

    try:
        kopf.run(
            clusterwide=True,
            standalone=True,
            liveness_endpoint="http://0.0.0.0:8080/healthz",
        )
    except KeyboardInterrupt:
        logging.info("Received shutdown signal")
        sys.exit(0)
    except Exception as e:
        logging.error(f"Webhook failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
