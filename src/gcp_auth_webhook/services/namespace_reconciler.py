"""
Namespace reconciler provisioning the registry pull secret.

For every namespace it observes, the reconciler walks:

    Observed -> Excluded | Eligible -> SecretChecked -> Exists | Created

Excluded namespaces (the system namespace and the webhook's own) are left
alone. Eligible namespaces get the pull secret if it is missing. Secrets are
created once and never refreshed.

Checking and creating are not atomic: a backfill pass and a live event can
both see the secret missing. The losing create gets a conflict, which is
treated as "already exists".
"""

import asyncio
import time
from collections.abc import AsyncIterable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from gcp_auth_webhook.constants import DOCKERCFG_EMAIL, OAUTH_TOKEN_USERNAME
from gcp_auth_webhook.errors import ReconcileError
from gcp_auth_webhook.observability.logging import WebhookLogger
from gcp_auth_webhook.observability.metrics import metrics_collector
from gcp_auth_webhook.services.credentials import CredentialSource
from gcp_auth_webhook.settings import settings
from gcp_auth_webhook.utils.secret_manager import SecretManager

# Watch event types that mean "this namespace is new to us". kopf reports
# the initial listing with no type.
CREATION_EVENT_TYPES = frozenset({None, "ADDED"})


class ReconcileOutcome(StrEnum):
    EXCLUDED = "excluded"
    EXISTS = "exists"
    CREATED = "created"
    FAILED = "failed"


@dataclass(frozen=True)
class NamespaceEvent:
    """A namespace watch event reduced to what the reconciler needs."""

    type: str | None
    namespace: str


def build_dockercfg(token: str, registries: Sequence[str]) -> dict[str, dict[str, str]]:
    """
    Build the legacy per-registry auth map for a bearer token.

    Args:
        token: OAuth access token
        registries: Registry hosts the token authorizes

    Returns:
        Mapping of ``https://<host>`` to username/password/email entries
    """
    return {
        f"https://{registry}": {
            "username": OAUTH_TOKEN_USERNAME,
            "password": token,
            "email": DOCKERCFG_EMAIL,
        }
        for registry in registries
    }


class NamespaceReconciler:
    """Ensures every eligible namespace carries the registry pull secret."""

    def __init__(
        self,
        credential_source: CredentialSource,
        secret_manager: SecretManager | None = None,
        secret_name: str | None = None,
        excluded_namespaces: frozenset[str] | None = None,
    ):
        """
        Initialize namespace reconciler.

        Args:
            credential_source: Supplies the registry token and hosts
            secret_manager: Kubernetes secret access, created if not provided
            secret_name: Name of the pull secret
            excluded_namespaces: Namespaces never reconciled against
        """
        self.credential_source = credential_source
        self.secret_manager = secret_manager or SecretManager()
        self.secret_name = secret_name or settings.secret_name
        self.excluded_namespaces = (
            excluded_namespaces
            if excluded_namespaces is not None
            else settings.excluded_namespaces
        )
        self.logger = WebhookLogger(self.__class__.__name__)

    def is_excluded(self, namespace: str) -> bool:
        return namespace in self.excluded_namespaces

    async def reconcile(self, namespace: str) -> ReconcileOutcome:
        """
        Make sure the pull secret exists in a namespace.

        Args:
            namespace: Namespace to reconcile

        Returns:
            What the reconciliation found or did

        Raises:
            ReconcileError: If listing secrets, fetching the token or
                creating the secret fails
        """
        if self.is_excluded(namespace):
            return ReconcileOutcome.EXCLUDED

        if await self.secret_manager.secret_exists(self.secret_name, namespace):
            return ReconcileOutcome.EXISTS

        token = await asyncio.to_thread(self.credential_source.token)
        dockercfg = build_dockercfg(token, self.credential_source.registries())

        created = await self.secret_manager.create_pull_secret(
            name=self.secret_name, namespace=namespace, dockercfg=dockercfg
        )
        return ReconcileOutcome.CREATED if created else ReconcileOutcome.EXISTS

    async def process(self, namespace: str) -> ReconcileOutcome:
        """
        Reconcile one namespace, logging instead of raising on any failure.

        Returns:
            The outcome, FAILED when reconciliation raised
        """
        start_time = time.time()
        self.logger.log_reconciliation_start(namespace)
        try:
            outcome = await self.reconcile(namespace)
        except ReconcileError as e:
            self.logger.log_reconciliation_error(namespace, e, time.time() - start_time)
            outcome = ReconcileOutcome.FAILED
        except Exception as e:
            self.logger.log_reconciliation_error(
                namespace, e, time.time() - start_time, exc_info=True
            )
            outcome = ReconcileOutcome.FAILED
        else:
            self.logger.log_reconciliation_success(
                namespace, outcome, time.time() - start_time
            )
        metrics_collector.record_reconciliation(outcome)
        return outcome

    async def handle_event(self, event: NamespaceEvent) -> ReconcileOutcome | None:
        """
        Handle one namespace watch event.

        Returns:
            The reconciliation outcome, or None for events that are not
            namespace creations
        """
        if event.type not in CREATION_EVENT_TYPES:
            return None
        return await self.process(event.namespace)

    async def consume(self, events: AsyncIterable[NamespaceEvent]) -> None:
        """
        Process a namespace event stream one event at a time.

        Returns when the stream ends; restarting is up to the caller.
        """
        async for event in events:
            await self.handle_event(event)
        self.logger.info("Namespace event stream closed")

    async def backfill(self) -> dict[str, ReconcileOutcome]:
        """
        Reconcile every namespace that currently exists.

        Returns:
            Outcome per namespace name, empty if namespaces could not be listed
        """
        try:
            namespaces = await self.secret_manager.list_namespaces()
        except Exception as e:
            self.logger.error(
                f"Backfill skipped: {e}",
                exc_info=not isinstance(e, ReconcileError),
                error_type=type(e).__name__,
            )
            return {}

        self.logger.info(f"Backfilling pull secret into {len(namespaces)} namespaces")
        return {namespace: await self.process(namespace) for namespace in namespaces}
