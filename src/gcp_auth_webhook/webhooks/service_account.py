"""
Mutating admission webhook for ServiceAccounts.

Adds the registry pull secret to the imagePullSecrets of new service
accounts so that pods running under them can pull from Google registries.
"""

import logging

from pydantic import ValidationError

from gcp_auth_webhook.constants import ERROR_DECODE_OBJECT
from gcp_auth_webhook.errors import DecodeError
from gcp_auth_webhook.models.admission import AdmissionRequest
from gcp_auth_webhook.models.core import LocalObjectReference, ServiceAccount
from gcp_auth_webhook.settings import settings
from gcp_auth_webhook.webhooks.patch_builder import (
    PatchOperation,
    add_operation,
    append_unique,
    has_named,
    json_pointer,
)

logger = logging.getLogger(__name__)


class ServiceAccountMutator:
    """
    Builds the pull secret patch for a ServiceAccount.

    With ``require_attached_secret`` set, the pull secret is only referenced
    when the account's ``secrets`` list already names it. Otherwise it is
    always referenced.
    """

    def __init__(
        self,
        secret_name: str | None = None,
        excluded_namespaces: frozenset[str] | None = None,
        require_attached_secret: bool | None = None,
    ):
        self.secret_name = secret_name or settings.secret_name
        self.excluded_namespaces = (
            excluded_namespaces
            if excluded_namespaces is not None
            else settings.excluded_namespaces
        )
        self.require_attached_secret = (
            require_attached_secret
            if require_attached_secret is not None
            else settings.sa_require_attached_secret
        )

    def decode(self, raw_object: dict | None) -> ServiceAccount:
        """
        Parse the raw admission object into a ServiceAccount view.

        Raises:
            DecodeError: If the object is missing or is not a valid ServiceAccount
        """
        if raw_object is None:
            raise DecodeError(
                ERROR_DECODE_OBJECT.format("ServiceAccount", "object is missing")
            )
        try:
            return ServiceAccount.model_validate(raw_object)
        except ValidationError as e:
            raise DecodeError(
                ERROR_DECODE_OBJECT.format("ServiceAccount", e), cause=e
            ) from e

    def patch_for(self, request: AdmissionRequest) -> list[PatchOperation]:
        """Decode the request's object and build its patch."""
        service_account = self.decode(request.raw_object)
        return self.mutate(service_account, request_namespace=request.namespace)

    def mutate(
        self, service_account: ServiceAccount, request_namespace: str | None = None
    ) -> list[PatchOperation]:
        """
        Build the patch adding the pull secret reference.

        Args:
            service_account: ServiceAccount under review
            request_namespace: Namespace from the admission request, used
                when the object itself does not carry one

        Returns:
            A single add operation, or an empty list when nothing is needed
        """
        namespace = service_account.metadata.namespace or request_namespace or ""
        name = service_account.metadata.name

        if namespace in self.excluded_namespaces:
            logger.debug(f"Skipping service account in excluded namespace {namespace}")
            return []

        if has_named(service_account.image_pull_secrets, self.secret_name):
            logger.debug(
                f"Service account {name} in {namespace} already references "
                f"{self.secret_name}"
            )
            return []

        if self.require_attached_secret and not has_named(
            service_account.secrets, self.secret_name
        ):
            logger.info(
                f"Service account {name} in {namespace} has no {self.secret_name} "
                f"secret attached, not adding pull secret"
            )
            return []

        reference = LocalObjectReference(name=self.secret_name)
        return [
            add_operation(
                json_pointer("imagePullSecrets"),
                append_unique(service_account.image_pull_secrets, [reference]),
            )
        ]
