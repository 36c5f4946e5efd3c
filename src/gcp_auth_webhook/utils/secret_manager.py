"""
Secret management utilities for the registry pull secret.

This module handles the Kubernetes API calls behind namespace
reconciliation: listing namespaces, looking up secrets and creating the
pull secret.
"""

import asyncio
import base64
import json
import logging
from typing import Any

from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from ..constants import (
    DOCKERCFG_KEY,
    DOCKERCFG_SECRET_TYPE,
    MANAGED_BY_LABEL_KEY,
    MANAGED_BY_LABEL_VALUE,
)
from ..errors import KubernetesAPIError

logger = logging.getLogger(__name__)


class SecretManager:
    """Manages the registry pull secrets through the Kubernetes API."""

    def __init__(self, k8s_client: client.ApiClient | None = None):
        """
        Initialize secret manager.

        Args:
            k8s_client: Optional Kubernetes API client
        """
        self.k8s_client = k8s_client
        self._v1: client.CoreV1Api | None = None

    @property
    def v1(self) -> client.CoreV1Api:
        """Get CoreV1Api client."""
        if self._v1 is None:
            if self.k8s_client:
                self._v1 = client.CoreV1Api(self.k8s_client)
            else:
                self._v1 = client.CoreV1Api()
        return self._v1

    async def list_namespaces(self) -> list[str]:
        """
        List the names of all namespaces in the cluster.

        Raises:
            KubernetesAPIError: If the list call fails
        """
        try:
            namespaces = await asyncio.to_thread(self.v1.list_namespace)
        except ApiException as e:
            raise KubernetesAPIError(
                f"Failed to list namespaces: {e.reason}", reason=e.reason
            ) from e
        except (HTTPError, OSError) as e:
            raise KubernetesAPIError(f"Failed to list namespaces: {e}") from e
        return [ns.metadata.name for ns in namespaces.items if ns.metadata]

    async def secret_exists(self, name: str, namespace: str) -> bool:
        """
        Check whether a secret with the given name exists in a namespace.

        Args:
            name: Secret name
            namespace: Namespace to look in

        Returns:
            True if the secret exists

        Raises:
            KubernetesAPIError: If the list call fails
        """
        try:
            secrets = await asyncio.to_thread(
                self.v1.list_namespaced_secret,
                namespace=namespace,
                field_selector=f"metadata.name={name}",
            )
        except ApiException as e:
            raise KubernetesAPIError(
                f"Failed to list secrets in {namespace}: {e.reason}",
                reason=e.reason,
                namespace=namespace,
            ) from e
        except (HTTPError, OSError) as e:
            raise KubernetesAPIError(
                f"Failed to list secrets in {namespace}: {e}", namespace=namespace
            ) from e
        return any(
            secret.metadata and secret.metadata.name == name
            for secret in secrets.items
        )

    async def create_pull_secret(
        self, name: str, namespace: str, dockercfg: dict[str, Any]
    ) -> bool:
        """
        Create a legacy dockercfg pull secret.

        Args:
            name: Secret name
            namespace: Namespace to create the secret in
            dockercfg: Legacy per-registry auth map

        Returns:
            True if the secret was created, False if it already existed

        Raises:
            KubernetesAPIError: If creation fails for reasons other than a conflict
        """
        secret_body: dict[str, Any] = {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "labels": {MANAGED_BY_LABEL_KEY: MANAGED_BY_LABEL_VALUE},
            },
            "type": DOCKERCFG_SECRET_TYPE,
            "data": {
                DOCKERCFG_KEY: base64.b64encode(
                    json.dumps(dockercfg, separators=(",", ":")).encode()
                ).decode()
            },
        }

        try:
            await asyncio.to_thread(
                self.v1.create_namespaced_secret, namespace=namespace, body=secret_body
            )
        except ApiException as e:
            if e.status == 409:
                # Already exists (race between backfill and a live event)
                logger.info(f"Pull secret already exists: {namespace}/{name}")
                return False
            raise KubernetesAPIError(
                f"Failed to create pull secret {namespace}/{name}: {e.reason}",
                reason=e.reason,
                namespace=namespace,
            ) from e
        except (HTTPError, OSError) as e:
            raise KubernetesAPIError(
                f"Failed to create pull secret {namespace}/{name}: {e}",
                namespace=namespace,
            ) from e

        logger.info(f"Created pull secret: {namespace}/{name}")
        return True
