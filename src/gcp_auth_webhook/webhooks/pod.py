"""
Mutating admission webhook for Pods.

Injects Google Cloud credentials into new pods:
- A host-path volume carrying the application default credentials file
- A read-only mount of that file into every container and init container
- GOOGLE_APPLICATION_CREDENTIALS pointing at the mounted file
- The project ID env vars when the host exposes a current project

Whether a pod needs credentials is decided on its first container only; the
resulting patch is applied to every container.
"""

import logging

from pydantic import ValidationError

from gcp_auth_webhook.constants import (
    CREDENTIALS_ENV_VAR,
    CREDENTIALS_MOUNT_PATH,
    CREDENTIALS_VOLUME_NAME,
    ERROR_DECODE_OBJECT,
    HOST_PATH_TYPE_FILE,
    PROJECT_ALIASES,
)
from gcp_auth_webhook.errors import DecodeError
from gcp_auth_webhook.models.admission import AdmissionRequest
from gcp_auth_webhook.models.core import (
    Container,
    EnvVar,
    HostPathVolumeSource,
    Pod,
    Volume,
    VolumeMount,
)
from gcp_auth_webhook.settings import settings
from gcp_auth_webhook.webhooks.patch_builder import (
    PatchOperation,
    add_operation,
    append_unique,
    has_named,
    json_pointer,
    missing_by_name,
)

logger = logging.getLogger(__name__)


def read_project_id(path: str) -> str | None:
    """
    Read the current project ID from a host file.

    Args:
        path: Path of the project file

    Returns:
        The project ID, or None if the file is missing, unreadable or empty
    """
    try:
        with open(path, encoding="utf-8") as project_file:
            project = project_file.read().strip()
    except OSError as e:
        logger.debug(f"No project ID available from {path}: {e}")
        return None
    return project or None


class PodMutator:
    """Builds the credential injection patch for a Pod."""

    def __init__(
        self,
        excluded_namespaces: frozenset[str] | None = None,
        host_credentials_path: str | None = None,
        host_project_path: str | None = None,
    ):
        """
        Initialize pod mutator.

        Args:
            excluded_namespaces: Namespaces whose pods are never mutated
            host_credentials_path: Host file mounted into pods
            host_project_path: Optional host file holding the project ID
        """
        self.excluded_namespaces = (
            excluded_namespaces
            if excluded_namespaces is not None
            else settings.excluded_namespaces
        )
        self.host_credentials_path = (
            host_credentials_path or settings.host_credentials_path
        )
        self.host_project_path = host_project_path or settings.host_project_path

    @property
    def volume(self) -> Volume:
        return Volume(
            name=CREDENTIALS_VOLUME_NAME,
            host_path=HostPathVolumeSource(
                path=self.host_credentials_path, type=HOST_PATH_TYPE_FILE
            ),
        )

    @property
    def mount(self) -> VolumeMount:
        return VolumeMount(
            name=CREDENTIALS_VOLUME_NAME,
            mount_path=CREDENTIALS_MOUNT_PATH,
            read_only=True,
        )

    def decode(self, raw_object: dict | None) -> Pod:
        """
        Parse the raw admission object into a Pod view.

        Raises:
            DecodeError: If the object is missing or is not a valid Pod
        """
        if raw_object is None:
            raise DecodeError(ERROR_DECODE_OBJECT.format("Pod", "object is missing"))
        try:
            return Pod.model_validate(raw_object)
        except ValidationError as e:
            raise DecodeError(ERROR_DECODE_OBJECT.format("Pod", e), cause=e) from e

    def patch_for(self, request: AdmissionRequest) -> list[PatchOperation]:
        """Decode the request's object and build its patch."""
        pod = self.decode(request.raw_object)
        return self.mutate(pod, request_namespace=request.namespace)

    def mutate(
        self, pod: Pod, request_namespace: str | None = None
    ) -> list[PatchOperation]:
        """
        Build the patch injecting credentials into a pod.

        Args:
            pod: Pod under review
            request_namespace: Namespace from the admission request, used
                when the object itself does not carry one

        Returns:
            Ordered list of add operations against the original pod
        """
        namespace = pod.metadata.namespace or request_namespace or ""
        if namespace in self.excluded_namespaces:
            logger.debug(f"Skipping pod in excluded namespace {namespace}")
            return []

        spec = pod.spec
        if not spec.containers:
            logger.debug("Pod has no containers, nothing to inject")
            return []

        patch: list[PatchOperation] = []
        env_vars: list[EnvVar] = []

        first = spec.containers[0]
        needs_creds = not has_named(first.env, CREDENTIALS_ENV_VAR)

        if needs_creds:
            env_vars.append(
                EnvVar(name=CREDENTIALS_ENV_VAR, value=CREDENTIALS_MOUNT_PATH)
            )
            if not has_named(spec.volumes, CREDENTIALS_VOLUME_NAME):
                patch.append(
                    add_operation(
                        json_pointer("spec", "volumes"),
                        append_unique(spec.volumes, [self.volume]),
                    )
                )

        project = read_project_id(self.host_project_path)
        if project:
            env_vars.extend(
                EnvVar(name=alias, value=project)
                for alias in PROJECT_ALIASES
                if not has_named(first.env, alias)
            )

        if env_vars:
            patch.extend(
                self._container_patches(
                    spec.containers, "containers", env_vars, needs_creds
                )
            )
            patch.extend(
                self._container_patches(
                    spec.init_containers, "initContainers", env_vars, needs_creds
                )
            )

        logger.debug(
            f"Built {len(patch)} patch operations for pod "
            f"{pod.metadata.name or '<generated>'} in {namespace}"
        )
        return patch

    def _container_patches(
        self,
        containers: list[Container] | None,
        field: str,
        env_vars: list[EnvVar],
        needs_creds: bool,
    ) -> list[PatchOperation]:
        patch: list[PatchOperation] = []
        for index, container in enumerate(containers or ()):
            if needs_creds and not has_named(
                container.volume_mounts, CREDENTIALS_VOLUME_NAME
            ):
                patch.append(
                    add_operation(
                        json_pointer("spec", field, index, "volumeMounts"),
                        append_unique(container.volume_mounts, [self.mount]),
                    )
                )
            if missing_by_name(container.env, env_vars):
                patch.append(
                    add_operation(
                        json_pointer("spec", field, index, "env"),
                        append_unique(container.env, env_vars),
                    )
                )
        return patch
