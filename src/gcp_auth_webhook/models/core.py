"""
Views of the core Kubernetes objects the webhook mutates.

Only the fields the mutators inspect are declared. Everything else is kept
as pydantic extras so that lists re-emitted in a patch (existing env vars,
mounts, volumes, pull secrets) carry the original entries unchanged.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class KubeModel(BaseModel):
    """Base for partial Kubernetes object views."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the Kubernetes JSON shape."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class ObjectMeta(KubeModel):
    name: str | None = None
    namespace: str | None = None


class EnvVar(KubeModel):
    name: str
    value: str | None = None


class VolumeMount(KubeModel):
    name: str
    mount_path: str | None = Field(None, alias="mountPath")
    read_only: bool | None = Field(None, alias="readOnly")


class HostPathVolumeSource(KubeModel):
    path: str
    type: str | None = None


class Volume(KubeModel):
    name: str
    host_path: HostPathVolumeSource | None = Field(None, alias="hostPath")


class Container(KubeModel):
    name: str = ""
    env: list[EnvVar] | None = None
    volume_mounts: list[VolumeMount] | None = Field(None, alias="volumeMounts")


class PodSpec(KubeModel):
    containers: list[Container] = Field(default_factory=list)
    init_containers: list[Container] | None = Field(None, alias="initContainers")
    volumes: list[Volume] | None = None


class Pod(KubeModel):
    """Partial view of a core/v1 Pod."""

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: PodSpec


class LocalObjectReference(KubeModel):
    name: str


class ServiceAccount(KubeModel):
    """Partial view of a core/v1 ServiceAccount."""

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    secrets: list[LocalObjectReference] | None = None
    image_pull_secrets: list[LocalObjectReference] | None = Field(
        None, alias="imagePullSecrets"
    )
