"""
Admission review envelope models (admission.k8s.io/v1).

The API server posts an AdmissionReview carrying a request and expects an
AdmissionReview carrying a response with the same UID back.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gcp_auth_webhook.constants import ADMISSION_API_VERSION, ADMISSION_KIND


class GroupVersionKind(BaseModel):
    """Kind of the object under review."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    group: str = ""
    version: str = ""
    kind: str = ""


class AdmissionRequest(BaseModel):
    """
    The request half of an admission review.

    Only the fields the webhook uses are declared; the raw object stays a
    plain dict until the mutator parses it into its own view.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    uid: str = Field(..., description="Correlation identifier echoed in the response")
    kind: GroupVersionKind | None = None
    namespace: str | None = None
    operation: str | None = None
    raw_object: dict[str, Any] | None = Field(None, alias="object")


class Status(BaseModel):
    """Result details attached to a non-allowed response."""

    message: str


class AdmissionResponse(BaseModel):
    """The response half of an admission review."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str = ""
    allowed: bool = False
    patch_type: str | None = Field(None, alias="patchType")
    patch: str | None = Field(None, description="Base64 encoded JSON patch")
    status: Status | None = None


class AdmissionReview(BaseModel):
    """Admission review envelope used for both directions."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_version: str = Field(ADMISSION_API_VERSION, alias="apiVersion")
    kind: str = ADMISSION_KIND
    request: AdmissionRequest | None = None
    response: AdmissionResponse | None = None

    def to_json(self) -> str:
        """Serialize the envelope, dropping unset optional fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
