"""
Admission review dispatching.

A ReviewDispatcher is bound to one endpoint and one mutator. It decodes the
admission review envelope, asks the mutator for a patch and wraps the result
(or the failure) into the response envelope.

Failure mapping:
- Empty body: EmptyBodyError, the caller answers HTTP 400
- Undecodable envelope or object, or any mutation failure: a non-allowed
  response carrying the error message
- Response that cannot be serialized: EncodeError, the caller answers HTTP 500
"""

import base64
import logging
import time
from enum import StrEnum
from typing import Protocol

from pydantic import ValidationError

from gcp_auth_webhook.constants import (
    ERROR_DECODE_REVIEW,
    ERROR_ENCODE_RESPONSE,
    PATCH_TYPE_JSON,
)
from gcp_auth_webhook.errors import DecodeError, EmptyBodyError, EncodeError
from gcp_auth_webhook.models.admission import (
    AdmissionRequest,
    AdmissionResponse,
    AdmissionReview,
    Status,
)
from gcp_auth_webhook.observability.logging import set_correlation_id
from gcp_auth_webhook.observability.metrics import metrics_collector
from gcp_auth_webhook.webhooks.patch_builder import PatchOperation, serialize_patch

logger = logging.getLogger(__name__)


class ReviewKind(StrEnum):
    """Kind of object a dispatcher reviews, fixed by the endpoint."""

    POD = "pod"
    SERVICE_ACCOUNT = "serviceaccount"


class Mutator(Protocol):
    """Builds a JSON patch for the object carried by an admission request."""

    def patch_for(self, request: AdmissionRequest) -> list[PatchOperation]: ...


class ReviewDispatcher:
    """Turns admission review request bytes into response bytes."""

    def __init__(self, kind: ReviewKind, mutator: Mutator):
        self.kind = kind
        self.mutator = mutator

    def handle(self, body: bytes | None) -> bytes:
        """
        Handle one admission review.

        Args:
            body: Raw request body

        Returns:
            Serialized admission review response

        Raises:
            EmptyBodyError: If the request carried no payload
            EncodeError: If the response could not be serialized
        """
        start_time = time.monotonic()

        if not body:
            logger.warning("Request body was empty, rejecting")
            metrics_collector.record_admission(
                self.kind, "rejected", time.monotonic() - start_time
            )
            raise EmptyBodyError()

        uid = ""
        operations = 0
        try:
            request = self.decode(body)
            uid = request.uid
            set_correlation_id(uid)
            patch = self.mutator.patch_for(request)
            response = self.allow(uid, patch)
            operations = len(patch)
        except DecodeError as e:
            logger.warning(f"Could not decode {self.kind} review: {e}")
            response = self.deny(uid, str(e))
        except Exception as e:
            logger.error(
                f"Failed to build {self.kind} patch: {e}",
                exc_info=True,
                extra={"error_type": type(e).__name__},
            )
            response = self.deny(uid, str(e))

        try:
            encoded = self.encode(response)
        except EncodeError:
            metrics_collector.record_admission(
                self.kind, "error", time.monotonic() - start_time
            )
            raise

        result = "allowed" if response.allowed else "denied"
        logger.info(
            f"Admission review for {self.kind} {result} "
            f"with {operations} patch operations",
            extra={
                "endpoint": str(self.kind),
                "request_uid": uid,
                "allowed": response.allowed,
                "patch_operations": operations,
            },
        )
        metrics_collector.record_admission(
            self.kind, result, time.monotonic() - start_time, operations
        )
        return encoded

    def decode(self, body: bytes) -> AdmissionRequest:
        """
        Parse the admission review envelope.

        Raises:
            DecodeError: If the envelope is malformed or carries no request
        """
        try:
            review = AdmissionReview.model_validate_json(body)
        except ValidationError as e:
            raise DecodeError(ERROR_DECODE_REVIEW.format(e), cause=e) from e
        if review.request is None:
            raise DecodeError(ERROR_DECODE_REVIEW.format("request is missing"))
        return review.request

    def allow(self, uid: str, patch: list[PatchOperation]) -> AdmissionResponse:
        """Wrap a patch into an allowed JSONPatch response."""
        return AdmissionResponse(
            uid=uid,
            allowed=True,
            patch_type=PATCH_TYPE_JSON,
            patch=base64.b64encode(serialize_patch(patch)).decode(),
        )

    def deny(self, uid: str, message: str) -> AdmissionResponse:
        """Build a non-allowed response describing a failure."""
        return AdmissionResponse(
            uid=uid, allowed=False, status=Status(message=message)
        )

    def encode(self, response: AdmissionResponse) -> bytes:
        """
        Serialize the response envelope.

        Raises:
            EncodeError: If serialization fails
        """
        try:
            return AdmissionReview(response=response).to_json().encode()
        except (ValueError, TypeError) as e:
            logger.error(f"Can't encode response: {e}")
            raise EncodeError(ERROR_ENCODE_RESPONSE.format(e), cause=e) from e
