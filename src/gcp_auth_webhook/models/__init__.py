"""
Pydantic models for the admission envelope and the mutated objects.
"""

from .admission import AdmissionRequest, AdmissionResponse, AdmissionReview, Status
from .core import Pod, ServiceAccount

__all__ = [
    "AdmissionRequest",
    "AdmissionResponse",
    "AdmissionReview",
    "Status",
    "Pod",
    "ServiceAccount",
]
