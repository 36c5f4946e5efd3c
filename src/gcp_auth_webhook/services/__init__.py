"""
Service layer for the GCP auth webhook.

This module provides the background services that run next to the
admission webhook, separated from the kopf handler layer.
"""

from .credentials import CredentialSource, GoogleCredentialSource
from .namespace_reconciler import (
    NamespaceEvent,
    NamespaceReconciler,
    ReconcileOutcome,
)
from .update_checker import UpdateChecker

__all__ = [
    "CredentialSource",
    "GoogleCredentialSource",
    "NamespaceEvent",
    "NamespaceReconciler",
    "ReconcileOutcome",
    "UpdateChecker",
]
