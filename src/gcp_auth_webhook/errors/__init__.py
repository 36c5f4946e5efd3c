"""
Error handling module for the GCP auth webhook.

This module provides the error hierarchy shared by the admission path
and the namespace reconciler.
"""

from .webhook_errors import (
    ConfigurationError,
    CredentialError,
    DecodeError,
    EmptyBodyError,
    EncodeError,
    KubernetesAPIError,
    ReconcileError,
    UpdateCheckError,
    WebhookError,
)

__all__ = [
    "WebhookError",
    "EmptyBodyError",
    "DecodeError",
    "EncodeError",
    "ReconcileError",
    "KubernetesAPIError",
    "CredentialError",
    "ConfigurationError",
    "UpdateCheckError",
]
