"""
Mutating admission webhooks for the GCP auth webhook.

This package builds the JSON patches injecting Google Cloud credentials into
Pods and the registry pull secret into ServiceAccounts, and serves them over
an aiohttp HTTPS server.
"""

from .dispatcher import ReviewDispatcher, ReviewKind
from .pod import PodMutator
from .server import WebhookServer
from .service_account import ServiceAccountMutator

__all__ = [
    "ReviewDispatcher",
    "ReviewKind",
    "PodMutator",
    "ServiceAccountMutator",
    "WebhookServer",
]
