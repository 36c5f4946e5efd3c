"""
Namespace handlers - provision the registry pull secret in new namespaces.

kopf streams namespace events: the initial listing (no event type) followed
by live ADDED/MODIFIED/DELETED events. Each one is handed to the namespace
reconciler stored in the operator memo, which only acts on creations.
"""

import logging
from typing import Any

import kopf

from gcp_auth_webhook.services.namespace_reconciler import NamespaceEvent

logger = logging.getLogger(__name__)


@kopf.on.event("", "v1", "namespaces")
async def on_namespace_event(
    event: dict[str, Any], name: str, memo: kopf.Memo, **kwargs: Any
) -> None:
    """
    Forward a namespace event to the namespace reconciler.

    Args:
        event: Raw watch event with ``type`` and ``object``
        name: Namespace name
        memo: Operator memo holding the reconciler
    """
    reconciler = memo.get("namespace_reconciler")
    if reconciler is None:
        logger.debug(f"Namespace reconciler not ready, skipping event for {name}")
        return

    await reconciler.handle_event(
        NamespaceEvent(type=event.get("type"), namespace=name)
    )
