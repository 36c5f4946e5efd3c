"""
JSON Patch (RFC 6902) construction helpers.

All patches produced by the webhook are computed against a single snapshot
of the incoming object: every path indexes the original lists, and every
list-valued ``add`` carries the full original list plus the new entries.
"""

import json
from collections.abc import Iterable, Sequence
from typing import Any, Literal

from pydantic import BaseModel

from gcp_auth_webhook.models.core import KubeModel


class PatchOperation(BaseModel):
    """A single JSON Patch operation. The webhook only ever adds."""

    op: Literal["add"] = "add"
    path: str
    value: Any


def has_named(items: Iterable[Any] | None, name: str) -> bool:
    """Return True if any item in ``items`` carries ``name``."""
    return any(item.name == name for item in items or ())


def escape_pointer_token(token: str) -> str:
    """Escape one reference token for a JSON Pointer (RFC 6901)."""
    return token.replace("~", "~0").replace("/", "~1")


def json_pointer(*tokens: str | int) -> str:
    """Build a JSON Pointer from raw reference tokens."""
    return "".join("/" + escape_pointer_token(str(token)) for token in tokens)


def missing_by_name(
    existing: Sequence[KubeModel] | None, additions: Iterable[KubeModel]
) -> list[KubeModel]:
    """Return the additions whose name is not already used in ``existing``."""
    seen = {item.name for item in existing or ()}
    missing = []
    for item in additions:
        if item.name in seen:
            continue
        missing.append(item)
        seen.add(item.name)
    return missing


def append_unique(
    existing: Sequence[KubeModel] | None, additions: Iterable[KubeModel]
) -> list[dict[str, Any]]:
    """
    Return ``existing`` followed by every addition not already present by name.

    Existing entries are serialized unchanged, including fields the views
    do not declare.
    """
    merged = [item.to_dict() for item in existing or ()]
    merged.extend(item.to_dict() for item in missing_by_name(existing, additions))
    return merged


def add_operation(path: str, value: Any) -> PatchOperation:
    return PatchOperation(op="add", path=path, value=value)


def serialize_patch(patch: Sequence[PatchOperation]) -> bytes:
    """Render a patch document as compact JSON bytes."""
    return json.dumps(
        [operation.model_dump(mode="json") for operation in patch],
        separators=(",", ":"),
    ).encode()
