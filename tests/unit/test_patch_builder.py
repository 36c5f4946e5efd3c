"""Unit tests for the JSON patch helpers."""

import json

from gcp_auth_webhook.models.core import EnvVar, LocalObjectReference
from gcp_auth_webhook.webhooks.patch_builder import (
    add_operation,
    append_unique,
    escape_pointer_token,
    has_named,
    json_pointer,
    missing_by_name,
    serialize_patch,
)


class TestJsonPointer:
    """Test JSON Pointer construction."""

    def test_joins_tokens(self):
        assert json_pointer("spec", "containers", 0, "env") == "/spec/containers/0/env"

    def test_escapes_tilde_before_slash(self):
        """'~' must be escaped first so '/' escapes are not double-escaped."""
        assert escape_pointer_token("a~b/c") == "a~0b~1c"

    def test_escapes_inside_pointer(self):
        assert json_pointer("metadata", "annotations", "x/y") == (
            "/metadata/annotations/x~1y"
        )


class TestNamedLists:
    """Test name-keyed list helpers."""

    def test_has_named_handles_none(self):
        assert has_named(None, "anything") is False

    def test_has_named_finds_entry(self):
        env = [EnvVar(name="A", value="1"), EnvVar(name="B", value="2")]
        assert has_named(env, "B") is True
        assert has_named(env, "C") is False

    def test_missing_by_name_skips_existing_and_duplicates(self):
        existing = [EnvVar(name="A", value="1")]
        additions = [
            EnvVar(name="A", value="other"),
            EnvVar(name="B", value="2"),
            EnvVar(name="B", value="3"),
        ]

        missing = missing_by_name(existing, additions)

        assert [item.name for item in missing] == ["B"]
        assert missing[0].value == "2"

    def test_append_unique_keeps_existing_entries_verbatim(self):
        """Undeclared fields of existing entries survive the round trip."""
        existing = [
            EnvVar.model_validate(
                {"name": "A", "valueFrom": {"fieldRef": {"fieldPath": "x"}}}
            )
        ]

        merged = append_unique(existing, [EnvVar(name="B", value="2")])

        assert merged == [
            {"name": "A", "valueFrom": {"fieldRef": {"fieldPath": "x"}}},
            {"name": "B", "value": "2"},
        ]

    def test_append_unique_on_missing_list(self):
        merged = append_unique(None, [LocalObjectReference(name="gcp-auth")])
        assert merged == [{"name": "gcp-auth"}]


class TestSerializePatch:
    """Test patch serialization."""

    def test_serializes_add_operations(self):
        patch = [add_operation("/imagePullSecrets", [{"name": "gcp-auth"}])]

        document = json.loads(serialize_patch(patch))

        assert document == [
            {"op": "add", "path": "/imagePullSecrets", "value": [{"name": "gcp-auth"}]}
        ]

    def test_empty_patch_is_empty_array(self):
        assert serialize_patch([]) == b"[]"
