"""
Unit tests for the webhook HTTP server.

Uses ``aiohttp.test_utils`` to drive the server's aiohttp application
without binding the configured port.
"""

import base64
import json
from unittest.mock import patch

import pytest
from aiohttp.test_utils import TestClient, TestServer

from gcp_auth_webhook.errors import ConfigurationError, EncodeError
from gcp_auth_webhook.webhooks.dispatcher import ReviewDispatcher, ReviewKind
from gcp_auth_webhook.webhooks.pod import PodMutator
from gcp_auth_webhook.webhooks.server import WebhookServer, create_ssl_context
from gcp_auth_webhook.webhooks.service_account import ServiceAccountMutator

EXCLUDED = frozenset({"kube-system", "gcp-auth"})


def review(obj, uid="uid-1", namespace="default"):
    return {
        "apiVersion": "admission.k8s.io/v1",
        "kind": "AdmissionReview",
        "request": {"uid": uid, "namespace": namespace, "object": obj},
    }


@pytest.fixture
def webhook_server(tmp_path):
    """Create a WebhookServer with mutators that do not depend on the host."""
    dispatchers = {
        ReviewKind.POD: ReviewDispatcher(
            ReviewKind.POD,
            PodMutator(
                excluded_namespaces=EXCLUDED,
                host_credentials_path="/creds.json",
                host_project_path=str(tmp_path / "no-project"),
            ),
        ),
        ReviewKind.SERVICE_ACCOUNT: ReviewDispatcher(
            ReviewKind.SERVICE_ACCOUNT,
            ServiceAccountMutator(
                secret_name="gcp-auth",
                excluded_namespaces=EXCLUDED,
                require_attached_secret=False,
            ),
        ),
    }
    return WebhookServer(port=0, dispatchers=dispatchers)


@pytest.fixture
async def client(webhook_server):
    """Create an aiohttp TestClient from the WebhookServer app."""
    server = TestServer(webhook_server.app)
    async with TestClient(server) as cli:
        yield cli


class TestPodEndpoint:
    """Tests for ``POST /mutate``."""

    @pytest.mark.asyncio
    async def test_pod_review(self, client):
        pod = {"metadata": {"name": "p"}, "spec": {"containers": [{"name": "a"}]}}

        resp = await client.post("/mutate", json=review(pod, uid="pod-uid"))

        assert resp.status == 200
        assert resp.content_type == "application/json"
        body = await resp.json()
        assert body["response"]["uid"] == "pod-uid"
        assert body["response"]["allowed"] is True
        patch_ops = json.loads(base64.b64decode(body["response"]["patch"]))
        assert [op["path"] for op in patch_ops] == [
            "/spec/volumes",
            "/spec/containers/0/volumeMounts",
            "/spec/containers/0/env",
        ]

    @pytest.mark.asyncio
    async def test_empty_body_is_400(self, client):
        resp = await client.post("/mutate", data=b"")

        assert resp.status == 400
        assert await resp.text() == "empty body"

    @pytest.mark.asyncio
    async def test_malformed_body_is_200_denied(self, client):
        resp = await client.post("/mutate", data=b"not json")

        assert resp.status == 200
        body = await resp.json()
        assert body["response"]["allowed"] is False

    @pytest.mark.asyncio
    async def test_encode_failure_is_500(self, client, webhook_server):
        dispatcher = webhook_server.dispatchers[ReviewKind.POD]
        with patch.object(
            dispatcher, "encode", side_effect=EncodeError("could not encode")
        ):
            pod = {"spec": {"containers": [{"name": "a"}]}}
            resp = await client.post("/mutate", json=review(pod))

        assert resp.status == 500

    @pytest.mark.asyncio
    async def test_get_not_allowed(self, client):
        resp = await client.get("/mutate")
        assert resp.status == 405


class TestServiceAccountEndpoint:
    """Tests for ``POST /mutate/sa``."""

    @pytest.mark.asyncio
    async def test_service_account_review(self, client):
        sa = {"metadata": {"name": "builder", "namespace": "team-a"}}

        resp = await client.post("/mutate/sa", json=review(sa, namespace="team-a"))

        assert resp.status == 200
        body = await resp.json()
        patch_ops = json.loads(base64.b64decode(body["response"]["patch"]))
        assert patch_ops == [
            {"op": "add", "path": "/imagePullSecrets", "value": [{"name": "gcp-auth"}]}
        ]

    @pytest.mark.asyncio
    async def test_empty_body_is_400(self, client):
        resp = await client.post("/mutate/sa")
        assert resp.status == 400


class TestAuxiliaryEndpoints:
    """Tests for ``GET /healthz`` and ``GET /metrics``."""

    @pytest.mark.asyncio
    async def test_healthz_returns_ok(self, client):
        resp = await client.get("/healthz")

        assert resp.status == 200
        assert await resp.text() == "ok"

    @pytest.mark.asyncio
    async def test_metrics_exposes_admission_counter(self, client):
        await client.post("/mutate/sa", json=review({"metadata": {"name": "x"}}))

        resp = await client.get("/metrics")

        assert resp.status == 200
        assert "gcp_auth_webhook_admission_reviews_total" in await resp.text()


class TestSSLContext:
    """Tests for loading the serving certificate."""

    def test_missing_certificate_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Failed to load webhook"):
            create_ssl_context(
                str(tmp_path / "missing.crt"), str(tmp_path / "missing.key")
            )
