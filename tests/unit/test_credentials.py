"""Unit tests for the Google credential source."""

from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import DefaultCredentialsError, RefreshError

from gcp_auth_webhook.constants import DEFAULT_AR_REGISTRIES, DEFAULT_GCR_REGISTRIES
from gcp_auth_webhook.errors import CredentialError
from gcp_auth_webhook.services.credentials import GoogleCredentialSource

DEFAULT_PATCH = "gcp_auth_webhook.services.credentials.google.auth.default"


def fake_credentials(token="ya29.token"):
    credentials = MagicMock()
    credentials.token = token
    return credentials


class TestRegistries:
    """Test the registry host list."""

    def test_defaults_cover_gcr_and_artifact_registry(self):
        registries = GoogleCredentialSource().registries()

        assert registries == DEFAULT_GCR_REGISTRIES + DEFAULT_AR_REGISTRIES
        assert "gcr.io" in registries
        assert "us-docker.pkg.dev" in registries

    def test_custom_registries(self):
        assert GoogleCredentialSource(registries=["gcr.io"]).registries() == (
            "gcr.io",
        )


class TestToken:
    """Test token retrieval."""

    def test_refreshes_and_returns_token(self):
        credentials = fake_credentials()
        with patch(DEFAULT_PATCH, return_value=(credentials, "proj")) as default:
            source = GoogleCredentialSource()
            assert source.token() == "ya29.token"
            assert source.token() == "ya29.token"

        default.assert_called_once_with(
            scopes=["https://www.googleapis.com/auth/cloud-platform"]
        )
        assert credentials.refresh.call_count == 2

    def test_missing_default_credentials(self):
        with patch(DEFAULT_PATCH, side_effect=DefaultCredentialsError("none found")):
            with pytest.raises(CredentialError, match="finding default credentials"):
                GoogleCredentialSource().token()

    def test_refresh_failure(self):
        credentials = fake_credentials()
        credentials.refresh.side_effect = RefreshError("expired")
        with patch(DEFAULT_PATCH, return_value=(credentials, "proj")):
            with pytest.raises(CredentialError, match="refreshing access token"):
                GoogleCredentialSource().token()

    def test_empty_token(self):
        with patch(DEFAULT_PATCH, return_value=(fake_credentials(token=""), None)):
            with pytest.raises(CredentialError, match="empty access token"):
                GoogleCredentialSource().token()
