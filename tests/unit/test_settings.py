"""Unit tests for environment driven settings."""

from gcp_auth_webhook.settings import Settings


class TestSettings:
    """Test settings defaults and overrides."""

    def test_defaults(self, monkeypatch):
        for name in (
            "SA_REQUIRE_ATTACHED_SECRET",
            "SECRET_NAME",
            "WEBHOOK_PORT",
            "SYSTEM_NAMESPACE",
            "WEBHOOK_NAMESPACE",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.webhook_port == 8443
        assert settings.secret_name == "gcp-auth"
        assert settings.sa_require_attached_secret is False
        assert settings.excluded_namespaces == frozenset({"kube-system", "gcp-auth"})

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("WEBHOOK_PORT", "9443")
        monkeypatch.setenv("SA_REQUIRE_ATTACHED_SECRET", "true")
        monkeypatch.setenv("WEBHOOK_NAMESPACE", "addons")

        settings = Settings(_env_file=None)

        assert settings.webhook_port == 9443
        assert settings.sa_require_attached_secret is True
        assert "addons" in settings.excluded_namespaces
        assert "gcp-auth" not in settings.excluded_namespaces
