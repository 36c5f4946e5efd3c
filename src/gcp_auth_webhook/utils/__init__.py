"""
Utils package - Kubernetes helpers for the GCP auth webhook.
"""

from gcp_auth_webhook.utils.kubernetes import load_kubernetes_config
from gcp_auth_webhook.utils.secret_manager import SecretManager

__all__ = [
    "load_kubernetes_config",
    "SecretManager",
]
