"""
Kubernetes client configuration for the GCP auth webhook.
"""

import logging

from kubernetes import config

logger = logging.getLogger(__name__)


def load_kubernetes_config() -> None:
    """
    Load Kubernetes client configuration.

    Tries in-cluster configuration first (when running in a pod) and falls
    back to the local kubeconfig for development.

    Raises:
        config.ConfigException: If neither configuration can be loaded
    """
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        try:
            config.load_kube_config()
            logger.info("Loaded kubeconfig configuration")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise
