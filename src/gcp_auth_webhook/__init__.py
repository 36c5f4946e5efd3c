"""
GCP Auth Webhook - Mutating admission webhook for Google Cloud credentials.

This webhook wires Google Cloud credentials into workloads with:
- Credential file volume and mount injection for Pods
- Project ID environment variables taken from the host
- Image pull secret references on ServiceAccounts
- Per-namespace provisioning of the registry pull secret
"""

__version__ = "0.1.0"
