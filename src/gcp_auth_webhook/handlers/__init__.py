"""
Kopf handlers for the GCP auth webhook.

Importing a handler module registers its decorators with kopf.
"""
