"""
Constants used throughout the GCP auth webhook.

This module defines all well-known values shared by the mutators and the
namespace reconciler including:
- Names of the injected volume, mount and pull secret
- Environment variable names for credentials and project IDs
- Host and in-container file locations
- Registry hosts covered by the pull secret
"""

# Name of the image pull secret and of the namespace the webhook runs in
SECRET_NAME = "gcp-auth"
WEBHOOK_NAMESPACE = "gcp-auth"

# The cluster's system namespace is never mutated or reconciled
SYSTEM_NAMESPACE = "kube-system"

# Credential file injection
CREDENTIALS_ENV_VAR = "GOOGLE_APPLICATION_CREDENTIALS"
CREDENTIALS_VOLUME_NAME = "gcp-creds"
CREDENTIALS_MOUNT_PATH = "/google-app-creds.json"
HOST_CREDENTIALS_PATH = "/var/lib/minikube/google_application_credentials.json"
HOST_PATH_TYPE_FILE = "File"

# Optional host file holding the current project ID
HOST_PROJECT_PATH = "/var/lib/minikube/google_cloud_project"

# Every variant of the project env var understood by Google client libraries
PROJECT_ALIASES = (
    "PROJECT_ID",
    "GCP_PROJECT",
    "GCLOUD_PROJECT",
    "GOOGLE_CLOUD_PROJECT",
    "CLOUDSDK_CORE_PROJECT",
)

# Admission review envelope
ADMISSION_API_VERSION = "admission.k8s.io/v1"
ADMISSION_KIND = "AdmissionReview"
PATCH_TYPE_JSON = "JSONPatch"

# Pull secret format (legacy ~/.dockercfg layout)
DOCKERCFG_SECRET_TYPE = "kubernetes.io/dockercfg"
DOCKERCFG_KEY = ".dockercfg"
OAUTH_TOKEN_USERNAME = "oauth2accesstoken"
DOCKERCFG_EMAIL = "none"

# Label constants for resource identification
MANAGED_BY_LABEL_KEY = "app.kubernetes.io/managed-by"
MANAGED_BY_LABEL_VALUE = "gcp-auth-webhook"

# OAuth scope requested for the registry token
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

# Container Registry hosts
DEFAULT_GCR_REGISTRIES = (
    "gcr.io",
    "us.gcr.io",
    "eu.gcr.io",
    "asia.gcr.io",
    "marketplace.gcr.io",
)

# Artifact Registry hosts
DEFAULT_AR_REGISTRIES = (
    "asia-docker.pkg.dev",
    "asia-east1-docker.pkg.dev",
    "asia-east2-docker.pkg.dev",
    "asia-northeast1-docker.pkg.dev",
    "asia-northeast2-docker.pkg.dev",
    "asia-northeast3-docker.pkg.dev",
    "asia-south1-docker.pkg.dev",
    "asia-south2-docker.pkg.dev",
    "asia-southeast1-docker.pkg.dev",
    "asia-southeast2-docker.pkg.dev",
    "australia-southeast1-docker.pkg.dev",
    "australia-southeast2-docker.pkg.dev",
    "europe-docker.pkg.dev",
    "europe-central2-docker.pkg.dev",
    "europe-north1-docker.pkg.dev",
    "europe-southwest1-docker.pkg.dev",
    "europe-west1-docker.pkg.dev",
    "europe-west2-docker.pkg.dev",
    "europe-west3-docker.pkg.dev",
    "europe-west4-docker.pkg.dev",
    "europe-west6-docker.pkg.dev",
    "europe-west8-docker.pkg.dev",
    "europe-west9-docker.pkg.dev",
    "me-west1-docker.pkg.dev",
    "northamerica-northeast1-docker.pkg.dev",
    "northamerica-northeast2-docker.pkg.dev",
    "southamerica-east1-docker.pkg.dev",
    "southamerica-west1-docker.pkg.dev",
    "us-docker.pkg.dev",
    "us-central1-docker.pkg.dev",
    "us-east1-docker.pkg.dev",
    "us-east4-docker.pkg.dev",
    "us-east5-docker.pkg.dev",
    "us-south1-docker.pkg.dev",
    "us-west1-docker.pkg.dev",
    "us-west2-docker.pkg.dev",
    "us-west3-docker.pkg.dev",
    "us-west4-docker.pkg.dev",
)

# Release feed for the update notification
RELEASES_URL = "https://storage.googleapis.com/minikube-gcp-auth/releases.json"
UPDATE_CHECK_INTERVAL_SECONDS = 12 * 60 * 60

# Error message templates
ERROR_EMPTY_BODY = "empty body"
ERROR_DECODE_REVIEW = "could not decode admission review: {}"
ERROR_DECODE_OBJECT = "could not decode {} object: {}"
ERROR_ENCODE_RESPONSE = "could not encode response: {}"
