"""
Registry credential sources.

A credential source hands the namespace reconciler a fresh bearer token and
the registry hosts that token is good for. The Google implementation reads
application default credentials the same way Google client libraries do.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

import google.auth
import google.auth.transport.requests
from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError

from gcp_auth_webhook.constants import (
    CLOUD_PLATFORM_SCOPE,
    DEFAULT_AR_REGISTRIES,
    DEFAULT_GCR_REGISTRIES,
)
from gcp_auth_webhook.errors import CredentialError

logger = logging.getLogger(__name__)


class CredentialSource(Protocol):
    """Supplies a registry bearer token and the hosts it authorizes."""

    def token(self) -> str: ...

    def registries(self) -> Sequence[str]: ...


class GoogleCredentialSource:
    """Credential source backed by Google application default credentials."""

    def __init__(
        self,
        registries: Sequence[str] | None = None,
        scopes: Sequence[str] = (CLOUD_PLATFORM_SCOPE,),
    ):
        """
        Initialize the credential source.

        Credentials are discovered lazily on the first token request.

        Args:
            registries: Registry hosts the token is used for (GCR and
                Artifact Registry hosts by default)
            scopes: OAuth scopes requested for the token
        """
        self._registries = tuple(
            registries
            if registries is not None
            else DEFAULT_GCR_REGISTRIES + DEFAULT_AR_REGISTRIES
        )
        self.scopes = list(scopes)
        self._credentials: Credentials | None = None

    @property
    def credentials(self) -> Credentials:
        """
        Get or discover the application default credentials.

        Raises:
            CredentialError: If no default credentials can be found
        """
        if self._credentials is None:
            try:
                self._credentials, project = google.auth.default(scopes=self.scopes)
            except GoogleAuthError as e:
                raise CredentialError(
                    f"finding default credentials: {e}", cause=e
                ) from e
            logger.info(f"Loaded application default credentials (project: {project})")
        return self._credentials

    def token(self) -> str:
        """
        Return a freshly refreshed access token.

        Raises:
            CredentialError: If the token cannot be obtained
        """
        credentials = self.credentials
        try:
            credentials.refresh(google.auth.transport.requests.Request())
        except GoogleAuthError as e:
            raise CredentialError(f"refreshing access token: {e}", cause=e) from e
        if not credentials.token:
            raise CredentialError("credentials returned an empty access token")
        return credentials.token

    def registries(self) -> Sequence[str]:
        return self._registries
