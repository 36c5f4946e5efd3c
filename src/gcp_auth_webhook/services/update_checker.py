"""
Release update notification.

Periodically fetches the published releases feed and logs when a newer
webhook release than the running one is available.
"""

import asyncio
import logging

import httpx
from packaging.version import InvalidVersion, Version

from gcp_auth_webhook import __version__
from gcp_auth_webhook.errors import UpdateCheckError
from gcp_auth_webhook.settings import settings

logger = logging.getLogger(__name__)


class UpdateChecker:
    """Compares the running version against the latest published release."""

    def __init__(
        self,
        url: str | None = None,
        current_version: str = __version__,
        interval: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.url = url or settings.update_check_url
        self.current_version = current_version
        self.interval = (
            interval if interval is not None else settings.update_check_interval_seconds
        )
        self.transport = transport
        self.timeout = timeout

    async def latest_release(self) -> str:
        """
        Fetch the name of the newest published release.

        Raises:
            UpdateCheckError: If the feed cannot be fetched or is empty
        """
        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=self.timeout
            ) as http:
                response = await http.get(self.url)
                response.raise_for_status()
                releases = response.json()
        except httpx.HTTPError as e:
            raise UpdateCheckError(f"failed to get releases file: {e}", cause=e) from e
        except ValueError as e:
            raise UpdateCheckError(
                f"failed to decode releases file: {e}", cause=e
            ) from e

        if not isinstance(releases, list) or not releases:
            raise UpdateCheckError("no releases found in releases file")
        name = releases[0].get("name") if isinstance(releases[0], dict) else None
        if not name:
            raise UpdateCheckError("latest release has no name")
        return name

    async def check(self) -> str | None:
        """
        Run one update check.

        Returns:
            The newer release name if one is available, otherwise None

        Raises:
            UpdateCheckError: If the feed or either version cannot be parsed
        """
        latest = await self.latest_release()
        try:
            current_version = Version(self.current_version)
        except InvalidVersion as e:
            raise UpdateCheckError(
                f"unable to parse current version: {e}", cause=e
            ) from e
        try:
            latest_version = Version(latest)
        except InvalidVersion as e:
            raise UpdateCheckError(
                f"unable to parse latest version: {e}", cause=e
            ) from e

        if current_version < latest_version:
            logger.info(f"gcp-auth-webhook {latest} is available!")
            return latest
        logger.debug(f"gcp-auth-webhook {self.current_version} is up to date")
        return None

    async def run(self) -> None:
        """Check for updates forever, logging failures."""
        while True:
            try:
                await self.check()
            except UpdateCheckError as e:
                logger.warning(f"Update check failed: {e}")
            except Exception as e:
                logger.error(f"Unexpected update check failure: {e}", exc_info=True)
            await asyncio.sleep(self.interval)
