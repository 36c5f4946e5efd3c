"""
HTTP(S) server for the mutating admission webhook.

Routes:
- POST /mutate: admission reviews for Pods
- POST /mutate/sa: admission reviews for ServiceAccounts
- GET /healthz: liveness
- GET /metrics: Prometheus scrape endpoint
"""

import logging
import ssl

from aiohttp.web import (
    Application,
    AppRunner,
    Request,
    Response,
    TCPSite,
)

from gcp_auth_webhook.errors import ConfigurationError, EmptyBodyError, EncodeError
from gcp_auth_webhook.observability.metrics import metrics_handler
from gcp_auth_webhook.webhooks.dispatcher import ReviewDispatcher, ReviewKind
from gcp_auth_webhook.webhooks.pod import PodMutator
from gcp_auth_webhook.webhooks.service_account import ServiceAccountMutator

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def build_dispatchers() -> dict[ReviewKind, ReviewDispatcher]:
    """Create one dispatcher per endpoint, wired to its mutator."""
    return {
        ReviewKind.POD: ReviewDispatcher(ReviewKind.POD, PodMutator()),
        ReviewKind.SERVICE_ACCOUNT: ReviewDispatcher(
            ReviewKind.SERVICE_ACCOUNT, ServiceAccountMutator()
        ),
    }


def create_ssl_context(certfile: str, keyfile: str) -> ssl.SSLContext:
    """
    Build the server TLS context from certificate files.

    Raises:
        ConfigurationError: If the certificate or key cannot be loaded
    """
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    try:
        context.load_cert_chain(certfile=certfile, keyfile=keyfile)
    except (OSError, ssl.SSLError) as e:
        raise ConfigurationError(
            f"Failed to load webhook certificate {certfile}: {e}",
            user_action="Mount the serving certificate and key into the webhook pod",
        ) from e
    return context


class WebhookServer:
    """aiohttp server routing admission reviews to their dispatchers."""

    def __init__(
        self,
        port: int = 8443,
        host: str = "0.0.0.0",
        ssl_context: ssl.SSLContext | None = None,
        dispatchers: dict[ReviewKind, ReviewDispatcher] | None = None,
    ):
        """
        Initialize webhook server.

        Args:
            port: Port to listen on
            host: Host address to bind
            ssl_context: TLS context, or None to serve plain HTTP
            dispatchers: Dispatchers per review kind (built from settings if omitted)
        """
        self.port = port
        self.host = host
        self.ssl_context = ssl_context
        self.dispatchers = dispatchers or build_dispatchers()
        self.app = Application()
        self.runner: AppRunner | None = None
        self.site: TCPSite | None = None

        self.app.router.add_post("/mutate", self._pod_handler)
        self.app.router.add_post("/mutate/sa", self._service_account_handler)
        self.app.router.add_get("/healthz", self._healthz_handler)
        self.app.router.add_get("/metrics", metrics_handler)

    async def _pod_handler(self, request: Request) -> Response:
        return await self._review(request, ReviewKind.POD)

    async def _service_account_handler(self, request: Request) -> Response:
        return await self._review(request, ReviewKind.SERVICE_ACCOUNT)

    async def _review(self, request: Request, kind: ReviewKind) -> Response:
        body = await request.read() if request.can_read_body else b""
        try:
            payload = self.dispatchers[kind].handle(body)
        except EmptyBodyError as e:
            return Response(text=str(e), status=400)
        except EncodeError as e:
            return Response(text=str(e), status=500)
        return Response(body=payload, content_type=JSON_CONTENT_TYPE)

    async def _healthz_handler(self, request: Request) -> Response:
        return Response(text="ok")

    async def start(self) -> None:
        """Start the webhook server."""
        try:
            self.runner = AppRunner(self.app)
            await self.runner.setup()

            self.site = TCPSite(
                self.runner, self.host, self.port, ssl_context=self.ssl_context
            )
            await self.site.start()

            scheme = "https" if self.ssl_context else "http"
            logger.info(f"Webhook server started on {scheme}://{self.host}:{self.port}")
        except Exception as e:
            logger.error(f"Failed to start webhook server: {e}")
            raise

    async def stop(self) -> None:
        """Stop the webhook server."""
        try:
            if self.site:
                await self.site.stop()
                self.site = None

            if self.runner:
                await self.runner.cleanup()
                self.runner = None

            logger.info("Webhook server stopped")
        except Exception as e:
            logger.error(f"Error stopping webhook server: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.stop()
