"""
FastAPI application relaying Alertmanager notifications to Rocket.Chat.
This module wires the webhook route, metrics and error handling.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator

from rocketchat_webhook import __version__
from rocketchat_webhook.core.config import RocketChatConfig, Settings, get_settings
from rocketchat_webhook.core.error_handlers import (
    base_exception_handler,
    unhandled_exception_handler,
)
from rocketchat_webhook.core.exceptions import AuthenticationError, BaseAppException
from rocketchat_webhook.integrations.rocketchat.client import RocketChatClient
from rocketchat_webhook.routes import health, webhook
from rocketchat_webhook.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    client: RocketChatClient = app.state.rocketchat_client
    if app.state.authenticate_on_startup:
        try:
            await client.authenticate()
        except AuthenticationError as e:
            # Not fatal: the first webhook call logs in again
            logger.error(f"Error authenticating RocketChat client: {e.detail}")

    yield

    # Shutdown
    logger.info("Closing Rocket.Chat client")
    await client.close()


def create_app(
    config: RocketChatConfig,
    settings: Optional[Settings] = None,
    client: Optional[RocketChatClient] = None,
    authenticate_on_startup: bool = True,
) -> FastAPI:
    """Build the relay application.

    Args:
        config: Validated Rocket.Chat configuration
        settings: Process settings (retry budget, timeouts)
        client: Rocket.Chat client to share; built from config if omitted
        authenticate_on_startup: Log in once before serving

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    client = client or RocketChatClient(config, timeout=settings.REQUEST_TIMEOUT)

    app = FastAPI(
        title="Alertmanager webhook for Rocket.Chat",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.config = config
    app.state.rocketchat_client = client
    app.state.authenticate_on_startup = authenticate_on_startup
    app.state.notification_service = NotificationService(
        client=client,
        config=config,
        retries=settings.RETRY_COUNT,
        delay=settings.RETRY_DELAY_SECONDS,
    )

    # HTTP metrics go to the default registry, exposed by /metrics below
    Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        excluded_handlers=["/health", "/metrics"],
    ).instrument(app)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(webhook.router, tags=["Webhook"])
    app.include_router(health.router, tags=["Health"])

    app.add_exception_handler(BaseAppException, base_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)

    return app
