"""Deliver alert notifications to Rocket.Chat with re-authentication.

Each attempt formats the payload and posts it. A failed post is followed
right away by a fresh login, whatever the cause of the failure, and then
by a retry once the delay has passed. When every attempt fails, the most
recent login failure is reported as the root cause.

Flow per request:
    Sending -> Success
    Sending -> ReauthAttempt -> Sending (while retries remain)
    Sending -> ReauthAttempt -> Failure
"""

import logging
from typing import Optional, Protocol

from rocketchat_webhook.core.config import RocketChatConfig
from rocketchat_webhook.core.exceptions import (
    AuthenticationError,
    DeliveryError,
    RetryExhaustedError,
)
from rocketchat_webhook.integrations.rocketchat.metrics import (
    rocketchat_webhook_retries_total,
)
from rocketchat_webhook.models.alerts import AlertGroupPayload
from rocketchat_webhook.services.notification_formatter import format_notification
from rocketchat_webhook.utils.retry import retry

logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    """What the service needs from a chat backend client."""

    async def authenticate(self): ...

    async def send_message(self, message: dict) -> None: ...


class NotificationService:
    """Sends alert groups through a chat client, retrying with a fresh login.

    Attributes:
        client: Chat client shared by all requests
        config: Rocket.Chat configuration (used for formatting)
        retries: Retries after the first attempt
        delay: Seconds between attempts
    """

    def __init__(
        self,
        client: ChatClient,
        config: RocketChatConfig,
        retries: int = 1,
        delay: float = 2.0,
    ):
        self.client = client
        self.config = config
        self.retries = retries
        self.delay = delay

    async def deliver(self, payload: AlertGroupPayload) -> None:
        """Format and send a notification.

        Args:
            payload: Decoded alert group

        Raises:
            AuthenticationError: If every attempt failed and the last
                re-login failed too
            DeliveryError: If every attempt failed although re-login worked
        """
        # Outcome of the latest re-login in this request
        auth_error: Optional[AuthenticationError] = None

        async def send_once() -> None:
            nonlocal auth_error
            message = format_notification(payload, self.config)
            try:
                await self.client.send_message(message)
            except Exception:
                auth_error = await self._reauthenticate()
                raise

        try:
            await retry(
                send_once,
                retries=self.retries,
                delay=self.delay,
                on_retry=lambda _: rocketchat_webhook_retries_total.inc(),
            )
        except RetryExhaustedError as e:
            logger.error(f"Error sending notifications to RocketChat: {e}")
            if auth_error is not None:
                raise auth_error from e
            raise DeliveryError(str(e)) from e

        logger.info(
            f"Notification for {len(payload.alerts)} alert(s) sent "
            f"(receiver: {payload.receiver or 'unknown'})"
        )

    async def _reauthenticate(self) -> Optional[AuthenticationError]:
        try:
            await self.client.authenticate()
        except AuthenticationError as e:
            logger.error(f"Error authenticating RocketChat client: {e.detail}")
            logger.error("No notification was sent")
            return e
        return None
