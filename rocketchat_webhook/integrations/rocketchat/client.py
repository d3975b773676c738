"""Rocket.Chat REST client used to relay alert notifications.

Only the two calls the relay needs are implemented:

- POST /api/v1/login             -> user id and auth token
- POST /api/v1/chat.postMessage  -> posts a message with attachments
"""

import logging
from typing import Any, Dict, Optional

import httpx

from rocketchat_webhook.core.config import RocketChatConfig
from rocketchat_webhook.core.exceptions import AuthenticationError, SendError
from rocketchat_webhook.integrations.rocketchat.metrics import (
    rocketchat_auth_total,
    rocketchat_messages_sent_total,
)
from rocketchat_webhook.integrations.rocketchat.session import (
    AuthToken,
    RocketChatSession,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/v1/login"
POST_MESSAGE_PATH = "/api/v1/chat.postMessage"


class RocketChatClient:
    """Client for the Rocket.Chat REST API.

    A single instance is shared by all requests. The HTTP connection pool
    and the session token are the only state it carries, and both are safe
    to use from concurrent requests.

    Attributes:
        config: Rocket.Chat configuration (credentials and endpoint)
        session: Shared authentication session
    """

    def __init__(
        self,
        config: RocketChatConfig,
        session: Optional[RocketChatSession] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            config: Validated Rocket.Chat configuration
            session: Session to share; a new, unauthenticated one by default
            timeout: Timeout in seconds for each HTTP call
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.session = session or RocketChatSession()
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release its connections."""
        if not self._client.is_closed:
            await self._client.aclose()

    async def authenticate(self) -> AuthToken:
        """Log in with the configured credentials and replace the session token.

        Safe to call repeatedly and concurrently; the last successful login
        wins. A failed login leaves the current token in place.

        Returns:
            The new AuthToken

        Raises:
            AuthenticationError: If the server can't be reached or rejects
                the credentials
        """
        credentials = self.config.credentials
        try:
            response = await self._client.post(
                LOGIN_PATH,
                json={"user": credentials.email, "password": credentials.password},
            )
        except httpx.HTTPError as e:
            rocketchat_auth_total.labels(result="failure").inc()
            raise AuthenticationError(
                f"unable to reach Rocket.Chat for login: {e}"
            ) from e

        body = self._json_body(response)
        data = body.get("data") if isinstance(body.get("data"), dict) else {}
        if (
            response.is_success
            and body.get("status") == "success"
            and data.get("authToken")
            and data.get("userId")
        ):
            token = AuthToken(user_id=data["userId"], token=data["authToken"])
        else:
            rocketchat_auth_total.labels(result="failure").inc()
            reason = body.get("message") or body.get("error") or response.reason_phrase
            raise AuthenticationError(
                f"Rocket.Chat login failed ({response.status_code}): {reason}"
            )

        if credentials.id and token.user_id != credentials.id:
            logger.warning(
                f"Rocket.Chat returned user id {token.user_id}, "
                f"configured id is {credentials.id}"
            )

        self.session.replace(token)
        rocketchat_auth_total.labels(result="success").inc()
        logger.info(
            f"Authenticated to {self.config.base_url} as {token.user_id} "
            f"(token: {token.redacted()})"
        )
        return token

    async def send_message(self, message: Dict[str, Any]) -> None:
        """Post a formatted message with the current session token.

        Args:
            message: chat.postMessage body (channel, text, attachments)

        Raises:
            SendError: If there is no token, the call fails, or Rocket.Chat
                reports the message as not delivered
        """
        token = self.session.current
        if token is None:
            rocketchat_messages_sent_total.labels(result="failure").inc()
            raise SendError("Rocket.Chat client is not authenticated")

        try:
            response = await self._client.post(
                POST_MESSAGE_PATH,
                json=message,
                headers={"X-User-Id": token.user_id, "X-Auth-Token": token.token},
            )
        except httpx.HTTPError as e:
            rocketchat_messages_sent_total.labels(result="failure").inc()
            raise SendError(f"unable to reach Rocket.Chat: {e}") from e

        body = self._json_body(response)
        if not response.is_success or body.get("success") is not True:
            rocketchat_messages_sent_total.labels(result="failure").inc()
            reason = body.get("error") or body.get("message") or response.reason_phrase
            raise SendError(
                f"Rocket.Chat rejected message ({response.status_code}): {reason}"
            )

        rocketchat_messages_sent_total.labels(result="success").inc()
        logger.debug(f"Message posted to {message.get('channel')}")

    @staticmethod
    def _json_body(response: httpx.Response) -> Dict[str, Any]:
        """Decode a JSON object body, returning {} for anything else."""
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
