"""Rocket.Chat REST integration.

Components:
    - RocketChatClient: login and chat.postMessage calls over httpx
    - RocketChatSession: shared, atomically replaced auth token
"""

from rocketchat_webhook.integrations.rocketchat.client import RocketChatClient
from rocketchat_webhook.integrations.rocketchat.session import (
    AuthToken,
    RocketChatSession,
)

__all__ = ["RocketChatClient", "RocketChatSession", "AuthToken"]
