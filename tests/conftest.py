"""
Pytest configuration and fixtures for the Rocket.Chat webhook relay.

This module provides:
- A valid Rocket.Chat configuration and settings with no retry delay
- Sample Alertmanager payloads
- A mocked chat client and an application wired to it
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from rocketchat_webhook.core.config import RocketChatConfig, Settings
from rocketchat_webhook.integrations.rocketchat.session import (
    AuthToken,
    RocketChatSession,
)
from rocketchat_webhook.main import create_app


@pytest.fixture
def rocketchat_config() -> RocketChatConfig:
    """Complete Rocket.Chat configuration pointing at a fake server."""
    return RocketChatConfig.model_validate(
        {
            "credentials": {
                "id": "bot-user-id",
                "email": "alertbot@example.com",
                "password": "secret",
            },
            "endpoint": {"host": "chat.example.com", "scheme": "https"},
            "channel": {"default_channel_name": "alerts"},
        }
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings with the default retry budget and no delay between attempts."""
    return Settings(RETRY_COUNT=1, RETRY_DELAY_SECONDS=0)


@pytest.fixture
def sample_alert_payload() -> dict:
    """Sample Alertmanager webhook payload."""
    return {
        "receiver": "rocketchat",
        "status": "firing",
        "alerts": [
            {
                "status": "firing",
                "labels": {
                    "alertname": "HighLatency",
                    "severity": "warning",
                    "instance": "api-1:8080",
                },
                "annotations": {
                    "summary": "API latency above 2s",
                    "description": "p99 latency has been above 2s for 10 minutes.",
                },
                "startsAt": "2026-01-19T10:00:00Z",
                "endsAt": "0001-01-01T00:00:00Z",
                "generatorURL": "http://prometheus:9090/graph",
                "fingerprint": "abc123",
            }
        ],
        "groupLabels": {"alertname": "HighLatency"},
        "commonLabels": {"alertname": "HighLatency", "severity": "warning"},
        "commonAnnotations": {"summary": "API latency above 2s"},
        "externalURL": "http://alertmanager:9093",
        "version": "4",
        "groupKey": "{}:{alertname=HighLatency}",
    }


@pytest.fixture
def mock_chat_client() -> MagicMock:
    """Chat client whose login and send calls always succeed."""
    client = MagicMock()
    client.session = RocketChatSession()
    client.authenticate = AsyncMock(return_value=AuthToken("bot-user-id", "token"))
    client.send_message = AsyncMock(return_value=None)
    client.close = AsyncMock()
    return client


@pytest.fixture
def test_client(rocketchat_config, test_settings, mock_chat_client) -> TestClient:
    """Test client for an app using the mocked chat client."""
    app = create_app(
        rocketchat_config,
        settings=test_settings,
        client=mock_chat_client,
        authenticate_on_startup=False,
    )
    return TestClient(app)
