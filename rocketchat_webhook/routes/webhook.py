"""Alertmanager webhook endpoint relaying notifications to Rocket.Chat.

Architecture:
    Alertmanager -> POST /webhook -> NotificationService -> Rocket.Chat channel
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.requests import ClientDisconnect

from rocketchat_webhook.core.error_handlers import json_response
from rocketchat_webhook.core.exceptions import DecodeError
from rocketchat_webhook.models.alerts import AlertGroupPayload, WebhookResponse
from rocketchat_webhook.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_notification_service(request: Request) -> NotificationService:
    """Notification service created at startup and stored on app state."""
    return request.app.state.notification_service


async def read_payload(request: Request) -> AlertGroupPayload:
    """Decode the request body into an alert group.

    Raises:
        DecodeError: If the body can't be read or isn't a valid payload
    """
    try:
        body = await request.body()
    except ClientDisconnect as e:
        raise DecodeError(f"unable to read request body: {e}") from e

    try:
        return AlertGroupPayload.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(str(e)) from e


@router.post("/webhook", response_model=WebhookResponse)
async def webhook(
    request: Request,
    service: NotificationService = Depends(get_notification_service),
) -> JSONResponse:
    """Receive an Alertmanager notification and post it to Rocket.Chat.

    Returns:
        200 "Success" once the message is posted. Decode failures answer
        400 and delivery failures 401, through the registered exception
        handlers.
    """
    payload = await read_payload(request)
    logger.info(
        f"Received {len(payload.alerts)} alert(s) from receiver "
        f"'{payload.receiver or 'unknown'}' ({payload.status or 'no status'})"
    )

    await service.deliver(payload)
    return json_response(200, "Success")
