"""
Error handlers for the webhook relay.

Every error response uses the same {"Status", "Message"} body as a
successful one, with the HTTP status mirroring "Status".
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from rocketchat_webhook.core.exceptions import BaseAppException
from rocketchat_webhook.integrations.rocketchat.metrics import webhook_requests_total
from rocketchat_webhook.models.alerts import WebhookResponse

logger = logging.getLogger(__name__)


def json_response(status_code: int, message: str) -> JSONResponse:
    """Build the relay's JSON response and count it."""
    webhook_requests_total.labels(status=str(status_code)).inc()
    body = WebhookResponse(Status=status_code, Message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def base_exception_handler(
    request: Request, exc: BaseAppException
) -> JSONResponse:
    """Handle all application-specific exceptions.

    Args:
        request: The incoming request that caused the exception
        exc: The application exception that was raised

    Returns:
        JSON response carrying the exception's status and detail
    """
    logger.error(
        f"Application error: {exc.error_code} - {exc.detail}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return json_response(exc.status_code, exc.detail)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors without leaking their details."""
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )
    return json_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred"
    )
