"""
Exception hierarchy for the Rocket.Chat webhook relay.

Exceptions derived from BaseAppException are rendered directly as the
webhook's JSON response. RelayError subclasses stay inside the process and
are translated before they reach a client.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class BaseAppException(HTTPException):
    """Relay failure answered to Alertmanager.

    The handler in error_handlers turns it into a {"Status", "Message"} body
    carrying ``status_code``; ``detail`` becomes the Message.
    """

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code or self.__class__.__name__


class DecodeError(BaseAppException):
    """Raised when the request body can't be read or decoded."""

    def __init__(self, detail: str):
        super().__init__(
            detail, status.HTTP_400_BAD_REQUEST, error_code="DECODE_ERROR"
        )


class AuthenticationError(BaseAppException):
    """Raised when Rocket.Chat rejects the login or can't be reached for it."""

    def __init__(
        self, detail: str = "Authentication failed", error_code: Optional[str] = None
    ):
        super().__init__(
            detail, status.HTTP_401_UNAUTHORIZED, error_code=error_code or "AUTH_ERROR"
        )


class DeliveryError(BaseAppException):
    """Raised when every send attempt failed although re-login succeeded."""

    def __init__(self, detail: str):
        super().__init__(
            detail, status.HTTP_401_UNAUTHORIZED, error_code="DELIVERY_ERROR"
        )


# Internal errors


class RelayError(Exception):
    """Base exception for failures that never reach the caller as-is."""

    pass


class SendError(RelayError):
    """Raised when Rocket.Chat rejects or fails to deliver a message."""

    pass


class RetryExhaustedError(RelayError):
    """Raised once the retry budget is spent.

    Attributes:
        retries: Retry budget that was exhausted
        last_error: Exception raised by the final attempt
    """

    def __init__(self, retries: int, last_error: BaseException):
        self.retries = retries
        self.last_error = last_error
        super().__init__(f"after {retries} retries, last error: {last_error}")


class ConfigError(RelayError):
    """Raised at startup when the configuration is unusable."""

    pass
