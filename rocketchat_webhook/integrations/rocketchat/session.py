"""Shared Rocket.Chat authentication session."""

import threading
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthToken:
    """Credentials returned by a successful Rocket.Chat login."""

    user_id: str
    token: str

    def redacted(self) -> str:
        """Token prefix safe for logging."""
        return f"{self.token[:6]}..." if len(self.token) > 6 else "***"


class RocketChatSession:
    """Holder for the auth token shared by all in-flight requests.

    The token is swapped as a whole under a lock, so readers always see
    either the previous or the new token. Concurrent logins simply race
    and the last one wins. A token is never assumed to still be valid;
    a rejected send triggers a new login.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._token: Optional[AuthToken] = None

    @property
    def current(self) -> Optional[AuthToken]:
        with self._lock:
            return self._token

    @property
    def is_authenticated(self) -> bool:
        return self.current is not None

    def replace(self, token: AuthToken) -> None:
        with self._lock:
            self._token = token
