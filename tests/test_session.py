"""Tests for the shared Rocket.Chat session."""

import threading

from rocketchat_webhook.integrations.rocketchat.session import (
    AuthToken,
    RocketChatSession,
)


def test_new_session_is_unauthenticated():
    session = RocketChatSession()

    assert session.current is None
    assert not session.is_authenticated


def test_replace_overwrites_token():
    session = RocketChatSession()
    session.replace(AuthToken("user", "first"))
    session.replace(AuthToken("user", "second"))

    assert session.current == AuthToken("user", "second")
    assert session.is_authenticated


def test_concurrent_replace_leaves_one_written_token():
    """Racing writers never leave a mixed or missing token behind."""
    session = RocketChatSession()
    written = [AuthToken(f"user-{i}", f"token-{i}") for i in range(20)]
    seen = []

    def writer(token):
        for _ in range(100):
            session.replace(token)
            current = session.current
            seen.append(current)

    threads = [threading.Thread(target=writer, args=(t,)) for t in written]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert session.current in written
    assert all(token in written for token in seen)


def test_redacted_token():
    assert AuthToken("user", "abcdefghijkl").redacted() == "abcdef..."
    assert AuthToken("user", "abc").redacted() == "***"
