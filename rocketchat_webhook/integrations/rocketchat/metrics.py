"""Prometheus metrics for Rocket.Chat authentication and message delivery."""

from prometheus_client import Counter

# Authentication metrics
rocketchat_auth_total = Counter(
    "rocketchat_auth_total",
    "Total Rocket.Chat authentication attempts",
    ["result"],  # success, failure
)

# Delivery metrics
rocketchat_messages_sent_total = Counter(
    "rocketchat_messages_sent_total",
    "Total Rocket.Chat chat.postMessage attempts",
    ["result"],  # success, failure
)

rocketchat_webhook_retries_total = Counter(
    "rocketchat_webhook_retries_total",
    "Total retries of the send-with-reauthentication loop",
)

# Webhook responses
webhook_requests_total = Counter(
    "rocketchat_webhook_requests_total",
    "Total webhook responses by HTTP status",
    ["status"],  # 200, 400, 401, 500
)
