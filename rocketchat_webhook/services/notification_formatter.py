"""Format Alertmanager notifications as Rocket.Chat messages."""

from typing import Any, Dict, List

from rocketchat_webhook.core.config import RocketChatConfig
from rocketchat_webhook.models.alerts import Alert, AlertGroupPayload

CHANNEL_LABEL = "channel_name"

# Labels already shown in the attachment title
_TITLE_LABELS = {"alertname", "severity", CHANNEL_LABEL}


def resolve_channel(payload: AlertGroupPayload, config: RocketChatConfig) -> str:
    """Pick the target channel.

    A "channel_name" label common to the whole group overrides the
    configured default channel.
    """
    name = payload.commonLabels.get(CHANNEL_LABEL) or config.channel.default_channel_name
    return name if name.startswith("#") else f"#{name}"


def format_header(payload: AlertGroupPayload) -> str:
    """Summary line for the group, e.g. "[FIRING:2] HighLatency (api)"."""
    status = (payload.status or _group_status(payload.alerts)).upper()
    header = f"[{status}:{len(payload.alerts)}]"

    alertname = payload.groupLabels.get("alertname") or payload.commonLabels.get(
        "alertname"
    )
    if alertname:
        header += f" {alertname}"

    others = [v for k, v in sorted(payload.groupLabels.items()) if k != "alertname"]
    if others:
        header += f" ({' '.join(others)})"
    return header


def format_attachment(alert: Alert, config: RocketChatConfig) -> Dict[str, Any]:
    """Format one alert as a message attachment.

    Args:
        alert: The alert to format
        config: Configuration holding the severity colours

    Returns:
        Attachment dict with title, colour, text and label fields
    """
    resolved = alert.status == "resolved"
    emoji = "✅" if resolved else "🔥"

    severity = alert.labels.get("severity", "unknown")
    alertname = alert.labels.get("alertname", "Unknown")

    lines = []
    summary = alert.annotations.get("summary")
    description = alert.annotations.get("description")
    if summary:
        lines.append(summary)
    if description:
        lines.append(description)

    attachment: Dict[str, Any] = {
        "title": f"{emoji} [{(alert.status or 'firing').upper()}] "
        f"{severity.upper()}: {alertname}",
        "color": config.resolved_color if resolved else config.color_for(severity),
        "text": "\n".join(lines) or "No summary",
        "fields": [
            {"short": True, "title": key, "value": value}
            for key, value in sorted(alert.labels.items())
            if key not in _TITLE_LABELS
        ],
    }
    if alert.generatorURL:
        attachment["title_link"] = alert.generatorURL
    return attachment


def format_notification(
    payload: AlertGroupPayload, config: RocketChatConfig
) -> Dict[str, Any]:
    """Build the chat.postMessage body for an alert group."""
    return {
        "channel": resolve_channel(payload, config),
        "text": format_header(payload),
        "attachments": [format_attachment(alert, config) for alert in payload.alerts],
    }


def _group_status(alerts: List[Alert]) -> str:
    if any(alert.status == "firing" for alert in alerts):
        return "firing"
    return "resolved" if alerts else "unknown"
