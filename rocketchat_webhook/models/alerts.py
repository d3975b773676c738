"""Alertmanager webhook payload and relay response models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Alert(BaseModel):
    """Single alert from Alertmanager.

    Attributes:
        status: Alert status ("firing" or "resolved")
        labels: Alert labels (alertname, severity, etc.)
        annotations: Alert annotations (summary, description, etc.)
        startsAt: ISO timestamp when alert started
        endsAt: ISO timestamp when alert ended (or "0001-01-01T00:00:00Z" if still firing)
        generatorURL: URL to the generator (Prometheus graph)
        fingerprint: Unique identifier for the alert
    """

    model_config = ConfigDict(frozen=True)

    status: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    startsAt: Optional[str] = None
    endsAt: Optional[str] = None
    generatorURL: Optional[str] = None
    fingerprint: Optional[str] = None

    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return {} if v is None else v


class AlertGroupPayload(BaseModel):
    """Alertmanager webhook payload: a batch of alerts grouped by labels.

    See: https://prometheus.io/docs/alerting/latest/configuration/#webhook_config

    Every field is optional; Alertmanager always sends them, but a minimal
    body with just "alerts" is still a valid notification.
    """

    model_config = ConfigDict(frozen=True)

    receiver: str = ""
    status: str = ""
    alerts: List[Alert] = Field(default_factory=list)
    groupLabels: Dict[str, str] = Field(default_factory=dict)
    commonLabels: Dict[str, str] = Field(default_factory=dict)
    commonAnnotations: Dict[str, str] = Field(default_factory=dict)
    externalURL: Optional[str] = None
    version: Optional[str] = None
    groupKey: Optional[str] = None

    @field_validator(
        "alerts", "groupLabels", "commonLabels", "commonAnnotations", mode="before"
    )
    @classmethod
    def null_as_empty(cls, v, info):
        """Alertmanager may send null for an empty map or list."""
        if v is None:
            return [] if info.field_name == "alerts" else {}
        return v


class WebhookResponse(BaseModel):
    """Response body of the webhook endpoint."""

    Status: int
    Message: str
