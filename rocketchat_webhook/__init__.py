"""Relay Prometheus Alertmanager notifications to Rocket.Chat."""

__version__ = "0.1.0"
