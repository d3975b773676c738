import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from rocketchat_webhook.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Process settings, overridable by CLI flags
    CONFIG_FILE: str = "config/rocketchat.yml"
    LISTEN_ADDRESS: str = ":9876"
    LOG_LEVEL: str = "INFO"

    # Send-with-reauthentication loop
    RETRY_COUNT: int = 1  # Retries after the first attempt
    RETRY_DELAY_SECONDS: float = 2.0

    # Outbound Rocket.Chat HTTP calls
    REQUEST_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ROCKETCHAT_WEBHOOK_",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


class Credentials(BaseModel):
    # YAML reads "password: 123456" as an int
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = ""
    email: str = ""
    password: str = ""


class Endpoint(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    host: str = ""
    scheme: str = ""


class Channel(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    default_channel_name: str = "prometheus-alerts"


DEFAULT_SEVERITY_COLORS: Dict[str, str] = {
    "critical": "#ff0000",
    "warning": "#ffa500",
    "info": "#439fe0",
}


class RocketChatConfig(BaseModel):
    """Rocket.Chat connection and formatting options loaded from YAML.

    Read once at startup and shared, unmodified, by every request.
    """

    credentials: Credentials = Field(default_factory=Credentials)
    endpoint: Endpoint = Field(default_factory=Endpoint)
    channel: Channel = Field(default_factory=Channel)
    severity_colors: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_SEVERITY_COLORS)
    )
    resolved_color: str = "#36a64f"
    default_color: str = "#439fe0"

    @property
    def base_url(self) -> str:
        return f"{self.endpoint.scheme}://{self.endpoint.host}"

    def color_for(self, severity: Optional[str]) -> str:
        if not severity:
            return self.default_color
        return self.severity_colors.get(severity.lower(), self.default_color)


def check_config(config: RocketChatConfig) -> None:
    """Verify every field needed to reach Rocket.Chat is present.

    Raises:
        ConfigError: naming the first missing field
    """
    required = [
        (config.credentials.id, "rocket.chat ID not provided"),
        (config.credentials.email, "rocket.chat email not provided"),
        (config.credentials.password, "rocket.chat password not provided"),
        (config.endpoint.host, "rocket.chat host not provided"),
        (config.endpoint.scheme, "rocket.chat scheme not provided"),
    ]
    for value, message in required:
        if not value.strip():
            raise ConfigError(message)


def load_config(config_file: str) -> RocketChatConfig:
    """Load and validate the Rocket.Chat configuration file.

    Args:
        config_file: Path to the YAML configuration file

    Returns:
        Validated RocketChatConfig

    Raises:
        ConfigError: If the file can't be read, isn't valid YAML, or is
            missing a required field
    """
    path = Path(config_file)
    logger.info(f"Loading Rocket.Chat configuration from {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"unable to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    try:
        config = RocketChatConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e

    check_config(config)
    return config
