"""Tests for configuration loading and validation."""

import pytest

from rocketchat_webhook.core.config import (
    DEFAULT_SEVERITY_COLORS,
    RocketChatConfig,
    Settings,
    check_config,
    load_config,
)
from rocketchat_webhook.core.exceptions import ConfigError

VALID_YAML = """
endpoint:
  scheme: https
  host: chat.example.com
credentials:
  id: bot-user-id
  email: alertbot@example.com
  password: secret
channel:
  default_channel_name: ops
severity_colors:
  critical: "#aa0000"
"""


@pytest.fixture
def config_file(tmp_path):
    def write(content: str):
        path = tmp_path / "rocketchat.yml"
        path.write_text(content)
        return str(path)

    return write


class TestLoadConfig:
    """Test reading the YAML configuration file."""

    def test_valid_file(self, config_file):
        config = load_config(config_file(VALID_YAML))

        assert config.credentials.id == "bot-user-id"
        assert config.endpoint.host == "chat.example.com"
        assert config.base_url == "https://chat.example.com"
        assert config.channel.default_channel_name == "ops"
        assert config.color_for("critical") == "#aa0000"

    def test_numeric_scalars_read_as_strings(self, config_file):
        """Unquoted numbers in YAML are accepted for string fields."""
        content = VALID_YAML.replace("id: bot-user-id", "id: 42").replace(
            "password: secret", "password: 123456"
        )

        config = load_config(config_file(content))

        assert config.credentials.id == "42"
        assert config.credentials.password == "123456"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="unable to read"):
            load_config(str(tmp_path / "missing.yml"))

    def test_invalid_yaml(self, config_file):
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(config_file("endpoint: [unclosed"))

    def test_not_a_mapping(self, config_file):
        with pytest.raises(ConfigError, match="mapping"):
            load_config(config_file("- a\n- b\n"))

    def test_empty_file_reports_first_missing_field(self, config_file):
        with pytest.raises(ConfigError, match="rocket.chat ID not provided"):
            load_config(config_file(""))

    @pytest.mark.parametrize(
        "line,message",
        [
            ("  id: bot-user-id", "rocket.chat ID not provided"),
            ("  email: alertbot@example.com", "rocket.chat email not provided"),
            ("  password: secret", "rocket.chat password not provided"),
            ("  host: chat.example.com", "rocket.chat host not provided"),
            ("  scheme: https", "rocket.chat scheme not provided"),
        ],
    )
    def test_missing_required_field(self, config_file, line, message):
        content = VALID_YAML.replace(line + "\n", "")

        with pytest.raises(ConfigError, match=message):
            load_config(config_file(content))


class TestCheckConfig:
    """Test required-field validation on already parsed configs."""

    def test_blank_values_rejected(self, rocketchat_config):
        config = rocketchat_config.model_copy(
            update={
                "endpoint": rocketchat_config.endpoint.model_copy(
                    update={"scheme": "  "}
                )
            }
        )

        with pytest.raises(ConfigError, match="scheme"):
            check_config(config)

    def test_complete_config_accepted(self, rocketchat_config):
        check_config(rocketchat_config)

    def test_default_colors(self):
        config = RocketChatConfig()

        assert config.severity_colors == DEFAULT_SEVERITY_COLORS
        assert config.color_for(None) == config.default_color
        assert config.color_for("WARNING") == DEFAULT_SEVERITY_COLORS["warning"]


class TestSettings:
    """Test process settings from the environment."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ROCKETCHAT_WEBHOOK_RETRY_COUNT", raising=False)

        settings = Settings(_env_file=None)

        assert settings.RETRY_COUNT == 1
        assert settings.RETRY_DELAY_SECONDS == 2.0
        assert settings.LISTEN_ADDRESS == ":9876"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ROCKETCHAT_WEBHOOK_RETRY_COUNT", "3")
        monkeypatch.setenv("ROCKETCHAT_WEBHOOK_LISTEN_ADDRESS", "127.0.0.1:8080")

        settings = Settings(_env_file=None)

        assert settings.RETRY_COUNT == 3
        assert settings.LISTEN_ADDRESS == "127.0.0.1:8080"
