"""Tests for environment-driven Settings."""

from __future__ import annotations

import pytest

from rephrase_relay.config import (
    DEFAULT_AWS_REGION,
    DEFAULT_PORT,
    ConfigError,
    Settings,
    load_settings,
)


class TestLoadSettings:

    def test_defaults_from_empty_env(self):
        settings = load_settings({})
        assert settings == Settings()
        assert settings.aws_region == DEFAULT_AWS_REGION
        assert settings.port == DEFAULT_PORT
        assert settings.model_key == "CLAUDE"
        assert not settings.is_production
        assert not settings.oauth_configured

    def test_reads_all_variables(self):
        settings = load_settings({
            "AWS_REGION": "us-west-2",
            "AWS_ACCESS_KEY_ID": "AK",
            "AWS_SECRET_ACCESS_KEY": "SK",
            "DEFAULT_MODEL": "llama",
            "SLACK_CLIENT_ID": "1.2",
            "SLACK_CLIENT_SECRET": "s",
            "SLACK_REDIRECT_URI": "https://x/cb",
            "PORT": "8080",
            "APP_ENV": "production",
            "LOG_LEVEL": "debug",
        })
        assert settings.aws_region == "us-west-2"
        assert settings.aws_access_key_id == "AK"
        assert settings.model_key == "LLAMA"
        assert settings.port == 8080
        assert settings.is_production
        assert settings.oauth_configured
        assert settings.log_level == "DEBUG"

    def test_blank_values_treated_as_unset(self):
        settings = load_settings({"AWS_ACCESS_KEY_ID": "  ", "PORT": "", "SLACK_CLIENT_ID": ""})
        assert settings.aws_access_key_id is None
        assert settings.port == DEFAULT_PORT
        assert settings.slack_client_id is None

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_bad_port_rejected(self, port):
        with pytest.raises(ConfigError):
            load_settings({"PORT": port})

    def test_settings_are_immutable(self):
        settings = Settings()
        with pytest.raises(AttributeError):
            settings.port = 1
