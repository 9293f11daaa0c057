"""Configuration constants and .env loading.

WHY: Credentials, region, model choice, OAuth settings and the listening
port are all fixed at process start. Keeping them in one immutable record
makes that explicit and lets the HTTP layer receive its configuration by
injection instead of reading os.environ on every request.

HOW: python-dotenv loads the .env file on import. load_settings() reads
the environment once and returns a frozen Settings dataclass.

RULES:
- Settings is immutable after construction
- Secrets are never logged or echoed back to clients
- AWS credentials are optional; when absent boto3's default chain applies
- OAuth is "configured" only when both client id and secret are set
- APP_ENV=production hides internal error detail from Slack replies
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv()

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_AWS_REGION = "ap-south-1"
DEFAULT_MODEL_KEY = "CLAUDE"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_OAUTH_SCOPES = "commands"
PRODUCTION_ENV = "production"


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration resolved once at startup.

    RULES:
    - Optional fields are None when the variable is unset or blank
    - port is always an int
    """

    aws_region: str = DEFAULT_AWS_REGION
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None
    model_key: str = DEFAULT_MODEL_KEY
    slack_client_id: Optional[str] = None
    slack_client_secret: Optional[str] = None
    slack_redirect_uri: Optional[str] = None
    slack_oauth_scopes: str = DEFAULT_OAUTH_SCOPES
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == PRODUCTION_ENV

    @property
    def oauth_configured(self) -> bool:
        return bool(self.slack_client_id and self.slack_client_secret)


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    """Return a stripped env value, or None when unset or blank."""
    value = env.get(name, "").strip()
    return value or None


def _parse_port(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError("PORT must be an integer, got {!r}".format(raw))
    if not 0 < port < 65536:
        raise ConfigError("PORT must be between 1 and 65535, got {}".format(port))
    return port


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    WHY: Tests pass an explicit mapping; the server passes nothing and
    gets os.environ (already populated from .env by python-dotenv).

    RULES:
    - Raises ConfigError on a malformed PORT
    - DEFAULT_MODEL is upper-cased so "claude" and "CLAUDE" match
    """
    if env is None:
        env = os.environ

    return Settings(
        aws_region=_get(env, "AWS_REGION") or DEFAULT_AWS_REGION,
        aws_access_key_id=_get(env, "AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=_get(env, "AWS_SECRET_ACCESS_KEY"),
        aws_session_token=_get(env, "AWS_SESSION_TOKEN"),
        model_key=(_get(env, "DEFAULT_MODEL") or DEFAULT_MODEL_KEY).upper(),
        slack_client_id=_get(env, "SLACK_CLIENT_ID"),
        slack_client_secret=_get(env, "SLACK_CLIENT_SECRET"),
        slack_redirect_uri=_get(env, "SLACK_REDIRECT_URI"),
        slack_oauth_scopes=_get(env, "SLACK_OAUTH_SCOPES") or DEFAULT_OAUTH_SCOPES,
        host=_get(env, "HOST") or DEFAULT_HOST,
        port=_parse_port(_get(env, "PORT")),
        environment=_get(env, "APP_ENV") or "development",
        log_level=(_get(env, "LOG_LEVEL") or "INFO").upper(),
    )
