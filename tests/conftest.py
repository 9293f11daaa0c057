"""Shared test fixtures for the rephrase_relay test suite.

WHY: Most tests need the same pieces: fixed Settings, a fake boto3
bedrock-runtime client that records calls, and an app wired to both.
Centralizing them keeps every test free of network access.

HOW: FakeBedrockRuntime mimics boto3's invoke_model() return shape
({"body": <stream with .read()>}). Fixtures build a BedrockClient around
it, a Rephraser around that, and a FastAPI TestClient around the app.

RULES:
- No test reaches AWS or Slack
- Settings are built explicitly, never from the real environment
"""

from __future__ import annotations

import io
import json
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from rephrase_relay.config import Settings
from rephrase_relay.core.rephrase import Rephraser
from rephrase_relay.inference.adapters import CLAUDE
from rephrase_relay.inference.client import BedrockClient
from rephrase_relay.server.app import create_app
from rephrase_relay.slack.oauth import SlackOAuth


CLAUDE_REPLY: Dict[str, Any] = {
    "id": "msg_bdrk_01",
    "type": "message",
    "role": "assistant",
    "content": [{"type": "text", "text": "  Could you please send the report?  "}],
    "stop_reason": "end_turn",
}


class FakeBedrockRuntime:
    """Stand-in for boto3.client("bedrock-runtime")."""

    def __init__(self, reply: Any = None, raw: Optional[bytes] = None, error: Optional[Exception] = None):
        self.reply = CLAUDE_REPLY if reply is None else reply
        self.raw = raw
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def invoke_model(self, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        body = self.raw if self.raw is not None else json.dumps(self.reply).encode("utf-8")
        return {"body": io.BytesIO(body), "contentType": "application/json"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        aws_access_key_id="AKIATEST",
        aws_secret_access_key="secret",
        slack_client_id="123.456",
        slack_client_secret="shh",
        slack_redirect_uri="https://relay.example.com/slack/oauth/callback",
    )


@pytest.fixture
def fake_runtime_factory():
    """Build FakeBedrockRuntime instances with a custom reply, body or error."""
    return FakeBedrockRuntime


@pytest.fixture
def fake_runtime(fake_runtime_factory) -> FakeBedrockRuntime:
    return fake_runtime_factory()


@pytest.fixture
def rephraser(settings, fake_runtime) -> Rephraser:
    return Rephraser(
        model=CLAUDE,
        client=BedrockClient(settings, client=fake_runtime),
        expose_errors=True,
    )


@pytest.fixture
def app(settings, rephraser):
    return create_app(settings=settings, rephraser=rephraser, oauth=SlackOAuth(settings))


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
