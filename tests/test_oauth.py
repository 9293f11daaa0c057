"""Tests for the Slack OAuth exchange client.

WHY: The exchange posts credentials to Slack and must return Slack's
verdict untouched, while turning transport problems into one exception.

HOW: httpx.MockTransport answers in place of slack.com.
"""

from __future__ import annotations

import asyncio
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from rephrase_relay.config import Settings
from rephrase_relay.slack.oauth import (
    SLACK_OAUTH_ACCESS_URL,
    OAuthExchangeError,
    SlackOAuth,
)


def _oauth(settings, handler) -> SlackOAuth:
    return SlackOAuth(settings, transport=httpx.MockTransport(handler))


class TestExchangeCode:

    def test_posts_credentials_and_code(self, settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"ok": True, "team": {"id": "T1"}})

        result = asyncio.run(_oauth(settings, handler).exchange_code("abc"))

        assert result["ok"] is True
        assert seen["url"] == SLACK_OAUTH_ACCESS_URL
        assert seen["form"]["code"] == ["abc"]
        assert seen["form"]["client_id"] == ["123.456"]
        assert seen["form"]["client_secret"] == ["shh"]
        assert seen["form"]["redirect_uri"] == [settings.slack_redirect_uri]

    def test_provider_rejection_returned_not_raised(self, settings):
        def handler(request):
            return httpx.Response(200, json={"ok": False, "error": "invalid_code"})

        result = asyncio.run(_oauth(settings, handler).exchange_code("bad"))
        assert result == {"ok": False, "error": "invalid_code"}

    def test_transport_failure_raises(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(OAuthExchangeError, match="request failed"):
            asyncio.run(_oauth(settings, handler).exchange_code("abc"))

    def test_non_json_reply_raises(self, settings):
        def handler(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(OAuthExchangeError, match="HTTP 502"):
            asyncio.run(_oauth(settings, handler).exchange_code("abc"))


class TestAuthorizeUrl:

    def test_includes_client_scope_and_redirect(self, settings):
        url = urlparse(SlackOAuth(settings).authorize_url())
        query = parse_qs(url.query)
        assert url.netloc == "slack.com"
        assert url.path == "/oauth/v2/authorize"
        assert query["client_id"] == ["123.456"]
        assert query["scope"] == ["commands"]
        assert query["redirect_uri"] == [settings.slack_redirect_uri]

    def test_redirect_omitted_when_unset(self):
        oauth = SlackOAuth(Settings(slack_client_id="1", slack_client_secret="2"))
        assert "redirect_uri" not in oauth.authorize_url()

    def test_configured_requires_id_and_secret(self):
        assert SlackOAuth(Settings(slack_client_id="1", slack_client_secret="2")).configured
        assert not SlackOAuth(Settings(slack_client_id="1")).configured
        assert not SlackOAuth(Settings()).configured
