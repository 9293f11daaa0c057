"""Slack OAuth v2 installation handshake.

WHY: Distributing the app to a workspace requires Slack's OAuth flow: the
installer is sent to Slack's authorize page, Slack redirects back with a
one-time code, and the server trades that code for an install token.

HOW: SlackOAuth builds the authorize URL and performs the code exchange
against oauth.v2.access with httpx.AsyncClient. The exchange returns
Slack's JSON verbatim; interpreting "ok"/"error" is left to the route.

RULES:
- Uses httpx for the outbound call, one attempt, transport default timeout
- Transport failures and non-JSON replies raise OAuthExchangeError
- A Slack reply with ok=false is NOT an exception; it is returned as-is
- Client secret and tokens are never logged
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from rephrase_relay.config import Settings

logger = logging.getLogger(__name__)

SLACK_AUTHORIZE_URL = "https://slack.com/oauth/v2/authorize"
SLACK_OAUTH_ACCESS_URL = "https://slack.com/api/oauth.v2.access"


class OAuthExchangeError(Exception):
    """Raised when the code exchange could not reach Slack or be decoded."""


class SlackOAuth:
    """Code-for-token exchange with Slack.

    RULES:
    - transport= lets tests route requests to an httpx.MockTransport
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self._settings.oauth_configured

    def authorize_url(self) -> str:
        params = {
            "client_id": self._settings.slack_client_id or "",
            "scope": self._settings.slack_oauth_scopes,
        }
        if self._settings.slack_redirect_uri:
            params["redirect_uri"] = self._settings.slack_redirect_uri
        return "{}?{}".format(SLACK_AUTHORIZE_URL, urlencode(params))

    async def exchange_code(self, code: str) -> Dict[str, Any]:
        """Trade an authorization code for an install token.

        Returns:
            Slack's JSON reply, e.g. {"ok": true, "team": {...}, ...}
            or {"ok": false, "error": "invalid_code"}.

        Raises:
            OAuthExchangeError: On network failure or a non-JSON reply.
        """
        data = {
            "client_id": self._settings.slack_client_id or "",
            "client_secret": self._settings.slack_client_secret or "",
            "code": code,
        }
        if self._settings.slack_redirect_uri:
            data["redirect_uri"] = self._settings.slack_redirect_uri

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(SLACK_OAUTH_ACCESS_URL, data=data)
            body = resp.json()
        except httpx.HTTPError as exc:
            raise OAuthExchangeError("Slack OAuth request failed: {}".format(exc)) from exc
        except ValueError as exc:
            raise OAuthExchangeError(
                "Slack OAuth reply was not JSON (HTTP {})".format(resp.status_code)
            ) from exc

        if not isinstance(body, dict):
            raise OAuthExchangeError("Slack OAuth reply was not a JSON object")

        if body.get("ok"):
            team = body.get("team") or {}
            logger.info("Slack app installed for team %s", team.get("id", "unknown"))
        else:
            logger.warning("Slack OAuth exchange rejected: %s", body.get("error"))
        return body
