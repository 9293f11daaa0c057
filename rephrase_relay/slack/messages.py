"""Slack reply payloads and the fixed user-facing strings.

WHY: Every reply to a slash command must be a valid Slack message body,
even when something goes wrong, so Slack shows it to the invoking user
instead of reporting a webhook failure.

RULES:
- All slash-command replies use response_type "ephemeral"
- User-facing strings live here, not in the handlers
"""

from __future__ import annotations

from typing import Dict

EPHEMERAL = "ephemeral"

AVAILABLE_COMMANDS = ("/polite", "/clarity", "/simple")

EMPTY_MESSAGE_NOTICE = "Please provide a message to rephrase."
COMMAND_NOT_FOUND = "Command not found. Available commands: {}".format(
    ", ".join(AVAILABLE_COMMANDS)
)
GENERIC_FAILURE = "Sorry, something went wrong. Please try again later."

OAUTH_SUCCESS = "App installed successfully! You can close this window."
OAUTH_MISSING_CODE = "Missing authorization code."
OAUTH_NOT_CONFIGURED = "Slack OAuth is not configured on this server."
OAUTH_EXCHANGE_FAILED = "Could not complete the Slack installation. Please try again."


def build_ephemeral(text: str) -> Dict[str, str]:
    """Wrap text as a reply visible only to the invoking user."""
    return {"response_type": EPHEMERAL, "text": text}


def format_error_text(exc: BaseException, expose_detail: bool) -> str:
    """Pick the reply text for a failed request.

    RULES:
    - expose_detail=False → GENERIC_FAILURE
    - expose_detail=True → "Error: <message>", falling back to the class name
    """
    if not expose_detail:
        return GENERIC_FAILURE
    return "Error: {}".format(str(exc) or type(exc).__name__)
