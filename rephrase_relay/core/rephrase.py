"""Rephrase handler: validate, prompt, invoke, extract, reply.

WHY: All three slash commands do the same thing with a different tone.
This module owns that shared flow so the HTTP layer only binds a tone
and hands over the message.

HOW: Rephraser holds the active ModelDescriptor and a BedrockClient, both
injected at startup. rephrase() walks a short linear flow:
  validate → invoke → respond
  validate → short-circuit respond   (blank message, no model call)
  invoke   → error-respond           (any failure, logged)

RULES:
- Blank or whitespace-only messages never reach the model
- The prompt is a fixed template parameterized only by tone and message
- Model output is returned exactly as the descriptor extracts it
- Failures are absorbed into an ephemeral reply; rephrase() never raises
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, Optional

from rephrase_relay.inference.adapters import ModelDescriptor
from rephrase_relay.inference.client import BedrockClient, decode_response
from rephrase_relay.slack.messages import (
    EMPTY_MESSAGE_NOTICE,
    build_ephemeral,
    format_error_text,
)

logger = logging.getLogger(__name__)


class Tone(str, enum.Enum):
    """Rewrite goals, one per slash command."""

    POLITE = "polite"
    CLARITY = "clarity"
    SIMPLE = "simple"


PROMPT_TEMPLATE = (
    'Rephrase the following message to improve {tone}:\n"{message}"\n\n'
    "Strictly include only the following:\n"
    "1. The rephrased message\n"
    "2. No additional text\n"
    "3. No formatting\n"
    "4. No markdown\n"
    "5. No code blocks\n"
    "Nothing other than the rephrased message should be included in the "
    "response. I want only the rephrased text very strictly. Don't include "
    "phrases like \"Here is the rephrased message\" or \"The rephrased "
    "message is\" or anything else. Just the rephrased text. No other text. "
    "No formatting. No markdown. No code blocks. Just the rephrased text. "
    "Nothing else."
)


def build_prompt(tone: Tone, message: str) -> str:
    return PROMPT_TEMPLATE.format(tone=tone.value, message=message)


class Rephraser:
    """Turns a (tone, message) pair into a Slack ephemeral reply."""

    def __init__(
        self,
        model: ModelDescriptor,
        client: BedrockClient,
        expose_errors: bool = False,
    ) -> None:
        self.model = model
        self._client = client
        self._expose_errors = expose_errors

    async def rephrase(self, tone: Tone, message: Optional[str]) -> Dict[str, str]:
        if not message or not message.strip():
            return build_ephemeral(EMPTY_MESSAGE_NOTICE)

        payload = self.model.format_prompt(build_prompt(tone, message))

        try:
            raw = await self._client.ainvoke(self.model.id, payload)
            text = self.model.extract_response(decode_response(raw))
        except Exception as exc:
            logger.exception("Rephrase failed (tone=%s, model=%s)", tone.value, self.model.id)
            return build_ephemeral(format_error_text(exc, self._expose_errors))

        return build_ephemeral(text)
