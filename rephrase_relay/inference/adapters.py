"""Model descriptors: request formatting and response extraction per model family.

WHY: Bedrock models do not share a request or response schema. Anthropic
models take a system instruction plus a message list and answer with
content blocks; Llama models take one templated prompt string and answer
with a "generation" field. Callers should not care which one is active.

HOW: Each supported model is a frozen ModelDescriptor holding its Bedrock
model id and two pure functions. MODELS is the static lookup table and
select_model() resolves the active descriptor once at startup.

RULES:
- format_prompt and extract_response are pure functions of their argument
- extract_response never raises; unknown shapes yield EXTRACTION_ERROR
- Adding a model family = one new descriptor in MODELS, no call-site changes
- Unknown model keys fall back to CLAUDE
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

EXTRACTION_ERROR = "Error: Could not extract response"

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant that rephrases text. "
    "Provide only the rephrased text with no additional commentary."
)

# Sampling parameters shared by every model family
_TEMPERATURE = 0.7
_TOP_P = 0.9
_MAX_TOKENS = 1000

Payload = Dict[str, Any]


@dataclass(frozen=True)
class ModelDescriptor:
    """The format/extract pair plus identifier for one hosted model."""

    key: str
    id: str
    format_prompt: Callable[[str], Payload]
    extract_response: Callable[[Payload], str]


# ---------------------------------------------------------------------------
# Chat-style family (Anthropic Messages API on Bedrock)
# ---------------------------------------------------------------------------


def format_chat_prompt(prompt: str) -> Payload:
    return {
        "anthropic_version": "bedrock-2023-05-31",
        "max_tokens": _MAX_TOKENS,
        "temperature": _TEMPERATURE,
        "top_p": _TOP_P,
        "system": SYSTEM_INSTRUCTION,
        "messages": [
            {
                "role": "user",
                "content": [{"type": "text", "text": prompt}],
            }
        ],
    }


def extract_chat_response(body: Payload) -> str:
    """Return the first content block's text, or a legacy completion.

    RULES:
    - content[0].text wins when present
    - Falls back to the legacy Text Completions "completion" field
    - Anything else returns EXTRACTION_ERROR
    """
    if not isinstance(body, dict):
        return EXTRACTION_ERROR

    content = body.get("content")
    if isinstance(content, list) and content:
        first = content[0]
        if isinstance(first, dict) and isinstance(first.get("text"), str):
            return first["text"].strip()

    completion = body.get("completion")
    if isinstance(completion, str):
        return completion.strip()

    return EXTRACTION_ERROR


# ---------------------------------------------------------------------------
# Completion-style family (Meta Llama on Bedrock)
# ---------------------------------------------------------------------------


def format_completion_prompt(prompt: str) -> Payload:
    return {
        "prompt": "\n\nHuman: {}\n\nAssistant:".format(prompt),
        "temperature": _TEMPERATURE,
        "top_p": _TOP_P,
    }


def extract_completion_response(body: Payload) -> str:
    if isinstance(body, dict) and isinstance(body.get("generation"), str):
        return body["generation"].strip()
    return EXTRACTION_ERROR


# ---------------------------------------------------------------------------
# Static model table
# ---------------------------------------------------------------------------

CLAUDE = ModelDescriptor(
    key="CLAUDE",
    id="apac.anthropic.claude-3-5-sonnet-20240620-v1:0",
    format_prompt=format_chat_prompt,
    extract_response=extract_chat_response,
)

LLAMA = ModelDescriptor(
    key="LLAMA",
    id="meta.llama3-8b-instruct-v1:0",
    format_prompt=format_completion_prompt,
    extract_response=extract_completion_response,
)

MODELS: Dict[str, ModelDescriptor] = {
    CLAUDE.key: CLAUDE,
    LLAMA.key: LLAMA,
}


def select_model(key: str) -> ModelDescriptor:
    """Look up a descriptor by key, falling back to CLAUDE."""
    descriptor = MODELS.get(key.upper())
    if descriptor is None:
        logger.warning(
            "Unknown model %r, falling back to %s. Available: %s",
            key, CLAUDE.key, ", ".join(sorted(MODELS)),
        )
        return CLAUDE
    return descriptor
