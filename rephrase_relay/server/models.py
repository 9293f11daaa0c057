"""Pydantic response models for the HTTP API.

WHY: FastAPI uses these for response serialization and the OpenAPI docs.
Slack only reads response_type and text, so the slash-command reply model
is deliberately minimal.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Python 3.9+ compatible (no PEP 604 unions)
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SlackReply(BaseModel):
    """Slash-command reply body."""

    response_type: str = Field(
        default="ephemeral",
        description="Slack visibility; 'ephemeral' shows the reply only to the invoker.",
    )
    text: str = Field(description="Rephrased message, notice, or error text.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "response_type": "ephemeral",
                "text": "Could you please send the report when you have a moment?",
            }
        ]
    }}


class HealthResponse(BaseModel):
    """Health check response.

    WHY: Load balancers need a liveness probe that does not depend on the
    inference provider being reachable.
    """

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    model: str = Field(
        description="Identifier of the active hosted model.",
        json_schema_extra={"example": "apac.anthropic.claude-3-5-sonnet-20240620-v1:0"},
    )
