"""Bedrock runtime client: one InvokeModel call per request.

WHY: The relay sends a JSON payload to a hosted model and gets a JSON
payload back. This module hides boto3 so the rephrase handler only sees
bytes in, bytes out, and a single exception type on failure.

HOW: BedrockClient lazily builds a boto3 "bedrock-runtime" client from
Settings on first use. invoke() serializes the payload, calls invoke_model,
and reads the streaming body. ainvoke() runs invoke() in a worker thread
because boto3 is synchronous and the HTTP layer is async.

RULES:
- No retries: botocore's own retry is disabled (total_max_attempts=1)
- No custom timeout: botocore transport defaults apply
- Every botocore failure is wrapped in InferenceError
- Explicit credentials from Settings win; otherwise boto3's default chain
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from rephrase_relay.config import Settings

logger = logging.getLogger(__name__)

_CONTENT_TYPE = "application/json"


class InferenceError(Exception):
    """Raised when the inference endpoint cannot produce a usable reply.

    RULES:
    - Covers network, authentication and request-rejection failures
    - Covers a response body that is not valid JSON
    - The original exception is chained as __cause__
    """


class BedrockClient:
    """Thin wrapper over boto3's bedrock-runtime client.

    RULES:
    - Pass client= to inject a prebuilt (or fake) boto3 client
    - Otherwise the boto3 client is created on first invoke
    """

    def __init__(self, settings: Settings, client: Optional[Any] = None) -> None:
        self._settings = settings
        self._client = client
        self._lock = threading.Lock()

    def _ensure_client(self) -> Any:
        """Return the boto3 client, building it exactly once.

        RULES:
        - Creation is serialized; boto3's default session is not thread-safe
        """
        if self._client is not None:
            return self._client
        with self._lock:
            if self._client is None:
                s = self._settings
                self._client = boto3.client(
                    "bedrock-runtime",
                    region_name=s.aws_region,
                    aws_access_key_id=s.aws_access_key_id,
                    aws_secret_access_key=s.aws_secret_access_key,
                    aws_session_token=s.aws_session_token,
                    config=Config(retries={"total_max_attempts": 1, "mode": "standard"}),
                )
        return self._client

    def invoke(self, model_id: str, payload: Dict[str, Any]) -> bytes:
        """Submit a payload to a model and return the raw response body.

        Args:
            model_id: Bedrock model identifier.
            payload: Vendor-specific request body (JSON-serializable).

        Returns:
            The raw JSON response bytes.

        Raises:
            InferenceError: On any botocore failure.
        """
        client = self._ensure_client()
        try:
            response = client.invoke_model(
                modelId=model_id,
                contentType=_CONTENT_TYPE,
                accept=_CONTENT_TYPE,
                body=json.dumps(payload),
            )
            return response["body"].read()
        except ClientError as exc:
            error = exc.response.get("Error", {})
            raise InferenceError(
                "Bedrock rejected the request ({}): {}".format(
                    error.get("Code", "Unknown"), error.get("Message", "")
                )
            ) from exc
        except BotoCoreError as exc:
            raise InferenceError("Bedrock call failed: {}".format(exc)) from exc

    async def ainvoke(self, model_id: str, payload: Dict[str, Any]) -> bytes:
        return await asyncio.to_thread(self.invoke, model_id, payload)


def decode_response(raw: bytes) -> Dict[str, Any]:
    """Parse a raw response body into a dict.

    Raises:
        InferenceError: If the body is not valid JSON.
    """
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise InferenceError("Model response is not valid JSON") from exc
