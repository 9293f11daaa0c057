"""Inference package — model descriptors and the Bedrock runtime client.

WHY: The rephrase handler needs to turn a prompt into model output without
knowing which model family is active or how Bedrock is called.

HOW: adapters.py holds the static model table (format/extract per family);
client.py wraps the single boto3 InvokeModel call.

RULES:
- All Bedrock calls go through BedrockClient (no direct boto3 usage elsewhere)
- Exactly one ModelDescriptor is active per process
"""

from rephrase_relay.inference.adapters import MODELS, ModelDescriptor, select_model
from rephrase_relay.inference.client import BedrockClient, InferenceError

__all__ = ["BedrockClient", "InferenceError", "MODELS", "ModelDescriptor", "select_model"]
