"""Slack Rephrase Relay — slash commands that rewrite text with a hosted LLM.

WHY: Users want a quick way to rewrite a message in a better tone or
with plainer wording without leaving Slack. Each slash command sends the text to a
model on AWS Bedrock and returns the rewrite only to the invoking user.

HOW: Four small layers: model descriptors (format/extract per model
family), a Bedrock client, the rephrase handler, and a FastAPI app that
maps slash commands and the Slack OAuth callback onto them.

RULES:
- Exactly one model is active per process, chosen at startup
- Slash-command replies are always ephemeral
"""

__version__ = "0.1.0"
