"""Slack integration for the rephrase relay.

WHY: Slack talks to the relay in two ways: slash-command webhooks, which
need ephemeral JSON replies, and the OAuth install redirect, which needs a
code-for-token exchange.

HOW: messages.py holds reply payloads and user-facing strings; oauth.py
performs the OAuth v2 exchange over httpx.

RULES:
- Slash-command replies are always HTTP 200 with an ephemeral body
- OAuth replies use conventional HTTP status codes
"""
