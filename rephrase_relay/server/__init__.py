"""HTTP surface for the rephrase relay.

WHY: Slack slash commands and the OAuth install redirect both arrive as
plain HTTP requests.

HOW: app.py defines the FastAPI app factory and routes; models.py defines
the Pydantic response schemas used for serialization and OpenAPI docs.
"""

from rephrase_relay.server.app import create_app

__all__ = ["create_app"]
