"""FastAPI application: slash-command routes, health, and Slack OAuth.

WHY: Slack delivers slash commands as HTTP webhooks and expects a JSON
reply within a few seconds. The OAuth install flow needs a browser-facing
redirect and callback. One small FastAPI app serves both.

HOW: create_app() resolves Settings and the active model once, builds the
Rephraser and SlackOAuth collaborators, and stores them on app.state.
Route handlers fetch them from request.app.state, so tests can inject
fakes by passing them to create_app(). /polite, /clarity and /simple each
bind a Tone and delegate to Rephraser.rephrase().

RULES:
- Slash-command routes always answer HTTP 200 with an ephemeral body
- Unmatched paths and methods answer 200 with the "Command not found" notice
- Uncaught errors answer 200 ephemeral; detail only outside production
- OAuth routes use conventional status codes (400 provider error, 500 failure)
- /health never touches the inference provider
- Slack request signatures are not verified
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from rephrase_relay import __version__
from rephrase_relay.config import Settings, load_settings
from rephrase_relay.core.rephrase import Rephraser, Tone
from rephrase_relay.inference.adapters import select_model
from rephrase_relay.inference.client import BedrockClient
from rephrase_relay.server.models import HealthResponse, SlackReply
from rephrase_relay.slack.messages import (
    COMMAND_NOT_FOUND,
    OAUTH_EXCHANGE_FAILED,
    OAUTH_MISSING_CODE,
    OAUTH_NOT_CONFIGURED,
    OAUTH_SUCCESS,
    build_ephemeral,
    format_error_text,
)
from rephrase_relay.slack.oauth import OAuthExchangeError, SlackOAuth

logger = logging.getLogger(__name__)

router = APIRouter()

# Status codes that mean "no such command" rather than a real HTTP error
_NOT_FOUND_STATUSES = frozenset({404, 405})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _read_command(request: Request) -> Dict[str, Any]:
    """Read a slash-command body as a dict.

    RULES:
    - application/json → parsed JSON object (anything else → {})
    - otherwise → form fields (Slack sends x-www-form-urlencoded)
    - an unparseable body of either kind → {}
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    try:
        form = await request.form()
    except StarletteHTTPException as exc:
        logger.warning("Unparseable slash-command body: %s", exc.detail)
        return {}
    return dict(form)


async def _handle_command(request: Request, tone: Tone) -> Dict[str, str]:
    command = await _read_command(request)
    text = command.get("text")
    if not isinstance(text, str):
        text = None

    logger.info(
        "Slash command %s (tone=%s) from user %s",
        command.get("command", "/" + tone.value),
        tone.value,
        command.get("user_id", "unknown"),
    )

    rephraser: Rephraser = request.app.state.rephraser
    return await rephraser.rephrase(tone, text)


# ---------------------------------------------------------------------------
# Endpoints: Slash commands
# ---------------------------------------------------------------------------


@router.post(
    "/polite",
    response_model=SlackReply,
    tags=["commands"],
    summary="Rephrase a message to sound more polite",
)
async def polite(request: Request) -> Dict[str, str]:
    return await _handle_command(request, Tone.POLITE)


@router.post(
    "/clarity",
    response_model=SlackReply,
    tags=["commands"],
    summary="Rephrase a message for clarity",
)
async def clarity(request: Request) -> Dict[str, str]:
    return await _handle_command(request, Tone.CLARITY)


@router.post(
    "/simple",
    response_model=SlackReply,
    tags=["commands"],
    summary="Rephrase a message in simpler words",
)
async def simple(request: Request) -> Dict[str, str]:
    return await _handle_command(request, Tone.SIMPLE)


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check. Reports the active model without calling it.",
)
async def health_check(request: Request) -> HealthResponse:
    rephraser: Rephraser = request.app.state.rephraser
    return HealthResponse(status="ok", model=rephraser.model.id)


# ---------------------------------------------------------------------------
# Endpoints: Slack OAuth
# ---------------------------------------------------------------------------


@router.get(
    "/slack/install",
    tags=["oauth"],
    summary="Start the Slack app installation",
    description="Redirects the browser to Slack's OAuth authorize page.",
)
async def slack_install(request: Request) -> Response:
    oauth: SlackOAuth = request.app.state.oauth
    if not oauth.configured:
        return PlainTextResponse(OAUTH_NOT_CONFIGURED, status_code=500)
    return RedirectResponse(oauth.authorize_url())


@router.get(
    "/slack/oauth/callback",
    response_class=PlainTextResponse,
    tags=["oauth"],
    summary="Complete the Slack app installation",
    description=(
        "Slack redirects here with a one-time code. The code is exchanged "
        "for an install token via oauth.v2.access."
    ),
)
async def slack_oauth_callback(request: Request, code: Optional[str] = None) -> Response:
    oauth: SlackOAuth = request.app.state.oauth
    if not oauth.configured:
        return PlainTextResponse(OAUTH_NOT_CONFIGURED, status_code=500)
    if not code:
        return PlainTextResponse(OAUTH_MISSING_CODE, status_code=400)

    try:
        result = await oauth.exchange_code(code)
    except OAuthExchangeError:
        logger.exception("Slack OAuth exchange failed")
        return PlainTextResponse(OAUTH_EXCHANGE_FAILED, status_code=500)

    if not result.get("ok"):
        return PlainTextResponse(
            "OAuth failed: {}".format(result.get("error", "unknown_error")),
            status_code=400,
        )
    return PlainTextResponse(OAUTH_SUCCESS)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code in _NOT_FOUND_STATUSES:
        return JSONResponse(build_ephemeral(COMMAND_NOT_FOUND), status_code=200)
    return await http_exception_handler(request, exc)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    settings: Settings = request.app.state.settings
    text = format_error_text(exc, expose_detail=not settings.is_production)
    return JSONResponse(build_ephemeral(text), status_code=200)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    settings: Optional[Settings] = None,
    rephraser: Optional[Rephraser] = None,
    oauth: Optional[SlackOAuth] = None,
) -> FastAPI:
    """Build the FastAPI app with its collaborators resolved once.

    RULES:
    - settings defaults to load_settings() (environment + .env)
    - rephraser defaults to the model selected by settings.model_key
    - oauth defaults to SlackOAuth(settings)
    """
    if settings is None:
        settings = load_settings()
    if rephraser is None:
        rephraser = Rephraser(
            model=select_model(settings.model_key),
            client=BedrockClient(settings),
            expose_errors=not settings.is_production,
        )
    if oauth is None:
        oauth = SlackOAuth(settings)

    app = FastAPI(
        title="Slack Rephrase Relay",
        description=(
            "Relays Slack slash commands (/polite, /clarity, /simple) to a "
            "hosted language model and returns the rephrased text as an "
            "ephemeral Slack reply. Also handles the Slack OAuth install flow."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.rephraser = rephraser
    app.state.oauth = oauth

    app.include_router(router)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    logger.info(
        "Rephrase relay ready (model=%s, oauth=%s, env=%s)",
        rephraser.model.id,
        "configured" if oauth.configured else "disabled",
        settings.environment,
    )
    return app


def run_api() -> None:
    """Entry point for the rephrase-relay console script."""
    import uvicorn

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logger.info("Slack app listening on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
