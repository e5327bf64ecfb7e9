"""FastAPI application serving the /status and /grass slash commands.

WHY: Slack delivers slash commands as form-encoded POSTs to a public URL
and expects a JSON reply. FastAPI gives form parsing, response
validation, and OpenAPI docs with little code.

HOW: create_app() takes a Settings object and optional collaborators,
fills in the real ones for anything not supplied, and stores a
CommandHandlers instance on app.state. Route functions are plain ``def``
so their blocking outbound calls run in the server's thread pool, one
request per worker thread.

RULES:
- POST /status, POST /grass accept form fields token, text, channel_id
- Wrong method → 405, malformed body → 400, bad token → 401, all as
  plain-text responses
- Every other outcome is a 200 JSON SlashCommandReply
- Settings are passed in explicitly; nothing here reads the environment
  except run_api()
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from grass_bot import __version__
from grass_bot.api.chart import ChartClient
from grass_bot.api.github import GitHubClient
from grass_bot.config import Settings, configure_logging, load_settings
from grass_bot.converters.base import ImageConverter
from grass_bot.converters.rsvg import RsvgConverter
from grass_bot.server.handlers import CommandHandlers, UnauthorizedError
from grass_bot.server.models import CommandRequest, HealthResponse, SlashCommandReply
from grass_bot.slack.uploader import SlackUploader

logger = logging.getLogger(__name__)

_FORM_DESCRIPTIONS = {
    "token": "Verification token Slack attaches to every slash command.",
    "text": "Everything typed after the command; the first word is the GitHub username.",
    "channel_id": "Channel the command was invoked in.",
}


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    settings: Optional[Settings] = None,
    *,
    github_factory: Optional[Callable[[], GitHubClient]] = None,
    chart_factory: Optional[Callable[[], ChartClient]] = None,
    converter: Optional[ImageConverter] = None,
    uploader: Optional[SlackUploader] = None,
) -> FastAPI:
    """Build the FastAPI app with its command handlers.

    WHY: Tests and the production entry point need the same routes with
    different collaborators. A factory avoids module-level state and
    import-time environment reads.

    RULES:
    - settings defaults to load_settings()
    - Collaborators left as None are built from settings
    - A missing verification token or bot token is logged, not fatal
    """
    if settings is None:
        settings = load_settings()

    if not settings.verification_token:
        logger.warning(
            "SLACK_VERIFICATION_TOKEN is not set; slash command tokens "
            "will not be verified."
        )
    if not settings.slack_bot_token:
        logger.warning("SLACK_BOT_TOKEN is not set; /grass uploads will fail.")

    if github_factory is None:
        github_factory = partial(
            GitHubClient,
            token=settings.github_token,
            base_url=settings.github_api_url,
        )

    if chart_factory is None:
        chart_factory = partial(
            ChartClient,
            base_url=settings.chart_base_url,
            timeout_s=settings.http_timeout_s,
            max_bytes=settings.max_chart_bytes,
        )

    if converter is None:
        converter = RsvgConverter(
            executable=settings.rsvg_convert_path,
            timeout_s=settings.http_timeout_s,
        )

    if uploader is None:
        uploader = SlackUploader(
            token=settings.slack_bot_token,
            base_url=settings.slack_api_url,
            timeout_s=settings.http_timeout_s,
        )

    app = FastAPI(
        title="grass-bot",
        description=(
            "Slack slash-command webhook: /status replies with a GitHub "
            "profile summary, /grass posts the user's contribution chart "
            "to the channel."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.handlers = CommandHandlers(
        settings=settings,
        github_factory=github_factory,
        chart_factory=chart_factory,
        converter=converter,
        uploader=uploader,
    )

    _register_error_handlers(app)
    app.include_router(_build_router())
    return app


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


def _register_error_handlers(app: FastAPI) -> None:
    """Transport-level failures are answered in plain text, as Slack shows them verbatim."""

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        logger.warning(
            "%s %s rejected: %s %s",
            request.method, request.url.path, exc.status_code, exc.detail,
        )
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def _malformed_form(request: Request, exc: RequestValidationError) -> PlainTextResponse:
        logger.warning("%s %s malformed form: %s", request.method, request.url.path, exc.errors())
        return PlainTextResponse("Failed to parse form", status_code=400)

    @app.exception_handler(UnauthorizedError)
    async def _unauthorized(request: Request, exc: UnauthorizedError) -> PlainTextResponse:
        logger.warning("%s %s unauthorized", request.method, request.url.path)
        return PlainTextResponse("Unauthorized", status_code=401)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


def get_handlers(request: Request) -> CommandHandlers:
    return request.app.state.handlers


def _build_router() -> APIRouter:
    router = APIRouter()

    @router.post(
        "/status",
        response_model=SlashCommandReply,
        tags=["commands"],
        summary="/status slash command",
        description="Reply with the GitHub profile summary of the first word of `text`.",
        responses={
            400: {"description": "Malformed form body", "content": {"text/plain": {}}},
            401: {"description": "Invalid verification token", "content": {"text/plain": {}}},
        },
    )
    def slack_status(
        handlers: Annotated[CommandHandlers, Depends(get_handlers)],
        token: Annotated[str, Form(description=_FORM_DESCRIPTIONS["token"])] = "",
        text: Annotated[str, Form(description=_FORM_DESCRIPTIONS["text"])] = "",
        channel_id: Annotated[str, Form(description=_FORM_DESCRIPTIONS["channel_id"])] = "",
    ) -> SlashCommandReply:
        command = CommandRequest(
            command="status", token=token, text=text, channel_id=channel_id
        )
        return handlers.handle_status(command)

    @router.post(
        "/grass",
        response_model=SlashCommandReply,
        tags=["commands"],
        summary="/grass slash command",
        description=(
            "Render the contribution chart of the first word of `text` and "
            "post it to `channel_id`."
        ),
        responses={
            400: {"description": "Malformed form body", "content": {"text/plain": {}}},
            401: {"description": "Invalid verification token", "content": {"text/plain": {}}},
        },
    )
    def slack_grass(
        handlers: Annotated[CommandHandlers, Depends(get_handlers)],
        token: Annotated[str, Form(description=_FORM_DESCRIPTIONS["token"])] = "",
        text: Annotated[str, Form(description=_FORM_DESCRIPTIONS["text"])] = "",
        channel_id: Annotated[str, Form(description=_FORM_DESCRIPTIONS["channel_id"])] = "",
    ) -> SlashCommandReply:
        command = CommandRequest(
            command="grass", token=token, text=text, channel_id=channel_id
        )
        return handlers.handle_grass(command)

    @router.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"],
        summary="Health check",
        description="Liveness check for load balancers and orchestrators.",
    )
    def health_check() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return router


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_api() -> None:
    """Entry point for the grass-bot console script and ``python -m grass_bot``."""
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)

    logger.info("Serving /status and /grass on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
