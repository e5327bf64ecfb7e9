"""Slash command handlers: token check, argument parsing, orchestration.

WHY: Each command is a short pipeline over the outbound clients. Keeping
that pipeline out of the FastAPI route functions lets it be exercised
directly with fake collaborators, and keeps the routes to form parsing
and response encoding.

HOW: CommandHandlers is built once per app with its collaborators
injected: factories for the per-request HTTP clients, one image
converter, one Slack uploader. handle_status() and handle_grass() take a
CommandRequest and return a SlashCommandReply; the only exception they
let escape is UnauthorizedError.

RULES:
- Token check first; a rejected request makes no outbound call
- Blank argument → ephemeral usage prompt, no outbound call
- Username that is not a valid GitHub login → ephemeral failure, no
  outbound call
- Domain failures (GitHub, chart, conversion, upload) → ephemeral reply
  starting with the failure marker, logged with context
- /grass temp files live in a per-request directory removed on every path
"""

from __future__ import annotations

import hmac
import logging
import tempfile
import uuid
from collections.abc import Callable
from pathlib import Path

from grass_bot.api.chart import ChartClient, ChartFetchError
from grass_bot.api.github import GitHubAPIError, GitHubClient, is_valid_login
from grass_bot.config import Settings
from grass_bot.converters.base import ConversionError, ImageConverter
from grass_bot.server.models import CommandRequest, SlashCommandReply
from grass_bot.slack import messages
from grass_bot.slack.uploader import SlackUploader, SlackUploadError

logger = logging.getLogger(__name__)


class UnauthorizedError(Exception):
    """Raised when a slash command carries the wrong verification token."""


def verify_token(received: str, expected: str) -> None:
    """Reject ``received`` unless it equals ``expected`` exactly.

    An empty ``expected`` disables the check. That is an escape hatch for
    local testing and is logged on every request.
    """
    if not expected:
        logger.warning("SLACK_VERIFICATION_TOKEN is not set; skipping token check")
        return
    if not hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8")):
        raise UnauthorizedError("invalid verification token")


def _invalid_login(command: str, username: str) -> SlashCommandReply:
    logger.warning("/%s rejected username %r", command, username)
    return SlashCommandReply.ephemeral(
        messages.format_failure(username, messages.INVALID_LOGIN)
    )


class CommandHandlers:
    """The /status and /grass pipelines with their collaborators."""

    def __init__(
        self,
        settings: Settings,
        github_factory: Callable[[], GitHubClient],
        chart_factory: Callable[[], ChartClient],
        converter: ImageConverter,
        uploader: SlackUploader,
    ) -> None:
        self._settings = settings
        self._github_factory = github_factory
        self._chart_factory = chart_factory
        self._converter = converter
        self._uploader = uploader

    # ------------------------------------------------------------------
    # /status
    # ------------------------------------------------------------------

    def handle_status(self, request: CommandRequest) -> SlashCommandReply:
        """Reply with a GitHub profile summary, visible to the channel."""
        verify_token(request.token, self._settings.verification_token)

        username = request.username()
        if not username:
            return SlashCommandReply.ephemeral(messages.usage_prompt(request.command))
        if not is_valid_login(username):
            return _invalid_login(request.command, username)

        logger.info("/%s requested for %s", request.command, username)
        try:
            with self._github_factory() as github:
                user = github.fetch_user(username)
        except GitHubAPIError as exc:
            logger.warning("GitHub lookup for %s failed: %s", username, exc)
            return SlashCommandReply.ephemeral(messages.format_failure(username, str(exc)))

        return SlashCommandReply.in_channel(messages.format_status(user))

    # ------------------------------------------------------------------
    # /grass
    # ------------------------------------------------------------------

    def handle_grass(self, request: CommandRequest) -> SlashCommandReply:
        """Render the contribution chart and post it to the channel.

        The chart goes out as a channel message through the upload
        sequence; the slash command reply itself only tells the sender
        it was posted.
        """
        verify_token(request.token, self._settings.verification_token)

        username = request.username()
        if not username:
            return SlashCommandReply.ephemeral(messages.usage_prompt(request.command))
        if not is_valid_login(username):
            return _invalid_login(request.command, username)

        request_id = uuid.uuid4().hex
        logger.info(
            "/%s requested for %s (channel=%s, request=%s)",
            request.command, username, request.channel_id, request_id,
        )

        try:
            with tempfile.TemporaryDirectory(prefix="grass-{}-".format(request_id)) as tmp:
                self._render_and_upload(username, request.channel_id, Path(tmp))
        except (ChartFetchError, ConversionError, SlackUploadError, OSError) as exc:
            logger.exception(
                "/%s failed for %s (channel=%s, request=%s)",
                request.command, username, request.channel_id, request_id,
            )
            return SlashCommandReply.ephemeral(messages.format_failure(username, str(exc)))

        return SlashCommandReply.ephemeral(messages.chart_posted(username))

    def _render_and_upload(self, username: str, channel_id: str, workdir: Path) -> None:
        with self._chart_factory() as charts:
            svg_bytes = charts.fetch_chart(username)

        svg_path = workdir / "chart.svg"
        png_path = workdir / "chart.png"
        svg_path.write_bytes(svg_bytes)

        self._converter.convert(svg_path, png_path)

        self._uploader.upload_and_share(
            png_path,
            filename=messages.chart_filename(username),
            channel_id=channel_id,
            caption=messages.chart_caption(username),
        )
