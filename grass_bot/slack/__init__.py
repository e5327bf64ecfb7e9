"""Slack-facing pieces: the external upload sequence and reply templates.

WHY: /grass posts an image to the channel through Slack's external
upload flow, and both commands reply with formatted text. This package
holds the Web API plumbing and every user-facing string.

HOW: uploader.py runs the four-step upload with typed bodies from
models.py; messages.py builds the reply texts.

RULES:
- Web API calls use the bot token (SLACK_BOT_TOKEN)
- Slash command replies themselves are plain HTTP responses built by
  the server, not Web API calls
"""

from grass_bot.slack.uploader import (
    FileTransferError,
    SlackReportedError,
    SlackUploader,
    SlackUploadError,
    UploadRequestError,
    UploadResponseError,
    UploadTransportError,
)

__all__ = [
    "FileTransferError",
    "SlackReportedError",
    "SlackUploadError",
    "SlackUploader",
    "UploadRequestError",
    "UploadResponseError",
    "UploadTransportError",
]
