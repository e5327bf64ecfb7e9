"""Slack external file upload: request slot, PUT bytes, finalize, announce.

WHY: files.upload is retired; posting an image to a channel now takes
Slack's external upload flow. /grass uses it to share the rendered
contribution chart.

HOW: SlackUploader runs four strictly ordered steps, each consuming the
previous step's output:

  1. files.getUploadURLExternal  → UploadSession (file_id, upload_url)
  2. PUT file bytes to upload_url
  3. files.completeUploadExternal with the file_id
  4. chat.postMessage to the channel referencing the file_id

Web API calls (1, 3, 4) go through slack_sdk's WebClient with bodies
built from the models in models.py: api_call(json=...) for the two file
methods and the typed chat_postMessage for the announcement. The raw PUT
(2) is not a Web API call and goes through httpx.

RULES:
- Any step's failure raises a SlackUploadError subclass and stops the
  sequence; nothing is retried or rolled back
- A failed or empty slot request means no PUT and no finalize
- A PUT answered with status >= 300 means no finalize and no announce
- The finalize response's ok flag is checked like every other step
- A file_id is referenced in a message only after finalize succeeded
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import httpx
from pydantic import ValidationError
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackRequestError
from slack_sdk.web.slack_response import SlackResponse

from grass_bot.config import DEFAULT_HTTP_TIMEOUT_S, SLACK_API_URL
from grass_bot.slack.models import (
    CompleteUploadRequest,
    FileRef,
    GetUploadURLRequest,
    GetUploadURLResponse,
    PostMessageRequest,
    SlackAPIResult,
    UploadSession,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class SlackUploadError(Exception):
    """Base class for every failure in the upload sequence."""


class UploadRequestError(SlackUploadError):
    """The request could not be built (e.g. the local file is unreadable)."""


class UploadTransportError(SlackUploadError):
    """Slack could not be reached or did not answer in time."""


class UploadResponseError(SlackUploadError):
    """Slack answered with a body that does not have the expected shape."""


class SlackReportedError(SlackUploadError):
    """Slack answered ok=false.

    RULES:
    - method is the Web API method name
    - error is Slack's error code (e.g. "invalid_auth"), or None
    """

    def __init__(self, method: str, error: Optional[str]) -> None:
        self.method = method
        self.error = error
        super().__init__("{} failed: {}".format(method, error or "unknown_error"))


class FileTransferError(SlackUploadError):
    """The PUT to the upload URL was rejected."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__("File upload failed with HTTP {}: {}".format(status_code, body))


# ---------------------------------------------------------------------------
# Uploader
# ---------------------------------------------------------------------------


class SlackUploader:
    """Runs the external upload sequence for one file.

    RULES:
    - token is the bot token (xoxb-...)
    - web_client and transport are for tests; by default a WebClient and
      an httpx transport are built with the same bounded timeout
    """

    def __init__(
        self,
        token: str = "",
        base_url: Optional[str] = None,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
        web_client: Optional[WebClient] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._transport = transport
        if web_client is None:
            web_client = WebClient(
                token=token or None,
                base_url=(base_url or SLACK_API_URL).rstrip("/") + "/",
                timeout=max(1, int(round(timeout_s))),
            )
        self._web = web_client

    # ------------------------------------------------------------------
    # Full sequence
    # ------------------------------------------------------------------

    def upload_and_share(
        self,
        file_path: Path,
        filename: str,
        channel_id: str,
        caption: str,
    ) -> str:
        """Upload ``file_path`` and post it to ``channel_id``.

        Returns:
            The finalized Slack file id.

        Raises:
            SlackUploadError: a step failed; later steps did not run.
        """
        file_path = Path(file_path)
        try:
            length = file_path.stat().st_size
        except OSError as exc:
            raise UploadRequestError(
                "Cannot read {}: {}".format(file_path, exc)
            ) from exc

        logger.info("Requesting upload slot: filename=%s size=%d", filename, length)
        session = self.request_upload_slot(filename, length, channel_id)

        logger.info("Uploading %s to Slack (file_id=%s)", filename, session.file_id)
        self.transfer(session, file_path)

        self.complete(session)
        logger.info("Upload finalized: file_id=%s", session.file_id)

        self.announce(channel_id, caption, session.file_id)
        logger.info(
            "Posted file %s to channel %s", session.file_id, channel_id
        )
        return session.file_id

    # ------------------------------------------------------------------
    # Step 1: request slot
    # ------------------------------------------------------------------

    def request_upload_slot(
        self, filename: str, length: int, channel_id: str
    ) -> UploadSession:
        method = "files.getUploadURLExternal"
        body = GetUploadURLRequest.for_file(filename, length, channel_id)
        data = self._call(method, body.model_dump())

        try:
            parsed = GetUploadURLResponse.model_validate(data)
        except ValidationError as exc:
            raise UploadResponseError(
                "{} returned an unexpected body: {}".format(method, exc)
            ) from exc

        if not parsed.ok:
            raise SlackReportedError(method, parsed.error)

        sessions = parsed.sessions()
        if not sessions:
            logger.error("%s returned no upload slot: %s", method, data)
            raise UploadResponseError("{} returned no upload slot".format(method))
        return sessions[0]

    # ------------------------------------------------------------------
    # Step 2: transfer bytes
    # ------------------------------------------------------------------

    def transfer(self, session: UploadSession, file_path: Path) -> None:
        try:
            content = Path(file_path).read_bytes()
        except OSError as exc:
            raise UploadRequestError(
                "Cannot read {}: {}".format(file_path, exc)
            ) from exc

        try:
            with httpx.Client(timeout=self._timeout_s, transport=self._transport) as http:
                resp = http.put(
                    session.upload_url,
                    content=content,
                    headers={"Content-Type": "application/octet-stream"},
                )
        except httpx.HTTPError as exc:
            raise UploadTransportError(
                "PUT to upload URL failed: {}".format(exc)
            ) from exc

        if resp.status_code >= 300:
            raise FileTransferError(resp.status_code, resp.text)

    # ------------------------------------------------------------------
    # Step 3: finalize
    # ------------------------------------------------------------------

    def complete(self, session: UploadSession) -> None:
        method = "files.completeUploadExternal"
        body = CompleteUploadRequest(files=[FileRef(id=session.file_id)])
        data = self._call(method, body.model_dump())
        logger.info("%s response: %s", method, data)
        self._check_ok(method, data)

    # ------------------------------------------------------------------
    # Step 4: announce
    # ------------------------------------------------------------------

    def announce(self, channel_id: str, text: str, file_id: str) -> None:
        method = "chat.postMessage"
        body = PostMessageRequest(channel=channel_id, text=text, file_ids=[file_id])
        data = self._send(method, lambda: self._web.chat_postMessage(**body.model_dump()))
        self._check_ok(method, data)

    # ------------------------------------------------------------------
    # Web API plumbing
    # ------------------------------------------------------------------

    def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON body to a Web API method and return the decoded body."""
        return self._send(method, lambda: self._web.api_call(method, json=payload))

    def _send(self, method: str, request: Callable[[], SlackResponse]) -> Dict[str, Any]:
        """Run one WebClient call, mapping slack_sdk failures to SlackUploadError."""
        try:
            resp = request()
        except SlackApiError as exc:
            error = exc.response.get("error") if exc.response is not None else None
            logger.error("%s reported failure: %s", method, error)
            raise SlackReportedError(method, error) from exc
        except SlackRequestError as exc:
            raise UploadRequestError("{}: {}".format(method, exc)) from exc
        except OSError as exc:
            raise UploadTransportError("{}: {}".format(method, exc)) from exc

        data = resp.data
        if not isinstance(data, dict):
            raise UploadResponseError("{} returned a non-JSON body".format(method))
        return data

    @staticmethod
    def _check_ok(method: str, data: Dict[str, Any]) -> None:
        try:
            result = SlackAPIResult.model_validate(data)
        except ValidationError as exc:
            raise UploadResponseError(
                "{} returned an unexpected body: {}".format(method, exc)
            ) from exc
        if not result.ok:
            raise SlackReportedError(method, result.error)
