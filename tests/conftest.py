"""Shared test fixtures for the grass_bot test suite.

WHY: The client, uploader, handler, and server tests all need the same
settings, the same sample GitHub profile, and the same fakes for the
converter and the Slack Web API.

HOW: Plain pytest fixtures plus small helpers. HTTP is stubbed with
httpx.MockTransport, the Slack WebClient with a MagicMock returning real
SlackResponse objects, and the converter with FakeConverter.

RULES:
- No test touches the network or runs rsvg-convert
- OCTOCAT matches the documented end-to-end scenario (empty name/bio)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock

import httpx
import pytest
from slack_sdk.web.slack_response import SlackResponse

from grass_bot.config import Settings
from grass_bot.converters.base import ConversionError, ImageConverter

VERIFICATION_TOKEN = "test-verification-token"

OCTOCAT: Dict[str, Any] = {
    "login": "octocat",
    "name": "",
    "public_repos": 8,
    "followers": 100,
    "bio": "",
    "html_url": "https://github.com/octocat",
}

SAMPLE_SVG = b'<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"></svg>'
FAKE_PNG = b"\x89PNG\r\n\x1a\nfake"

UPLOAD_URL = "https://files.slack.com/upload/v1/abc123"


def slack_response(data: Dict[str, Any], method: str = "api.test") -> SlackResponse:
    """A SlackResponse as WebClient.api_call would return it."""
    return SlackResponse(
        client=None,
        http_verb="POST",
        api_url="https://slack.com/api/{}".format(method),
        req_args={},
        data=data,
        headers={},
        status_code=200,
    )


def upload_url_ok(file_id: str = "F0001") -> SlackResponse:
    return slack_response(
        {"ok": True, "files": [{"id": file_id, "upload_url": UPLOAD_URL}]},
        "files.getUploadURLExternal",
    )


class FakeConverter(ImageConverter):
    """Writes a fixed PNG instead of running a subprocess."""

    def __init__(self, error: Optional[str] = None) -> None:
        self.error = error
        self.calls: List[tuple] = []

    @property
    def name(self) -> str:
        return "fake"

    def convert(self, svg_path: Path, png_path: Path) -> Path:
        self.calls.append((svg_path, png_path))
        if self.error:
            raise ConversionError(self.error)
        Path(png_path).write_bytes(FAKE_PNG)
        return Path(png_path)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def settings():
    return Settings(
        verification_token=VERIFICATION_TOKEN,
        slack_bot_token="xoxb-test",
        github_token="",
        http_timeout_s=2.0,
    )


@pytest.fixture
def octocat_payload():
    return dict(OCTOCAT)


@pytest.fixture
def fake_converter():
    return FakeConverter()


@pytest.fixture
def web_client():
    """Slack WebClient stand-in.

    Tests set api_call.side_effect for the file methods; chat_postMessage
    succeeds unless a test overrides it.
    """
    client = MagicMock()
    client.chat_postMessage.return_value = slack_response(
        {"ok": True, "ts": "1700000000.000100"}, "chat.postMessage"
    )
    return client


@pytest.fixture
def put_transport():
    """Accepts every PUT to the upload URL with 200."""
    return RecordingTransport(lambda request: httpx.Response(200, text="OK"))
