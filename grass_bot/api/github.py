"""HTTP client for the GitHub REST API user lookup.

WHY: The /status command shows a profile summary, which is a single
GET /users/{username}. Keeping the call behind a small client class lets
handlers stay ignorant of headers, timeouts, and error shapes, and lets
tests swap the transport.

HOW: Wraps httpx.Client with the GitHub base URL, the client
identification header GitHub requires, and the optional token. Use it as
a context manager so the connection pool is closed after the request.

RULES:
- Timeout is fixed at 5 seconds (GITHUB_TIMEOUT_S)
- Authorization uses the "token <secret>" scheme, only when configured
- Non-200 responses raise GitHubAPIError with the status and raw body
- Transport failures (including timeouts) raise GitHubAPIError with
  status_code=None
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote

import httpx

from grass_bot import __version__
from grass_bot.api.models import GitHubUser
from grass_bot.config import GITHUB_API_URL, GITHUB_TIMEOUT_S

logger = logging.getLogger(__name__)

USER_AGENT = "grass-bot/{}".format(__version__)

# ASCII letters, digits and hyphens; 39 characters at most
LOGIN_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$")


def is_valid_login(username: str) -> bool:
    """True if ``username`` could be a GitHub login.

    Anything else (".." or "a/b" in particular) would change the request
    path, so callers reject it before any request is made.
    """
    return LOGIN_RE.fullmatch(username) is not None


class GitHubAPIError(Exception):
    """Raised when a GitHub lookup fails.

    RULES:
    - status_code is None for transport failures
    - message is the raw response body, or a transport error summary
    """

    def __init__(self, status_code: int | None, message: str) -> None:
        self.status_code = status_code
        self.message = message
        if status_code is None:
            super().__init__("GitHub request failed: {}".format(message))
        else:
            super().__init__(
                "GitHub responded {}: {}".format(status_code, message)
            )


class GitHubClient:
    """Synchronous client for GET /users/{username}.

    RULES:
    - Use as: with GitHubClient(token=...) as github: github.fetch_user(...)
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        token: str = "",
        base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._token = token
        self._base_url = (base_url or GITHUB_API_URL).rstrip("/")
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> GitHubClient:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        }
        if self._token:
            headers["Authorization"] = "token {}".format(self._token)
        self._client = httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=GITHUB_TIMEOUT_S,
            transport=self._transport,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            self._client.close()
            self._client = None

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            raise RuntimeError(
                "GitHubClient must be used as a context manager: "
                "with GitHubClient() as github: ..."
            )
        return self._client

    def fetch_user(self, username: str) -> GitHubUser:
        """Fetch the public profile for ``username``.

        Args:
            username: GitHub login; escaped before it goes into the path.

        Returns:
            The decoded GitHubUser. Fields GitHub omits default to empty.
        """
        client = self._ensure_client()
        path = "/users/{}".format(quote(username, safe=""))

        try:
            resp = client.get(path)
        except httpx.HTTPError as exc:
            logger.warning("GitHub request for %s failed: %s", username, exc)
            raise GitHubAPIError(None, str(exc) or type(exc).__name__) from exc

        if resp.status_code != 200:
            raise GitHubAPIError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as exc:
            raise GitHubAPIError(resp.status_code, "response is not JSON") from exc
        if not isinstance(data, dict):
            raise GitHubAPIError(resp.status_code, "response is not a JSON object")

        return GitHubUser.from_dict(data)
