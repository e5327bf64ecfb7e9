"""HTTP client for the contribution chart renderer.

WHY: GitHub has no API for the contribution calendar image. A public
chart service renders it as SVG keyed by username; /grass fetches that
SVG and rasterizes it before uploading to Slack.

HOW: One unauthenticated streamed GET per request. The body is read in
chunks so an oversized or runaway response is cut off at the configured
cap instead of being buffered whole.

RULES:
- Any transport error, non-200 status, or oversized body raises
  ChartFetchError
- No retry
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from grass_bot.config import CHART_BASE_URL, DEFAULT_HTTP_TIMEOUT_S, DEFAULT_MAX_CHART_BYTES

logger = logging.getLogger(__name__)


class ChartFetchError(Exception):
    """Raised when the chart SVG could not be fetched."""


class ChartClient:
    """Fetches contribution chart SVGs.

    RULES:
    - Use as a context manager, like GitHubClient
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
        max_bytes: int = DEFAULT_MAX_CHART_BYTES,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or CHART_BASE_URL).rstrip("/")
        self._timeout_s = timeout_s
        self._max_bytes = max_bytes
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> ChartClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout_s,
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            self._client.close()
            self._client = None

    def fetch_chart(self, username: str) -> bytes:
        """Return the raw SVG bytes of ``username``'s contribution chart."""
        if self._client is None:
            raise RuntimeError(
                "ChartClient must be used as a context manager: "
                "with ChartClient() as charts: ..."
            )
        path = "/{}".format(quote(username, safe=""))

        try:
            with self._client.stream("GET", path) as resp:
                if resp.status_code != 200:
                    raise ChartFetchError(
                        "Failed to fetch chart for {}: HTTP {}".format(
                            username, resp.status_code
                        )
                    )
                chunks = []
                received = 0
                for chunk in resp.iter_bytes():
                    received += len(chunk)
                    if received > self._max_bytes:
                        raise ChartFetchError(
                            "Failed to fetch chart for {}: response exceeds "
                            "{} bytes".format(username, self._max_bytes)
                        )
                    chunks.append(chunk)
        except httpx.HTTPError as exc:
            logger.warning("Chart request for %s failed: %s", username, exc)
            raise ChartFetchError(
                "Failed to fetch chart for {}: {}".format(username, exc)
            ) from exc

        return b"".join(chunks)
