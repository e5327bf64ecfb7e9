"""Tests for the contribution chart fetcher."""

from __future__ import annotations

import httpx
import pytest

from grass_bot.api.chart import ChartClient, ChartFetchError

from conftest import SAMPLE_SVG, RecordingTransport


def _client(transport, max_bytes=1024):
    return ChartClient(
        base_url="https://chart.test",
        timeout_s=1.0,
        max_bytes=max_bytes,
        transport=transport,
    )


class TestFetchChart:

    def test_returns_svg_bytes(self):
        transport = RecordingTransport(
            lambda request: httpx.Response(200, content=SAMPLE_SVG)
        )
        with _client(transport) as charts:
            assert charts.fetch_chart("octocat") == SAMPLE_SVG

        request = transport.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/octocat"
        assert "Authorization" not in request.headers

    def test_non_200_raises(self):
        transport = RecordingTransport(lambda request: httpx.Response(502, text="bad gateway"))
        with _client(transport) as charts:
            with pytest.raises(ChartFetchError, match="HTTP 502"):
                charts.fetch_chart("octocat")

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client(httpx.MockTransport(handler)) as charts:
            with pytest.raises(ChartFetchError, match="connection refused"):
                charts.fetch_chart("octocat")

    def test_oversized_body_rejected(self):
        transport = RecordingTransport(
            lambda request: httpx.Response(200, content=b"x" * 2048)
        )
        with _client(transport, max_bytes=1024) as charts:
            with pytest.raises(ChartFetchError, match="exceeds 1024 bytes"):
                charts.fetch_chart("octocat")

    def test_single_request_no_retry(self):
        transport = RecordingTransport(lambda request: httpx.Response(500))
        with _client(transport) as charts:
            with pytest.raises(ChartFetchError):
                charts.fetch_chart("octocat")

        assert len(transport.requests) == 1
