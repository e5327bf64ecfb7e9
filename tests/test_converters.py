"""Tests for the rsvg-convert image converter.

subprocess.run is patched throughout; rsvg-convert is never executed.
"""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from grass_bot.converters import ConversionError, RsvgConverter


def _completed(cmd, returncode=0, stderr=b""):
    return subprocess.CompletedProcess(cmd, returncode, stdout=b"", stderr=stderr)


class TestRsvgConverter:

    def test_runs_rsvg_convert_and_returns_png(self, tmp_path):
        svg = tmp_path / "chart.svg"
        png = tmp_path / "chart.png"
        svg.write_bytes(b"<svg/>")

        def fake_run(cmd, **kwargs):
            png.write_bytes(b"png")
            return _completed(cmd)

        with patch("grass_bot.converters.rsvg.subprocess.run", side_effect=fake_run) as run:
            result = RsvgConverter(executable="/usr/bin/rsvg-convert").convert(svg, png)

        assert result == png
        cmd = run.call_args[0][0]
        assert cmd == ["/usr/bin/rsvg-convert", "-o", str(png), str(svg)]
        assert run.call_args[1]["timeout"] > 0

    def test_non_zero_exit_raises_with_stderr(self, tmp_path):
        with patch(
            "grass_bot.converters.rsvg.subprocess.run",
            side_effect=lambda cmd, **kw: _completed(cmd, 1, b"Error reading SVG"),
        ):
            with pytest.raises(ConversionError, match="Error reading SVG"):
                RsvgConverter().convert(tmp_path / "a.svg", tmp_path / "a.png")

    def test_missing_executable_raises(self, tmp_path):
        with patch(
            "grass_bot.converters.rsvg.subprocess.run",
            side_effect=FileNotFoundError("rsvg-convert"),
        ):
            with pytest.raises(ConversionError, match="not found"):
                RsvgConverter().convert(tmp_path / "a.svg", tmp_path / "a.png")

    def test_timeout_raises(self, tmp_path):
        with patch(
            "grass_bot.converters.rsvg.subprocess.run",
            side_effect=subprocess.TimeoutExpired("rsvg-convert", 5),
        ):
            with pytest.raises(ConversionError, match="timed out"):
                RsvgConverter(timeout_s=5).convert(tmp_path / "a.svg", tmp_path / "a.png")

    def test_success_without_output_file_raises(self, tmp_path):
        with patch(
            "grass_bot.converters.rsvg.subprocess.run",
            side_effect=lambda cmd, **kw: _completed(cmd),
        ):
            with pytest.raises(ConversionError, match="wrote no file"):
                RsvgConverter().convert(tmp_path / "a.svg", tmp_path / "a.png")

    def test_name(self):
        assert RsvgConverter().name == "rsvg"
