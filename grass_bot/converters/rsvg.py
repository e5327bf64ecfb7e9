"""SVG rasterization via librsvg's ``rsvg-convert`` command.

WHY: rsvg-convert is packaged on every mainstream Linux distribution and
renders the chart service's SVG faithfully, without pulling a rendering
stack into the Python process.

HOW: Runs ``rsvg-convert -o <png> <svg>`` with subprocess.run, capturing
stderr for the error message.

RULES:
- Non-zero exit, missing executable, or timeout raise ConversionError
- The executable path is configurable (RSVG_CONVERT_PATH)
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from grass_bot.converters.base import ConversionError, ImageConverter

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 30.0


class RsvgConverter(ImageConverter):
    """Converts SVG to PNG by shelling out to rsvg-convert."""

    def __init__(
        self,
        executable: str = "rsvg-convert",
        timeout_s: float = _DEFAULT_TIMEOUT_S,
    ) -> None:
        self._executable = executable
        self._timeout_s = timeout_s

    @property
    def name(self) -> str:
        return "rsvg"

    def convert(self, svg_path: Path, png_path: Path) -> Path:
        cmd = [self._executable, "-o", str(png_path), str(svg_path)]
        logger.debug("Running %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=self._timeout_s,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ConversionError(
                "{} not found; install librsvg or set RSVG_CONVERT_PATH".format(
                    self._executable
                )
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ConversionError(
                "{} timed out after {:.0f}s".format(self._executable, self._timeout_s)
            ) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise ConversionError(
                "{} exited with status {}: {}".format(
                    self._executable, result.returncode, stderr or "no output"
                )
            )

        png_path = Path(png_path)
        if not png_path.is_file():
            raise ConversionError(
                "{} reported success but wrote no file".format(self._executable)
            )
        return png_path
