"""Abstract image converter and its error type.

WHY: /grass has to turn the chart service's SVG into a PNG that Slack
previews inline. Rasterizing is delegated to an external tool, which
tests must not depend on. An abstract base lets the server take any
converter and lets tests pass a fake.

HOW: ImageConverter is an ABC with one method, convert(). Concrete
converters live next to it (rsvg.py).

RULES:
- convert() writes the PNG to png_path and returns it
- Every failure surfaces as ConversionError
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class ConversionError(Exception):
    """Raised when an SVG could not be rasterized."""


class ImageConverter(ABC):
    """Interface for SVG to PNG conversion.

    To add a converter:
    1. Subclass ImageConverter in a new module under converters/
    2. Implement name and convert()
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier, e.g. 'rsvg'."""

    @abstractmethod
    def convert(self, svg_path: Path, png_path: Path) -> Path:
        """Rasterize ``svg_path`` into ``png_path``.

        Returns:
            png_path, once the file exists.

        Raises:
            ConversionError: the conversion did not produce a PNG.
        """
