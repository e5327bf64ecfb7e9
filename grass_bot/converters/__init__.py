"""SVG to PNG converters for the /grass chart.

WHY: Slack previews PNGs inline but not SVGs, so the chart must be
rasterized before upload. Handlers depend on the ImageConverter
interface; the server wires in RsvgConverter by default.

RULES:
- Handlers accept any ImageConverter (tests pass a fake)
- Converters never touch the network
"""

from grass_bot.converters.base import ConversionError, ImageConverter
from grass_bot.converters.rsvg import RsvgConverter

__all__ = ["ConversionError", "ImageConverter", "RsvgConverter"]
