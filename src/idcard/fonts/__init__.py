"""Font resolution and caching for the raster surface."""

import logging
from pathlib import Path
from typing import Optional

from PIL import ImageFont

from idcard.config import CardStyle
from idcard.fonts.google import get_google_font
from idcard.types import FontWeight
from idcard.utils.dimensions import round_half_up

logger = logging.getLogger(__name__)

FONT_WEIGHTS: dict[FontWeight, int] = {
    "regular": 400,
    "semibold": 600,
    "bold": 700,
}

AnyFont = ImageFont.FreeTypeFont | ImageFont.ImageFont


class FontBook:
    """
    Resolves and caches fonts by weight and pixel size.

    Resolution priority per weight:
    1. Explicit file from the style (bold/semibold fall back to font_path)
    2. Google Fonts family from the style (auto-download and cache)
    3. Pillow's bundled scalable default font
    """

    def __init__(self, style: CardStyle | None = None) -> None:
        """
        Initialize font book.

        Args:
            style: Styling with font settings. Defaults to CardStyle().
        """
        self.style = style or CardStyle()
        self._paths: dict[FontWeight, Optional[Path]] = {}
        self._fonts: dict[tuple[FontWeight, int], AnyFont] = {}

    def path_for(self, weight: FontWeight) -> Optional[Path]:
        """
        Get the font file used for a weight.

        Args:
            weight: "regular", "semibold" or "bold".

        Returns:
            Path to a TTF/OTF file, or None when the bundled default is used.
        """
        if weight not in self._paths:
            self._paths[weight] = self._resolve_path(weight)
        return self._paths[weight]

    def get(self, weight: FontWeight, size_px: float) -> AnyFont:
        """
        Get a font at a pixel size.

        Args:
            weight: "regular", "semibold" or "bold".
            size_px: Font size in pixels. Rounded half up to a whole pixel.

        Returns:
            Pillow font object.
        """
        size = max(1, round_half_up(size_px))
        key = (weight, size)
        if key not in self._fonts:
            self._fonts[key] = self._load(weight, size)
        return self._fonts[key]

    def _load(self, weight: FontWeight, size: int) -> AnyFont:
        path = self.path_for(weight)
        if path is not None:
            try:
                return ImageFont.truetype(str(path), size)
            except OSError as e:
                logger.warning(f"Failed to load font {path}: {e}. Using bundled default font.")
                self._paths[weight] = None
        return ImageFont.load_default(size=size)

    def _resolve_path(self, weight: FontWeight) -> Optional[Path]:
        explicit = {
            "regular": self.style.font_path,
            "semibold": self.style.semibold_font_path or self.style.font_path,
            "bold": self.style.bold_font_path or self.style.font_path,
        }[weight]
        if explicit is not None:
            if explicit.exists():
                logger.debug(f"Using font file {explicit} for {weight}")
                return explicit
            logger.warning(f"Font file not found: {explicit}")

        if self.style.google_font:
            path = get_google_font(self.style.google_font, FONT_WEIGHTS[weight])
            if path:
                return path
            logger.warning(f"Could not get Google Font '{self.style.google_font}' ({weight})")

        logger.debug(f"Using bundled default font for {weight}")
        return None
