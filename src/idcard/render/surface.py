"""Drawing surface abstraction and its Pillow implementation."""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from PIL import Image, ImageDraw

from idcard.config import parse_color
from idcard.crop import CropRectangle
from idcard.errors import CropSampleError
from idcard.fonts import FontBook
from idcard.types import Color, FontWeight
from idcard.utils.dimensions import LogicalDims, round_half_up

logger = logging.getLogger(__name__)


class DrawingSurface(ABC):
    """
    Minimal 2D drawing API the render pipeline is written against.

    All coordinates and sizes are logical units; implementations apply the
    device pixel ratio themselves. Text is anchored at its left edge and
    vertical middle.
    """

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        """Fill an axis-aligned rectangle."""

    @abstractmethod
    def stroke_rect(
        self, x: float, y: float, width: float, height: float, color: Color, line_width: float = 1
    ) -> None:
        """Outline an axis-aligned rectangle."""

    @abstractmethod
    def line(
        self, x0: float, y0: float, x1: float, y1: float, color: Color, line_width: float = 1
    ) -> None:
        """Draw a straight line."""

    @abstractmethod
    def fill_circle(self, cx: float, cy: float, radius: float, color: Color) -> None:
        """Fill a circle."""

    @abstractmethod
    def clip_circle(self, cx: float, cy: float, radius: float):
        """
        Context manager restricting image drawing to a circle.

        Args:
            cx: Circle center x.
            cy: Circle center y.
            radius: Circle radius.
        """

    @abstractmethod
    def draw_image_region(
        self,
        image: Image.Image,
        source: CropRectangle,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """
        Draw a source rectangle of an image scaled into a destination rectangle.

        Raises:
            CropSampleError: If the backend cannot sample the source rectangle.
        """

    @abstractmethod
    def measure_text(
        self,
        text: str,
        size_px: float,
        weight: FontWeight = "regular",
    ) -> float:
        """Width of text in logical units, as it will be drawn on this surface."""

    @abstractmethod
    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size_px: float,
        color: Color,
        weight: FontWeight = "regular",
    ) -> None:
        """Draw a single line of text anchored at (x, vertical middle y)."""


class PillowSurface(DrawingSurface):
    """Raster surface backed by a Pillow RGB image at physical resolution."""

    def __init__(
        self,
        device_pixel_ratio: float = 1.0,
        fonts: FontBook | None = None,
        logical: LogicalDims | None = None,
    ) -> None:
        """
        Initialize surface.

        Args:
            device_pixel_ratio: Physical pixels per logical unit.
            fonts: Font book for text. Defaults to FontBook().
            logical: Logical size. Defaults to the 600x360 card.
        """
        self.device_pixel_ratio = device_pixel_ratio
        self.fonts = fonts or FontBook()
        self.logical = logical or LogicalDims()
        pixels = self.logical.to_pixels(device_pixel_ratio)
        self.image = Image.new("RGB", (pixels.width, pixels.height), (255, 255, 255))
        self._draw = ImageDraw.Draw(self.image)
        self._clip: tuple[int, int, int, int] | None = None

    def _px(self, value: float) -> int:
        return round_half_up(value * self.device_pixel_ratio)

    def _stroke_width(self, line_width: float) -> int:
        return max(1, self._px(line_width))

    def fill_rect(self, x, y, width, height, color):
        x0, y0 = self._px(x), self._px(y)
        x1, y1 = self._px(x + width), self._px(y + height)
        if x1 <= x0 or y1 <= y0:
            return
        # Pillow rectangles include the far edge
        self._draw.rectangle((x0, y0, x1 - 1, y1 - 1), fill=parse_color(color))

    def stroke_rect(self, x, y, width, height, color, line_width=1):
        box = (self._px(x), self._px(y), self._px(x + width), self._px(y + height))
        self._draw.rectangle(box, outline=parse_color(color), width=self._stroke_width(line_width))

    def line(self, x0, y0, x1, y1, color, line_width=1):
        self._draw.line(
            (self._px(x0), self._px(y0), self._px(x1), self._px(y1)),
            fill=parse_color(color),
            width=self._stroke_width(line_width),
        )

    def fill_circle(self, cx, cy, radius, color):
        self._draw.ellipse(self._circle_box(cx, cy, radius), fill=parse_color(color))

    def _circle_box(self, cx: float, cy: float, radius: float) -> tuple[int, int, int, int]:
        return (
            self._px(cx - radius),
            self._px(cy - radius),
            self._px(cx + radius) - 1,
            self._px(cy + radius) - 1,
        )

    @contextmanager
    def clip_circle(self, cx: float, cy: float, radius: float) -> Iterator[None]:
        previous = self._clip
        self._clip = self._circle_box(cx, cy, radius)
        try:
            yield
        finally:
            self._clip = previous

    def draw_image_region(self, image, source, x, y, width, height):
        left, top = self._px(x), self._px(y)
        size = (max(1, self._px(x + width) - left), max(1, self._px(y + height) - top))

        try:
            region = image.resize(size, Image.Resampling.LANCZOS, box=source.box)
        except (ValueError, OSError) as e:
            raise CropSampleError(f"Cannot sample {source} from {image.width}x{image.height} image: {e}") from e
        if region.mode != "RGB":
            region = region.convert("RGB")

        if self._clip is None:
            self.image.paste(region, (left, top))
            return

        mask = Image.new("L", size, 0)
        cx0, cy0, cx1, cy1 = self._clip
        ImageDraw.Draw(mask).ellipse((cx0 - left, cy0 - top, cx1 - left, cy1 - top), fill=255)
        self.image.paste(region, (left, top), mask)

    def measure_text(self, text, size_px, weight="regular"):
        # Measure with the physical font draw_text uses, in logical units
        font = self.fonts.get(weight, size_px * self.device_pixel_ratio)
        return font.getlength(text) / self.device_pixel_ratio

    def draw_text(self, text, x, y, size_px, color, weight="regular"):
        font = self.fonts.get(weight, size_px * self.device_pixel_ratio)
        self._draw.text(
            (x * self.device_pixel_ratio, y * self.device_pixel_ratio),
            text,
            fill=parse_color(color),
            font=font,
            anchor="lm",
        )
