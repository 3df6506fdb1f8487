"""Card geometry and unit conversion utilities."""

import math
from dataclasses import dataclass as _dataclass


@_dataclass(frozen=True)
class PointDims:
    """Dimensions in points (PDF coordinate system: 72 points = 1 inch)."""

    width: int
    height: int


@_dataclass(frozen=True)
class PixelDims:
    """Dimensions in physical buffer pixels."""

    width: int
    height: int


# Fixed card geometry, in logical units (CSS pixels at 96 DPI)
CARD_WIDTH = 600
CARD_HEIGHT = 360
BORDER_INSET = 8
HEADER_HEIGHT = 72
HEADER_TEXT_X = 24
HEADER_FONT_PX = 20

# Avatar circle: 120x120 square at (36, 110)
AVATAR_SIZE = 120
AVATAR_X = 36
AVATAR_Y = 110

# Name block to the right of the avatar
NAME_GAP = 28  # avatar right edge -> name
NAME_RIGHT_PADDING = 36
NAME_TOP_OFFSET = 36  # avatar top -> first name line
NAME_BASE_FONT_PX = 28
NAME_MIN_FONT_PX = 14
NAME_FONT_STEP_PX = 2
LINE_HEIGHT_RATIO = 1.2

# Caption below the name block
CAPTION_PADDING = 8
CAPTION_FONT_PX = 14

# Divider rule and footer
DIVIDER_GAP = 24  # avatar right edge -> divider start
DIVIDER_RIGHT_PADDING = 36
DIVIDER_BOTTOM_OFFSET = 8  # divider sits this far above the avatar bottom
FOOTER_X = 24
FOOTER_BOTTOM_OFFSET = 28
FOOTER_FONT_PX = 12

# Unit conversion: CSS pixels are defined at 96 DPI, PDF points at 72
CSS_DPI = 96
POINTS_PER_INCH = 72

# Device pixel ratio guard rails
DPR_MIN = 0.25
DPR_MAX = 8.0


@_dataclass
class LogicalDims:
    """
    Dimensions stored canonically in logical units.

    All layout math happens in logical units; use the conversion methods to
    get the physical buffer size for a device pixel ratio or the PDF page size.
    """

    width: float = CARD_WIDTH
    height: float = CARD_HEIGHT

    def to_pixels(self, device_pixel_ratio: float) -> PixelDims:
        """
        Convert to physical buffer pixels.

        Args:
            device_pixel_ratio: Scale factor between logical units and pixels.

        Returns:
            Frozen PixelDims with integer pixel values.
        """
        return PixelDims(
            width=round_half_up(self.width * device_pixel_ratio),
            height=round_half_up(self.height * device_pixel_ratio),
        )

    def to_points(self) -> PointDims:
        """
        Convert to PDF points (72/96 of a logical unit, rounded).

        Returns:
            Frozen PointDims with integer point values.
        """
        return PointDims(width=pt_from_px(self.width), height=pt_from_px(self.height))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded towards +infinity.

    Python's built-in round() uses banker's rounding; layout math needs the
    browser-canvas convention so that e.g. 2.5 -> 3 and -0.5 -> 0.

    Args:
        value: Number to round.

    Returns:
        Rounded integer.
    """
    return int(math.floor(value + 0.5))


def pt_from_px(px: float) -> int:
    """
    Convert CSS pixels to PDF points.

    Args:
        px: Measurement in logical units (CSS pixels at 96 DPI).

    Returns:
        Measurement in whole points, e.g. 600 -> 450, 360 -> 270.
    """
    return round_half_up(px * POINTS_PER_INCH / CSS_DPI)


def check_device_pixel_ratio(device_pixel_ratio: float) -> float:
    """
    Validate a device pixel ratio.

    Raises:
        ValueError: If the ratio is outside [DPR_MIN, DPR_MAX].
    """
    if not DPR_MIN <= device_pixel_ratio <= DPR_MAX:
        raise ValueError(
            f"device_pixel_ratio must be between {DPR_MIN} and {DPR_MAX}, got {device_pixel_ratio}"
        )
    return device_pixel_ratio


def physical_size(device_pixel_ratio: float) -> PixelDims:
    """
    Get the physical buffer size of the card for a device pixel ratio.

    Args:
        device_pixel_ratio: Scale factor between logical units and pixels.

    Returns:
        PixelDims for the full card (e.g. 1200x720 at dpr=2).
    """
    return LogicalDims().to_pixels(device_pixel_ratio)


def avatar_right() -> int:
    """Right edge of the avatar square in logical units."""
    return AVATAR_X + AVATAR_SIZE


def name_origin() -> tuple[int, int]:
    """
    Anchor of the first name line (left edge, vertical middle).

    Returns:
        Tuple of (x, y) in logical units.
    """
    return (avatar_right() + NAME_GAP, AVATAR_Y + NAME_TOP_OFFSET)


def name_max_width() -> int:
    """Width available to the name block before it hits the right padding."""
    return CARD_WIDTH - (avatar_right() + NAME_GAP + NAME_RIGHT_PADDING)
