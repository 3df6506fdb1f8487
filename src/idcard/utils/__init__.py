"""Utility modules."""

from idcard.utils.dimensions import (
    AVATAR_SIZE,
    AVATAR_X,
    AVATAR_Y,
    CARD_HEIGHT,
    CARD_WIDTH,
    HEADER_HEIGHT,
    LogicalDims,
    PixelDims,
    PointDims,
    check_device_pixel_ratio,
    physical_size,
    pt_from_px,
    round_half_up,
)
from idcard.utils.text import TextBlock, layout_text, text_block_offset

__all__ = [
    "AVATAR_SIZE",
    "AVATAR_X",
    "AVATAR_Y",
    "CARD_HEIGHT",
    "CARD_WIDTH",
    "HEADER_HEIGHT",
    "LogicalDims",
    "PixelDims",
    "PointDims",
    "TextBlock",
    "check_device_pixel_ratio",
    "layout_text",
    "physical_size",
    "pt_from_px",
    "round_half_up",
    "text_block_offset",
]
