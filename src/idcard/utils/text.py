"""Text utilities for auto-fit sizing and layout."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from idcard.types import MeasureFunc
from idcard.utils.dimensions import (
    LINE_HEIGHT_RATIO,
    NAME_BASE_FONT_PX,
    NAME_FONT_STEP_PX,
    NAME_MIN_FONT_PX,
    round_half_up,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextBlock:
    """
    Result of laying out a string inside a maximum width.

    Attributes:
        lines: Text of each line, top to bottom. Never empty.
        font_size_px: Font size used for every line, in logical px.
        line_height_px: Distance between consecutive line anchors.
    """

    lines: list[str] = field(default_factory=lambda: [""])
    font_size_px: float = NAME_BASE_FONT_PX
    line_height_px: float = round_half_up(NAME_BASE_FONT_PX * LINE_HEIGHT_RATIO)

    @property
    def height(self) -> float:
        """Total vertical space the block occupies (lines x line height)."""
        return len(self.lines) * self.line_height_px


def line_height_for(font_px: float) -> int:
    """
    Calculate line height for a font size.

    Args:
        font_px: Font size in logical px.

    Returns:
        round(font_px * 1.2).
    """
    return round_half_up(font_px * LINE_HEIGHT_RATIO)


def wrap_words(text: str, max_width: float, font_px: float, measure: MeasureFunc) -> list[str]:
    """
    Greedy word-wrap at a fixed font size.

    Words are split on single spaces. A word starts a new line when appending
    it to a non-empty line would exceed max_width; a single word wider than
    max_width is kept intact on its own line.

    Args:
        text: Text to wrap.
        max_width: Maximum line width in logical px.
        font_px: Font size used for measurement.
        measure: Width measurement function.

    Returns:
        List of lines (at least one).
    """
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if current and measure(candidate, font_px) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines or [""]


def layout_text(
    text: str,
    max_width: float,
    measure: MeasureFunc,
    base_font_px: float = NAME_BASE_FONT_PX,
    min_font_px: float = NAME_MIN_FONT_PX,
    step_px: float = NAME_FONT_STEP_PX,
) -> TextBlock:
    """
    Fit text inside max_width by shrinking the font, then wrapping.

    The font shrinks from base_font_px in steps of step_px while the whole
    string overflows and the font is above min_font_px. If the string still
    overflows at the floor, it is greedily word-wrapped at min_font_px.

    The result depends only on the arguments, so the same call always yields
    the same block.

    Args:
        text: Text to lay out.
        max_width: Maximum width in logical px.
        measure: Function returning the width of a string at a font size.
        base_font_px: Starting (largest) font size.
        min_font_px: Font size floor.
        step_px: Amount to shrink per iteration.

    Returns:
        TextBlock with lines, font size and line height.
    """
    font = base_font_px
    while measure(text, font) > max_width and font > min_font_px:
        font -= step_px

    if measure(text, font) <= max_width:
        lines = [text]
    else:
        font = min_font_px
        lines = wrap_words(text, max_width, font, measure)
        logger.debug(f"Wrapped {text!r} into {len(lines)} line(s) at {font}px")

    return TextBlock(lines=lines, font_size_px=font, line_height_px=line_height_for(font))


def text_block_offset(base_y: float, block: TextBlock, padding: float) -> float:
    """
    Y position of an element placed below a text block.

    Args:
        base_y: Anchor y of the block's first line.
        block: Laid-out text block.
        padding: Extra space between the block and the element.

    Returns:
        base_y + lines * line_height + padding.
    """
    return base_y + len(block.lines) * block.line_height_px + padding
