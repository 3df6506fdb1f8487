"""Card render pipeline: CardState + CropState -> RenderedSurface."""

import logging
from dataclasses import dataclass

from PIL import Image

from idcard.config import CardState, CardStyle
from idcard.crop import CropState
from idcard.errors import CropSampleError
from idcard.fonts import FontBook
from idcard.render.image import save_image_to_bytes
from idcard.render.surface import DrawingSurface, PillowSurface
from idcard.utils.dimensions import (
    AVATAR_SIZE,
    AVATAR_X,
    AVATAR_Y,
    BORDER_INSET,
    CAPTION_FONT_PX,
    CAPTION_PADDING,
    CARD_HEIGHT,
    CARD_WIDTH,
    DIVIDER_BOTTOM_OFFSET,
    DIVIDER_GAP,
    DIVIDER_RIGHT_PADDING,
    FOOTER_BOTTOM_OFFSET,
    FOOTER_FONT_PX,
    FOOTER_X,
    HEADER_FONT_PX,
    HEADER_HEIGHT,
    HEADER_TEXT_X,
    avatar_right,
    check_device_pixel_ratio,
    name_max_width,
    name_origin,
)
from idcard.utils.text import TextBlock, layout_text, text_block_offset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedSurface:
    """
    Finished card raster at physical resolution.

    Produced once per state change and only read afterwards; the next render
    produces a new surface instead of touching this one.
    """

    image: Image.Image
    device_pixel_ratio: float
    logical_width: int = CARD_WIDTH
    logical_height: int = CARD_HEIGHT

    @property
    def physical_width(self) -> int:
        return self.image.width

    @property
    def physical_height(self) -> int:
        return self.image.height

    def to_png(self) -> bytes:
        """Encode the physical buffer as PNG."""
        return save_image_to_bytes(self.image, format="PNG")


class CardRenderer:
    """Draws the fixed card layout onto a DrawingSurface."""

    def __init__(self, style: CardStyle | None = None, fonts: FontBook | None = None) -> None:
        """
        Initialize renderer.

        Args:
            style: Styling (strings, colors, fonts). Defaults to CardStyle().
            fonts: Font book shared between renders. Built from style if None.
        """
        self.style = style or CardStyle()
        self.fonts = fonts or FontBook(self.style)

    def render(self, card: CardState, crop: CropState, device_pixel_ratio: float = 1.0) -> RenderedSurface:
        """
        Render the card to a new raster surface.

        Args:
            card: Card fields.
            crop: Source image and pan/zoom state.
            device_pixel_ratio: Physical pixels per logical unit.

        Returns:
            RenderedSurface of size round(600*dpr) x round(360*dpr).

        Raises:
            ValueError: If device_pixel_ratio is outside the supported range.
        """
        check_device_pixel_ratio(device_pixel_ratio)

        surface = PillowSurface(device_pixel_ratio, self.fonts)
        self.draw(surface, card, crop)
        return RenderedSurface(image=surface.image, device_pixel_ratio=device_pixel_ratio)

    def draw(self, surface: DrawingSurface, card: CardState, crop: CropState) -> TextBlock:
        """
        Draw every layer of the card in order.

        Args:
            surface: Target surface (logical coordinates).
            card: Card fields.
            crop: Source image and pan/zoom state.

        Returns:
            The laid-out name block.
        """
        self._draw_background(surface, card)
        self._draw_header(surface, card)
        self._draw_avatar(surface, crop)
        name_block = self._draw_name(surface, card)
        self._draw_caption(surface, name_block)
        self._draw_footer(surface)
        return name_block

    def _draw_background(self, surface: DrawingSurface, card: CardState) -> None:
        surface.fill_rect(0, 0, CARD_WIDTH, CARD_HEIGHT, card.card_background)
        surface.stroke_rect(
            BORDER_INSET,
            BORDER_INSET,
            CARD_WIDTH - 2 * BORDER_INSET,
            CARD_HEIGHT - 2 * BORDER_INSET,
            self.style.border_color,
        )

    def _draw_header(self, surface: DrawingSurface, card: CardState) -> None:
        """Header band with the event title. The title is never shrunk or wrapped."""
        surface.fill_rect(0, 0, CARD_WIDTH, HEADER_HEIGHT, card.header_color)
        surface.draw_text(
            card.event_title or self.style.default_event_title,
            HEADER_TEXT_X,
            HEADER_HEIGHT / 2,
            HEADER_FONT_PX,
            self.style.header_text_color,
            weight="bold",
        )

    def _draw_avatar(self, surface: DrawingSurface, crop: CropState) -> None:
        """
        Placeholder circle, then the cropped photo clipped to the same circle.

        A rejected crop falls back to the fit crop; if that is rejected too
        the placeholder stays.
        """
        radius = AVATAR_SIZE / 2
        cx, cy = AVATAR_X + radius, AVATAR_Y + radius
        surface.fill_circle(cx, cy, radius, self.style.placeholder_color)

        image = crop.source_image
        if image is None:
            return

        with surface.clip_circle(cx, cy, radius):
            try:
                surface.draw_image_region(image, crop.crop_rectangle(), AVATAR_X, AVATAR_Y, AVATAR_SIZE, AVATAR_SIZE)
                return
            except CropSampleError as e:
                logger.warning(f"Crop sampling failed, using fit crop: {e}")

            try:
                surface.draw_image_region(
                    image, crop.fit_rectangle(AVATAR_SIZE), AVATAR_X, AVATAR_Y, AVATAR_SIZE, AVATAR_SIZE
                )
            except CropSampleError as e:
                logger.warning(f"Fit crop failed, keeping placeholder: {e}")

    def _draw_name(self, surface: DrawingSurface, card: CardState) -> TextBlock:
        name = card.name or self.style.default_name
        x, y = name_origin()
        block = layout_text(
            name,
            name_max_width(),
            lambda text, px: surface.measure_text(text, px, "bold"),
        )
        for i, line in enumerate(block.lines):
            surface.draw_text(
                line,
                x,
                y + i * block.line_height_px,
                block.font_size_px,
                self.style.name_color,
                weight="bold",
            )
        return block

    def _draw_caption(self, surface: DrawingSurface, name_block: TextBlock) -> None:
        x, y = name_origin()
        surface.draw_text(
            self.style.caption,
            x,
            text_block_offset(y, name_block, CAPTION_PADDING),
            CAPTION_FONT_PX,
            self.style.caption_color,
            weight="semibold",
        )

    def _draw_footer(self, surface: DrawingSurface) -> None:
        divider_y = AVATAR_Y + AVATAR_SIZE - DIVIDER_BOTTOM_OFFSET
        surface.line(
            avatar_right() + DIVIDER_GAP,
            divider_y,
            CARD_WIDTH - DIVIDER_RIGHT_PADDING,
            divider_y,
            self.style.border_color,
        )
        surface.draw_text(
            self.style.footer,
            FOOTER_X,
            CARD_HEIGHT - FOOTER_BOTTOM_OFFSET,
            FOOTER_FONT_PX,
            self.style.footer_color,
        )


def render(
    card: CardState,
    crop: CropState,
    device_pixel_ratio: float = 1.0,
    style: CardStyle | None = None,
) -> RenderedSurface:
    """
    Render a card with a one-off renderer.

    Args:
        card: Card fields.
        crop: Source image and pan/zoom state.
        device_pixel_ratio: Physical pixels per logical unit.
        style: Optional styling overrides.

    Returns:
        RenderedSurface.
    """
    return CardRenderer(style).render(card, crop, device_pixel_ratio)
