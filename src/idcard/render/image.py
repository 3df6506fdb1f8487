"""Image decoding, encoding and crop preview using Pillow."""

import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from idcard.errors import ImageDecodeError
from idcard.utils.dimensions import round_half_up

logger = logging.getLogger(__name__)

# Background shown around the image in the crop preview
PREVIEW_BACKGROUND = (241, 245, 249)


def load_image_from_bytes(image_data: bytes) -> Image.Image:
    """
    Load image from raw bytes.

    Args:
        image_data: Raw image bytes (JPEG, PNG, etc.).

    Returns:
        PIL Image object (lazily decoded).
    """
    return Image.open(BytesIO(image_data))


def decode_image(image_data: bytes) -> Image.Image:
    """
    Fully decode an uploaded photo into an upright RGB bitmap.

    EXIF orientation is applied so the bitmap matches what an image viewer
    shows.

    Args:
        image_data: Raw image bytes.

    Returns:
        Decoded RGB PIL Image.

    Raises:
        ImageDecodeError: If the data is empty, not an image, or corrupt.
    """
    if not image_data:
        raise ImageDecodeError("Empty image data")

    try:
        img = load_image_from_bytes(image_data)
        img.load()
        img = ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Cannot decode image: {e}") from e

    if img.width < 1 or img.height < 1:
        raise ImageDecodeError(f"Image has no pixels ({img.width}x{img.height})")

    # Convert to RGB if necessary (handles RGBA, grayscale, palette, etc.)
    if img.mode != "RGB":
        img = img.convert("RGB")

    return img


def save_image_to_bytes(img: Image.Image, format: str = "PNG") -> bytes:
    """
    Save PIL Image to bytes.

    Args:
        img: PIL Image object.
        format: Image format (PNG, JPEG, etc.).

    Returns:
        Image as bytes.
    """
    buffer = BytesIO()
    img.save(buffer, format=format)
    return buffer.getvalue()


def render_crop_preview(
    image: Image.Image | None,
    zoom: float,
    center: tuple[float, float],
    size: int,
) -> Image.Image:
    """
    Render the square pan/zoom preview the user drags on.

    The image is scaled to zoom x size wide (height follows the aspect ratio)
    and offset so that the center fraction lines up the way a CSS
    background-position percentage does: offset = (size - scaled) * fraction.

    Args:
        image: Source bitmap, or None for an empty preview.
        zoom: Zoom factor.
        center: (cx, cy) fraction of the image.
        size: Side of the preview in pixels.

    Returns:
        New size x size RGB image.
    """
    preview = Image.new("RGB", (size, size), PREVIEW_BACKGROUND)
    if image is None:
        return preview

    scaled_w = max(1, round_half_up(size * zoom))
    scaled_h = max(1, round_half_up(size * zoom * image.height / image.width))
    scaled = image.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)

    cx, cy = center
    offset = (round_half_up((size - scaled_w) * cx), round_half_up((size - scaled_h) * cy))
    preview.paste(scaled, offset)
    return preview
