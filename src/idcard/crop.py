"""Crop state and the pan/zoom -> source rectangle transform."""

import logging
from dataclasses import dataclass

from PIL import Image

from idcard.utils.dimensions import AVATAR_SIZE, round_half_up

logger = logging.getLogger(__name__)

# Zoom slider bounds and the state a freshly loaded image starts in
ZOOM_MIN = 1.0
ZOOM_MAX = 3.0
DEFAULT_ZOOM = 1.2
DEFAULT_CENTER = (0.5, 0.5)


@dataclass(frozen=True)
class CropRectangle:
    """Sub-rectangle of the source image, in source pixels."""

    sx: float
    sy: float
    sw: float
    sh: float

    @property
    def box(self) -> tuple[float, float, float, float]:
        """(left, upper, right, lower) box as Pillow expects it."""
        return (self.sx, self.sy, self.sx + self.sw, self.sy + self.sh)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(value, high))


def compute_crop_rectangle(
    width: int,
    height: int,
    zoom: float,
    center: tuple[float, float],
) -> CropRectangle:
    """
    Map a pan/zoom state to the source rectangle to sample.

    The window is 1/zoom of the image in each direction, centered on the
    given fraction of the image and then pushed back inside the image.
    The result satisfies 0 <= sx, sx + sw <= width (same for y) for any
    zoom >= 1 and any center in [0, 1]^2.

    Args:
        width: Source image width in pixels.
        height: Source image height in pixels.
        zoom: Zoom factor (>= 1).
        center: (cx, cy) fraction of the image the window is centered on.

    Returns:
        CropRectangle with integer coordinates.
    """
    cx, cy = center
    sw = max(1, round_half_up(width / zoom))
    sh = max(1, round_half_up(height / zoom))
    sx = round_half_up(cx * width - sw / 2)
    sy = round_half_up(cy * height - sh / 2)
    sx = max(0, min(sx, width - sw))
    sy = max(0, min(sy, height - sh))
    return CropRectangle(sx=sx, sy=sy, sw=sw, sh=sh)


def fit_crop_rectangle(width: int, height: int, dest_size: float = AVATAR_SIZE) -> CropRectangle:
    """
    Fallback crop covering a square destination with the centered image.

    Args:
        width: Source image width in pixels.
        height: Source image height in pixels.
        dest_size: Side of the destination square.

    Returns:
        CropRectangle (possibly fractional) centered in the image.
    """
    ratio = max(dest_size / width, dest_size / height)
    ssw = dest_size / ratio
    ssh = dest_size / ratio
    return CropRectangle(sx=(width - ssw) / 2, sy=(height - ssh) / 2, sw=ssw, sh=ssh)


class CropState:
    """
    Source image plus the pan/zoom state applied to it.

    The state owns its bitmap: installing a new image or releasing the state
    closes the previous one.
    """

    def __init__(self) -> None:
        self._image: Image.Image | None = None
        self.zoom: float = DEFAULT_ZOOM
        self.center: tuple[float, float] = DEFAULT_CENTER

    @property
    def source_image(self) -> Image.Image | None:
        """Decoded bitmap, or None when no image is loaded."""
        return self._image

    @property
    def has_image(self) -> bool:
        return self._image is not None

    def install(self, image: Image.Image) -> None:
        """
        Replace the source image and reset zoom/center to their defaults.

        Args:
            image: Decoded bitmap. Ownership passes to this state.
        """
        self.release()
        self._image = image
        self.zoom = DEFAULT_ZOOM
        self.center = DEFAULT_CENTER
        logger.debug(f"Installed {image.width}x{image.height} source image")

    def release(self) -> None:
        """Close and forget the current bitmap, if any."""
        if self._image is not None:
            self._image.close()
            self._image = None

    def set_zoom(self, zoom: float) -> None:
        """
        Set zoom from the slider, clamped to [1, 3]. The center is untouched.

        Args:
            zoom: Requested zoom factor.
        """
        self.zoom = clamp(zoom, ZOOM_MIN, ZOOM_MAX)

    def set_center(self, cx: float, cy: float) -> None:
        """
        Place the center at absolute image fractions, clamped to [0, 1].

        Args:
            cx: Horizontal position as a fraction of the image width.
            cy: Vertical position as a fraction of the image height.
        """
        self.center = (clamp(cx, 0.0, 1.0), clamp(cy, 0.0, 1.0))

    def pan(self, dx: float, dy: float) -> None:
        """
        Move the center by a fraction of the image, clamped to [0, 1].

        Args:
            dx: Horizontal delta as a fraction of the image width.
            dy: Vertical delta as a fraction of the image height.
        """
        cx, cy = self.center
        self.center = (clamp(cx + dx, 0.0, 1.0), clamp(cy + dy, 0.0, 1.0))

    def crop_rectangle(self) -> CropRectangle | None:
        """Current crop rectangle, or None without an image."""
        if self._image is None:
            return None
        return compute_crop_rectangle(self._image.width, self._image.height, self.zoom, self.center)

    def fit_rectangle(self, dest_size: float = AVATAR_SIZE) -> CropRectangle | None:
        """Fit-crop fallback rectangle, or None without an image."""
        if self._image is None:
            return None
        return fit_crop_rectangle(self._image.width, self._image.height, dest_size)
