"""Card engine: owns the card and crop state and re-renders on every change."""

import logging
from typing import Callable

from PIL import Image

from idcard.config import CardState, CardStyle
from idcard.crop import CropState
from idcard.errors import ImageDecodeError
from idcard.export import ExportedFile, ImageViewer, export_document, export_raster
from idcard.interaction import DEFAULT_PREVIEW_SIZE, DragSession, PointerCapture
from idcard.render.card import CardRenderer, RenderedSurface
from idcard.render.image import decode_image, render_crop_preview
from idcard.render.pdf import DocumentBackend
from idcard.types import Color
from idcard.utils.dimensions import CARD_HEIGHT, CARD_WIDTH, check_device_pixel_ratio, round_half_up

logger = logging.getLogger(__name__)

ChangeListener = Callable[[RenderedSurface], None]


class CardEngine:
    """
    Stateful front end of the card engine.

    Every mutation (fields, image, zoom, drag, pixel ratio) renders a fresh
    RenderedSurface to completion and notifies subscribers with it. Exports
    read the latest surface and never modify it.

    Example:
        ```python
        with CardEngine(device_pixel_ratio=2) as engine:
            engine.set_card_fields(name="Ada Lovelace", event_title="PyCon")
            engine.load_image(Path("ada.jpg").read_bytes())
            engine.set_zoom(1.5)
            engine.export_document().save(Path("out"))
        ```
    """

    def __init__(
        self,
        card: CardState | None = None,
        style: CardStyle | None = None,
        device_pixel_ratio: float = 1.0,
        preview_size: int = DEFAULT_PREVIEW_SIZE,
        document_backend: DocumentBackend | None = None,
        viewer: ImageViewer | None = None,
        pointer_capture: PointerCapture | None = None,
    ) -> None:
        """
        Initialize engine.

        Args:
            card: Initial card fields. Defaults to CardState().
            style: Styling (strings, colors, fonts). Defaults to CardStyle().
            device_pixel_ratio: Physical pixels per logical unit.
            preview_size: Side of the square crop preview, in pixels.
            document_backend: PDF backend. Resolved lazily on first export if None.
            viewer: Callback showing the raster when PDF export falls back.
            pointer_capture: Optional pointer capture hook for drags.
        """
        check_device_pixel_ratio(device_pixel_ratio)
        self.card = card.model_copy() if card else CardState()
        self.crop = CropState()
        self.renderer = CardRenderer(style)
        self.device_pixel_ratio = device_pixel_ratio
        self.drag = DragSession(self.crop, preview_size, pointer_capture)
        self.document_backend = document_backend
        self.viewer = viewer
        self._listeners: list[ChangeListener] = []
        self._surface: RenderedSurface | None = None

    def __enter__(self) -> "CardEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ========================================================================
    # Rendering
    # ========================================================================

    @property
    def surface(self) -> RenderedSurface:
        """Latest rendered card (rendered on first access)."""
        if self._surface is None:
            self._surface = self.renderer.render(self.card, self.crop, self.device_pixel_ratio)
        return self._surface

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a callback receiving each new surface.

        Exceptions raised by a listener are logged and do not propagate to
        the mutating call.

        Args:
            listener: Called with the RenderedSurface after every change.

        Returns:
            Function that unsubscribes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        # State is committed before notification; every listener runs
        self._surface = self.renderer.render(self.card, self.crop, self.device_pixel_ratio)
        for listener in list(self._listeners):
            try:
                listener(self._surface)
            except Exception as e:
                logger.exception(f"Change listener {listener!r} failed: {e}")

    def set_device_pixel_ratio(self, device_pixel_ratio: float) -> None:
        """
        Change the display density and re-render.

        Raises:
            ValueError: If the ratio is outside the supported range.
        """
        check_device_pixel_ratio(device_pixel_ratio)
        self.device_pixel_ratio = device_pixel_ratio
        self._changed()

    # ========================================================================
    # Card fields
    # ========================================================================

    def set_card_fields(
        self,
        name: str | None = None,
        event_title: str | None = None,
        header_color: Color | None = None,
        card_background: Color | None = None,
        preview_scale: float | None = None,
    ) -> None:
        """
        Update card fields. Fields left as None keep their value.

        The update is validated as a whole; an invalid value leaves the
        card unchanged.

        Raises:
            pydantic.ValidationError: If a color or preview scale is invalid.
        """
        updates = {
            key: value
            for key, value in {
                "name": name,
                "event_title": event_title,
                "header_color": header_color,
                "card_background": card_background,
                "preview_scale": preview_scale,
            }.items()
            if value is not None
        }
        if not updates:
            return

        self.card = CardState.model_validate({**self.card.model_dump(), **updates})
        self._changed()

    def preview_size(self) -> tuple[int, int]:
        """On-screen (width, height) of the card preview at the current preview scale."""
        scale = self.card.preview_scale
        return (round_half_up(CARD_WIDTH * scale), round_half_up(CARD_HEIGHT * scale))

    # ========================================================================
    # Image and crop
    # ========================================================================

    def load_image(self, data: bytes) -> bool:
        """
        Decode and install a new photo, resetting zoom and center.

        On failure the previous photo is dropped and the avatar shows the
        placeholder.

        Args:
            data: Raw image file bytes.

        Returns:
            True if the image was decoded and installed.
        """
        self.drag.end()
        try:
            image = decode_image(data)
        except ImageDecodeError as e:
            logger.warning(f"Image could not be loaded: {e}")
            self.crop.release()
            self._changed()
            return False

        self.crop.install(image)
        logger.info(f"Loaded {image.width}x{image.height} photo")
        self._changed()
        return True

    def set_zoom(self, zoom: float) -> None:
        """Set zoom from the slider (clamped to [1, 3]); the center is unchanged."""
        self.crop.set_zoom(zoom)
        self._changed()

    def set_crop(
        self,
        zoom: float | None = None,
        center_delta: tuple[float, float] | None = None,
        center: tuple[float, float] | None = None,
    ) -> None:
        """
        Update zoom and/or move the center.

        Args:
            zoom: New zoom, clamped to [1, 3]. None keeps the current zoom.
            center_delta: (dx, dy) added to the center, each clamped to [0, 1].
            center: Absolute (cx, cy) center, applied before center_delta.
        """
        if zoom is not None:
            self.crop.set_zoom(zoom)
        if center is not None:
            self.crop.set_center(*center)
        if center_delta is not None:
            self.crop.pan(*center_delta)
        self._changed()

    def crop_preview(self, size: int | None = None) -> Image.Image:
        """Render the square crop preview for the current pan/zoom (default side: the drag preview size)."""
        return render_crop_preview(
            self.crop.source_image, self.crop.zoom, self.crop.center, size or self.drag.preview_size
        )

    # ========================================================================
    # Pointer dragging
    # ========================================================================

    def begin_drag(self, x: float, y: float, pointer_id: int = 0) -> bool:
        """Pointer-down on the crop preview. No-op without an image."""
        return self.drag.begin(x, y, pointer_id)

    def drag_to(self, x: float, y: float) -> bool:
        """Pointer-move on the crop preview. Re-renders only while dragging."""
        moved = self.drag.update(x, y)
        if moved:
            self._changed()
        return moved

    def end_drag(self) -> bool:
        """Pointer-up or capture loss."""
        return self.drag.end()

    # ========================================================================
    # Export
    # ========================================================================

    def export_raster(self) -> ExportedFile:
        """Export the current card as PNG."""
        return export_raster(self.surface, self.card.name)

    def export_document(self) -> ExportedFile:
        """Export the current card as a one-page PDF, or a degraded PNG if PDF export fails."""
        return export_document(self.surface, self.card.name, self.document_backend, self.viewer)

    def close(self) -> None:
        """Release the photo bitmap."""
        self.drag.end()
        self.crop.release()
        self._listeners.clear()
