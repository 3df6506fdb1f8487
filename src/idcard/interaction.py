"""Pointer-drag panning on the square crop preview."""

import enum
import logging
from typing import Protocol

from idcard.crop import CropState
from idcard.errors import PointerCaptureError

logger = logging.getLogger(__name__)

# Side of the crop preview, in pixels
DEFAULT_PREVIEW_SIZE = 160


class PointerCapture(Protocol):
    """Input-layer hook for routing a pointer's events to the preview while dragging."""

    def capture(self, pointer_id: int) -> None: ...

    def release(self, pointer_id: int) -> None: ...


class DragState(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragSession:
    """
    Idle/Dragging state machine translating pointer deltas into crop center moves.

    A drag of dx pixels across a preview of size P moves the center by dx/P of
    the image, clamped to [0, 1]. Moves outside a drag are ignored, which
    absorbs late or duplicate events.
    """

    def __init__(
        self,
        crop: CropState,
        preview_size: int = DEFAULT_PREVIEW_SIZE,
        capture: PointerCapture | None = None,
    ) -> None:
        """
        Initialize drag session.

        Args:
            crop: Crop state to pan.
            preview_size: Side of the square preview, in pixels.
            capture: Optional pointer capture hook.

        Raises:
            ValueError: If preview_size is not positive.
        """
        if preview_size <= 0:
            raise ValueError(f"preview_size must be positive, got {preview_size}")
        self.crop = crop
        self.preview_size = preview_size
        self.capture = capture
        self.state = DragState.IDLE
        self.pointer_id: int | None = None
        self._last: tuple[float, float] = (0.0, 0.0)

    @property
    def dragging(self) -> bool:
        return self.state is DragState.DRAGGING

    def begin(self, x: float, y: float, pointer_id: int = 0) -> bool:
        """
        Pointer-down: start dragging if an image is loaded.

        Args:
            x: Pointer x in preview pixels.
            y: Pointer y in preview pixels.
            pointer_id: Pointer identifier for capture.

        Returns:
            True if a drag started.
        """
        if self.dragging or not self.crop.has_image:
            return False

        if self.capture is not None:
            try:
                self.capture.capture(pointer_id)
            except PointerCaptureError as e:
                logger.debug(f"Pointer capture failed for {pointer_id}: {e}")

        self.pointer_id = pointer_id
        self._last = (x, y)
        self.state = DragState.DRAGGING
        return True

    def update(self, x: float, y: float) -> bool:
        """
        Pointer-move: pan the crop center by the delta since the last event.

        Args:
            x: Pointer x in preview pixels.
            y: Pointer y in preview pixels.

        Returns:
            True if the crop center was updated.
        """
        if not self.dragging or not self.crop.has_image:
            return False

        last_x, last_y = self._last
        self._last = (x, y)
        self.crop.pan((x - last_x) / self.preview_size, (y - last_y) / self.preview_size)
        return True

    def end(self) -> bool:
        """
        Pointer-up or capture loss: release the pointer and go idle.

        Returns:
            True if a drag was ended.
        """
        if not self.dragging:
            return False

        if self.capture is not None and self.pointer_id is not None:
            try:
                self.capture.release(self.pointer_id)
            except PointerCaptureError as e:
                # Already released by the input layer
                logger.debug(f"Pointer release ignored for {self.pointer_id}: {e}")

        self.pointer_id = None
        self.state = DragState.IDLE
        return True
