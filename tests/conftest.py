import sys
from contextlib import contextmanager
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

# Ensure the src layout is importable for direct pytest runs
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from idcard.errors import CropSampleError  # noqa: E402
from idcard.render.surface import DrawingSurface  # noqa: E402


def char_width_measure(text: str, font_px: float) -> float:
    """Monospace-like measure: every character is 0.6em wide."""
    return len(text) * font_px * 0.6


class RecordingSurface(DrawingSurface):
    """DrawingSurface that records calls instead of drawing."""

    def __init__(self, failing_image_draws: int = 0) -> None:
        self.calls: list[tuple] = []
        self.failing_image_draws = failing_image_draws
        self.clip_depth = 0

    def fill_rect(self, x, y, width, height, color):
        self.calls.append(("fill_rect", x, y, width, height, color))

    def stroke_rect(self, x, y, width, height, color, line_width=1):
        self.calls.append(("stroke_rect", x, y, width, height, color))

    def line(self, x0, y0, x1, y1, color, line_width=1):
        self.calls.append(("line", x0, y0, x1, y1, color))

    def fill_circle(self, cx, cy, radius, color):
        self.calls.append(("fill_circle", cx, cy, radius, color))

    @contextmanager
    def clip_circle(self, cx, cy, radius):
        self.calls.append(("clip_circle", cx, cy, radius))
        self.clip_depth += 1
        try:
            yield
        finally:
            self.clip_depth -= 1

    def draw_image_region(self, image, source, x, y, width, height):
        if self.failing_image_draws > 0:
            self.failing_image_draws -= 1
            raise CropSampleError("rejected")
        self.calls.append(("draw_image_region", source, x, y, width, height, self.clip_depth))

    def measure_text(self, text, size_px, weight="regular"):
        return char_width_measure(text, size_px)

    def draw_text(self, text, x, y, size_px, color, weight="regular"):
        self.calls.append(("draw_text", text, x, y, size_px, color, weight))

    def named(self, kind: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == kind]

    def text_call(self, text: str) -> tuple:
        return next(call for call in self.named("draw_text") if call[1] == text)


def make_image_bytes(width: int = 800, height: int = 600, color=(200, 30, 30), format: str = "PNG") -> bytes:
    img = Image.new("RGB", (width, height), color=color)
    buffer = BytesIO()
    img.save(buffer, format=format)
    return buffer.getvalue()


@pytest.fixture
def recording_surface():
    return RecordingSurface()


@pytest.fixture
def photo_bytes():
    return make_image_bytes()


@pytest.fixture
def photo_file(tmp_path, photo_bytes):
    path = tmp_path / "photo.png"
    path.write_bytes(photo_bytes)
    return path
