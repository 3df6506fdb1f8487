import pytest
from PIL import Image

from idcard.crop import CropState
from idcard.errors import PointerCaptureError
from idcard.interaction import DragSession, DragState


class FakeCapture:
    def __init__(self, fail_release: bool = False) -> None:
        self.captured: list[int] = []
        self.released: list[int] = []
        self.fail_release = fail_release

    def capture(self, pointer_id: int) -> None:
        self.captured.append(pointer_id)

    def release(self, pointer_id: int) -> None:
        if self.fail_release:
            raise PointerCaptureError("already released")
        self.released.append(pointer_id)


@pytest.fixture
def crop():
    state = CropState()
    state.install(Image.new("RGB", (400, 300)))
    return state


def test_half_preview_drag_moves_center_to_edge(crop):
    session = DragSession(crop, preview_size=160)
    assert session.begin(10, 10)
    assert session.update(90, 10)
    assert crop.center == (1.0, 0.5)


def test_moves_accumulate_from_last_position(crop):
    session = DragSession(crop, preview_size=100)
    session.begin(0, 0)
    session.update(10, 0)
    session.update(20, -5)
    assert crop.center == pytest.approx((0.7, 0.45))


def test_drag_does_not_touch_zoom(crop):
    crop.set_zoom(2.0)
    session = DragSession(crop, preview_size=100)
    session.begin(0, 0)
    session.update(30, 30)
    assert crop.zoom == 2.0


def test_no_drag_without_image():
    session = DragSession(CropState(), preview_size=160)
    assert not session.begin(0, 0)
    assert session.state is DragState.IDLE


def test_moves_while_idle_are_ignored(crop):
    session = DragSession(crop, preview_size=160)
    assert not session.update(50, 50)
    assert crop.center == (0.5, 0.5)

    session.begin(0, 0)
    session.end()
    assert not session.update(80, 80)
    assert crop.center == (0.5, 0.5)


def test_pointer_is_captured_and_released(crop):
    capture = FakeCapture()
    session = DragSession(crop, preview_size=160, capture=capture)
    session.begin(0, 0, pointer_id=7)
    assert session.dragging
    assert session.end()
    assert capture.captured == [7]
    assert capture.released == [7]
    assert session.state is DragState.IDLE


def test_release_errors_are_ignored(crop):
    session = DragSession(crop, preview_size=160, capture=FakeCapture(fail_release=True))
    session.begin(0, 0)
    assert session.end()
    assert not session.dragging


def test_end_while_idle_is_noop(crop):
    capture = FakeCapture()
    session = DragSession(crop, capture=capture)
    assert not session.end()
    assert capture.released == []


def test_preview_size_must_be_positive(crop):
    with pytest.raises(ValueError):
        DragSession(crop, preview_size=0)
