from io import BytesIO

import pytest
from PIL import Image

from idcard.config import CardState, export_filename
from idcard.crop import CropState
from idcard.errors import DocumentBackendUnavailable
from idcard.export import export_document, export_raster, page_size_points
from idcard.render import pdf
from idcard.render.card import render
from idcard.render.pdf import DocumentBackend, ReportLabBackend, resolve_document_backend
from idcard.utils.dimensions import pt_from_px


class RecordingBackend(DocumentBackend):
    name = "recording"

    def __init__(self) -> None:
        self.calls: list[tuple[bytes, int, int]] = []

    def build(self, png_data, width_pt, height_pt):
        self.calls.append((png_data, width_pt, height_pt))
        return b"%PDF-fake"


class BrokenBackend(DocumentBackend):
    def __init__(self, error: Exception) -> None:
        self.error = error

    def build(self, png_data, width_pt, height_pt):
        raise self.error


@pytest.fixture
def surface():
    return render(CardState(name="Ada Lovelace"), CropState(), 2.0)


@pytest.mark.parametrize("px, pt", [(600, 450), (360, 270), (96, 72), (1, 1), (2, 2), (0, 0)])
def test_pt_from_px(px, pt):
    assert pt_from_px(px) == pt


def test_page_size_does_not_depend_on_device_pixel_ratio():
    for dpr in (1.0, 1.5, 2.0, 3.0):
        page = page_size_points(render(CardState(), CropState(), dpr))
        assert (page.width, page.height) == (450, 270)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Ada Lovelace", "Ada_Lovelace.png"),
        ("", "id-card.png"),
        ("Grace  \t Hopper", "Grace_Hopper.png"),
        ("Solo", "Solo.png"),
    ],
)
def test_export_filename(name, expected):
    assert export_filename(name, "png") == expected


def test_raster_export_is_physical_png(surface):
    exported = export_raster(surface, "Ada Lovelace")

    assert exported.filename == "Ada_Lovelace.png"
    assert exported.media_type == "image/png"
    assert not exported.degraded
    with Image.open(BytesIO(exported.data)) as img:
        assert img.format == "PNG"
        assert img.size == (1200, 720)


def test_document_export_uses_point_page_size(surface):
    backend = RecordingBackend()
    exported = export_document(surface, "Ada Lovelace", backend=backend)

    assert exported.filename == "Ada_Lovelace.pdf"
    assert exported.media_type == "application/pdf"
    assert exported.data == b"%PDF-fake"
    assert not exported.degraded
    ((png_data, width_pt, height_pt),) = backend.calls
    assert (width_pt, height_pt) == (450, 270)
    assert png_data == surface.to_png()


def test_reportlab_document_is_single_landscape_page(surface):
    exported = export_document(surface, "Ada Lovelace", backend=ReportLabBackend())

    assert exported.data.startswith(b"%PDF")
    assert b"/MediaBox [ 0 0 450 270 ]" in exported.data
    assert not exported.degraded


def test_reportlab_output_is_reproducible(surface):
    backend = ReportLabBackend()
    assert export_document(surface, "x", backend=backend).data == export_document(surface, "x", backend=backend).data


@pytest.mark.parametrize(
    "error",
    [DocumentBackendUnavailable("no pdf for you"), RuntimeError("boom"), ValueError("bad image")],
)
def test_document_failure_falls_back_to_raster(surface, error):
    shown = []
    exported = export_document(surface, "Ada Lovelace", backend=BrokenBackend(error), viewer=shown.append)

    assert exported.degraded
    assert exported.filename == "Ada_Lovelace.png"
    assert exported.media_type == "image/png"
    assert exported.data == surface.to_png()
    assert len(shown) == 1
    assert shown[0].size == (1200, 720)


def test_fallback_survives_broken_viewer(surface):
    def viewer(image):
        raise OSError("no display")

    exported = export_document(surface, "", backend=BrokenBackend(RuntimeError("boom")), viewer=viewer)
    assert exported.degraded
    assert exported.filename == "id-card.png"


def test_unavailable_backend_is_resolved_lazily(surface, monkeypatch):
    class MissingBackend(DocumentBackend):
        def __init__(self) -> None:
            raise ImportError("No module named 'reportlab'")

        def build(self, png_data, width_pt, height_pt):
            raise AssertionError("never built")

    monkeypatch.setitem(pdf.DOCUMENT_BACKENDS, "reportlab", MissingBackend)
    monkeypatch.setattr(pdf, "_RESOLVED", {})

    exported = export_document(surface, "Ada")
    assert exported.degraded


def test_resolve_unknown_backend():
    with pytest.raises(DocumentBackendUnavailable):
        resolve_document_backend("postscript")


def test_resolved_backend_is_cached(monkeypatch):
    monkeypatch.setattr(pdf, "_RESOLVED", {})
    assert resolve_document_backend() is resolve_document_backend()


def test_register_backend(monkeypatch):
    monkeypatch.setattr(pdf, "DOCUMENT_BACKENDS", dict(pdf.DOCUMENT_BACKENDS))
    monkeypatch.setattr(pdf, "_RESOLVED", {})
    pdf.register_document_backend("recording", RecordingBackend)
    assert isinstance(resolve_document_backend("recording"), RecordingBackend)


def test_exported_file_save(tmp_path, surface):
    path = export_raster(surface, "Ada Lovelace").save(tmp_path / "out")
    assert path == tmp_path / "out" / "Ada_Lovelace.png"
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
