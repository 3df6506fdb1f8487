"""Identity card composition and export engine."""

__version__ = "0.1.0"

# High-level Python API
from idcard.config import CardState, CardStyle, load_config
from idcard.crop import CropRectangle, CropState, compute_crop_rectangle, fit_crop_rectangle
from idcard.engine import CardEngine
from idcard.errors import (
    CropSampleError,
    DocumentBackendUnavailable,
    IDCardError,
    ImageDecodeError,
    PointerCaptureError,
)
from idcard.export import ExportedFile, export_document, export_raster
from idcard.interaction import DragSession
from idcard.render import RenderedSurface, render
from idcard.utils.dimensions import pt_from_px
from idcard.utils.text import TextBlock, layout_text

__all__ = [
    "CardEngine",
    "CardState",
    "CardStyle",
    "CropRectangle",
    "CropSampleError",
    "CropState",
    "DocumentBackendUnavailable",
    "DragSession",
    "ExportedFile",
    "IDCardError",
    "ImageDecodeError",
    "PointerCaptureError",
    "RenderedSurface",
    "TextBlock",
    "compute_crop_rectangle",
    "export_document",
    "export_raster",
    "fit_crop_rectangle",
    "layout_text",
    "load_config",
    "pt_from_px",
    "render",
]
