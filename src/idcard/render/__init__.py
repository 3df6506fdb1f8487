"""Rendering modules for the card raster, images and PDF documents."""

from idcard.render.card import CardRenderer, RenderedSurface, render
from idcard.render.image import (
    decode_image,
    load_image_from_bytes,
    render_crop_preview,
    save_image_to_bytes,
)
from idcard.render.pdf import (
    DocumentBackend,
    ReportLabBackend,
    register_document_backend,
    resolve_document_backend,
)
from idcard.render.surface import DrawingSurface, PillowSurface

__all__ = [
    "CardRenderer",
    "DocumentBackend",
    "DrawingSurface",
    "PillowSurface",
    "RenderedSurface",
    "ReportLabBackend",
    "decode_image",
    "load_image_from_bytes",
    "register_document_backend",
    "render",
    "render_crop_preview",
    "resolve_document_backend",
    "save_image_to_bytes",
]
