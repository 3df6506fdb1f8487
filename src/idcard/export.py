"""PNG and single-page PDF export of a rendered card."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from PIL import Image

from idcard.config import export_filename
from idcard.errors import DocumentBackendUnavailable
from idcard.render.card import RenderedSurface
from idcard.render.pdf import DocumentBackend, resolve_document_backend
from idcard.utils.dimensions import LogicalDims, PointDims, round_half_up

logger = logging.getLogger(__name__)

PNG_MEDIA_TYPE = "image/png"
PDF_MEDIA_TYPE = "application/pdf"

# Shows a raster image to the user when a document cannot be produced
ImageViewer = Callable[[Image.Image], None]


@dataclass(frozen=True)
class ExportedFile:
    """
    An exported artifact, ready for a collaborator to save or send.

    Attributes:
        filename: Suggested download filename.
        media_type: MIME type of data.
        data: Encoded file contents.
        degraded: True when a document was requested but the raster fallback was produced.
    """

    filename: str
    media_type: str
    data: bytes
    degraded: bool = False

    def save(self, directory: Path) -> Path:
        """
        Write the file into a directory under its suggested name.

        Args:
            directory: Target directory (created if missing).

        Returns:
            Path of the written file.
        """
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        path.write_bytes(self.data)
        return path


def page_size_points(surface: RenderedSurface) -> PointDims:
    """
    Document page size matching the on-screen size of a surface.

    The physical buffer is divided by its device pixel ratio to get CSS
    pixels, which are then converted at 72/96, so the page does not depend on
    the ratio the card was rendered at.

    Args:
        surface: Rendered card.

    Returns:
        PointDims, e.g. 450x270 for the 600x360 card.
    """
    logical = LogicalDims(
        width=round_half_up(surface.physical_width / surface.device_pixel_ratio),
        height=round_half_up(surface.physical_height / surface.device_pixel_ratio),
    )
    return logical.to_points()


def export_raster(surface: RenderedSurface, name: str) -> ExportedFile:
    """
    Encode the physical buffer as PNG.

    Args:
        surface: Rendered card.
        name: Participant name, used for the filename.

    Returns:
        ExportedFile with PNG data.
    """
    return ExportedFile(
        filename=export_filename(name, "png"),
        media_type=PNG_MEDIA_TYPE,
        data=surface.to_png(),
    )


def export_document(
    surface: RenderedSurface,
    name: str,
    backend: DocumentBackend | None = None,
    viewer: ImageViewer | None = None,
) -> ExportedFile:
    """
    Export the card as a single-page PDF, falling back to PNG.

    Never raises for backend problems: if the backend cannot be acquired or
    fails while building, the raster is shown through viewer (when given)
    and returned as a degraded export, so the user can print it to a file.

    Args:
        surface: Rendered card.
        name: Participant name, used for the filename.
        backend: Document backend. Resolved lazily (ReportLab) when None.
        viewer: Callback presenting the raster in a new viewing surface.

    Returns:
        ExportedFile with PDF data, or degraded PNG data.
    """
    png_data = surface.to_png()
    page = page_size_points(surface)

    try:
        backend = backend or resolve_document_backend()
        data = backend.build(png_data, page.width, page.height)
    except DocumentBackendUnavailable as e:
        logger.error(f"PDF export unavailable, falling back to PNG: {e}")
        return _raster_fallback(surface, name, png_data, viewer)
    except Exception as e:
        logger.exception(f"PDF export failed, falling back to PNG: {e}")
        return _raster_fallback(surface, name, png_data, viewer)

    logger.info(f"Exported {page.width}x{page.height}pt PDF for {name or 'unnamed card'}")
    return ExportedFile(
        filename=export_filename(name, "pdf"),
        media_type=PDF_MEDIA_TYPE,
        data=data,
    )


def _raster_fallback(
    surface: RenderedSurface,
    name: str,
    png_data: bytes,
    viewer: ImageViewer | None,
) -> ExportedFile:
    if viewer is not None:
        try:
            viewer(surface.image.copy())
        except Exception as e:
            logger.warning(f"Could not display fallback image: {e}")

    return ExportedFile(
        filename=export_filename(name, "png"),
        media_type=PNG_MEDIA_TYPE,
        data=png_data,
        degraded=True,
    )
