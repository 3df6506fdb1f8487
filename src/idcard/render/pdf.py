"""Single-page PDF generation behind a pluggable document backend."""

import logging
from abc import ABC, abstractmethod
from io import BytesIO

from idcard.errors import DocumentBackendUnavailable

logger = logging.getLogger(__name__)


class DocumentBackend(ABC):
    """Builds a one-page document showing a raster image edge to edge."""

    name: str = ""

    @abstractmethod
    def build(self, png_data: bytes, width_pt: int, height_pt: int) -> bytes:
        """
        Build a document with a single page holding the image.

        Args:
            png_data: PNG-encoded card image.
            width_pt: Page width in points.
            height_pt: Page height in points.

        Returns:
            Encoded document bytes.
        """


class ReportLabBackend(DocumentBackend):
    """PDF backend using ReportLab. ReportLab is imported on construction."""

    name = "reportlab"

    def __init__(self) -> None:
        """
        Import ReportLab.

        Raises:
            DocumentBackendUnavailable: If ReportLab cannot be imported.
        """
        try:
            from reportlab.lib.pagesizes import landscape
            from reportlab.lib.utils import ImageReader
            from reportlab.pdfgen import canvas
        except ImportError as e:
            raise DocumentBackendUnavailable(f"ReportLab is not available: {e}") from e

        self._landscape = landscape
        self._image_reader = ImageReader
        self._canvas = canvas

    def build(self, png_data: bytes, width_pt: int, height_pt: int) -> bytes:
        """
        Render a landscape page exactly width_pt x height_pt with the image at (0, 0).

        Output is byte-reproducible (ReportLab invariant mode).
        """
        page_width, page_height = self._landscape((width_pt, height_pt))

        buffer = BytesIO()
        c = self._canvas.Canvas(buffer, pagesize=(page_width, page_height), invariant=1)
        # Fill the whole page even if landscape() swapped the axes
        c.drawImage(
            self._image_reader(BytesIO(png_data)),
            0, 0,
            width=page_width,
            height=page_height,
            preserveAspectRatio=False,
        )
        c.showPage()
        c.save()
        return buffer.getvalue()


# Registry of known backends, by name
DOCUMENT_BACKENDS: dict[str, type[DocumentBackend]] = {
    "reportlab": ReportLabBackend,
}

# Successfully initialized backends; failures are not cached so a later call can retry
_RESOLVED: dict[str, DocumentBackend] = {}


def register_document_backend(name: str, backend_class: type[DocumentBackend]) -> None:
    """
    Register a document backend under a name.

    Args:
        name: Backend name used with resolve_document_backend().
        backend_class: DocumentBackend subclass, constructed lazily.
    """
    DOCUMENT_BACKENDS[name] = backend_class
    _RESOLVED.pop(name, None)


def resolve_document_backend(name: str = "reportlab") -> DocumentBackend:
    """
    Get an initialized document backend, constructing it on first use.

    Args:
        name: Registered backend name.

    Returns:
        DocumentBackend instance (cached after the first success).

    Raises:
        DocumentBackendUnavailable: If the backend is unknown or fails to initialize.
    """
    if name in _RESOLVED:
        return _RESOLVED[name]

    backend_class = DOCUMENT_BACKENDS.get(name)
    if backend_class is None:
        raise DocumentBackendUnavailable(f"Unknown document backend: {name}")

    try:
        backend = backend_class()
    except DocumentBackendUnavailable:
        raise
    except Exception as e:
        raise DocumentBackendUnavailable(f"Document backend '{name}' failed to initialize: {e}") from e

    logger.info(f"Initialized document backend: {name}")
    _RESOLVED[name] = backend
    return backend
