"""Exceptions raised by the card engine.

Every error here is recoverable: the component that detects it absorbs it and
degrades (placeholder avatar, fit-crop, raster export) instead of letting a
render or export call fail.
"""


class IDCardError(Exception):
    """Base class for all card engine errors."""


class ImageDecodeError(IDCardError):
    """The chosen file could not be decoded into a bitmap."""


class CropSampleError(IDCardError):
    """The drawing backend refused to sample a crop rectangle."""


class DocumentBackendUnavailable(IDCardError):
    """The document (PDF) backend could not be initialized or failed to produce output."""


class PointerCaptureError(IDCardError):
    """Pointer capture could not be acquired or released."""
