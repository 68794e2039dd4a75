"""
Exception types raised by spriteatlas.

Every failure is fatal to the current run; the CLI catches ``AtlasError``,
logs it and exits non-zero.
"""


class AtlasError(Exception):
    """Base class for all atlas packing and extraction errors."""


class AtlasIOError(AtlasError):
    """A file could not be opened, read or written."""


class UnsupportedImageError(AtlasError):
    """Source pixels cannot be expanded to 8-bit RGBA."""


class MetadataFormatError(AtlasError, ValueError):
    """An atLS chunk is truncated, malformed or points outside its image."""


class SpriteTooLargeError(AtlasError):
    """A sprite does not fit on a page of the requested size."""


class AtlasConfigError(AtlasError, ValueError):
    """Invalid combination of packing options."""


class AtlasOverflowError(AtlasError):
    """Auto-sizing grew the page past the coordinate range."""
