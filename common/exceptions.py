"""Shared exception classes for image-resizer."""

from __future__ import annotations


class ImageResizerError(Exception):
    """Base exception for all image-resizer errors."""

    pass


class ValidationError(ImageResizerError):
    """Bad or missing command-line input."""

    pass


class DecodeError(ImageResizerError):
    """Input is unreadable, corrupt, or not a supported image format."""

    pass


class EncodeError(ImageResizerError):
    """Output format is unsupported or the encoder failed."""

    pass


class PathError(ImageResizerError):
    """Output location is missing, occupied, or not writable."""

    pass
