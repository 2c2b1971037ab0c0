"""Shared image processing utilities: decode, resize and encode with Pillow."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from common.exceptions import DecodeError, EncodeError, ValidationError

logger = logging.getLogger(__name__)

# Pillow format names accepted on either side of the pipeline
SUPPORTED_FORMATS = {"JPEG", "PNG"}

# Extensions Pillow would write for each supported format, canonical first
FORMAT_EXTENSIONS = {
    "JPEG": (".jpg", ".jpeg"),
    "PNG": (".png",),
}

RESAMPLE_FILTERS = ("nearest", "bilinear", "bicubic", "lanczos")
DEFAULT_RESAMPLE = "lanczos"
DEFAULT_JPEG_QUALITY = 90

# Modes each encoder writes without conversion
_ENCODER_MODES = {
    "JPEG": {"L", "RGB", "CMYK"},
    "PNG": {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"},
}


@dataclass
class ImageBuffer:
    """Decoded pixels plus the format they were read from."""

    image: Image.Image
    format: str

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


def format_from_name(name: str) -> Optional[str]:
    """Map a format name or file extension to a Pillow format name.

    Accepts "jpeg", "jpg", "png" with or without a leading dot, in any case.
    Returns None when the name does not denote a supported format.
    """
    key = name.lower().lstrip(".")
    if key in {"jpeg", "jpg"}:
        return "JPEG"
    if key == "png":
        return "PNG"
    return None


def get_resample_filter(name: str) -> Any:
    attr_map = {
        "nearest": Image.Resampling.NEAREST,
        "bilinear": Image.Resampling.BILINEAR,
        "bicubic": Image.Resampling.BICUBIC,
        "lanczos": Image.Resampling.LANCZOS,
    }
    try:
        return attr_map[name.lower()]
    except KeyError as ex:
        raise ValidationError(
            f"Unknown resample filter '{name}'. Choose one of: {', '.join(RESAMPLE_FILTERS)}"
        ) from ex


def resolve_dimensions(
    original: Tuple[int, int],
    target_width: Optional[int] = None,
    target_height: Optional[int] = None,
) -> Tuple[int, int]:
    """Compute the output size, filling in a missing side from the aspect ratio.

    Args:
        original: (width, height) of the decoded image
        target_width: Requested width, or None to derive it from the height
        target_height: Requested height, or None to derive it from the width

    Returns:
        (width, height) tuple. When both targets are given they are returned
        unchanged; a derived side is rounded to the nearest integer and never
        drops below 1.

    Raises:
        DecodeError: If the original size has a zero side
        ValidationError: If neither target is given
    """
    orig_w, orig_h = original
    if orig_w <= 0 or orig_h <= 0:
        raise DecodeError(f"Invalid image dimensions: {orig_w}x{orig_h}")

    if target_width is not None and target_height is not None:
        return target_width, target_height

    if target_width is not None:
        return target_width, max(1, round(target_width * orig_h / orig_w))

    if target_height is not None:
        return max(1, round(target_height * orig_w / orig_h)), target_height

    raise ValidationError("At least one of --width or --height must be specified.")


def decode_image(path: Path) -> ImageBuffer:
    """Open and fully decode a JPEG or PNG file.

    Raises:
        DecodeError: If the file cannot be read, is not an image, is corrupt,
            or is in a format other than JPEG/PNG
    """
    try:
        with Image.open(path) as img:
            img.load()  # Force load to catch truncated images
            fmt = (img.format or "").upper()
            decoded = img.copy()
    except UnidentifiedImageError as ex:
        raise DecodeError(f"The file '{path}' does not seem to be an image.") from ex
    except Image.DecompressionBombError as ex:
        raise DecodeError(f"Image too large or suspicious: {ex}") from ex
    except (OSError, SyntaxError, ValueError) as ex:
        raise DecodeError(f"Failed to decode image '{path}': {ex}") from ex

    if fmt not in SUPPORTED_FORMATS:
        raise DecodeError(
            f"Unsupported input format '{fmt or 'unknown'}' for '{path}'. Only JPEG and PNG are supported."
        )
    if decoded.width == 0 or decoded.height == 0:
        raise DecodeError(f"Image '{path}' has an empty pixel buffer.")

    logger.info(f"Original size: {decoded.width}x{decoded.height} ({fmt})")
    return ImageBuffer(image=decoded, format=fmt)


def resize_image(
    buffer: ImageBuffer,
    width: int,
    height: int,
    resample: str = DEFAULT_RESAMPLE,
) -> ImageBuffer:
    """Resample the buffer to exactly width x height."""
    img = buffer.image
    # Pillow silently falls back to NEAREST for palette and bilevel images
    if img.mode == "P":
        logger.debug("Converting palette image to RGBA before resampling")
        img = img.convert("RGBA")
    elif img.mode == "1":
        logger.debug("Converting bilevel image to L before resampling")
        img = img.convert("L")

    resized = img.resize((width, height), resample=get_resample_filter(resample))
    logger.info(f"New image dimensions: width {resized.width} x height {resized.height}")
    return ImageBuffer(image=resized, format=buffer.format)


def encode_image(
    buffer: ImageBuffer,
    fmt: str,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """Encode the buffer to JPEG or PNG bytes.

    Raises:
        EncodeError: If the format is unsupported or Pillow fails to encode
    """
    fmt = fmt.upper()
    if fmt not in SUPPORTED_FORMATS:
        raise EncodeError(
            f"Unsupported conversion to image format '{fmt}'. Specify a valid format with --format."
        )
    if buffer.width == 0 or buffer.height == 0:
        raise EncodeError("Failed to save image: Empty image buffer")

    img = buffer.image
    if img.mode not in _ENCODER_MODES[fmt]:
        target_mode = "RGB" if fmt == "JPEG" else "RGBA"
        logger.debug(f"Converting {img.mode} to {target_mode} for {fmt}")
        img = img.convert(target_mode)

    save_kwargs: dict[str, Any] = {"optimize": True}
    if fmt == "JPEG":
        save_kwargs["quality"] = max(1, min(100, quality))
    logger.debug(f"Encoding {fmt} with {save_kwargs}")

    out = io.BytesIO()
    try:
        img.save(out, format=fmt, **save_kwargs)
    except (OSError, ValueError) as ex:
        raise EncodeError(f"Failed to encode image as {fmt}: {ex}") from ex
    return out.getvalue()
