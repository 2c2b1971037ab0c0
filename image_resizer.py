"""Image resizer CLI: resize a JPEG/PNG and save it as JPEG or PNG.

Requires Pillow: pip install Pillow

Installed as both `image-resizer` and `image-resizer-rust`.

Examples:
  - Width only, aspect ratio kept, saved next to the input as photo_resized.jpg:
    image-resizer photo.jpg -W 800
  - Exact size, converted to PNG:
    image-resizer photo.jpg -W 640 -H 480 -F png -o thumb.png
  - Overwrite without asking:
    image-resizer photo.png -H 200 -o small.png --yes
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from common.cli_helpers import add_dry_run_argument, add_log_level_argument, setup_logging
from common.exceptions import ImageResizerError, ValidationError
from common.file_helpers import (
    confirm_overwrite,
    determine_output_path,
    ensure_output_directory,
    resolve_output,
    write_output,
)
from common.image_helpers import (
    DEFAULT_JPEG_QUALITY,
    DEFAULT_RESAMPLE,
    RESAMPLE_FILTERS,
    decode_image,
    encode_image,
    resize_image,
    resolve_dimensions,
)

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("jpeg", "png")


@dataclass
class InvocationRequest:
    input_path: Path
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    output: Optional[str] = None
    resample: str = DEFAULT_RESAMPLE
    quality: int = DEFAULT_JPEG_QUALITY
    assume_yes: bool = False
    dry_run: bool = False


@dataclass
class SaveInfo:
    path: Path
    format: str
    width: int
    height: int


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resizes images based on provided dimensions.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input", type=Path, help="Path to the input image")
    parser.add_argument(
        "-W",
        "--width",
        type=int,
        help="New width of the image. Required if --height not provided.",
    )
    parser.add_argument(
        "-H",
        "--height",
        type=int,
        help="New height of the image. Required if --width not provided.",
    )
    parser.add_argument(
        "-F",
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output image format (overrides the output extension)",
    )
    parser.add_argument(
        "-o",
        "--output",
        help=(
            "Absolute or relative path including new image name. If only a name "
            "is provided (e.g. output.jpg), the directory of the input image is used."
        ),
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Replace an existing output file without asking",
    )
    parser.add_argument(
        "--resample",
        choices=RESAMPLE_FILTERS,
        default=DEFAULT_RESAMPLE,
        help="Resampling filter",
    )
    parser.add_argument(
        "--quality",
        type=int,
        default=DEFAULT_JPEG_QUALITY,
        help="JPEG quality (1-100)",
    )
    add_dry_run_argument(parser)
    add_log_level_argument(parser)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def build_request(args: argparse.Namespace) -> InvocationRequest:
    """Validate parsed arguments and turn them into an InvocationRequest.

    Raises:
        ValidationError: If no dimension is given, a dimension or the quality
            is out of range, or the input is not a readable file
    """
    if args.width is None and args.height is None:
        raise ValidationError("At least one of --width or --height must be specified.")
    for name in ("width", "height"):
        value = getattr(args, name)
        if value is not None and value <= 0:
            raise ValidationError(f"--{name} must be a positive integer, got {value}.")
    if not 1 <= args.quality <= 100:
        raise ValidationError(f"--quality must be between 1 and 100, got {args.quality}.")

    input_path: Path = args.input
    if not input_path.is_file():
        raise ValidationError(f"The path {input_path} does not exist or is not a file.")
    if not os.access(input_path, os.R_OK):
        raise ValidationError(f"The file {input_path} is not readable.")

    return InvocationRequest(
        input_path=input_path,
        width=args.width,
        height=args.height,
        format=args.format,
        output=args.output,
        resample=args.resample,
        quality=args.quality,
        assume_yes=args.yes,
        dry_run=args.dry_run,
    )


def run(request: InvocationRequest) -> SaveInfo:
    """Decode, resize, encode and write one image."""
    output_path = determine_output_path(request.input_path, request.output)
    ensure_output_directory(output_path)

    buffer = decode_image(request.input_path)
    width, height = resolve_dimensions(buffer.size, request.width, request.height)

    resolved = resolve_output(output_path, request.format, buffer.format)
    info = SaveInfo(path=resolved.path, format=resolved.format, width=width, height=height)

    if request.dry_run:
        logger.info(
            f"DRY-RUN: {request.input_path} -> {resolved.path} "
            f"({width}x{height}, {resolved.format})"
        )
        return info

    confirm_overwrite(resolved.path, assume_yes=request.assume_yes)

    resized = resize_image(buffer, width, height, resample=request.resample)
    data = encode_image(resized, resolved.format, quality=request.quality)
    logger.info(f"Saving image to: {resolved.path}")
    write_output(data, resolved.path)
    return info


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logging(args.log_level)

    try:
        request = build_request(args)
        info = run(request)
    except ImageResizerError as ex:
        logger.error(str(ex))
        return 1

    if request.dry_run:
        return 0

    logger.info("Image resized and saved!")
    logger.info(f"New dimensions: {info.width}x{info.height}")
    logger.info(f"Format: {info.format}")
    logger.info(f"Output path: {info.path}")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
