"""Shared file operation utilities: output path/format resolution and writing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from common.exceptions import EncodeError, PathError
from common.image_helpers import FORMAT_EXTENSIONS, format_from_name

logger = logging.getLogger(__name__)

RESIZED_SUFFIX = "_resized"


@dataclass
class ResolvedOutput:
    path: Path
    format: str


def default_output_name(input_path: Path) -> str:
    """Name used when no --output is given, e.g. photo.png -> photo_resized.png."""
    return f"{input_path.stem}{RESIZED_SUFFIX}{input_path.suffix}"


def determine_output_path(input_path: Path, output: Optional[str] = None) -> Path:
    """Work out where the resized image goes.

    Args:
        input_path: Path of the source image
        output: Value of --output, if any

    Returns:
        Output path. A bare filename is placed next to the input; a path with
        a directory component is used as given. A missing extension is taken
        from the input file.
    """
    parent = input_path.parent

    if output is None:
        out = parent / default_output_name(input_path)
    else:
        out = Path(output)
        # Path("./x.png") normalises to "x.png", so it counts as a bare name
        if out.parent == Path("."):
            out = parent / out
        if out.is_dir():
            out = out / default_output_name(input_path)
        elif not out.suffix:
            out = out.with_suffix(input_path.suffix)
    return out


def ensure_output_directory(path: Path) -> None:
    """Raise PathError unless the directory that will hold path exists."""
    directory = path.parent
    if not directory.is_dir():
        raise PathError(f"The given output directory '{directory}' cannot be found.")


def resolve_output(
    output_path: Path,
    requested_format: Optional[str],
    source_format: str,
) -> ResolvedOutput:
    """Pick the output format and make the file extension agree with it.

    Precedence: --format, then the output extension, then the source format.
    A .jpg/.jpeg extension is kept for JPEG output; otherwise the canonical
    extension of the chosen format replaces whatever was there.

    Raises:
        EncodeError: If the chosen format is not JPEG or PNG
    """
    suffix = output_path.suffix
    if requested_format:
        fmt = format_from_name(requested_format)
        if fmt is None:
            raise EncodeError(f"Unsupported image format {requested_format}")
    elif suffix:
        fmt = format_from_name(suffix)
        if fmt is None:
            raise EncodeError(
                "You need to specify a valid extension, either jpeg, png or no extension."
            )
    else:
        fmt = format_from_name(source_format)
        if fmt is None:
            raise EncodeError(
                f"Unsupported conversion to image format '{source_format}'. Specify a valid format with --format."
            )

    extensions = FORMAT_EXTENSIONS[fmt]
    new_suffix = suffix if suffix.lower() in extensions else extensions[0]
    path = output_path.with_suffix(new_suffix)
    if path != output_path:
        logger.debug(f"Adjusted output extension: {output_path} -> {path}")
    return ResolvedOutput(path=path, format=fmt)


def confirm_overwrite(
    path: Path,
    assume_yes: bool = False,
    ask: Optional[Callable[[str], str]] = None,
) -> None:
    """Ask before replacing an existing file.

    Raises:
        PathError: If the file exists and the user does not answer "y"
    """
    if not path.exists():
        return
    if path.is_dir():
        raise PathError(f"'{path}' is a directory.")
    if assume_yes:
        logger.info(f"Overwriting existing file {path}")
        return
    try:
        answer = (ask or input)(f"\n'{path}' already exists. Do you want to replace it? (y/n): ")
    except EOFError:
        answer = ""
    if answer.strip().lower() != "y":
        raise PathError(f"'{path}' already exists. Operation cancelled!")


def write_output(data: bytes, path: Path) -> None:
    """Write encoded bytes to path with a single file handle."""
    try:
        with path.open("wb") as fh:
            fh.write(data)
    except OSError as ex:
        raise PathError(f"Failed to save image to '{path}': {ex}") from ex
    logger.debug(f"Wrote {len(data)} bytes to {path}")
