"""Shared pytest fixtures for image-resizer tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def reset_stream_handlers() -> Iterator[None]:
    """Drop the stdout handler main() installs so it cannot outlive capsys."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def sample_text_file(tmp_path: Path) -> Path:
    """Create a sample text file for testing.

    Args:
        tmp_path: Pytest temporary directory fixture

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / "sample.txt"
    file_path.write_text("Hello, World!\nThis is a test file.\n")
    return file_path


@pytest.fixture
def sample_image_file(tmp_path: Path) -> Path:
    """Create a sample image file for testing.

    Args:
        tmp_path: Pytest temporary directory fixture

    Returns:
        Path to sample image file (PNG, 100x100)
    """
    img = Image.new("RGB", (100, 100), color="red")
    file_path = tmp_path / "sample.png"
    img.save(file_path)
    return file_path


@pytest.fixture
def wide_image_file(tmp_path: Path) -> Path:
    """PNG with a 2:1 aspect ratio (200x100) and an alpha channel."""
    img = Image.new("RGBA", (200, 100), color=(0, 128, 255, 200))
    file_path = tmp_path / "wide.png"
    img.save(file_path)
    return file_path


@pytest.fixture
def sample_jpeg_file(tmp_path: Path) -> Path:
    """JPEG photo-like fixture (300x200)."""
    img = Image.linear_gradient("L").convert("RGB").resize((300, 200))
    file_path = tmp_path / "photo.jpg"
    img.save(file_path, format="JPEG", quality=85)
    return file_path


@pytest.fixture
def sample_gif_file(tmp_path: Path) -> Path:
    """Valid image in a format the resizer does not accept."""
    img = Image.new("P", (20, 10))
    file_path = tmp_path / "anim.gif"
    img.save(file_path, format="GIF")
    return file_path
