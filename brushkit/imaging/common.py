"""Shared helpers for the image encoders: validation, row ordering, file output."""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Union

PixelData = Union[bytes, bytearray, memoryview]


class ImageWriteError(Exception):
    """Raised when an image cannot be encoded or written."""


def check_image(pixels: PixelData, width: int, height: int, components: int) -> bytes:
    """Validate image dimensions and pixel data, returning the pixels as bytes.

    Pixels are interleaved 8-bit channels, left to right and top to bottom,
    with ``components`` channels per pixel (1=Y, 2=YA, 3=RGB, 4=RGBA).
    """
    if width < 0 or height < 0:
        raise ImageWriteError(f"invalid image size {width}x{height}")
    if components not in (1, 2, 3, 4):
        raise ImageWriteError(f"unsupported component count {components}")
    data = bytes(pixels)
    needed = width * height * components
    if len(data) < needed:
        raise ImageWriteError(
            f"pixel data too short: need {needed} bytes, got {len(data)}"
        )
    return data


def iter_rows(
    pixels: PixelData,
    width: int,
    height: int,
    components: int,
    bottom_up: bool = False,
    flip_vertically: bool = False,
) -> Iterator[bytes]:
    """Yield the rows of a tightly packed image in output order.

    ``bottom_up`` is the natural order of the target format; ``flip_vertically``
    reverses whatever that order is.
    """
    data = bytes(pixels)
    row_size = width * components
    reverse = bottom_up != flip_vertically
    rows = range(height - 1, -1, -1) if reverse else range(height)
    for row in rows:
        start = row * row_size
        yield data[start:start + row_size]


def write_file(path: Union[str, os.PathLike], data: bytes) -> None:
    """Write encoded image bytes to ``path``."""
    try:
        with open(path, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise ImageWriteError(f"cannot write {os.fspath(path)!r}: {exc}") from exc