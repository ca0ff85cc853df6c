"""Radiance RGBE (.hdr) encoder for linear floating-point pixel data."""

from __future__ import annotations

import math
import os
from collections.abc import Sequence
from typing import Union

from brushkit.imaging.common import ImageWriteError, write_file

_HEADER = b"#?RADIANCE\n# Written by brushkit\nFORMAT=32-bit_rle_rgbe\n"
_MIN_RLE_WIDTH = 8
_MAX_RLE_WIDTH = 32768
_MAX_DUMP = 128
_MAX_RUN = 127


def _to_byte(value: float) -> int:
    return int(value) & 0xFF


def linear_to_rgbe(red: float, green: float, blue: float) -> tuple[int, int, int, int]:
    """Convert one linear RGB colour to shared-exponent RGBE bytes."""
    maxcomp = max(red, green, blue)
    if maxcomp < 1e-32:
        return (0, 0, 0, 0)
    mantissa, exponent = math.frexp(maxcomp)
    normalize = mantissa * 256.0 / maxcomp
    return (
        _to_byte(red * normalize),
        _to_byte(green * normalize),
        _to_byte(blue * normalize),
        (exponent + 128) & 0xFF,
    )


def _pixel_rgbe(row: Sequence[float], x: int, components: int) -> tuple[int, int, int, int]:
    base = x * components
    if components >= 3:
        return linear_to_rgbe(row[base], row[base + 1], row[base + 2])
    grey = row[base]
    return linear_to_rgbe(grey, grey, grey)


def _rle_channel(values: bytes) -> bytes:
    """Run-length encode one channel of a scanline."""
    width = len(values)
    out = bytearray()
    x = 0
    while x < width:
        run = x
        while run + 2 < width:
            if values[run] == values[run + 1] == values[run + 2]:
                break
            run += 1
        if run + 2 >= width:
            run = width
        while x < run:
            length = min(run - x, _MAX_DUMP)
            out.append(length)
            out += values[x:x + length]
            x += length
        if run + 2 < width:
            while run < width and values[run] == values[x]:
                run += 1
            while x < run:
                length = min(run - x, _MAX_RUN)
                out.append(length + 128)
                out.append(values[x])
                x += length
    return bytes(out)


def _encode_scanline(row: Sequence[float], width: int, components: int) -> bytes:
    pixels = [_pixel_rgbe(row, x, components) for x in range(width)]
    if width < _MIN_RLE_WIDTH or width >= _MAX_RLE_WIDTH:
        return b"".join(bytes(p) for p in pixels)
    out = bytearray((2, 2, (width & 0xFF00) >> 8, width & 0x00FF))
    for channel in range(4):
        out += _rle_channel(bytes(p[channel] for p in pixels))
    return bytes(out)


def encode_hdr(
    pixels: Sequence[float],
    width: int,
    height: int,
    components: int = 3,
    flip_vertically: bool = False,
) -> bytes:
    """Encode linear float pixels as a Radiance HDR image.

    Alpha, if present, is dropped; grey is replicated into all three channels.
    """
    if width <= 0 or height <= 0:
        raise ImageWriteError(f"invalid image size {width}x{height}")
    if components not in (1, 2, 3, 4):
        raise ImageWriteError(f"unsupported component count {components}")
    values = [float(v) for v in pixels]
    row_size = width * components
    needed = row_size * height
    if len(values) < needed:
        raise ImageWriteError(f"pixel data too short: need {needed} values, got {len(values)}")

    out = bytearray(_HEADER)
    out += f"EXPOSURE=          1.0000000000000\n\n-Y {height} +X {width}\n".encode("ascii")
    order = range(height - 1, -1, -1) if flip_vertically else range(height)
    for row in order:
        start = row * row_size
        out += _encode_scanline(values[start:start + row_size], width, components)
    return bytes(out)


def write_hdr(
    path: Union[str, os.PathLike],
    pixels: Sequence[float],
    width: int,
    height: int,
    components: int = 3,
    flip_vertically: bool = False,
) -> None:
    """Encode pixels as HDR and write them to ``path``."""
    write_file(path, encode_hdr(pixels, width, height, components, flip_vertically))