"""PNG encoder with per-row adaptive filtering."""

from __future__ import annotations

import os
from typing import Union

from brushkit.imaging.common import ImageWriteError, PixelData, write_file
from brushkit.imaging.deflate import crc32, zlib_compress

PNG_SIGNATURE = bytes((137, 80, 78, 71, 13, 10, 26, 10))

# PNG colour type for each component count: Y, YA, RGB, RGBA.
_COLOR_TYPES = {1: 0, 2: 4, 3: 2, 4: 6}

# Magnitude of a byte read as a signed char, used to estimate row entropy.
_SIGNED_COST = tuple(b if b < 128 else 256 - b for b in range(256))

_FILTER_COUNT = 5


def paeth(a: int, b: int, c: int) -> int:
    """Paeth predictor of left ``a``, up ``b`` and upper-left ``c``, as a byte."""
    p = a + b - c
    pa, pb, pc = abs(p - a), abs(p - b), abs(p - c)
    if pa <= pb and pa <= pc:
        return a & 0xFF
    if pb <= pc:
        return b & 0xFF
    return c & 0xFF


def _filter_row(kind: int, row: bytes, prior: bytes, bpp: int) -> bytes:
    """Apply PNG filter ``kind`` to ``row`` given the previous output row."""
    if kind == 0:
        return bytes(row)
    out = bytearray(len(row))
    for i, value in enumerate(row):
        left = row[i - bpp] if i >= bpp else 0
        up = prior[i]
        if kind == 1:
            predicted = left
        elif kind == 2:
            predicted = up
        elif kind == 3:
            predicted = (left + up) >> 1
        else:
            upper_left = prior[i - bpp] if i >= bpp else 0
            predicted = paeth(left, up, upper_left)
        out[i] = (value - predicted) & 0xFF
    return bytes(out)


def _best_filter(row: bytes, prior: bytes, bpp: int) -> tuple[int, bytes]:
    best_kind, best_line, best_cost = 0, b"", None
    for kind in range(_FILTER_COUNT):
        line = _filter_row(kind, row, prior, bpp)
        cost = sum(_SIGNED_COST[b] for b in line)
        if best_cost is None or cost < best_cost:
            best_kind, best_line, best_cost = kind, line, cost
    return best_kind, best_line


def _chunk(tag: bytes, payload: bytes) -> bytes:
    body = tag + payload
    return len(payload).to_bytes(4, "big") + body + crc32(body).to_bytes(4, "big")


def encode_png(
    pixels: PixelData,
    width: int,
    height: int,
    components: int,
    stride: int = 0,
    compression_level: int = 8,
    force_filter: int = -1,
    flip_vertically: bool = False,
) -> bytes:
    """Encode 8-bit interleaved pixels as a PNG file in memory.

    ``stride`` is the distance in bytes between the starts of rows (0 means
    tightly packed). ``force_filter`` of 0..4 forces that filter on every row;
    any other value lets each row pick the filter with the lowest estimate.
    """
    if width < 0 or height < 0:
        raise ImageWriteError(f"invalid image size {width}x{height}")
    if components not in _COLOR_TYPES:
        raise ImageWriteError(f"unsupported component count {components}")
    row_size = width * components
    if stride == 0:
        stride = row_size
    if stride < row_size:
        raise ImageWriteError(f"stride {stride} is smaller than a row of {row_size} bytes")
    data = bytes(pixels)
    needed = stride * (height - 1) + row_size if height > 0 else 0
    if len(data) < needed:
        raise ImageWriteError(f"pixel data too short: need {needed} bytes, got {len(data)}")
    if not 0 <= force_filter < _FILTER_COUNT:
        force_filter = -1

    order = range(height - 1, -1, -1) if flip_vertically else range(height)
    rows = [data[r * stride:r * stride + row_size] for r in order]

    filtered = bytearray()
    prior = bytes(row_size)
    for row in rows:
        if force_filter >= 0:
            kind, line = force_filter, _filter_row(force_filter, row, prior, components)
        else:
            kind, line = _best_filter(row, prior, components)
        filtered.append(kind)
        filtered += line
        prior = row

    compressed = zlib_compress(bytes(filtered), compression_level)
    header = (
        width.to_bytes(4, "big")
        + height.to_bytes(4, "big")
        + bytes((8, _COLOR_TYPES[components], 0, 0, 0))
    )
    return (
        PNG_SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", compressed)
        + _chunk(b"IEND", b"")
    )


def write_png(
    path: Union[str, os.PathLike],
    pixels: PixelData,
    width: int,
    height: int,
    components: int,
    stride: int = 0,
    compression_level: int = 8,
    force_filter: int = -1,
    flip_vertically: bool = False,
) -> None:
    """Encode pixels as PNG and write them to ``path``."""
    encoded = encode_png(
        pixels, width, height, components, stride,
        compression_level, force_filter, flip_vertically,
    )
    write_file(path, encoded)