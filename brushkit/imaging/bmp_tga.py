"""BMP and TGA encoders for 8-bit interleaved pixel data."""

from __future__ import annotations

import os
import struct
from typing import Union

from brushkit.imaging.common import PixelData, check_image, iter_rows, write_file

_BMP_FILE_HEADER = 14
_BMP_INFO_HEADER = 40
_BMP_V4_HEADER = 108
_BMP_BITFIELDS = 3
_TGA_MAX_RUN = 128


def _encode_pixel(pixel: bytes, components: int, write_alpha: bool, expand_mono: bool) -> bytes:
    """Reorder one pixel to BGR(A), or Y(A), as stored on disk."""
    if components <= 2:
        color = bytes((pixel[0],) * 3) if expand_mono else bytes((pixel[0],))
    else:
        color = bytes((pixel[2], pixel[1], pixel[0]))
    if write_alpha:
        return color + pixel[components - 1:components]
    return color


def _split_pixels(row: bytes, width: int, components: int) -> list[bytes]:
    return [row[k * components:(k + 1) * components] for k in range(width)]


def encode_bmp(
    pixels: PixelData,
    width: int,
    height: int,
    components: int,
    flip_vertically: bool = False,
) -> bytes:
    """Encode pixels as a Windows bitmap.

    Images without alpha become 24-bit BGR with rows padded to four bytes
    (grey is expanded to three channels, grey alpha is dropped). RGBA images
    become 32-bit bitmaps with a V4 header and bitfield masks.
    """
    data = check_image(pixels, width, height, components)
    out = bytearray(b"BM")
    if components != 4:
        pad = (-width * 3) & 3
        offset = _BMP_FILE_HEADER + _BMP_INFO_HEADER
        size = (offset + (width * 3 + pad) * height) & 0xFFFFFFFF
        out += struct.pack("<IHHI", size, 0, 0, offset)
        out += struct.pack(
            "<IIIHHIIIIII", _BMP_INFO_HEADER, width, height, 1, 24, 0, 0, 0, 0, 0, 0
        )
        write_alpha = False
    else:
        pad = 0
        offset = _BMP_FILE_HEADER + _BMP_V4_HEADER
        size = (offset + width * height * 4) & 0xFFFFFFFF
        out += struct.pack("<IHHI", size, 0, 0, offset)
        out += struct.pack(
            "<IIIHHIIIIII", _BMP_V4_HEADER, width, height, 1, 32,
            _BMP_BITFIELDS, 0, 0, 0, 0, 0,
        )
        out += struct.pack("<IIII", 0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000)
        out += struct.pack("<I", 0)  # colour space type
        out += bytes(48)  # endpoints and gamma
        write_alpha = True

    padding = bytes(pad)
    for row in iter_rows(data, width, height, components, True, flip_vertically):
        for pixel in _split_pixels(row, width, components):
            out += _encode_pixel(pixel, components, write_alpha, True)
        out += padding
    return bytes(out)


def write_bmp(
    path: Union[str, os.PathLike],
    pixels: PixelData,
    width: int,
    height: int,
    components: int,
    flip_vertically: bool = False,
) -> None:
    """Encode pixels as BMP and write them to ``path``."""
    write_file(path, encode_bmp(pixels, width, height, components, flip_vertically))


def _tga_run_length(pixels: list[bytes], i: int, width: int) -> tuple[int, bool]:
    """Length of the packet starting at ``i`` and whether it holds raw pixels."""
    if i >= width - 1:
        return 1, True
    length = 2
    different = pixels[i] != pixels[i + 1]
    if different:
        prev = i
        for k in range(i + 2, width):
            if length >= _TGA_MAX_RUN:
                break
            if pixels[prev] != pixels[k]:
                prev += 1
                length += 1
            else:
                length -= 1
                break
    else:
        for k in range(i + 2, width):
            if length >= _TGA_MAX_RUN or pixels[k] != pixels[i]:
                break
            length += 1
    return length, different


def encode_tga(
    pixels: PixelData,
    width: int,
    height: int,
    components: int,
    rle: bool = True,
    flip_vertically: bool = False,
) -> bytes:
    """Encode pixels as a Truevision TGA image, run-length encoded by default."""
    data = check_image(pixels, width, height, components)
    has_alpha = components in (2, 4)
    color_bytes = components - 1 if has_alpha else components
    image_type = 3 if color_bytes < 2 else 2
    if rle:
        image_type += 8
    bits = (color_bytes + has_alpha) * 8
    out = bytearray(
        struct.pack(
            "<BBBHHBHHHHBB",
            0, 0, image_type, 0, 0, 0, 0, 0,
            width & 0xFFFF, height & 0xFFFF, bits, 8 if has_alpha else 0,
        )
    )

    for row in iter_rows(data, width, height, components, True, flip_vertically):
        row_pixels = _split_pixels(row, width, components)
        if not rle:
            for pixel in row_pixels:
                out += _encode_pixel(pixel, components, has_alpha, False)
            continue
        i = 0
        while i < width:
            length, raw = _tga_run_length(row_pixels, i, width)
            if raw:
                out.append(length - 1)
                for pixel in row_pixels[i:i + length]:
                    out += _encode_pixel(pixel, components, has_alpha, False)
            else:
                out.append((length - 129) & 0xFF)
                out += _encode_pixel(row_pixels[i], components, has_alpha, False)
            i += length
    return bytes(out)


def write_tga(
    path: Union[str, os.PathLike],
    pixels: PixelData,
    width: int,
    height: int,
    components: int,
    rle: bool = True,
    flip_vertically: bool = False,
) -> None:
    """Encode pixels as TGA and write them to ``path``."""
    write_file(path, encode_tga(pixels, width, height, components, rle, flip_vertically))