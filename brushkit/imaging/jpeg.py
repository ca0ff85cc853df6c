"""Baseline JPEG encoder with optional 4:2:0 chroma subsampling."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Union

from brushkit.imaging.common import ImageWriteError, PixelData, check_image, write_file

_ZIGZAG = (
    0, 1, 5, 6, 14, 15, 27, 28, 2, 4, 7, 13, 16, 26, 29, 42, 3, 8, 12, 17, 25, 30, 41, 43,
    9, 11, 18, 24, 31, 40, 44, 53, 10, 19, 23, 32, 39, 45, 52, 54, 20, 22, 33, 38, 46, 51,
    55, 60, 21, 34, 37, 47, 50, 56, 59, 61, 35, 36, 48, 49, 57, 58, 62, 63,
)

# Number of Huffman codes of each length 1..16, followed by the symbols.
_DC_LUMA_COUNTS = (0, 1, 5, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0)
_DC_LUMA_VALUES = tuple(range(12))
_AC_LUMA_COUNTS = (0, 2, 1, 3, 3, 2, 4, 3, 5, 5, 4, 4, 0, 0, 1, 0x7D)
_AC_LUMA_VALUES = (
    0x01, 0x02, 0x03, 0x00, 0x04, 0x11, 0x05, 0x12, 0x21, 0x31, 0x41, 0x06, 0x13, 0x51, 0x61, 0x07,
    0x22, 0x71, 0x14, 0x32, 0x81, 0x91, 0xA1, 0x08, 0x23, 0x42, 0xB1, 0xC1, 0x15, 0x52, 0xD1, 0xF0,
    0x24, 0x33, 0x62, 0x72, 0x82, 0x09, 0x0A, 0x16, 0x17, 0x18, 0x19, 0x1A, 0x25, 0x26, 0x27, 0x28,
    0x29, 0x2A, 0x34, 0x35, 0x36, 0x37, 0x38, 0x39, 0x3A, 0x43, 0x44, 0x45, 0x46, 0x47, 0x48, 0x49,
    0x4A, 0x53, 0x54, 0x55, 0x56, 0x57, 0x58, 0x59, 0x5A, 0x63, 0x64, 0x65, 0x66, 0x67, 0x68, 0x69,
    0x6A, 0x73, 0x74, 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A, 0x83, 0x84, 0x85, 0x86, 0x87, 0x88, 0x89,
    0x8A, 0x92, 0x93, 0x94, 0x95, 0x96, 0x97, 0x98, 0x99, 0x9A, 0xA2, 0xA3, 0xA4, 0xA5, 0xA6, 0xA7,
    0xA8, 0xA9, 0xAA, 0xB2, 0xB3, 0xB4, 0xB5, 0xB6, 0xB7, 0xB8, 0xB9, 0xBA, 0xC2, 0xC3, 0xC4, 0xC5,
    0xC6, 0xC7, 0xC8, 0xC9, 0xCA, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9, 0xDA, 0xE1, 0xE2,
    0xE3, 0xE4, 0xE5, 0xE6, 0xE7, 0xE8, 0xE9, 0xEA, 0xF1, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7, 0xF8,
    0xF9, 0xFA,
)
_DC_CHROMA_COUNTS = (0, 3, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0)
_DC_CHROMA_VALUES = tuple(range(12))
_AC_CHROMA_COUNTS = (0, 2, 1, 2, 4, 4, 3, 4, 7, 5, 4, 4, 0, 1, 2, 0x77)
_AC_CHROMA_VALUES = (
    0x00, 0x01, 0x02, 0x03, 0x11, 0x04, 0x05, 0x21, 0x31, 0x06, 0x12, 0x41, 0x51, 0x07, 0x61, 0x71,
    0x13, 0x22, 0x32, 0x81, 0x08, 0x14, 0x42, 0x91, 0xA1, 0xB1, 0xC1, 0x09, 0x23, 0x33, 0x52, 0xF0,
    0x15, 0x62, 0x72, 0xD1, 0x0A, 0x16, 0x24, 0x34, 0xE1, 0x25, 0xF1, 0x17, 0x18, 0x19, 0x1A, 0x26,
    0x27, 0x28, 0x29, 0x2A, 0x35, 0x36, 0x37, 0x38, 0x39, 0x3A, 0x43, 0x44, 0x45, 0x46, 0x47, 0x48,
    0x49, 0x4A, 0x53, 0x54, 0x55, 0x56, 0x57, 0x58, 0x59, 0x5A, 0x63, 0x64, 0x65, 0x66, 0x67, 0x68,
    0x69, 0x6A, 0x73, 0x74, 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A, 0x82, 0x83, 0x84, 0x85, 0x86, 0x87,
    0x88, 0x89, 0x8A, 0x92, 0x93, 0x94, 0x95, 0x96, 0x97, 0x98, 0x99, 0x9A, 0xA2, 0xA3, 0xA4, 0xA5,
    0xA6, 0xA7, 0xA8, 0xA9, 0xAA, 0xB2, 0xB3, 0xB4, 0xB5, 0xB6, 0xB7, 0xB8, 0xB9, 0xBA, 0xC2, 0xC3,
    0xC4, 0xC5, 0xC6, 0xC7, 0xC8, 0xC9, 0xCA, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9, 0xDA,
    0xE2, 0xE3, 0xE4, 0xE5, 0xE6, 0xE7, 0xE8, 0xE9, 0xEA, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7, 0xF8,
    0xF9, 0xFA,
)

_LUMA_QUANT = (
    16, 11, 10, 16, 24, 40, 51, 61, 12, 12, 14, 19, 26, 58, 60, 55, 14, 13, 16, 24, 40, 57, 69, 56,
    14, 17, 22, 29, 51, 87, 80, 62, 18, 22, 37, 56, 68, 109, 103, 77, 24, 35, 55, 64, 81, 104, 113, 92,
    49, 64, 78, 87, 103, 121, 120, 101, 72, 92, 95, 98, 112, 100, 103, 99,
)
_CHROMA_QUANT = (
    17, 18, 24, 47, 99, 99, 99, 99, 18, 21, 26, 66, 99, 99, 99, 99, 24, 26, 56, 99, 99, 99, 99, 99,
    47, 66, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99,
    99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99, 99,
)

_AASF = tuple(
    s * 2.828427125
    for s in (1.0, 1.387039845, 1.306562965, 1.175875602, 1.0, 0.785694958, 0.541196100, 0.275899379)
)

_HEAD0 = bytes((
    0xFF, 0xD8, 0xFF, 0xE0, 0, 0x10, ord("J"), ord("F"), ord("I"), ord("F"), 0, 1, 1, 0, 0, 1, 0, 1,
    0, 0, 0xFF, 0xDB, 0, 0x84, 0,
))
_HEAD2 = bytes((0xFF, 0xDA, 0, 0xC, 3, 1, 0, 2, 0x11, 3, 0x11, 0, 0x3F, 0))
_EOI = b"\xff\xd9"
_FILL_BITS = (0x7F, 7)


def _huffman_table(counts: Sequence[int], values: Sequence[int]) -> dict[int, tuple[int, int]]:
    """Build canonical Huffman codes: symbol -> (code, length)."""
    table: dict[int, tuple[int, int]] = {}
    symbols = iter(values)
    code = 0
    for length, count in enumerate(counts, start=1):
        for _ in range(count):
            table[next(symbols)] = (code, length)
            code += 1
        code <<= 1
    return table


_YDC = _huffman_table(_DC_LUMA_COUNTS, _DC_LUMA_VALUES)
_YAC = _huffman_table(_AC_LUMA_COUNTS, _AC_LUMA_VALUES)
_UVDC = _huffman_table(_DC_CHROMA_COUNTS, _DC_CHROMA_VALUES)
_UVAC = _huffman_table(_AC_CHROMA_COUNTS, _AC_CHROMA_VALUES)


class _BitWriter:
    """Most-significant-bit-first bit packer with 0xFF byte stuffing."""

    def __init__(self, out: bytearray) -> None:
        self.out = out
        self._buffer = 0
        self._count = 0

    def write(self, code: int, length: int) -> None:
        self._count += length
        self._buffer |= code << (24 - self._count)
        while self._count >= 8:
            byte = (self._buffer >> 16) & 0xFF
            self.out.append(byte)
            if byte == 0xFF:
                self.out.append(0)
            self._buffer = (self._buffer << 8) & 0xFFFFFF
            self._count -= 8


def _scale_factor(quality: int) -> int:
    quality = quality or 90
    quality = min(max(quality, 1), 100)
    return 5000 // quality if quality < 50 else 200 - quality * 2


def _scaled(base: Sequence[int], factor: int) -> list[int]:
    return [min(max((value * factor + 50) // 100, 1), 255) for value in base]


def _to_zigzag(natural: Sequence[int]) -> bytes:
    out = bytearray(64)
    for i, value in enumerate(natural):
        out[_ZIGZAG[i]] = value
    return bytes(out)


def quantization_tables(quality: int) -> tuple[bytes, bytes]:
    """Luma and chroma quantization tables for ``quality`` in zigzag order.

    A quality of 0 means 90; other values are clamped to 1..100.
    """
    factor = _scale_factor(quality)
    return (
        _to_zigzag(_scaled(_LUMA_QUANT, factor)),
        _to_zigzag(_scaled(_CHROMA_QUANT, factor)),
    )


def _divisors(natural: Sequence[int]) -> list[float]:
    return [1.0 / (natural[k] * _AASF[k // 8] * _AASF[k % 8]) for k in range(64)]


def forward_dct(values: Sequence[float]) -> list[float]:
    """Unscaled 8-point forward DCT (AAN), as applied to each row and column."""
    if len(values) != 8:
        raise ValueError("forward_dct needs exactly 8 values")
    d0, d1, d2, d3, d4, d5, d6, d7 = (float(v) for v in values)

    tmp0, tmp7 = d0 + d7, d0 - d7
    tmp1, tmp6 = d1 + d6, d1 - d6
    tmp2, tmp5 = d2 + d5, d2 - d5
    tmp3, tmp4 = d3 + d4, d3 - d4

    tmp10, tmp13 = tmp0 + tmp3, tmp0 - tmp3
    tmp11, tmp12 = tmp1 + tmp2, tmp1 - tmp2

    out0 = tmp10 + tmp11
    out4 = tmp10 - tmp11
    z1 = (tmp12 + tmp13) * 0.707106781
    out2 = tmp13 + z1
    out6 = tmp13 - z1

    tmp10 = tmp4 + tmp5
    tmp11 = tmp5 + tmp6
    tmp12 = tmp6 + tmp7

    z5 = (tmp10 - tmp12) * 0.382683433
    z2 = tmp10 * 0.541196100 + z5
    z4 = tmp12 * 1.306562965 + z5
    z3 = tmp11 * 0.707106781

    z11 = tmp7 + z3
    z13 = tmp7 - z3

    return [out0, z11 + z4, out2, z13 - z2, out4, z13 + z2, out6, z11 - z4]


def _dct_2d(block: Sequence[float]) -> list[float]:
    rows = [forward_dct(block[r * 8:r * 8 + 8]) for r in range(8)]
    columns = [forward_dct([rows[r][c] for r in range(8)]) for c in range(8)]
    return [columns[c][r] for r in range(8) for c in range(8)]


def _magnitude(value: int) -> tuple[int, int]:
    nbits = max(abs(value).bit_length(), 1)
    if value < 0:
        value -= 1
    return value & ((1 << nbits) - 1), nbits


def _encode_block(
    writer: _BitWriter,
    block: Sequence[float],
    divisors: Sequence[float],
    previous_dc: int,
    dc_table: dict[int, tuple[int, int]],
    ac_table: dict[int, tuple[int, int]],
) -> int:
    """Transform, quantize and entropy-code one 8x8 block; return its DC value."""
    du = [0] * 64
    for j, (coefficient, divisor) in enumerate(zip(_dct_2d(block), divisors)):
        v = coefficient * divisor
        du[_ZIGZAG[j]] = int(v - 0.5 if v < 0 else v + 0.5)

    diff = du[0] - previous_dc
    if diff == 0:
        writer.write(*dc_table[0])
    else:
        bits, nbits = _magnitude(diff)
        writer.write(*dc_table[nbits])
        writer.write(bits, nbits)

    end = 63
    while end > 0 and du[end] == 0:
        end -= 1
    if end == 0:
        writer.write(*ac_table[0x00])
        return du[0]

    i = 1
    while i <= end:
        start = i
        while du[i] == 0 and i <= end:
            i += 1
        zeroes = i - start
        if zeroes >= 16:
            for _ in range(zeroes >> 4):
                writer.write(*ac_table[0xF0])
            zeroes &= 15
        bits, nbits = _magnitude(du[i])
        writer.write(*ac_table[(zeroes << 4) + nbits])
        writer.write(bits, nbits)
        i += 1
    if end != 63:
        writer.write(*ac_table[0x00])
    return du[0]


def _sample(
    data: bytes, width: int, height: int, components: int,
    x0: int, y0: int, size: int, flip: bool,
) -> tuple[list[float], list[float], list[float]]:
    """Convert a size x size area to YCbCr, repeating the last row and column."""
    ofs_g = 1 if components > 2 else 0
    ofs_b = 2 if components > 2 else 0
    ys: list[float] = []
    us: list[float] = []
    vs: list[float] = []
    for row in range(y0, y0 + size):
        clamped = min(row, height - 1)
        source_row = height - 1 - clamped if flip else clamped
        base = source_row * width * components
        for col in range(x0, x0 + size):
            p = base + min(col, width - 1) * components
            r, g, b = float(data[p]), float(data[p + ofs_g]), float(data[p + ofs_b])
            ys.append(0.29900 * r + 0.58700 * g + 0.11400 * b - 128)
            us.append(-0.16874 * r - 0.33126 * g + 0.50000 * b)
            vs.append(0.50000 * r - 0.41869 * g - 0.08131 * b)
    return ys, us, vs


def _sub_block(plane: Sequence[float], stride: int, offset: int) -> list[float]:
    return [plane[offset + r * stride + c] for r in range(8) for c in range(8)]


def _downsample(plane: Sequence[float]) -> list[float]:
    result = []
    for yy in range(8):
        for xx in range(8):
            j = yy * 32 + xx * 2
            result.append((plane[j] + plane[j + 1] + plane[j + 16] + plane[j + 17]) * 0.25)
    return result


def encode_jpeg(
    pixels: PixelData,
    width: int,
    height: int,
    components: int = 3,
    quality: int = 90,
    flip_vertically: bool = False,
) -> bytes:
    """Encode 8-bit pixels as a baseline JPEG.

    Alpha is ignored. Quality 0 means 90; qualities up to 90 subsample the
    chroma channels 2x2, higher qualities keep them at full resolution.
    """
    if width <= 0 or height <= 0:
        raise ImageWriteError(f"invalid image size {width}x{height}")
    data = check_image(pixels, width, height, components)

    quality = quality or 90
    subsample = quality <= 90
    factor = _scale_factor(quality)
    luma_natural = _scaled(_LUMA_QUANT, factor)
    chroma_natural = _scaled(_CHROMA_QUANT, factor)
    luma_div = _divisors(luma_natural)
    chroma_div = _divisors(chroma_natural)

    out = bytearray(_HEAD0)
    out += _to_zigzag(luma_natural)
    out.append(1)
    out += _to_zigzag(chroma_natural)
    out += bytes((
        0xFF, 0xC0, 0, 0x11, 8, (height >> 8) & 0xFF, height & 0xFF,
        (width >> 8) & 0xFF, width & 0xFF, 3, 1, 0x22 if subsample else 0x11,
        0, 2, 0x11, 1, 3, 0x11, 1, 0xFF, 0xC4, 0x01, 0xA2, 0,
    ))
    for marker, counts, values in (
        (None, _DC_LUMA_COUNTS, _DC_LUMA_VALUES),
        (0x10, _AC_LUMA_COUNTS, _AC_LUMA_VALUES),
        (0x01, _DC_CHROMA_COUNTS, _DC_CHROMA_VALUES),
        (0x11, _AC_CHROMA_COUNTS, _AC_CHROMA_VALUES),
    ):
        if marker is not None:
            out.append(marker)
        out += bytes(counts)
        out += bytes(values)
    out += _HEAD2

    writer = _BitWriter(out)
    dc_y = dc_u = dc_v = 0
    step = 16 if subsample else 8
    for y in range(0, height, step):
        for x in range(0, width, step):
            ys, us, vs = _sample(data, width, height, components, x, y, step, flip_vertically)
            if subsample:
                for offset in (0, 8, 128, 136):
                    dc_y = _encode_block(writer, _sub_block(ys, 16, offset), luma_div, dc_y, _YDC, _YAC)
                dc_u = _encode_block(writer, _downsample(us), chroma_div, dc_u, _UVDC, _UVAC)
                dc_v = _encode_block(writer, _downsample(vs), chroma_div, dc_v, _UVDC, _UVAC)
            else:
                dc_y = _encode_block(writer, ys, luma_div, dc_y, _YDC, _YAC)
                dc_u = _encode_block(writer, us, chroma_div, dc_u, _UVDC, _UVAC)
                dc_v = _encode_block(writer, vs, chroma_div, dc_v, _UVDC, _UVAC)

    writer.write(*_FILL_BITS)
    out += _EOI
    return bytes(out)


def write_jpeg(
    path: Union[str, os.PathLike],
    pixels: PixelData,
    width: int,
    height: int,
    components: int = 3,
    quality: int = 90,
    flip_vertically: bool = False,
) -> None:
    """Encode pixels as JPEG and write them to ``path``."""
    write_file(path, encode_jpeg(pixels, width, height, components, quality, flip_vertically))