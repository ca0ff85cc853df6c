"""Compact zlib stream compressor with fixed Huffman codes, plus checksums."""

from __future__ import annotations

import zlib
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

_HASH_SIZE = 16384
_WINDOW = 32768
_MAX_MATCH = 258

_LENGTH_BASE = (
    3, 4, 5, 6, 7, 8, 9, 10, 11, 13, 15, 17, 19, 23, 27, 31, 35, 43, 51, 59,
    67, 83, 99, 115, 131, 163, 195, 227, 258, 259,
)
_LENGTH_EXTRA = (
    0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4,
    5, 5, 5, 5, 0,
)
_DIST_BASE = (
    1, 2, 3, 4, 5, 7, 9, 13, 17, 25, 33, 49, 65, 97, 129, 193, 257, 385, 513,
    769, 1025, 1537, 2049, 3073, 4097, 6145, 8193, 12289, 16385, 24577, 32768,
)
_DIST_EXTRA = (
    0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8, 9, 9, 10, 10,
    11, 11, 12, 12, 13, 13,
)

_MASK32 = 0xFFFFFFFF


def _bit_reverse(code: int, bits: int) -> int:
    result = 0
    for _ in range(bits):
        result = (result << 1) | (code & 1)
        code >>= 1
    return result


class _BitWriter:
    """Least-significant-bit-first bit packer over a growing byte array."""

    def __init__(self, prefix: bytes = b"") -> None:
        self.out = bytearray(prefix)
        self._buffer = 0
        self._count = 0

    def add(self, code: int, bits: int) -> None:
        self._buffer |= code << self._count
        self._count += bits
        while self._count >= 8:
            self.out.append(self._buffer & 0xFF)
            self._buffer >>= 8
            self._count -= 8

    def add_reversed(self, code: int, bits: int) -> None:
        self.add(_bit_reverse(code, bits), bits)

    def huffman(self, symbol: int) -> None:
        """Emit a literal/length symbol with the fixed Huffman table."""
        if symbol <= 143:
            self.add_reversed(0x30 + symbol, 8)
        elif symbol <= 255:
            self.add_reversed(0x190 + symbol - 144, 9)
        elif symbol <= 279:
            self.add_reversed(symbol - 256, 7)
        else:
            self.add_reversed(0xC0 + symbol - 280, 8)

    def pad_to_byte(self) -> None:
        while self._count:
            self.add(0, 1)


def _hash3(data: bytes, pos: int) -> int:
    value = data[pos] + (data[pos + 1] << 8) + (data[pos + 2] << 16)
    value = (value ^ (value << 3)) & _MASK32
    value = (value + (value >> 5)) & _MASK32
    value = (value ^ (value << 4)) & _MASK32
    value = (value + (value >> 17)) & _MASK32
    value = (value ^ (value << 25)) & _MASK32
    value = (value + (value >> 6)) & _MASK32
    return value & (_HASH_SIZE - 1)


def _match_length(data: bytes, a: int, b: int, limit: int) -> int:
    limit = min(limit, _MAX_MATCH)
    count = 0
    while count < limit and data[a + count] == data[b + count]:
        count += 1
    return count


def adler32(data: BytesLike) -> int:
    """Adler-32 checksum of ``data``."""
    data = bytes(data)
    s1, s2 = 1, 0
    block = len(data) % 5552
    start = 0
    while start < len(data):
        for byte in data[start:start + block]:
            s1 += byte
            s2 += s1
        s1 %= 65521
        s2 %= 65521
        start += block
        block = 5552
    return (s2 << 16) | s1


def crc32(data: BytesLike) -> int:
    """CRC-32 checksum of ``data`` as used by PNG chunks."""
    return zlib.crc32(bytes(data)) & _MASK32


def zlib_compress(data: BytesLike, quality: int = 8) -> bytes:
    """Compress ``data`` into a zlib stream.

    ``quality`` bounds the hash chain length (minimum 5). If the fixed-Huffman
    stream would be larger than storing the data, stored blocks are used.
    """
    data = bytes(data)
    length = len(data)
    quality = max(quality, 5)

    writer = _BitWriter(b"\x78\x5e")
    writer.add(1, 1)  # final block
    writer.add(1, 2)  # fixed Huffman

    table: dict[int, list[int]] = {}
    i = 0
    while i < length - 3:
        bucket = _hash3(data, i)
        best = 3
        best_pos: int | None = None
        chain = table.get(bucket, [])
        for pos in chain:
            if pos > i - _WINDOW:
                found = _match_length(data, pos, i, length - i)
                if found >= best:
                    best = found
                    best_pos = pos
        if len(chain) == 2 * quality:
            del chain[:quality]
        chain.append(i)
        table[bucket] = chain

        if best_pos is not None:
            # lazy matching: prefer a literal if the next position matches longer
            for pos in table.get(_hash3(data, i + 1), []):
                if pos > i - (_WINDOW - 1):
                    if _match_length(data, pos, i + 1, length - i - 1) > best:
                        best_pos = None
                        break

        if best_pos is not None:
            distance = i - best_pos
            code = 0
            while best > _LENGTH_BASE[code + 1] - 1:
                code += 1
            writer.huffman(code + 257)
            if _LENGTH_EXTRA[code]:
                writer.add(best - _LENGTH_BASE[code], _LENGTH_EXTRA[code])
            code = 0
            while distance > _DIST_BASE[code + 1] - 1:
                code += 1
            writer.add_reversed(code, 5)
            if _DIST_EXTRA[code]:
                writer.add(distance - _DIST_BASE[code], _DIST_EXTRA[code])
            i += best
        else:
            writer.huffman(data[i])
            i += 1

    for byte in data[i:]:
        writer.huffman(byte)
    writer.huffman(256)
    writer.pad_to_byte()

    out = writer.out
    if len(out) > length + 2 + ((length + 32766) // 32767) * 5:
        del out[2:]
        start = 0
        while start < length:
            block = min(length - start, 32767)
            out.append(1 if length - start == block else 0)
            out += block.to_bytes(2, "little")
            out += (~block & 0xFFFF).to_bytes(2, "little")
            out += data[start:start + block]
            start += block

    out += adler32(data).to_bytes(4, "big")
    return bytes(out)