"""Mapping between display coordinates and character positions."""

from __future__ import annotations

from dataclasses import dataclass

from brushkit.textedit.buffer import NEWLINE, LayoutRow, TextBuffer


@dataclass
class CharPosition:
    """Where a character is displayed, and which rows surround it."""

    x: float = 0.0
    y: float = 0.0
    height: float = 0.0
    first_char: int = 0
    length: int = 0
    prev_first: int = 0


def locate_coord(buffer: TextBuffer, x: float, y: float) -> int:
    """Return the character index nearest to display position ``(x, y)``."""
    n = len(buffer)
    base_y = 0.0
    i = 0
    row = LayoutRow()

    while i < n:
        row = buffer.layout_row(i)
        if row.num_chars <= 0:
            return n
        if i == 0 and y < base_y + row.ymin:
            return 0
        if y < base_y + row.ymax:
            break
        i += row.num_chars
        base_y += row.baseline_y_delta

    if i >= n:
        return n

    if x < row.x0:
        return i

    if x < row.x1:
        prev_x = row.x0
        for k in range(row.num_chars):
            w = buffer.char_width(i, k)
            if x < prev_x + w:
                return i + k if x < prev_x + w / 2 else i + k + 1
            prev_x += w

    last = i + row.num_chars - 1
    if buffer.char_at(last) == NEWLINE:
        return last
    return i + row.num_chars


def find_charpos(buffer: TextBuffer, index: int, single_line: bool = False) -> CharPosition:
    """Find where character ``index`` is displayed and the start of its previous row."""
    z = len(buffer)

    if index == z and single_line:
        row = buffer.layout_row(0)
        return CharPosition(
            x=row.x1, y=0.0, height=row.ymax - row.ymin,
            first_char=0, length=z, prev_first=0,
        )

    prev_start = 0
    i = 0
    y = 0.0
    while True:
        row = buffer.layout_row(i)
        length = row.num_chars
        if index < i + length:
            break
        if i + length == z and z > 0 and buffer.char_at(z - 1) != NEWLINE:
            break
        prev_start = i
        i += length
        y += row.baseline_y_delta
        if i == z:
            length = 0
            break

    first = i
    x = row.x0 + sum(buffer.char_width(first, k) for k in range(index - first))
    return CharPosition(
        x=x, y=y, height=row.ymax - row.ymin,
        first_char=first, length=length, prev_first=prev_start,
    )