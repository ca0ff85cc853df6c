"""Cursor movement by word, by line and between rows."""

from __future__ import annotations

from brushkit.textedit.buffer import NEWLINE, TextBuffer
from brushkit.textedit.layout import find_charpos
from brushkit.textedit.selection import TextEditState


def _is_space(ch: str) -> bool:
    return ch.isspace()


def is_word_boundary(buffer: TextBuffer, index: int) -> bool:
    """True if a word starts at ``index`` (after whitespace), or at the start."""
    if index <= 0:
        return True
    return _is_space(buffer.char_at(index - 1)) and not _is_space(buffer.char_at(index))


def move_word_left(buffer: TextBuffer, cursor: int) -> int:
    """Position of the start of the word before ``cursor``."""
    cursor -= 1
    while cursor >= 0 and not is_word_boundary(buffer, cursor):
        cursor -= 1
    return max(cursor, 0)


def move_word_right(buffer: TextBuffer, cursor: int) -> int:
    """Position of the start of the word after ``cursor``, or the end of text."""
    length = len(buffer)
    cursor += 1
    while cursor < length and not is_word_boundary(buffer, cursor):
        cursor += 1
    return min(cursor, length)


def line_start(buffer: TextBuffer, cursor: int) -> int:
    """Position just after the newline preceding ``cursor``."""
    while cursor > 0 and buffer.char_at(cursor - 1) != NEWLINE:
        cursor -= 1
    return cursor


def line_end(buffer: TextBuffer, cursor: int) -> int:
    """Position of the newline ending the line of ``cursor``, or the end of text."""
    length = len(buffer)
    while cursor < length and buffer.char_at(cursor) != NEWLINE:
        cursor += 1
    return cursor


def _seek_in_row(state: TextEditState, buffer: TextBuffer, start: int, goal_x: float):
    """Place the cursor in the row starting at ``start`` nearest ``goal_x``."""
    state.cursor = start
    row = buffer.layout_row(start)
    x = row.x0
    for i in range(row.num_chars):
        if buffer.char_at(start + i) == NEWLINE:
            break
        x += buffer.char_width(start, i)
        if x > goal_x:
            break
        state.cursor += 1
    state.clamp(buffer)
    state.has_preferred_x = True
    state.preferred_x = goal_x
    return row


def move_vertical(
    state: TextEditState,
    buffer: TextBuffer,
    down: bool,
    row_count: int = 1,
    extend: bool = False,
) -> None:
    """Move the cursor ``row_count`` rows up or down, keeping its x position.

    With ``extend`` the selection grows to the new cursor; otherwise an
    existing selection collapses first.
    """
    if extend:
        state.prep_selection_at_cursor()
    elif state.has_selection():
        if down:
            state.move_to_last(buffer)
        else:
            state.move_to_first()

    state.clamp(buffer)
    find = find_charpos(buffer, state.cursor, state.single_line)

    for _ in range(row_count):
        goal_x = state.preferred_x if state.has_preferred_x else find.x
        if down:
            if find.length == 0:
                break
            if buffer.char_at(find.first_char + find.length - 1) != NEWLINE:
                break
            start = find.first_char + find.length
            row = _seek_in_row(state, buffer, start, goal_x)
            if extend:
                state.select_end = state.cursor
            find.first_char = start
            find.length = row.num_chars
        else:
            if find.prev_first == find.first_char:
                break
            _seek_in_row(state, buffer, find.prev_first, goal_x)
            if extend:
                state.select_end = state.cursor
            prev_scan = find.prev_first - 1 if find.prev_first > 0 else 0
            while prev_scan > 0 and buffer.char_at(prev_scan - 1) != NEWLINE:
                prev_scan -= 1
            find.first_char = find.prev_first
            find.prev_first = prev_scan