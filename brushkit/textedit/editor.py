"""Keyboard and mouse driven editing of a text buffer."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import IntEnum
from typing import Union

from brushkit.textedit.buffer import TextBuffer
from brushkit.textedit.layout import locate_coord
from brushkit.textedit.navigation import (
    line_end,
    line_start,
    move_vertical,
    move_word_left,
    move_word_right,
)
from brushkit.textedit.selection import TextEditState


class Key(IntEnum):
    """Editing keys; combine with ``Key.SHIFT`` to extend the selection."""

    LEFT = 0x10000
    RIGHT = 0x10001
    UP = 0x10002
    DOWN = 0x10003
    PGUP = 0x10004
    PGDOWN = 0x10005
    LINESTART = 0x10006
    LINEEND = 0x10007
    TEXTSTART = 0x10008
    TEXTEND = 0x10009
    DELETE = 0x1000A
    BACKSPACE = 0x1000B
    UNDO = 0x1000C
    REDO = 0x1000D
    INSERT = 0x1000E
    WORDLEFT = 0x1000F
    WORDRIGHT = 0x10010
    SHIFT = 0x100000


# Keys that have no meaning when shift is held.
_NO_SHIFT = frozenset({Key.UNDO, Key.REDO, Key.INSERT})


class TextEditor:
    """Maps user input on a buffer to edits, cursor moves and undo history."""

    def __init__(self, buffer: TextBuffer, single_line: bool = False):
        self.buffer = buffer
        self.state = TextEditState(single_line)
        self._actions: dict[Key, Callable[[bool], None]] = {
            Key.INSERT: self._toggle_insert,
            Key.UNDO: self._undo,
            Key.REDO: self._redo,
            Key.LEFT: self._left,
            Key.RIGHT: self._right,
            Key.WORDLEFT: self._word_left,
            Key.WORDRIGHT: self._word_right,
            Key.DOWN: lambda shift: self._vertical(True, False, shift),
            Key.PGDOWN: lambda shift: self._vertical(True, True, shift),
            Key.UP: lambda shift: self._vertical(False, False, shift),
            Key.PGUP: lambda shift: self._vertical(False, True, shift),
            Key.DELETE: self._delete,
            Key.BACKSPACE: self._backspace,
            Key.TEXTSTART: self._text_start,
            Key.TEXTEND: self._text_end,
            Key.LINESTART: self._line_start,
            Key.LINEEND: self._line_end,
        }

    def _single_line_y(self, y: float) -> float:
        # In single-line mode any y maps to the one row, so drags off the field keep working.
        if self.state.single_line:
            return self.buffer.layout_row(0).ymin
        return y

    def click(self, x: float, y: float) -> None:
        """Move the cursor to the clicked position and clear the selection."""
        state = self.state
        state.cursor = locate_coord(self.buffer, x, self._single_line_y(y))
        state.select_start = state.select_end = state.cursor
        state.has_preferred_x = False

    def drag(self, x: float, y: float) -> None:
        """Move the cursor and the selection end to the dragged position."""
        state = self.state
        y = self._single_line_y(y)
        if state.select_start == state.select_end:
            state.select_start = state.cursor
        state.cursor = state.select_end = locate_coord(self.buffer, x, y)

    def cut(self) -> bool:
        """Delete the selection; return True if there was one."""
        if not self.state.has_selection():
            return False
        self.state.delete_selection(self.buffer)
        self.state.has_preferred_x = False
        return True

    def paste(self, text: Iterable[str]) -> bool:
        """Replace the selection, or insert at the cursor, with ``text``."""
        state = self.state
        chars = list(text)
        state.clamp(self.buffer)
        state.delete_selection(self.buffer)
        if self.buffer.insert(state.cursor, chars):
            state.undo.make_insert(state.cursor, len(chars))
            state.cursor += len(chars)
            state.has_preferred_x = False
            return True
        return False

    def key(self, key: Union[Key, int, str]) -> None:
        """Handle one input: a character to type, or a ``Key`` optionally with SHIFT."""
        if isinstance(key, str):
            self._type(key)
            return
        code = int(key)
        shift = bool(code & Key.SHIFT)
        try:
            base = Key(code & ~Key.SHIFT)
        except ValueError:
            return
        action = self._actions.get(base)
        if action is None or (shift and base in _NO_SHIFT):
            return
        action(shift)

    def _type(self, ch: str) -> None:
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        state, buffer = self.state, self.buffer
        if ch == "\n" and state.single_line:
            return
        if state.insert_mode and not state.has_selection() and state.cursor < len(buffer):
            state.undo.make_replace(buffer, state.cursor, 1, 1)
            buffer.delete(state.cursor, 1)
            if buffer.insert(state.cursor, [ch]):
                state.cursor += 1
                state.has_preferred_x = False
        else:
            state.delete_selection(buffer)
            if buffer.insert(state.cursor, [ch]):
                state.undo.make_insert(state.cursor, 1)
                state.cursor += 1
                state.has_preferred_x = False

    def _toggle_insert(self, shift: bool) -> None:
        self.state.insert_mode = not self.state.insert_mode

    def _undo(self, shift: bool) -> None:
        cursor = self.state.undo.undo(self.buffer)
        if cursor is not None:
            self.state.cursor = cursor
        self.state.has_preferred_x = False

    def _redo(self, shift: bool) -> None:
        cursor = self.state.undo.redo(self.buffer)
        if cursor is not None:
            self.state.cursor = cursor
        self.state.has_preferred_x = False

    def _left(self, shift: bool) -> None:
        state = self.state
        if shift:
            state.clamp(self.buffer)
            state.prep_selection_at_cursor()
            if state.select_end > 0:
                state.select_end -= 1
            state.cursor = state.select_end
        elif state.has_selection():
            state.move_to_first()
        elif state.cursor > 0:
            state.cursor -= 1
        state.has_preferred_x = False

    def _right(self, shift: bool) -> None:
        state = self.state
        if shift:
            state.prep_selection_at_cursor()
            state.select_end += 1
            state.clamp(self.buffer)
            state.cursor = state.select_end
        else:
            if state.has_selection():
                state.move_to_last(self.buffer)
            else:
                state.cursor += 1
            state.clamp(self.buffer)
        state.has_preferred_x = False

    def _word(self, shift: bool, mover: Callable[[TextBuffer, int], int], to_last: bool) -> None:
        state = self.state
        if shift:
            if not state.has_selection():
                state.prep_selection_at_cursor()
            state.cursor = mover(self.buffer, state.cursor)
            state.select_end = state.cursor
            state.clamp(self.buffer)
        elif state.has_selection():
            if to_last:
                state.move_to_last(self.buffer)
            else:
                state.move_to_first()
        else:
            state.cursor = mover(self.buffer, state.cursor)
            state.clamp(self.buffer)

    def _word_left(self, shift: bool) -> None:
        self._word(shift, move_word_left, False)

    def _word_right(self, shift: bool) -> None:
        self._word(shift, move_word_right, True)

    def _vertical(self, down: bool, page: bool, shift: bool) -> None:
        state = self.state
        if not page and state.single_line:
            # Up and down in a single-line field behave like left and right.
            if down:
                self._right(shift)
            else:
                self._left(shift)
            return
        row_count = state.row_count_per_page if page else 1
        move_vertical(state, self.buffer, down, row_count, shift)

    def _delete(self, shift: bool) -> None:
        state = self.state
        if state.has_selection():
            state.delete_selection(self.buffer)
        elif state.cursor < len(self.buffer):
            state.delete(self.buffer, state.cursor, 1)
        state.has_preferred_x = False

    def _backspace(self, shift: bool) -> None:
        state = self.state
        if state.has_selection():
            state.delete_selection(self.buffer)
        else:
            state.clamp(self.buffer)
            if state.cursor > 0:
                state.delete(self.buffer, state.cursor - 1, 1)
                state.cursor -= 1
        state.has_preferred_x = False

    def _text_start(self, shift: bool) -> None:
        state = self.state
        if shift:
            state.prep_selection_at_cursor()
            state.cursor = state.select_end = 0
        else:
            state.cursor = state.select_start = state.select_end = 0
        state.has_preferred_x = False

    def _text_end(self, shift: bool) -> None:
        state = self.state
        n = len(self.buffer)
        if shift:
            state.prep_selection_at_cursor()
            state.cursor = state.select_end = n
        else:
            state.cursor = n
            state.select_start = state.select_end = 0
        state.has_preferred_x = False

    def _line_start(self, shift: bool) -> None:
        state = self.state
        state.clamp(self.buffer)
        if shift:
            state.prep_selection_at_cursor()
        else:
            state.move_to_first()
        state.cursor = 0 if state.single_line else line_start(self.buffer, state.cursor)
        if shift:
            state.select_end = state.cursor
        state.has_preferred_x = False

    def _line_end(self, shift: bool) -> None:
        state = self.state
        n = len(self.buffer)
        state.clamp(self.buffer)
        if shift:
            state.prep_selection_at_cursor()
        else:
            state.move_to_first()
        state.cursor = n if state.single_line else line_end(self.buffer, state.cursor)
        if shift:
            state.select_end = state.cursor
        state.has_preferred_x = False