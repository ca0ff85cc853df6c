"""Cursor, selection and undo state of one text field."""

from __future__ import annotations

from brushkit.textedit.buffer import TextBuffer
from brushkit.textedit.undo import UndoStack


class TextEditState:
    """Cursor position, selection range, insert mode and undo history.

    ``select_start`` may be greater than ``select_end``; the selection is
    empty when they are equal.
    """

    def __init__(self, single_line: bool = False):
        self.undo = UndoStack()
        self.reset(single_line)

    def reset(self, single_line: bool = False) -> None:
        """Return to the initial state, forgetting all history."""
        self.undo.clear()
        self.select_start = 0
        self.select_end = 0
        self.cursor = 0
        self.has_preferred_x = False
        self.preferred_x = 0.0
        self.cursor_at_end_of_line = False
        self.initialized = True
        self.single_line = bool(single_line)
        self.insert_mode = False
        self.row_count_per_page = 0

    def has_selection(self) -> bool:
        return self.select_start != self.select_end

    def clamp(self, buffer: TextBuffer) -> None:
        """Keep cursor and selection inside ``buffer`` after outside edits."""
        n = len(buffer)
        if self.has_selection():
            self.select_start = min(self.select_start, n)
            self.select_end = min(self.select_end, n)
            if self.select_start == self.select_end:
                self.cursor = self.select_start
        self.cursor = min(self.cursor, n)

    def sort_selection(self) -> None:
        """Order the selection so that start <= end."""
        if self.select_end < self.select_start:
            self.select_start, self.select_end = self.select_end, self.select_start

    def move_to_first(self) -> None:
        """Collapse the selection onto its first character."""
        if self.has_selection():
            self.sort_selection()
            self.cursor = self.select_start
            self.select_end = self.select_start
            self.has_preferred_x = False

    def move_to_last(self, buffer: TextBuffer) -> None:
        """Collapse the selection onto its end."""
        if self.has_selection():
            self.sort_selection()
            self.clamp(buffer)
            self.cursor = self.select_end
            self.select_start = self.select_end
            self.has_preferred_x = False

    def prep_selection_at_cursor(self) -> None:
        """Start a selection at the cursor, or move the cursor to the selection end."""
        if not self.has_selection():
            self.select_start = self.select_end = self.cursor
        else:
            self.cursor = self.select_end

    def delete(self, buffer: TextBuffer, where: int, length: int) -> None:
        """Delete characters from ``buffer``, recording the edit for undo."""
        self.undo.make_delete(buffer, where, length)
        buffer.delete(where, length)
        self.has_preferred_x = False

    def delete_selection(self, buffer: TextBuffer) -> None:
        """Delete the selected characters and collapse the selection."""
        self.clamp(buffer)
        if not self.has_selection():
            return
        if self.select_start < self.select_end:
            self.delete(buffer, self.select_start, self.select_end - self.select_start)
            self.select_end = self.cursor = self.select_start
        else:
            self.delete(buffer, self.select_end, self.select_start - self.select_end)
            self.select_start = self.cursor = self.select_end
        self.has_preferred_x = False