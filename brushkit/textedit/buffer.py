"""Text storage and layout interface used by the text editing engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

NEWLINE = "\n"


@dataclass
class LayoutRow:
    """Shape of one displayed row of characters."""

    x0: float = 0.0
    x1: float = 0.0
    baseline_y_delta: float = 0.0
    ymin: float = 0.0
    ymax: float = 0.0
    num_chars: int = 0


class TextBuffer(ABC):
    """A string being edited, together with its layout."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of characters in the buffer."""

    @abstractmethod
    def char_at(self, index: int) -> str:
        """Return the character at ``index``."""

    @abstractmethod
    def delete(self, index: int, count: int) -> None:
        """Remove ``count`` characters starting at ``index``."""

    @abstractmethod
    def insert(self, index: int, chars: Iterable[str]) -> bool:
        """Insert characters at ``index``; return False if they do not fit."""

    @abstractmethod
    def layout_row(self, start: int) -> LayoutRow:
        """Lay out one row of characters beginning at ``start``."""

    @abstractmethod
    def char_width(self, row_start: int, index: int) -> float:
        """Width of the ``index``-th character of the row starting at ``row_start``."""


class MonospaceBuffer(TextBuffer):
    """A list-backed buffer where every character has the same width.

    Rows break after each newline; the newline itself has no width.
    """

    def __init__(self, text: str = "", char_width: float = 1.0, line_height: float = 1.0):
        if char_width <= 0 or line_height <= 0:
            raise ValueError("char_width and line_height must be positive")
        self._chars = list(text)
        self._char_width = float(char_width)
        self._line_height = float(line_height)

    def __len__(self) -> int:
        return len(self._chars)

    def char_at(self, index: int) -> str:
        if not 0 <= index < len(self._chars):
            raise IndexError(f"character index {index} out of range")
        return self._chars[index]

    def delete(self, index: int, count: int) -> None:
        if count < 0 or index < 0 or index + count > len(self._chars):
            raise IndexError(f"cannot delete {count} characters at {index}")
        del self._chars[index:index + count]

    def insert(self, index: int, chars: Iterable[str]) -> bool:
        if not 0 <= index <= len(self._chars):
            raise IndexError(f"insert position {index} out of range")
        self._chars[index:index] = list(chars)
        return True

    def layout_row(self, start: int) -> LayoutRow:
        try:
            end = self._chars.index(NEWLINE, start) + 1
            visible = end - start - 1
        except ValueError:
            end = len(self._chars)
            visible = end - start
        num_chars = max(end - start, 0)
        return LayoutRow(
            x0=0.0,
            x1=max(visible, 0) * self._char_width,
            baseline_y_delta=self._line_height,
            ymin=0.0,
            ymax=self._line_height,
            num_chars=num_chars,
        )

    def char_width(self, row_start: int, index: int) -> float:
        if self.char_at(row_start + index) == NEWLINE:
            return 0.0
        return self._char_width

    def text(self) -> str:
        """The buffer contents as a string."""
        return "".join(self._chars)