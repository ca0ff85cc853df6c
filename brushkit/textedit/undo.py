"""Bounded undo/redo history for text edits, stored in fixed-size tables."""

from __future__ import annotations

from dataclasses import dataclass, replace

from brushkit.textedit.buffer import TextBuffer

DEFAULT_MAX_RECORDS = 99
DEFAULT_MAX_CHARS = 999


@dataclass(frozen=True)
class UndoRecord:
    """One reversible edit: at ``where``, insert stored characters and delete others."""

    where: int = 0
    insert_length: int = 0
    delete_length: int = 0
    char_storage: int = 0


class UndoStack:
    """Undo records grow from the front of the tables, redo records from the back."""

    def __init__(self, max_records: int = DEFAULT_MAX_RECORDS, max_chars: int = DEFAULT_MAX_CHARS):
        if max_records <= 0 or max_chars <= 0:
            raise ValueError("max_records and max_chars must be positive")
        self.max_records = max_records
        self.max_chars = max_chars
        self.records: list[UndoRecord] = [UndoRecord()] * max_records
        self.chars: list[str] = [""] * max_chars
        self.clear()

    def clear(self) -> None:
        """Forget all undo and redo history."""
        self.undo_point = 0
        self.undo_char_point = 0
        self.redo_point = self.max_records
        self.redo_char_point = self.max_chars

    def flush_redo(self) -> None:
        """Discard all redo history."""
        self.redo_point = self.max_records
        self.redo_char_point = self.max_chars

    def can_undo(self) -> bool:
        return self.undo_point > 0

    def can_redo(self) -> bool:
        return self.redo_point < self.max_records

    def _discard_undo(self) -> None:
        if self.undo_point <= 0:
            return
        oldest = self.records[0]
        if oldest.char_storage >= 0:
            n = oldest.insert_length
            self.undo_char_point -= n
            self.chars[0:self.undo_char_point] = self.chars[n:n + self.undo_char_point]
            for i in range(self.undo_point):
                record = self.records[i]
                if record.char_storage >= 0:
                    self.records[i] = replace(record, char_storage=record.char_storage - n)
        self.undo_point -= 1
        self.records[0:self.undo_point] = self.records[1:self.undo_point + 1]

    def _discard_redo(self) -> None:
        last = self.max_records - 1
        if self.redo_point > last:
            return
        oldest = self.records[last]
        if oldest.char_storage >= 0:
            n = oldest.insert_length
            self.redo_char_point += n
            point = self.redo_char_point
            self.chars[point:self.max_chars] = self.chars[point - n:self.max_chars - n]
            for i in range(self.redo_point, last):
                record = self.records[i]
                if record.char_storage >= 0:
                    self.records[i] = replace(record, char_storage=record.char_storage + n)
        start = self.redo_point
        self.records[start + 1:last + 1] = self.records[start:last]
        self.redo_point += 1

    def _create_record(self, numchars: int) -> int | None:
        self.flush_redo()
        if self.undo_point == self.max_records:
            self._discard_undo()
        if numchars > self.max_chars:
            self.undo_point = 0
            self.undo_char_point = 0
            return None
        while self.undo_char_point + numchars > self.max_chars:
            self._discard_undo()
        index = self.undo_point
        self.undo_point += 1
        return index

    def _create_undo(self, where: int, insert_length: int, delete_length: int) -> int | None:
        """Add a record; return where its saved characters go, or None if none are saved."""
        index = self._create_record(insert_length)
        if index is None:
            return None
        if insert_length == 0:
            self.records[index] = UndoRecord(where, 0, delete_length, -1)
            return None
        storage = self.undo_char_point
        self.records[index] = UndoRecord(where, insert_length, delete_length, storage)
        self.undo_char_point += insert_length
        return storage

    def _save_chars(self, buffer: TextBuffer, storage: int, where: int, length: int) -> None:
        self.chars[storage:storage + length] = [buffer.char_at(where + i) for i in range(length)]

    def make_insert(self, where: int, length: int) -> None:
        """Record that ``length`` characters were inserted at ``where``."""
        self._create_undo(where, 0, length)

    def make_delete(self, buffer: TextBuffer, where: int, length: int) -> None:
        """Record a deletion; call before the characters are removed from ``buffer``."""
        storage = self._create_undo(where, length, 0)
        if storage is not None:
            self._save_chars(buffer, storage, where, length)

    def make_replace(self, buffer: TextBuffer, where: int, old_length: int, new_length: int) -> None:
        """Record a replacement; call before the old characters are removed."""
        storage = self._create_undo(where, old_length, new_length)
        if storage is not None:
            self._save_chars(buffer, storage, where, old_length)

    def undo(self, buffer: TextBuffer) -> int | None:
        """Revert the latest edit in ``buffer``; return the new cursor, or None."""
        if self.undo_point == 0:
            return None
        done = self.records[self.undo_point - 1]
        slot = self.redo_point - 1
        redo = UndoRecord(done.where, done.delete_length, done.insert_length, -1)
        self.records[slot] = redo

        if done.delete_length:
            if self.undo_char_point + done.delete_length >= self.max_chars:
                self.records[slot] = replace(redo, insert_length=0)
            else:
                while self.undo_char_point + done.delete_length > self.redo_char_point:
                    if self.redo_point == self.max_records:
                        return None
                    self._discard_redo()
                slot = self.redo_point - 1
                storage = self.redo_char_point - done.delete_length
                self.redo_char_point = storage
                self.records[slot] = replace(redo, char_storage=storage)
                self._save_chars(buffer, storage, done.where, done.delete_length)
            buffer.delete(done.where, done.delete_length)

        if done.insert_length:
            start = done.char_storage
            buffer.insert(done.where, self.chars[start:start + done.insert_length])
            self.undo_char_point -= done.insert_length

        self.undo_point -= 1
        self.redo_point -= 1
        return done.where + done.insert_length

    def redo(self, buffer: TextBuffer) -> int | None:
        """Reapply the latest undone edit in ``buffer``; return the new cursor, or None."""
        if self.redo_point == self.max_records:
            return None
        slot = self.undo_point
        pending = self.records[self.redo_point]
        undo = UndoRecord(pending.where, pending.delete_length, pending.insert_length, -1)

        if pending.delete_length:
            if self.undo_char_point + undo.insert_length > self.redo_char_point:
                undo = replace(undo, insert_length=0, delete_length=0)
            else:
                storage = self.undo_char_point
                self.undo_char_point += undo.insert_length
                undo = replace(undo, char_storage=storage)
                self._save_chars(buffer, storage, undo.where, undo.insert_length)
            buffer.delete(pending.where, pending.delete_length)
        self.records[slot] = undo

        if pending.insert_length:
            start = pending.char_storage
            buffer.insert(pending.where, self.chars[start:start + pending.insert_length])
            self.redo_char_point += pending.insert_length

        self.undo_point += 1
        self.redo_point += 1
        return pending.where + pending.insert_length