import pytest

from brushkit.textedit.buffer import MonospaceBuffer
from brushkit.textedit.selection import TextEditState


def _state(start, end, cursor=0):
    state = TextEditState()
    state.select_start = start
    state.select_end = end
    state.cursor = cursor
    return state


def test_initial_state():
    state = TextEditState(single_line=True)
    assert state.single_line is True
    assert (state.cursor, state.select_start, state.select_end) == (0, 0, 0)
    assert not state.has_selection()
    assert state.insert_mode is False
    assert not state.undo.can_undo()


def test_reset_clears_history_and_cursor():
    buffer = MonospaceBuffer("hello")
    state = _state(1, 3, cursor=3)
    state.delete_selection(buffer)
    assert state.undo.can_undo()
    state.reset(single_line=False)
    assert state.cursor == 0
    assert not state.has_selection()
    assert not state.undo.can_undo()
    assert state.single_line is False


def test_clamp_limits_selection_and_cursor():
    buffer = MonospaceBuffer("abc")
    state = _state(5, 9, cursor=9)
    state.clamp(buffer)
    assert state.select_start == len(buffer)
    assert state.select_end == len(buffer)
    assert state.cursor == len(buffer)


def test_clamp_keeps_valid_selection():
    buffer = MonospaceBuffer("abcdef")
    state = _state(1, 4, cursor=4)
    state.clamp(buffer)
    assert (state.select_start, state.select_end, state.cursor) == (1, 4, 4)


def test_sort_selection():
    state = _state(4, 1)
    state.sort_selection()
    assert (state.select_start, state.select_end) == (1, 4)


def test_move_to_first_and_last():
    buffer = MonospaceBuffer("abcdef")
    state = _state(5, 2, cursor=2)
    state.move_to_first()
    assert state.cursor == 2
    assert not state.has_selection()

    state = _state(5, 2, cursor=2)
    state.move_to_last(buffer)
    assert state.cursor == 5
    assert not state.has_selection()


def test_move_to_first_without_selection_is_noop():
    state = _state(2, 2, cursor=3)
    state.move_to_first()
    assert state.cursor == 3


def test_prep_selection_at_cursor():
    state = _state(0, 0, cursor=3)
    state.prep_selection_at_cursor()
    assert (state.select_start, state.select_end) == (3, 3)

    state = _state(1, 4, cursor=0)
    state.prep_selection_at_cursor()
    assert state.cursor == 4


@pytest.mark.parametrize("start,end", [(1, 4), (4, 1)])
def test_delete_selection_either_direction(start, end):
    buffer = MonospaceBuffer("hello")
    state = _state(start, end, cursor=end)
    state.has_preferred_x = True
    state.delete_selection(buffer)
    assert buffer.text() == "ho"
    assert state.cursor == 1
    assert not state.has_selection()
    assert state.has_preferred_x is False


def test_delete_selection_is_undoable():
    buffer = MonospaceBuffer("hello world")
    state = _state(5, 11, cursor=11)
    state.delete_selection(buffer)
    assert buffer.text() == "hello"
    cursor = state.undo.undo(buffer)
    assert buffer.text() == "hello world"
    assert cursor == 11
    state.undo.redo(buffer)
    assert buffer.text() == "hello"


def test_delete_without_selection_does_nothing():
    buffer = MonospaceBuffer("abc")
    state = _state(1, 1, cursor=1)
    state.delete_selection(buffer)
    assert buffer.text() == "abc"
    assert not state.undo.can_undo()


def test_delete_records_and_removes():
    buffer = MonospaceBuffer("abcdef")
    state = TextEditState()
    state.delete(buffer, 2, 2)
    assert buffer.text() == "abef"
    state.undo.undo(buffer)
    assert buffer.text() == "abcdef"


def test_delete_out_of_range_raises():
    buffer = MonospaceBuffer("ab")
    state = TextEditState()
    with pytest.raises(IndexError):
        state.delete(buffer, 1, 5)