import pytest

from brushkit.textedit.buffer import MonospaceBuffer
from brushkit.textedit.layout import CharPosition, find_charpos, locate_coord

CHAR_WIDTH = 10.0
LINE_HEIGHT = 20.0


def _buffer(text):
    return MonospaceBuffer(text, char_width=CHAR_WIDTH, line_height=LINE_HEIGHT)


@pytest.mark.parametrize("text", ["ab\ncd", "ab\n", "hello", "a\n\nbc\nd", "x\ny\nz\n"])
def test_charpos_locate_round_trip(text):
    buf = _buffer(text)
    for index in range(len(text) + 1):
        pos = find_charpos(buf, index, False)
        assert locate_coord(buf, pos.x, pos.y + LINE_HEIGHT / 2) == index


def test_row_start_and_length():
    text = "ab\ncd"
    buf = _buffer(text)
    second_row = text.index("\n") + 1
    pos = find_charpos(buf, second_row, False)
    assert pos.first_char == second_row
    assert pos.length == len(text) - second_row
    assert pos.prev_first == 0
    assert pos.y == LINE_HEIGHT
    assert pos.height == LINE_HEIGHT


def test_prev_first_on_third_row():
    text = "a\nb\nc"
    buf = _buffer(text)
    third_row = text.rindex("\n") + 1
    pos = find_charpos(buf, third_row, False)
    assert pos.first_char == third_row
    assert pos.prev_first == text.index("\n") + 1
    assert pos.y == 2 * LINE_HEIGHT


def test_x_grows_by_char_width_within_row():
    buf = _buffer("hello")
    xs = [find_charpos(buf, i, False).x for i in range(6)]
    assert xs == [i * CHAR_WIDTH for i in range(6)]


def test_single_line_end_special_case():
    text = "abc"
    buf = _buffer(text)
    pos = find_charpos(buf, len(text), True)
    assert pos == CharPosition(
        x=len(text) * CHAR_WIDTH, y=0.0, height=LINE_HEIGHT,
        first_char=0, length=len(text), prev_first=0,
    )


def test_trailing_newline_gives_empty_last_row():
    text = "ab\n"
    buf = _buffer(text)
    pos = find_charpos(buf, len(text), False)
    assert pos.first_char == len(text)
    assert pos.length == 0
    assert pos.x == 0.0


def test_empty_buffer():
    buf = _buffer("")
    assert locate_coord(buf, 5.0, 5.0) == 0
    pos = find_charpos(buf, 0, False)
    assert pos.first_char == 0
    assert pos.length == 0


def test_locate_above_text_is_start():
    buf = _buffer("ab\ncd")
    assert locate_coord(buf, 15.0, -1.0) == 0


def test_locate_below_text_is_end():
    text = "ab\ncd"
    buf = _buffer(text)
    assert locate_coord(buf, 0.0, 10 * LINE_HEIGHT) == len(text)


def test_locate_left_of_row_is_row_start():
    text = "ab\ncd"
    buf = _buffer(text)
    assert locate_coord(buf, -5.0, LINE_HEIGHT * 1.5) == text.index("\n") + 1


def test_locate_past_row_end_stops_before_newline():
    text = "ab\ncd"
    buf = _buffer(text)
    assert locate_coord(buf, 100 * CHAR_WIDTH, 1.0) == text.index("\n")


def test_locate_past_last_row_end_is_text_end():
    text = "ab\ncd"
    buf = _buffer(text)
    assert locate_coord(buf, 100 * CHAR_WIDTH, LINE_HEIGHT * 1.5) == len(text)


def test_locate_rounds_to_nearest_boundary():
    buf = _buffer("abcd")
    assert locate_coord(buf, CHAR_WIDTH * 1.4, 1.0) == 1
    assert locate_coord(buf, CHAR_WIDTH * 1.6, 1.0) == 2