import pytest

from brushkit.textedit.buffer import LayoutRow, MonospaceBuffer, TextBuffer


def test_text_buffer_is_abstract():
    with pytest.raises(TypeError):
        TextBuffer()


def test_length_and_text():
    buf = MonospaceBuffer("hello")
    assert len(buf) == len("hello")
    assert buf.text() == "hello"


def test_char_at():
    buf = MonospaceBuffer("abc")
    assert [buf.char_at(i) for i in range(len(buf))] == list("abc")


def test_char_at_out_of_range():
    buf = MonospaceBuffer("abc")
    with pytest.raises(IndexError):
        buf.char_at(3)
    with pytest.raises(IndexError):
        buf.char_at(-1)


def test_insert_and_delete_round_trip():
    buf = MonospaceBuffer("hello world")
    assert buf.insert(5, ",") is True
    assert buf.text() == "hello, world"
    buf.delete(5, 1)
    assert buf.text() == "hello world"


def test_insert_at_end():
    buf = MonospaceBuffer("ab")
    buf.insert(len(buf), ["c", "d"])
    assert buf.text() == "abcd"


def test_insert_out_of_range():
    buf = MonospaceBuffer("ab")
    with pytest.raises(IndexError):
        buf.insert(3, "x")


def test_delete_out_of_range():
    buf = MonospaceBuffer("ab")
    with pytest.raises(IndexError):
        buf.delete(1, 2)


def test_invalid_metrics():
    with pytest.raises(ValueError):
        MonospaceBuffer("x", char_width=0)


def test_layout_row_ends_after_newline():
    text = "ab\ncd"
    buf = MonospaceBuffer(text, char_width=2.0, line_height=3.0)
    row = buf.layout_row(0)
    assert row.num_chars == text.index("\n") + 1
    assert buf.char_at(row.num_chars - 1) == "\n"
    rest = buf.layout_row(row.num_chars)
    assert row.num_chars + rest.num_chars == len(text)


def test_layout_row_width_matches_char_widths():
    buf = MonospaceBuffer("abc\nxy", char_width=1.5)
    start = 0
    while start < len(buf):
        row = buf.layout_row(start)
        total = sum(buf.char_width(start, i) for i in range(row.num_chars))
        assert row.x1 - row.x0 == pytest.approx(total)
        start += row.num_chars


def test_layout_row_heights_consistent():
    buf = MonospaceBuffer("one\ntwo", line_height=4.0)
    first = buf.layout_row(0)
    second = buf.layout_row(first.num_chars)
    assert first.ymax - first.ymin == second.ymax - second.ymin
    assert first.baseline_y_delta == first.ymax - first.ymin


def test_layout_row_past_end_is_empty():
    buf = MonospaceBuffer("abc")
    assert buf.layout_row(len(buf)).num_chars == 0


def test_newline_has_no_width():
    buf = MonospaceBuffer("a\nb", char_width=3.0)
    assert buf.char_width(0, 1) == 0.0
    assert buf.char_width(0, 0) == buf.char_width(2, 0)


def test_layout_row_is_dataclass_value():
    assert LayoutRow(num_chars=2) == LayoutRow(num_chars=2)
    assert LayoutRow(num_chars=2) != LayoutRow(num_chars=3)