# brushkit

brushkit is a small library with no dependencies. It has two parts.

- `brushkit.imaging` encodes 8-bit pixel buffers as PNG, BMP, TGA and baseline
  JPEG, and float buffers as Radiance HDR. The PNG encoder uses its own
  deflate compressor.
- `brushkit.textedit` is the engine of a multi-line or single-line text field.
  You supply the text storage and its layout. The engine turns clicks, drags
  and key presses into edits, cursor moves, selection changes, and undo and
  redo.

## Installation

```
pip install .
```

## Writing images

Pixels are a flat bytes-like sequence, left to right and top to bottom. Each
pixel holds `components` channels: 1 = Y, 2 = YA, 3 = RGB, 4 = RGBA.

```python
from brushkit.imaging.png import encode_png, write_png
from brushkit.imaging.bmp_tga import write_bmp, write_tga
from brushkit.imaging.jpeg import write_jpeg
from brushkit.imaging.hdr import write_hdr

width, height = 2, 2
rgb = bytes([255, 0, 0,   0, 255, 0,
             0, 0, 255,   255, 255, 255])

data = encode_png(rgb, width, height, 3)   # PNG file contents as bytes
write_png("out.png", rgb, width, height, 3)
write_bmp("out.bmp", rgb, width, height, 3)
write_tga("out.tga", rgb, width, height, 3, rle=True)
write_jpeg("out.jpg", rgb, width, height, 3, quality=90)

floats = [0.5, 1.0, 2.0] * (width * height)
write_hdr("out.hdr", floats, width, height, 3)
```

Each `write_*` function has an `encode_*` counterpart that returns the file
contents as bytes: `encode_png`, `encode_bmp`, `encode_tga`, `encode_jpeg`,
`encode_hdr`.

Format notes:

- PNG: `stride` gives the bytes between row starts (0 means tightly packed),
  `compression_level` bounds the match search of the compressor (default 8),
  and `force_filter` of 0 to 4 forces one filter on every row; otherwise each
  row picks the filter with the lowest estimated cost.
- BMP: images without alpha become 24-bit BGR (grey is expanded, grey alpha is
  dropped); RGBA images become 32-bit bitmaps with a V4 header.
- TGA: run-length encoded unless `rle=False`.
- JPEG: alpha is ignored. Quality 0 means 90; other values are clamped to
  1..100. Up to quality 90 the chroma channels are subsampled 2x2.
- HDR: takes floats; alpha is dropped and grey is copied into all three
  channels.

Every writer takes `flip_vertically`, which writes the rows in the reverse of
the format's usual order. When the parameters are invalid, or the file cannot
be written, the writers raise `brushkit.imaging.common.ImageWriteError`.

Lower-level helpers:

- `brushkit.imaging.deflate`: `zlib_compress`, `adler32`, `crc32`.
- `brushkit.imaging.png`: `paeth`.
- `brushkit.imaging.jpeg`: `quantization_tables`, `forward_dct`.
- `brushkit.imaging.hdr`: `linear_to_rgbe`.
- `brushkit.imaging.common`: `check_image`, `iter_rows`, `write_file`.

## Editing text

```python
from brushkit.textedit.buffer import MonospaceBuffer
from brushkit.textedit.editor import TextEditor, Key

buffer = MonospaceBuffer("hello\nworld", char_width=8.0, line_height=16.0)
editor = TextEditor(buffer, single_line=False)

editor.click(0, 20)            # put the cursor at the start of the second line
editor.key(Key.LINEEND)        # jump to the end of that line
editor.paste("!")
editor.key(Key.UNDO)
print(buffer.text())           # "hello\nworld"
```

`TextEditor.key` takes either a single character to type or a `Key` value.
Combine a key with `Key.SHIFT` (for example `Key.LEFT | Key.SHIFT`) to extend
the selection. `Key.INSERT` toggles overwrite mode. `Key.PGUP` and
`Key.PGDOWN` move by `editor.state.row_count_per_page` rows, which is 0 until
you set it. In a single-line editor, newlines are not typed and up and down
act like left and right.

`TextEditor.click` and `TextEditor.drag` place the cursor and selection from
display coordinates; `TextEditor.cut` deletes the selection and
`TextEditor.paste` replaces it.

To use your own text storage and measurement, subclass
`brushkit.textedit.buffer.TextBuffer` and return a `LayoutRow` for each
displayed row. Other building blocks:

- `brushkit.textedit.undo.UndoStack`: bounded undo and redo history
  (99 records and 999 characters by default).
- `brushkit.textedit.selection.TextEditState`: cursor, selection, insert mode
  and the undo history of one field.
- `brushkit.textedit.layout`: `locate_coord` and `find_charpos`.
- `brushkit.textedit.navigation`: `move_word_left`, `move_word_right`,
  `line_start`, `line_end`, `move_vertical`.

## What brushkit does not do

brushkit only writes images; it does not read or decode them, and it does not
draw anything on screen. The text-editing engine does not render text,
measure fonts or listen for input events: your code passes it the positions
and keys, and draws the buffer and cursor itself. Copying a selection to a
clipboard is also left to you.

## Running the tests

```
pip install .[test]
pytest
```