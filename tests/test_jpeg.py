import random

import pytest

from brushkit.imaging.common import ImageWriteError
from brushkit.imaging.jpeg import encode_jpeg, forward_dct, quantization_tables, write_jpeg


def _noise(width, height, components, seed=7):
    rng = random.Random(seed)
    return bytes(rng.randrange(256) for _ in range(width * height * components))


def test_starts_with_soi_app0_and_ends_with_eoi():
    data = encode_jpeg(_noise(10, 10, 3), 10, 10, 3)
    assert data[:4] == b"\xff\xd8\xff\xe0"
    assert data[6:11] == b"JFIF\x00"
    assert data[-2:] == b"\xff\xd9"


def test_frame_header_holds_size():
    width, height = 300, 5
    data = encode_jpeg(_noise(width, height, 3), width, height, 3)
    sof = data.index(b"\xff\xc0")
    assert data[sof + 5:sof + 7] == height.to_bytes(2, "big")
    assert data[sof + 7:sof + 9] == width.to_bytes(2, "big")


@pytest.mark.parametrize("quality,factor", [(50, 0x22), (90, 0x22), (91, 0x11), (100, 0x11)])
def test_subsampling_depends_on_quality(quality, factor):
    data = encode_jpeg(_noise(4, 4, 3), 4, 4, 3, quality)
    sof = data.index(b"\xff\xc0")
    assert data[sof + 11] == factor


def test_quality_fifty_uses_base_tables():
    luma, chroma = quantization_tables(50)
    assert luma[0] == 16
    assert luma[1] == 11
    assert chroma[0] == 17


def test_quality_hundred_tables_are_all_ones():
    luma, chroma = quantization_tables(100)
    assert set(luma) == {1}
    assert set(chroma) == {1}


def test_lowest_quality_tables_are_clamped():
    luma, chroma = quantization_tables(1)
    assert set(luma) == {255}
    assert set(chroma) == {255}


def test_tables_grow_as_quality_falls():
    high_luma, high_chroma = quantization_tables(80)
    low_luma, low_chroma = quantization_tables(20)
    assert all(lo >= hi for lo, hi in zip(low_luma, high_luma))
    assert all(lo >= hi for lo, hi in zip(low_chroma, high_chroma))


def test_quality_zero_means_ninety():
    assert quantization_tables(0) == quantization_tables(90)
    pixels = _noise(9, 9, 3)
    assert encode_jpeg(pixels, 9, 9, 3, 0) == encode_jpeg(pixels, 9, 9, 3, 90)


def test_tables_are_embedded_in_output():
    luma, chroma = quantization_tables(75)
    data = encode_jpeg(_noise(8, 8, 3), 8, 8, 3, 75)
    assert data[25:89] == luma
    assert data[89] == 1
    assert data[90:154] == chroma


def test_dct_of_constant_is_pure_dc():
    values = [3.0] * 8
    result = forward_dct(values)
    assert result[0] == pytest.approx(sum(values))
    assert result[1:] == pytest.approx([0.0] * 7, abs=1e-9)


def test_dct_is_linear():
    a = [1.0, -2.0, 3.5, 0.0, 7.0, 2.0, -1.0, 4.0]
    b = [0.5, 0.5, -3.0, 2.0, 1.0, 9.0, 0.0, -6.0]
    combined = forward_dct([x + y for x, y in zip(a, b)])
    separate = [x + y for x, y in zip(forward_dct(a), forward_dct(b))]
    assert combined == pytest.approx(separate)


def test_dct_needs_eight_values():
    with pytest.raises(ValueError):
        forward_dct([1.0] * 7)


@pytest.mark.parametrize("quality", [50, 95])
@pytest.mark.parametrize("size", [(17, 9), (1, 1), (33, 20)])
def test_entropy_data_is_byte_stuffed(quality, size):
    width, height = size
    data = encode_jpeg(_noise(width, height, 3), width, height, 3, quality)
    sos = data.index(b"\xff\xda")
    entropy = data[sos + 14:-2]
    for i, byte in enumerate(entropy):
        if byte == 0xFF:
            assert entropy[i + 1] == 0
    assert data[-2:] == b"\xff\xd9"


def test_alpha_is_ignored_for_grey():
    grey = _noise(12, 7, 1)
    grey_alpha = bytes(b for g in grey for b in (g, 200))
    assert encode_jpeg(grey_alpha, 12, 7, 2) == encode_jpeg(grey, 12, 7, 1)


def test_grey_rgb_matches_single_channel():
    grey = _noise(10, 6, 1)
    rgb = bytes(b for g in grey for b in (g, g, g))
    assert encode_jpeg(rgb, 10, 6, 3) == encode_jpeg(grey, 10, 6, 1)


def test_rgba_alpha_is_ignored():
    rgb = _noise(5, 5, 3)
    rgba = b"".join(rgb[i:i + 3] + b"\x10" for i in range(0, len(rgb), 3))
    assert encode_jpeg(rgba, 5, 5, 4) == encode_jpeg(rgb, 5, 5, 3)


def test_flip_matches_reversed_rows():
    width, height = 8, 5
    pixels = _noise(width, height, 3)
    row = width * 3
    reversed_rows = b"".join(pixels[r * row:(r + 1) * row] for r in reversed(range(height)))
    assert encode_jpeg(pixels, width, height, 3, 80, True) == encode_jpeg(reversed_rows, width, height, 3, 80)


@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 3)])
def test_rejects_empty_size(width, height):
    with pytest.raises(ImageWriteError):
        encode_jpeg(b"\x00" * 64, width, height, 3)


def test_rejects_bad_components():
    with pytest.raises(ImageWriteError):
        encode_jpeg(b"\x00" * 80, 4, 4, 5)


def test_rejects_short_data():
    with pytest.raises(ImageWriteError):
        encode_jpeg(b"\x00" * 10, 4, 4, 3)


def test_write_jpeg_writes_encoded_bytes(tmp_path):
    pixels = _noise(7, 3, 3)
    target = tmp_path / "out.jpg"
    write_jpeg(target, pixels, 7, 3, 3, 60)
    assert target.read_bytes() == encode_jpeg(pixels, 7, 3, 3, 60)