import numpy as np
import pytest

from img2bytes.packing import pack, pack_mono, unpack_bytes
from img2bytes.quantization import QuantizedBuffer, quantize
from models import (
    ColorMode,
    DrawMode,
    GrayscaleTarget,
    MonoTarget,
    Rgb565Target,
    Rgb888Target,
    expected_byte_count,
)


@pytest.fixture
def ten_by_two():
    """Row 0 fully lit, row 1 only the leftmost pixel."""
    bits = np.zeros((2, 10), dtype=bool)
    bits[0, :] = True
    bits[1, 0] = True
    return bits


def test_horizontal_is_msb_first_with_zero_padding(ten_by_two):
    assert pack_mono(ten_by_two, DrawMode.HORIZONTAL) == bytes([0xFF, 0xC0, 0x80, 0x00])


def test_vertical_packs_columns_top_down(ten_by_two):
    # Transposed image: column 0 fully lit, column 1 only the top pixel
    assert pack_mono(ten_by_two.T, DrawMode.VERTICAL) == bytes([0xFF, 0xC0, 0x80, 0x00])


def test_vertical_single_byte_columns():
    bits = np.zeros((8, 3), dtype=bool)
    bits[0, 0] = True  # top of column 0
    bits[7, 2] = True  # bottom of column 2
    assert pack_mono(bits, DrawMode.VERTICAL) == bytes([0x80, 0x00, 0x01])


def test_pack_mono_buffer_keeps_draw_mode(ten_by_two):
    buffer = QuantizedBuffer(values=ten_by_two, target=MonoTarget(draw_mode=DrawMode.VERTICAL))
    result = pack(buffer)
    assert result.draw_mode == DrawMode.VERTICAL
    assert result.color_mode == ColorMode.MONO
    assert (result.width, result.height) == (10, 2)
    assert result.total_bytes == 10


def test_rgb565_is_big_endian():
    values = np.array([[0xF800, 0x001F]], dtype=np.uint16)
    result = pack(QuantizedBuffer(values=values, target=Rgb565Target()))
    assert result.data == b"\xF8\x00\x00\x1F"
    assert result.draw_mode == DrawMode.HORIZONTAL


def test_rgb888_is_raster_rgb():
    values = np.array([[[1, 2, 3], [4, 5, 6]], [[7, 8, 9], [10, 11, 12]]], dtype=np.uint8)
    result = pack(QuantizedBuffer(values=values, target=Rgb888Target()))
    assert result.data == bytes(range(1, 13))


def test_grayscale_is_raster_order():
    values = np.array([[0, 1], [2, 3]], dtype=np.uint8)
    assert pack(QuantizedBuffer(values=values, target=GrayscaleTarget())).data == b"\x00\x01\x02\x03"


@pytest.mark.parametrize(
    "target",
    [
        MonoTarget(),
        MonoTarget(draw_mode=DrawMode.VERTICAL),
        GrayscaleTarget(),
        Rgb565Target(),
        Rgb888Target(),
    ],
)
@pytest.mark.parametrize("width, height", [(13, 5), (8, 8), (1, 9)])
def test_size_matches_formula(noise, target, width, height):
    pixels = np.resize(noise.pixels, (height, width, 4))
    result = pack(quantize(pixels, target))
    draw_mode = getattr(target, "draw_mode", DrawMode.HORIZONTAL)
    assert result.total_bytes == expected_byte_count(width, height, target.color_mode, draw_mode)


class TestUnpack:
    @pytest.mark.parametrize("draw_mode", list(DrawMode))
    def test_mono_renders_lit_bits_white(self, draw_mode):
        rng = np.random.default_rng(7)
        bits = rng.random((11, 13)) > 0.5
        data = pack_mono(bits, draw_mode)

        image = unpack_bytes(data, 13, 11, ColorMode.MONO, draw_mode)
        assert image.shape == (11, 13, 4)
        assert np.array_equal(image[..., 0] == 255, bits)
        assert np.all(image[..., 3] == 255)

    def test_rgb565_expands_channels(self):
        image = unpack_bytes(b"\xF8\x00\x07\xE0", 2, 1, ColorMode.RGB565)
        assert image[0, 0, :3].tolist() == [248, 0, 0]
        assert image[0, 1, :3].tolist() == [0, 252, 0]

    def test_grayscale(self):
        image = unpack_bytes(b"\x00\x80", 2, 1, ColorMode.GRAYSCALE)
        assert image[0, 1].tolist() == [128, 128, 128, 255]

    def test_short_input_is_zero_padded(self):
        image = unpack_bytes(b"\xFF", 8, 2, ColorMode.MONO)
        assert np.all(image[0, :, 0] == 255)
        assert np.all(image[1, :, 0] == 0)

    def test_extra_bytes_ignored(self):
        image = unpack_bytes(bytes([1, 2, 3, 4, 5, 6, 7]), 2, 1, ColorMode.RGB888)
        assert image[0, :, :3].tolist() == [[1, 2, 3], [4, 5, 6]]
