import numpy as np
import pytest

from img2bytes.quantization import (
    luminance,
    quantize,
    quantize_rgb565,
)
from models import (
    ColorMode,
    Dithering,
    GrayscaleTarget,
    MonoTarget,
    ProcessingOptions,
    Rgb565Target,
    Rgb888Target,
)


def rgba(rows):
    rgb = np.array(rows, dtype=np.uint8)
    alpha = np.full(rgb.shape[:2] + (1,), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=2)


def gray_pixels(values):
    """One-row RGBA strip of neutral grays."""
    return rgba([[(v, v, v) for v in values]])


@pytest.mark.parametrize(
    "color, expected",
    [
        ((0, 0, 0), 0),
        ((255, 255, 255), 255),
        ((255, 0, 0), 76),
        ((0, 255, 0), 150),
        ((0, 0, 255), 29),
        ((128, 128, 128), 128),
    ],
)
def test_luminance(color, expected):
    assert luminance(rgba([[color]]))[0, 0] == expected


def test_luminance_ignores_alpha():
    pixels = rgba([[(255, 255, 255)]])
    pixels[..., 3] = 0
    assert luminance(pixels)[0, 0] == 255


class TestMono:
    def test_threshold_is_inclusive(self):
        result = quantize(gray_pixels([127, 128, 129]), MonoTarget(threshold=128))
        assert result.values.tolist() == [[False, True, True]]

    def test_invert_is_exact_complement(self, noise):
        plain = quantize(noise.pixels, MonoTarget(threshold=100)).values
        inverted = quantize(noise.pixels, MonoTarget(threshold=100, invert=True)).values
        assert np.array_equal(inverted, ~plain)

    @pytest.mark.parametrize("method", list(Dithering))
    def test_inverted_white_is_dark(self, method):
        result = quantize(gray_pixels([255] * 8), MonoTarget(dithering=method, invert=True))
        assert not result.values.any()

    def test_dithering_applies(self, gradient):
        plain = quantize(gradient.pixels, MonoTarget()).values
        dithered = quantize(gradient.pixels, MonoTarget(dithering=Dithering.BAYER)).values
        assert not np.array_equal(plain, dithered)


class TestGrayscale:
    def test_values(self):
        result = quantize(gray_pixels([0, 100, 255]), GrayscaleTarget())
        assert result.values.dtype == np.uint8
        assert result.values.tolist() == [[0, 100, 255]]

    def test_invert(self):
        result = quantize(gray_pixels([0, 100, 255]), GrayscaleTarget(invert=True))
        assert result.values.tolist() == [[255, 155, 0]]


class TestRgb565:
    @pytest.mark.parametrize(
        "color, expected",
        [
            ((255, 255, 255), 0xFFFF),
            ((255, 0, 0), 0xF800),
            ((0, 255, 0), 0x07E0),
            ((0, 0, 255), 0x001F),
            ((0, 0, 0), 0x0000),
            ((8, 4, 8), 0x0821),
        ],
    )
    def test_packing(self, color, expected):
        assert quantize_rgb565(rgba([[color]]), Rgb565Target())[0, 0] == expected

    def test_invert_complements_channels(self):
        result = quantize(rgba([[(255, 255, 255), (255, 0, 0)]]), Rgb565Target(invert=True))
        assert result.values.tolist() == [[0x0000, 0x07FF]]


class TestRgb888:
    def test_passes_channels_through(self):
        result = quantize(rgba([[(1, 2, 3), (250, 128, 0)]]), Rgb888Target())
        assert result.values.shape == (1, 2, 3)
        assert result.values.tolist() == [[[1, 2, 3], [250, 128, 0]]]

    def test_invert(self):
        result = quantize(rgba([[(1, 2, 3)]]), Rgb888Target(invert=True))
        assert result.values.tolist() == [[[254, 253, 252]]]


def test_buffer_metadata_and_read_only(noise):
    result = quantize(noise.pixels, GrayscaleTarget())
    assert result.color_mode == ColorMode.GRAYSCALE
    assert (result.width, result.height) == (16, 8)
    assert not result.values.flags.writeable


def test_dithering_has_no_effect_outside_mono(gradient):
    plain = ProcessingOptions(color_mode="grayscale")
    dithered = plain.with_changes(dithering=Dithering.FLOYD_STEINBERG, threshold=10)
    a = quantize(gradient.pixels, plain.color_target).values
    b = quantize(gradient.pixels, dithered.color_target).values
    assert np.array_equal(a, b)


def test_unknown_target_rejected(noise):
    with pytest.raises(TypeError):
        quantize(noise.pixels, object())
