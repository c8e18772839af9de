import numpy as np
import pytest

from img2bytes.dithering import atkinson, bayer, bayer_matrix, dither, floyd_steinberg
from models import Dithering

T, F = True, False


def gray(rows):
    return np.array(rows, dtype=np.uint8)


class TestErrorDiffusion:
    def test_floyd_steinberg_pushes_error_right(self):
        assert floyd_steinberg(gray([[100, 100]]), 128).tolist() == [[F, T]]
        assert floyd_steinberg(gray([[100, 100, 100]]), 128).tolist() == [[F, T, F]]

    def test_floyd_steinberg_pushes_error_down(self):
        assert floyd_steinberg(gray([[100], [100]]), 128).tolist() == [[F], [T]]

    def test_atkinson_drops_part_of_the_error(self):
        # Same row Floyd-Steinberg lights in the middle stays dark here
        assert atkinson(gray([[100, 100, 100]]), 128).tolist() == [[F, F, F]]

    def test_atkinson_reaches_two_rows_down(self):
        assert atkinson(gray([[110], [110], [110]]), 128).tolist() == [[F], [F], [T]]

    def test_input_is_not_modified(self, noise):
        values = np.asarray(noise.pixels[..., 0]).copy()
        before = values.copy()
        floyd_steinberg(values, 128)
        atkinson(values, 128)
        assert np.array_equal(values, before)

    def test_mid_gray_is_roughly_half_lit(self):
        bits = floyd_steinberg(np.full((32, 32), 128, dtype=np.uint8), 128)
        assert 0.4 < bits.mean() < 0.6


class TestBayer:
    def test_matrix_2(self):
        assert bayer_matrix(2).tolist() == [[0, 2], [3, 1]]

    def test_matrix_4_is_a_permutation(self):
        matrix = bayer_matrix(4)
        assert matrix.shape == (4, 4)
        assert sorted(matrix.ravel().tolist()) == list(range(16))

    @pytest.mark.parametrize("size", [0, 3, 6])
    def test_matrix_size_must_be_power_of_two(self, size):
        with pytest.raises(ValueError):
            bayer_matrix(size)

    def test_uniform_mid_gray(self):
        bits = bayer(np.full((8, 8), 128, dtype=np.uint8), 128)
        # Indices 0..8 of 16 fall at or below the mid threshold
        assert bits[:4, :4].sum() == 9
        assert np.array_equal(bits[:4, :4], bits[4:, 4:])
        assert np.array_equal(bits[:4, :4], bits[:4, 4:])

    def test_handles_sizes_not_multiple_of_matrix(self):
        assert bayer(np.zeros((5, 7), dtype=np.uint8), 128).shape == (5, 7)


@pytest.mark.parametrize("method", list(Dithering))
def test_extremes(method):
    white = np.full((6, 6), 255, dtype=np.uint8)
    black = np.zeros((6, 6), dtype=np.uint8)
    assert dither(white, 128, method).all()
    assert not dither(black, 128, method).any()


@pytest.mark.parametrize("method", list(Dithering))
def test_deterministic(method, gradient):
    values = gradient.pixels[..., 0]
    assert np.array_equal(dither(values, 128, method), dither(values, 128, method))


def test_none_is_plain_threshold():
    assert dither(gray([[127, 128]]), 128, Dithering.NONE).tolist() == [[F, T]]
