"""Dithering strategies for 1-bit output.

AIDEV-NOTE: Every function takes a 2D grayscale array (0-255, already
inverted if requested) and returns a boolean array where True means the
pixel is lit (bit = 1). The threshold is applied here, so callers never
threshold the result again.

Error-diffusion kernels keep a float working copy and clamp each
neighbour to 0-255 after receiving error. Neighbours outside the image
are skipped and their share of the error is lost.
"""

import numpy as np

from models import Dithering

# (dx, dy, weight) relative to the current pixel
FLOYD_STEINBERG_KERNEL = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)

# Atkinson spreads 6/8 of the error; the remaining 2/8 is dropped
ATKINSON_KERNEL = (
    (1, 0, 1 / 8),
    (2, 0, 1 / 8),
    (-1, 1, 1 / 8),
    (0, 1, 1 / 8),
    (1, 1, 1 / 8),
    (0, 2, 1 / 8),
)

BAYER_SIZE = 4
BAYER_SCALE = 255.0


def bayer_matrix(size: int) -> np.ndarray:
    """Build a size x size Bayer index matrix (values 0 .. size*size-1).

    Args:
        size: Matrix size, a power of two

    Returns:
        Integer matrix, e.g. size 2 -> [[0, 2], [3, 1]]
    """
    if size < 1 or size & (size - 1):
        raise ValueError(f"Bayer matrix size must be a power of two, got {size}")

    matrix = np.zeros((1, 1), dtype=np.int64)
    while matrix.shape[0] < size:
        m = matrix * 4
        matrix = np.block([[m, m + 2], [m + 3, m + 1]])
    return matrix


def threshold(gray: np.ndarray, level: int) -> np.ndarray:
    """Plain per-pixel threshold, no diffusion."""
    return np.asarray(gray) >= level


def _diffuse(gray: np.ndarray, level: int, kernel) -> np.ndarray:
    height, width = gray.shape
    # Python lists are much faster than numpy scalar indexing in this loop
    buffer = np.asarray(gray, dtype=np.float64).tolist()
    bits = np.zeros((height, width), dtype=bool)

    for y in range(height):
        row = buffer[y]
        for x in range(width):
            old = row[x]
            lit = old >= level
            error = old - (255.0 if lit else 0.0)
            bits[y, x] = lit
            if error == 0.0:
                continue

            for dx, dy, weight in kernel:
                nx = x + dx
                ny = y + dy
                if 0 <= nx < width and ny < height:
                    target = buffer[ny]
                    value = target[nx] + error * weight
                    target[nx] = 0.0 if value < 0.0 else (255.0 if value > 255.0 else value)

    return bits


def floyd_steinberg(gray: np.ndarray, level: int) -> np.ndarray:
    """Floyd-Steinberg error diffusion (7/16, 3/16, 5/16, 1/16)."""
    return _diffuse(gray, level, FLOYD_STEINBERG_KERNEL)


def atkinson(gray: np.ndarray, level: int) -> np.ndarray:
    """Atkinson error diffusion: 1/8 to six neighbours."""
    return _diffuse(gray, level, ATKINSON_KERNEL)


def bayer(gray: np.ndarray, level: int, size: int = BAYER_SIZE) -> np.ndarray:
    """Ordered dithering against a tiled Bayer matrix.

    Each pixel is compared with
    ``level + (matrix[y % n][x % n] / n**2 - 0.5) * BAYER_SCALE``.
    """
    gray = np.asarray(gray, dtype=np.float64)
    height, width = gray.shape
    matrix = bayer_matrix(size) / float(size * size)

    reps_y = -(-height // size)
    reps_x = -(-width // size)
    offsets = np.tile(matrix, (reps_y, reps_x))[:height, :width]
    thresholds = level + (offsets - 0.5) * BAYER_SCALE
    return gray >= thresholds


def dither(gray: np.ndarray, level: int, method: Dithering) -> np.ndarray:
    """Dispatch to the dithering strategy for ``method``."""
    if method == Dithering.FLOYD_STEINBERG:
        return floyd_steinberg(gray, level)
    if method == Dithering.ATKINSON:
        return atkinson(gray, level)
    if method == Dithering.BAYER:
        return bayer(gray, level)
    return threshold(gray, level)
