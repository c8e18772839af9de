"""Shared fixtures: small in-memory images, no files or display needed."""

import numpy as np
import pytest

from models import SourceImage


def solid(width, height, color, alpha=255, name="solid"):
    """SourceImage filled with one RGB color."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = color
    pixels[..., 3] = alpha
    return SourceImage(pixels=pixels, name=name)


def from_rows(rows, name="pattern"):
    """SourceImage from nested lists of (r, g, b) tuples, fully opaque."""
    rgb = np.array(rows, dtype=np.uint8)
    alpha = np.full(rgb.shape[:2] + (1,), 255, dtype=np.uint8)
    return SourceImage(pixels=np.concatenate([rgb, alpha], axis=2), name=name)


@pytest.fixture
def gradient():
    """32x16 horizontal gray ramp with some color noise."""
    rng = np.random.default_rng(1234)
    ramp = np.linspace(0, 255, 32, dtype=np.float64)
    pixels = np.zeros((16, 32, 4), dtype=np.uint8)
    pixels[..., 0] = ramp
    pixels[..., 1] = ramp[::-1]
    pixels[..., 2] = rng.integers(0, 256, size=(16, 32))
    pixels[..., 3] = 255
    return SourceImage(pixels=pixels, name="gradient")


@pytest.fixture
def noise():
    """16x8 random RGB image."""
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, size=(8, 16, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    return SourceImage(pixels=pixels, name="noise")


@pytest.fixture
def make_solid():
    return solid


@pytest.fixture
def make_rows():
    return from_rows
