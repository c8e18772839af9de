"""Color quantization into the target color model.

AIDEV-NOTE: Luminance uses ITU-R BT.601 weights (0.299, 0.587, 0.114)
rounded half-up to an integer. RGB565 values are kept as uint16 here;
the packer writes them big-endian. Alpha is ignored everywhere, so a
transparent background reads as black.
"""

from dataclasses import dataclass

import numpy as np

from models import (
    ColorMode,
    ColorTarget,
    Dithering,
    GrayscaleTarget,
    MonoTarget,
    Rgb565Target,
    Rgb888Target,
)

from .dithering import dither

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


@dataclass(frozen=True)
class QuantizedBuffer:
    """Per-pixel values in the target model's native representation.

    values shape/dtype by mode:
        mono      (H, W) bool
        grayscale (H, W) uint8
        rgb565    (H, W) uint16
        rgb888    (H, W, 3) uint8
    """

    values: np.ndarray
    target: ColorTarget

    @property
    def color_mode(self) -> ColorMode:
        return self.target.color_mode

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])


def luminance(pixels: np.ndarray) -> np.ndarray:
    """Integer luminance (0-255) of an RGB(A) pixel array."""
    rgb = np.asarray(pixels, dtype=np.float64)[..., :3]
    r_w, g_w, b_w = LUMA_WEIGHTS
    luma = r_w * rgb[..., 0] + g_w * rgb[..., 1] + b_w * rgb[..., 2]
    return np.clip(np.floor(luma + 0.5), 0, 255).astype(np.uint8)


def quantize_mono(pixels: np.ndarray, target: MonoTarget) -> np.ndarray:
    """Convert to 1-bit, applying dithering when configured.

    AIDEV-NOTE: Without dithering, invert flips the comparison so the
    result is the exact complement of the non-inverted output. With
    dithering, the luminance itself is inverted before diffusion.
    """
    gray = luminance(pixels)

    if target.dithering == Dithering.NONE:
        if target.invert:
            return gray < target.threshold
        return gray >= target.threshold

    if target.invert:
        gray = 255 - gray
    return dither(gray, target.threshold, target.dithering)


def quantize_grayscale(pixels: np.ndarray, target: GrayscaleTarget) -> np.ndarray:
    gray = luminance(pixels)
    if target.invert:
        gray = 255 - gray
    return gray


def _rgb_channels(pixels: np.ndarray, invert: bool) -> np.ndarray:
    rgb = np.asarray(pixels, dtype=np.uint8)[..., :3]
    if invert:
        rgb = 255 - rgb
    return rgb


def quantize_rgb565(pixels: np.ndarray, target: Rgb565Target) -> np.ndarray:
    """Pack each pixel as RRRRRGGGGGGBBBBB."""
    rgb = _rgb_channels(pixels, target.invert).astype(np.uint16)
    r5 = rgb[..., 0] >> 3
    g6 = rgb[..., 1] >> 2
    b5 = rgb[..., 2] >> 3
    return (r5 << 11) | (g6 << 5) | b5


def quantize_rgb888(pixels: np.ndarray, target: Rgb888Target) -> np.ndarray:
    return np.array(_rgb_channels(pixels, target.invert), dtype=np.uint8)


def quantize(pixels: np.ndarray, target: ColorTarget) -> QuantizedBuffer:
    """Map an RGBA canvas into the target color model.

    Args:
        pixels: (H, W, 4) uint8 canvas from the sampler
        target: Color-mode variant from ProcessingOptions.color_target

    Returns:
        QuantizedBuffer holding the converted values
    """
    if isinstance(target, MonoTarget):
        values = quantize_mono(pixels, target)
    elif isinstance(target, GrayscaleTarget):
        values = quantize_grayscale(pixels, target)
    elif isinstance(target, Rgb565Target):
        values = quantize_rgb565(pixels, target)
    elif isinstance(target, Rgb888Target):
        values = quantize_rgb888(pixels, target)
    else:
        raise TypeError(f"Unsupported color target: {target!r}")

    values.setflags(write=False)
    return QuantizedBuffer(values=values, target=target)
