"""Bit packing of quantized pixels into byte sequences.

AIDEV-NOTE: Byte layouts (keep in sync with firmware drawing routines):
- mono/horizontal: rows top to bottom, ceil(W/8) bytes per row, MSB is the
  leftmost pixel, trailing bits of a row are zero.
- mono/vertical: columns left to right, ceil(H/8) bytes per column, MSB is
  the topmost pixel, trailing bits of a column are zero.
- grayscale: 1 byte per pixel, raster order.
- rgb565: 2 bytes per pixel, raster order, big-endian (high byte first).
- rgb888: 3 bytes per pixel, raster order, R G B.
"""

import numpy as np

from models import ByteArray, ColorMode, DrawMode, MonoTarget, expected_byte_count

from .quantization import QuantizedBuffer


def pack_mono(bits: np.ndarray, draw_mode: DrawMode) -> bytes:
    """Pack a boolean (H, W) array MSB-first."""
    bits = np.asarray(bits, dtype=bool)
    if draw_mode == DrawMode.VERTICAL:
        # Each column becomes a row of the transposed array
        return np.packbits(bits.T, axis=1).tobytes()
    return np.packbits(bits, axis=1).tobytes()


def pack(quantized: QuantizedBuffer) -> ByteArray:
    """Pack a quantized buffer into its byte representation.

    Args:
        quantized: Output of quantization.quantize

    Returns:
        ByteArray whose length matches models.expected_byte_count
    """
    target = quantized.target
    color_mode = quantized.color_mode
    draw_mode = target.draw_mode if isinstance(target, MonoTarget) else DrawMode.HORIZONTAL
    values = quantized.values

    if color_mode == ColorMode.MONO:
        data = pack_mono(values, draw_mode)
    elif color_mode == ColorMode.RGB565:
        data = values.astype(">u2").tobytes()
    else:
        # grayscale (H, W) and rgb888 (H, W, 3) are already byte-sized
        data = np.ascontiguousarray(values, dtype=np.uint8).tobytes()

    return ByteArray(
        data=data,
        width=quantized.width,
        height=quantized.height,
        color_mode=color_mode,
        draw_mode=draw_mode,
    )


def unpack_bytes(
    data: bytes,
    width: int,
    height: int,
    color_mode: ColorMode,
    draw_mode: DrawMode = DrawMode.HORIZONTAL,
) -> np.ndarray:
    """Rebuild an opaque RGBA image from packed bytes.

    Short input leaves the remaining pixels black; extra bytes are ignored.
    Lit mono bits render white.

    Returns:
        (height, width, 4) uint8 array
    """
    expected = expected_byte_count(width, height, color_mode, draw_mode)
    buffer = np.zeros(expected, dtype=np.uint8)
    raw = np.frombuffer(bytes(data[:expected]), dtype=np.uint8)
    buffer[: raw.size] = raw

    if color_mode == ColorMode.MONO:
        if draw_mode == DrawMode.VERTICAL:
            columns = buffer.reshape(width, -1)
            bits = np.unpackbits(columns, axis=1)[:, :height].T
        else:
            rows = buffer.reshape(height, -1)
            bits = np.unpackbits(rows, axis=1)[:, :width]
        rgb = np.repeat((bits * 255).astype(np.uint8)[..., None], 3, axis=2)
    elif color_mode == ColorMode.GRAYSCALE:
        gray = buffer.reshape(height, width)
        rgb = np.repeat(gray[..., None], 3, axis=2)
    elif color_mode == ColorMode.RGB565:
        value = buffer.view(">u2").reshape(height, width).astype(np.uint16)
        rgb = np.stack(
            [
                ((value >> 11) & 0x1F) << 3,
                ((value >> 5) & 0x3F) << 2,
                (value & 0x1F) << 3,
            ],
            axis=-1,
        ).astype(np.uint8)
    else:
        rgb = buffer.reshape(height, width, 3)

    alpha = np.full((height, width, 1), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=2)
