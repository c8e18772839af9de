"""Image to byte array conversion for embedded displays.

AIDEV-NOTE: This package turns a decoded raster into bytes ready to burn
into firmware for small OLED/LCD displays. Organized into modular components:
- sampler: Canvas placement (rotation, flip, scaling, centering)
- quantization: Color model conversion (mono, grayscale, RGB565, RGB888)
- dithering: Threshold, Floyd-Steinberg, Atkinson and Bayer for 1-bit output
- packing: Byte packing and unpacking per color mode and orientation
- codegen: C/C++ array rendering and parsing
- processor: ImageProcessor orchestrator and latest-wins request tracking
"""

from .codegen import generate_code, parse_bytes, parse_code
from .processor import ImageProcessor, RequestCoalescer

__all__ = [
    "ImageProcessor",
    "RequestCoalescer",
    "generate_code",
    "parse_bytes",
    "parse_code",
]
