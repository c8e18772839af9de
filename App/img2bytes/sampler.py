"""Canvas sampling: place a source image onto a fixed-size canvas.

AIDEV-NOTE: Order of operations is flip -> rotate -> scale -> position ->
composite over the background. Rotation happens before scaling so that
90/270 degree turns swap the effective width/height the scaling modes see.
"""

import numpy as np
from PIL import Image

from models import ProcessingOptions, Scaling, SourceImage

# Clockwise rotation -> PIL transpose (PIL's ROTATE_* are counter-clockwise)
_ROTATIONS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def scaled_size(
    image_width: int,
    image_height: int,
    canvas_width: int,
    canvas_height: int,
    scaling: Scaling,
) -> "tuple[int, int]":
    """Calculate drawn dimensions for a scaling mode.

    Args:
        image_width: Source width after rotation
        image_height: Source height after rotation
        canvas_width: Target canvas width
        canvas_height: Target canvas height
        scaling: Scaling mode

    Returns:
        Tuple of (width, height), each at least 1 pixel
    """
    width, height = image_width, image_height

    if scaling == Scaling.FIT:
        ratio = min(canvas_width / image_width, canvas_height / image_height)
        width = int(image_width * ratio)
        height = int(image_height * ratio)
    elif scaling == Scaling.STRETCH:
        width, height = canvas_width, canvas_height
    elif scaling == Scaling.STRETCH_H:
        width = canvas_width
        height = int(canvas_width / image_width * image_height)
    elif scaling == Scaling.STRETCH_V:
        height = canvas_height
        width = int(canvas_height / image_height * image_width)

    # Extreme aspect ratios can round a side down to zero
    return max(1, width), max(1, height)


def draw_position(
    drawn_width: int,
    drawn_height: int,
    options: ProcessingOptions,
) -> "tuple[int, int]":
    """Top-left canvas coordinate of the drawn image (may be negative)."""
    x = (options.canvas_width - drawn_width) // 2 if options.center_h else 0
    y = (options.canvas_height - drawn_height) // 2 if options.center_v else 0
    return x, y


def transform_source(source: SourceImage, options: ProcessingOptions) -> Image.Image:
    """Apply flip, rotation and scaling to the source image.

    Returns:
        RGBA PIL image at its final drawn size
    """
    image = source.to_image()

    if options.flip_h:
        image = image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    if options.rotation in _ROTATIONS:
        image = image.transpose(_ROTATIONS[options.rotation])

    size = scaled_size(
        image.width,
        image.height,
        options.canvas_width,
        options.canvas_height,
        options.scaling,
    )
    if size != image.size:
        image = image.resize(size, Image.Resampling.LANCZOS)
    return image


def sample_canvas(source: SourceImage, options: ProcessingOptions) -> np.ndarray:
    """Resample a source image onto the configured canvas.

    Args:
        source: Decoded RGBA source
        options: Processing options (canvas, scaling, rotation, ...)

    Returns:
        Read-only (canvas_height, canvas_width, 4) uint8 array

    AIDEV-NOTE: Parts of the drawn image outside the canvas are clipped;
    uncovered canvas keeps the background color. A transparent background
    is (0, 0, 0, 0).
    """
    canvas = Image.new(
        "RGBA",
        (options.canvas_width, options.canvas_height),
        options.background_color.rgba,
    )

    drawn = transform_source(source, options)
    x, y = draw_position(drawn.width, drawn.height, options)

    # Clip to canvas; alpha_composite only accepts non-negative destinations
    left = max(0, -x)
    top = max(0, -y)
    right = min(drawn.width, options.canvas_width - x)
    bottom = min(drawn.height, options.canvas_height - y)

    if right > left and bottom > top:
        visible = drawn.crop((left, top, right, bottom))
        canvas.alpha_composite(visible, dest=(max(0, x), max(0, y)))

    pixels = np.array(canvas, dtype=np.uint8)
    pixels.setflags(write=False)
    return pixels
