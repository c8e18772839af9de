"""Data models and constants for the Img2Bytes converter."""

import re
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
from PIL import Image

# Configuration file path
CONFIG_FILE = Path.home() / ".img2bytes_config.json"

# AIDEV-NOTE: Limits applied when options come from an untrusted source
# (config file, CLI). Direct construction rejects instead of clamping.
MAX_CANVAS_SIZE = 4096
MAX_BYTES_PER_LINE = 256
VALID_ROTATIONS = (0, 90, 180, 270)


class ColorMode(Enum):
    """Target color model for the generated byte array."""

    MONO = "mono"  # 1 bit per pixel
    GRAYSCALE = "grayscale"  # 1 byte per pixel
    RGB565 = "rgb565"  # 2 bytes per pixel, big-endian
    RGB888 = "rgb888"  # 3 bytes per pixel, R G B

    @property
    def label(self) -> str:
        labels = {
            ColorMode.MONO: "Monochrome (1-bit)",
            ColorMode.GRAYSCALE: "Grayscale (8-bit)",
            ColorMode.RGB565: "RGB565 (16-bit)",
            ColorMode.RGB888: "RGB888 (24-bit)",
        }
        return labels[self]


class Dithering(Enum):
    """Dithering strategies (monochrome only)."""

    NONE = "none"
    FLOYD_STEINBERG = "floydSteinberg"
    ATKINSON = "atkinson"
    BAYER = "bayer"

    @property
    def label(self) -> str:
        labels = {
            Dithering.NONE: "None (threshold)",
            Dithering.FLOYD_STEINBERG: "Floyd-Steinberg",
            Dithering.ATKINSON: "Atkinson",
            Dithering.BAYER: "Bayer (ordered)",
        }
        return labels[self]


class DrawMode(Enum):
    """Bit packing orientation for 1-bit output."""

    HORIZONTAL = "horizontal"  # row-major, MSB = leftmost pixel
    VERTICAL = "vertical"  # column-major, MSB = topmost pixel


class BackgroundColor(Enum):
    """Fill for canvas area the source does not cover."""

    WHITE = "white"
    BLACK = "black"
    TRANSPARENT = "transparent"

    @property
    def rgba(self) -> "tuple[int, int, int, int]":
        values = {
            BackgroundColor.WHITE: (255, 255, 255, 255),
            BackgroundColor.BLACK: (0, 0, 0, 255),
            BackgroundColor.TRANSPARENT: (0, 0, 0, 0),
        }
        return values[self]


class Scaling(Enum):
    """How the (rotated) source is sized onto the canvas."""

    ORIGINAL = "original"
    FIT = "fit"
    STRETCH = "stretch"
    STRETCH_H = "stretchH"
    STRETCH_V = "stretchV"


class OutputFormat(Enum):
    """Numeric base used when rendering bytes as source text."""

    HEX = "hex"
    DECIMAL = "decimal"
    BINARY = "binary"


# (label, width, height)
CANVAS_PRESETS = [
    ("128×64 (SSD1306)", 128, 64),
    ("128×32 (SSD1306 Mini)", 128, 32),
    ("96×64 (SSD1331)", 96, 64),
    ("160×128 (ST7735)", 160, 128),
    ("240×240 (ST7789)", 240, 240),
    ("320×240 (ILI9341)", 320, 240),
    ("480×320 (ILI9488)", 480, 320),
]


def _coerce_enum(enum_cls, value):
    """Accept either an enum member or its string value."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(
            f"Invalid {enum_cls.__name__} '{value}' (expected one of: {allowed})"
        ) from None


def _clamp(value: Any, low: int, high: int, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


def _flag(value: Any, default: bool) -> bool:
    # Only real JSON booleans; "false" and 0 fall back to the default
    return value if isinstance(value, bool) else default


def sanitize_identifier(name: str, fallback: str = "image") -> str:
    """Reduce a string to a valid C identifier made of [A-Za-z0-9_].

    Invalid characters are dropped. A leading digit gets an underscore
    prefix and an empty result falls back to ``fallback``.
    """
    cleaned = re.sub(r"[^A-Za-z0-9_]", "", name or "")
    if not cleaned:
        return fallback
    if cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned


def expected_byte_count(
    width: int, height: int, color_mode: ColorMode, draw_mode: DrawMode
) -> int:
    """Packed size in bytes for a canvas of the given shape."""
    if color_mode == ColorMode.MONO:
        if draw_mode == DrawMode.VERTICAL:
            return ((height + 7) // 8) * width
        return ((width + 7) // 8) * height
    if color_mode == ColorMode.GRAYSCALE:
        return width * height
    if color_mode == ColorMode.RGB565:
        return width * height * 2
    return width * height * 3


# --- Color targets ---
#
# AIDEV-NOTE: One variant per color mode, carrying only what that mode
# needs. Dithering/threshold/draw mode exist on MonoTarget only, so they
# cannot leak into the other modes.


@dataclass(frozen=True)
class MonoTarget:
    threshold: int = 128
    dithering: Dithering = Dithering.NONE
    draw_mode: DrawMode = DrawMode.HORIZONTAL
    invert: bool = False

    color_mode = ColorMode.MONO


@dataclass(frozen=True)
class GrayscaleTarget:
    invert: bool = False

    color_mode = ColorMode.GRAYSCALE


@dataclass(frozen=True)
class Rgb565Target:
    invert: bool = False

    color_mode = ColorMode.RGB565


@dataclass(frozen=True)
class Rgb888Target:
    invert: bool = False

    color_mode = ColorMode.RGB888


ColorTarget = Union[MonoTarget, GrayscaleTarget, Rgb565Target, Rgb888Target]


# --- Options ---


@dataclass(frozen=True)
class ProcessingOptions:
    """Immutable settings controlling sampling and quantization."""

    # Canvas
    canvas_width: int = 128
    canvas_height: int = 64
    background_color: BackgroundColor = BackgroundColor.BLACK

    # Placement
    scaling: Scaling = Scaling.FIT
    center_h: bool = True
    center_v: bool = True
    rotation: int = 0  # degrees clockwise
    flip_h: bool = False

    # Color conversion
    color_mode: ColorMode = ColorMode.MONO
    threshold: int = 128  # 0-255, mono only
    invert: bool = False
    dithering: Dithering = Dithering.NONE  # mono only
    draw_mode: DrawMode = DrawMode.HORIZONTAL  # mono packing only

    def __post_init__(self):
        for name, enum_cls in (
            ("background_color", BackgroundColor),
            ("scaling", Scaling),
            ("color_mode", ColorMode),
            ("dithering", Dithering),
            ("draw_mode", DrawMode),
        ):
            object.__setattr__(self, name, _coerce_enum(enum_cls, getattr(self, name)))

        for name in ("canvas_width", "canvas_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if not 0 <= self.threshold <= 255:
            raise ValueError(f"threshold must be in 0-255, got {self.threshold}")
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(f"rotation must be one of {VALID_ROTATIONS}, got {self.rotation}")

    @property
    def color_target(self) -> ColorTarget:
        """Tagged color-mode variant used by the quantizer and packer."""
        if self.color_mode == ColorMode.MONO:
            return MonoTarget(
                threshold=self.threshold,
                dithering=self.dithering,
                draw_mode=self.draw_mode,
                invert=self.invert,
            )
        if self.color_mode == ColorMode.GRAYSCALE:
            return GrayscaleTarget(invert=self.invert)
        if self.color_mode == ColorMode.RGB565:
            return Rgb565Target(invert=self.invert)
        return Rgb888Target(invert=self.invert)

    def with_changes(self, **changes) -> "ProcessingOptions":
        return replace(self, **changes)

    def to_dict(self) -> "dict[str, Any]":
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_dict(cls, data: "dict[str, Any]") -> "ProcessingOptions":
        """Build options from loosely typed data, clamping bad values.

        AIDEV-NOTE: Used at the config/CLI boundary. Unknown enum strings
        fall back to defaults, numbers are clamped into range.
        """
        defaults = cls()
        values: "dict[str, Any]" = {}

        values["canvas_width"] = _clamp(
            data.get("canvas_width"), 1, MAX_CANVAS_SIZE, defaults.canvas_width
        )
        values["canvas_height"] = _clamp(
            data.get("canvas_height"), 1, MAX_CANVAS_SIZE, defaults.canvas_height
        )
        values["threshold"] = _clamp(data.get("threshold"), 0, 255, defaults.threshold)

        rotation = data.get("rotation", defaults.rotation)
        try:
            rotation = int(rotation) % 360
        except (TypeError, ValueError):
            rotation = defaults.rotation
        values["rotation"] = rotation if rotation in VALID_ROTATIONS else defaults.rotation

        for name, enum_cls in (
            ("background_color", BackgroundColor),
            ("scaling", Scaling),
            ("color_mode", ColorMode),
            ("dithering", Dithering),
            ("draw_mode", DrawMode),
        ):
            try:
                values[name] = _coerce_enum(enum_cls, data.get(name, getattr(defaults, name)))
            except ValueError:
                values[name] = getattr(defaults, name)

        for name in ("center_h", "center_v", "flip_h", "invert"):
            values[name] = _flag(data.get(name), getattr(defaults, name))

        return cls(**values)


@dataclass(frozen=True)
class OutputOptions:
    """Immutable settings controlling code generation."""

    variable_name: str = "image"
    format: OutputFormat = OutputFormat.HEX
    progmem: bool = True
    include_size: bool = True
    bytes_per_line: int = 16

    def __post_init__(self):
        # Sanitized at input so generated code is always a valid identifier
        object.__setattr__(self, "variable_name", sanitize_identifier(self.variable_name))
        object.__setattr__(self, "format", _coerce_enum(OutputFormat, self.format))
        if not isinstance(self.bytes_per_line, int) or self.bytes_per_line < 1:
            raise ValueError(
                f"bytes_per_line must be a positive integer, got {self.bytes_per_line!r}"
            )

    def with_changes(self, **changes) -> "OutputOptions":
        return replace(self, **changes)

    def to_dict(self) -> "dict[str, Any]":
        return {
            "variable_name": self.variable_name,
            "format": self.format.value,
            "progmem": self.progmem,
            "include_size": self.include_size,
            "bytes_per_line": self.bytes_per_line,
        }

    @classmethod
    def from_dict(cls, data: "dict[str, Any]") -> "OutputOptions":
        defaults = cls()
        try:
            output_format = _coerce_enum(OutputFormat, data.get("format", defaults.format))
        except ValueError:
            output_format = defaults.format
        return cls(
            variable_name=str(data.get("variable_name", defaults.variable_name)),
            format=output_format,
            progmem=_flag(data.get("progmem"), defaults.progmem),
            include_size=_flag(data.get("include_size"), defaults.include_size),
            bytes_per_line=_clamp(
                data.get("bytes_per_line"), 1, MAX_BYTES_PER_LINE, defaults.bytes_per_line
            ),
        )


# --- Pipeline data ---


@dataclass(frozen=True)
class SourceImage:
    """Decoded RGBA raster, read-only for the pipeline.

    AIDEV-NOTE: pixels is an (height, width, 4) uint8 array with the
    writeable flag cleared. Keep one per loaded file and re-process it
    whenever options change.
    """

    pixels: np.ndarray
    name: str = "image"

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"Expected an HxWx4 RGBA array, got shape {self.pixels.shape}")
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise ValueError("Source image has no pixels")
        pixels = np.array(self.pixels, dtype=np.uint8, copy=True)
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @classmethod
    def from_image(cls, image: Image.Image, name: str = "image") -> "SourceImage":
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(pixels=np.asarray(image), name=name)

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))


@dataclass(frozen=True)
class ByteArray:
    """Packed bytes plus the shape metadata needed to interpret them."""

    data: bytes
    width: int
    height: int
    color_mode: ColorMode
    draw_mode: DrawMode = DrawMode.HORIZONTAL

    @property
    def total_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ConversionResult:
    """Output of the pipeline for one source image."""

    byte_array: ByteArray
    # Device-view RGBA buffer rebuilt from byte_array
    preview: np.ndarray = field(repr=False, compare=False)
    name: str = "image"

    @property
    def total_bytes(self) -> int:
        return self.byte_array.total_bytes

    @property
    def width(self) -> int:
        return self.byte_array.width

    @property
    def height(self) -> int:
        return self.byte_array.height

    def preview_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.preview))


@dataclass(frozen=True)
class GeneratedCode:
    """C/C++ source fragment rendered from one or more results."""

    text: str
    frame_count: int = 0
    total_bytes: int = 0

    @property
    def is_empty(self) -> bool:
        return self.frame_count == 0

    @classmethod
    def empty(cls) -> "GeneratedCode":
        return cls(text="// Nothing to generate\n")

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class BatchFailure:
    """An image in a batch that could not be converted."""

    index: int
    name: str
    message: str


@dataclass
class BatchResult:
    """Results of a batch, one slot per submitted image.

    AIDEV-NOTE: results keeps submission order. A failed image leaves
    None in its slot and an entry in failures.
    """

    results: "list[Optional[ConversionResult]]"
    failures: "list[BatchFailure]" = field(default_factory=list)

    @property
    def succeeded(self) -> "list[ConversionResult]":
        return [r for r in self.results if r is not None]

    @property
    def ok(self) -> bool:
        return not self.failures
