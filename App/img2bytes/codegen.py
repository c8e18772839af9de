"""C/C++ source generation for packed image bytes.

AIDEV-NOTE: Output is a self-contained header fragment. Single image:

    // Generated by Img2Bytes Converter
    // Dimensions: 128x64
    // Color Mode: MONO
    // Total Bytes: 1024

    #define IMAGE_WIDTH 128
    #define IMAGE_HEIGHT 64

    const unsigned char image[] PROGMEM = {
      0x00, 0x00, ...
    };

Several images become <name>_frame<N> arrays in submission order followed
by a <name>_frames[] pointer table.
"""

import re
from pathlib import Path
from typing import Iterable, Sequence, Union

from models import ConversionResult, GeneratedCode, OutputFormat, OutputOptions

HEADER = "// Generated by Img2Bytes Converter"

_ARRAY_PATTERN = re.compile(
    r"const\s+unsigned\s+char\s+(\w+)\s*\[\s*\d*\s*\]\s*(?:PROGMEM\s*)?=\s*\{(.*?)\}\s*;",
    re.DOTALL,
)
_VALUE_PATTERN = re.compile(r"0[xX][0-9A-Fa-f]+|0[bB][01]+|\d+")
_COMMENT_PATTERN = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)


def format_byte(value: int, output_format: OutputFormat) -> str:
    """Render one byte as a C literal."""
    if output_format == OutputFormat.HEX:
        return f"0x{value:02X}"
    if output_format == OutputFormat.BINARY:
        return f"0b{value:08b}"
    return f"{value:>3}"


def format_array(
    name: str, data: bytes, options: OutputOptions
) -> "list[str]":
    """Render one array declaration as a list of lines."""
    progmem = " PROGMEM" if options.progmem else ""
    lines = [f"const unsigned char {name}[]{progmem} = {{"]

    values = [format_byte(b, options.format) for b in data]
    step = options.bytes_per_line
    for start in range(0, len(values), step):
        chunk = values[start : start + step]
        is_last = start + step >= len(values)
        lines.append("  " + ", ".join(chunk) + ("" if is_last else ","))

    lines.append("};")
    return lines


def generate_code(
    results: Union[ConversionResult, Sequence[ConversionResult]],
    options: OutputOptions,
) -> GeneratedCode:
    """Generate a C/C++ header fragment for one or more results.

    Args:
        results: A single result or a batch in submission order
        options: Output options (name, format, PROGMEM, size macros)

    Returns:
        GeneratedCode; GeneratedCode.empty() when there is nothing to emit
    """
    if isinstance(results, ConversionResult):
        results = [results]
    results = list(results)

    if not results or any(r.total_bytes == 0 for r in results):
        return GeneratedCode.empty()

    name = options.variable_name
    macro = name.upper()
    first = results[0]
    total_bytes = sum(r.total_bytes for r in results)
    multi_frame = len(results) > 1

    lines = [HEADER]
    if multi_frame:
        lines.append(f"// Animation frames: {len(results)}")
    lines.append(f"// Dimensions: {first.width}x{first.height}")
    lines.append(f"// Color Mode: {first.byte_array.color_mode.value.upper()}")
    lines.append(f"// Total Bytes: {total_bytes}")
    lines.append("")

    if options.include_size:
        lines.append(f"#define {macro}_WIDTH {first.width}")
        lines.append(f"#define {macro}_HEIGHT {first.height}")
        if multi_frame:
            lines.append(f"#define {macro}_FRAME_COUNT {len(results)}")
        lines.append("")

    if not multi_frame:
        lines.extend(format_array(name, first.byte_array.data, options))
    else:
        for index, result in enumerate(results):
            lines.append(f"// Frame {index}: {result.name}")
            lines.extend(format_array(f"{name}_frame{index}", result.byte_array.data, options))
            lines.append("")

        progmem = " PROGMEM" if options.progmem else ""
        lines.append("// Animation frames array")
        lines.append(f"const unsigned char* const {name}_frames[]{progmem} = {{")
        for index in range(len(results)):
            comma = "," if index < len(results) - 1 else ""
            lines.append(f"  {name}_frame{index}{comma}")
        lines.append("};")

    return GeneratedCode(
        text="\n".join(lines) + "\n",
        frame_count=len(results),
        total_bytes=total_bytes,
    )


def _parse_value(token: str) -> int:
    lowered = token.lower()
    if lowered.startswith("0x"):
        return int(lowered, 16)
    if lowered.startswith("0b"):
        return int(lowered[2:], 2)
    return int(token, 10)


def parse_code(code: str) -> "list[bytes]":
    """Extract every unsigned char array from C source.

    Comments are stripped first; macros and pointer tables are not
    matched. Values above 255 are skipped.

    Returns:
        One bytes object per array, in source order
    """
    stripped = _COMMENT_PATTERN.sub("", code)
    arrays = []
    for match in _ARRAY_PATTERN.finditer(stripped):
        body = match.group(2)
        values = [_parse_value(t) for t in _VALUE_PATTERN.findall(body)]
        arrays.append(bytes(v for v in values if v <= 255))
    return arrays


def parse_bytes(code: str) -> bytes:
    """All array contents from ``code`` concatenated."""
    return b"".join(parse_code(code))


def default_filename(names: Iterable[str], extension: str = "h") -> str:
    """Suggested download name for already-stemmed image names.

    One image keeps its name as given (``logo.v2`` -> ``logo.v2.h``);
    several become ``animation``.
    """
    names = list(names)
    base = names[0] if len(names) == 1 else "animation"
    return f"{base or 'image'}.{extension}"


def save_code(code: Union[GeneratedCode, str], path: Union[str, Path]) -> Path:
    """Write generated code to disk as UTF-8."""
    path = Path(path)
    path.write_text(str(code), encoding="utf-8")
    return path
