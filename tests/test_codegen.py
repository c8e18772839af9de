import numpy as np
import pytest
from PIL import Image

from img2bytes import ImageProcessor
from img2bytes.codegen import (
    HEADER,
    default_filename,
    format_array,
    format_byte,
    generate_code,
    parse_bytes,
    parse_code,
    save_code,
)
from models import ByteArray, ColorMode, ConversionResult, GeneratedCode, OutputFormat, OutputOptions


def result(data, width=None, height=1, name="image", color_mode=ColorMode.GRAYSCALE):
    width = width if width is not None else len(data)
    return ConversionResult(
        byte_array=ByteArray(data=bytes(data), width=width, height=height, color_mode=color_mode),
        preview=np.zeros((height, max(width, 1), 4), dtype=np.uint8),
        name=name,
    )


@pytest.mark.parametrize(
    "value, output_format, expected",
    [
        (0x0A, OutputFormat.HEX, "0x0A"),
        (255, OutputFormat.HEX, "0xFF"),
        (7, OutputFormat.DECIMAL, "  7"),
        (200, OutputFormat.DECIMAL, "200"),
        (5, OutputFormat.BINARY, "0b00000101"),
    ],
)
def test_format_byte(value, output_format, expected):
    assert format_byte(value, output_format) == expected


def test_format_array_wraps_lines():
    lines = format_array("img", bytes(range(5)), OutputOptions(bytes_per_line=2))
    assert lines == [
        "const unsigned char img[] PROGMEM = {",
        "  0x00, 0x01,",
        "  0x02, 0x03,",
        "  0x04",
        "};",
    ]


class TestSingleImage:
    def test_layout(self):
        code = generate_code(result([1, 2, 3, 4], width=2, height=2), OutputOptions())
        lines = code.text.splitlines()

        assert lines[0] == HEADER
        assert "// Dimensions: 2x2" in lines
        assert "// Color Mode: GRAYSCALE" in lines
        assert "// Total Bytes: 4" in lines
        assert "#define IMAGE_WIDTH 2" in lines
        assert "#define IMAGE_HEIGHT 2" in lines
        assert "const unsigned char image[] PROGMEM = {" in lines
        assert "  0x01, 0x02, 0x03, 0x04" in lines
        assert code.text.endswith("};\n")
        assert code.frame_count == 1
        assert code.total_bytes == 4

    def test_optional_parts_off(self):
        options = OutputOptions(variable_name="logo", progmem=False, include_size=False)
        code = generate_code(result([9]), options)
        assert "#define" not in code.text
        assert "PROGMEM" not in code.text
        assert "const unsigned char logo[] = {" in code.text

    def test_macros_use_upper_case_name(self):
        code = generate_code(result([1]), OutputOptions(variable_name="splash_v2"))
        assert "#define SPLASH_V2_WIDTH 1" in code.text
        assert "FRAME_COUNT" not in code.text

    def test_accepts_single_item_list(self):
        assert generate_code([result([1, 2])], OutputOptions()).text == generate_code(
            result([1, 2]), OutputOptions()
        ).text


class TestAnimation:
    def test_frames_in_submission_order(self):
        frames = [result([1, 2], name="walk1"), result([3, 4], name="walk2")]
        code = generate_code(frames, OutputOptions(variable_name="frog"))
        text = code.text

        assert "// Animation frames: 2" in text
        assert "#define FROG_FRAME_COUNT 2" in text
        assert "// Frame 0: walk1" in text
        assert text.index("frog_frame0[]") < text.index("frog_frame1[]")
        assert "const unsigned char* const frog_frames[] PROGMEM = {" in text
        table = text[text.index("frog_frames[]") :]
        assert table.index("frog_frame0,") < table.index("frog_frame1\n")
        assert code.frame_count == 2
        assert code.total_bytes == 4

    def test_parse_returns_each_frame(self):
        frames = [result([1, 2]), result([3, 4]), result([5, 6])]
        code = generate_code(frames, OutputOptions())
        assert parse_code(code.text) == [b"\x01\x02", b"\x03\x04", b"\x05\x06"]


class TestEmpty:
    def test_no_results(self):
        code = generate_code([], OutputOptions())
        assert code == GeneratedCode.empty()
        assert code.is_empty

    def test_zero_byte_result(self):
        assert generate_code(result([]), OutputOptions()).is_empty

    def test_empty_has_no_array(self):
        assert parse_bytes(GeneratedCode.empty().text) == b""


@pytest.mark.parametrize("output_format", list(OutputFormat))
@pytest.mark.parametrize("bytes_per_line", [1, 7, 16])
def test_parse_recovers_bytes(output_format, bytes_per_line):
    data = bytes(range(0, 256, 3))
    options = OutputOptions(format=output_format, bytes_per_line=bytes_per_line)
    assert parse_bytes(generate_code(result(data), options).text) == data


def test_parse_ignores_comments_and_large_values():
    code = """
    // const unsigned char fake[] = { 0x01 };
    /* const unsigned char other[] = { 0x02 }; */
    const unsigned char real[] = { 0x10, 300, 0b00000011, 42 };
    """
    assert parse_code(code) == [bytes([0x10, 3, 42])]


def test_variable_name_is_sanitized():
    code = generate_code(result([1]), OutputOptions(variable_name="2 cool-logo"))
    assert "const unsigned char _2coollogo[]" in code.text
    assert "#define _2COOLLOGO_WIDTH 1" in code.text


@pytest.mark.parametrize(
    "names, expected",
    [
        (["logo"], "logo.h"),
        (["logo.v2"], "logo.v2.h"),
        (["a", "b"], "animation.h"),
        ([], "animation.h"),
        ([""], "image.h"),
    ],
)
def test_default_filename(names, expected):
    assert default_filename(names) == expected


def test_default_filename_keeps_dotted_stem(tmp_path):
    path = tmp_path / "logo.v2.png"
    Image.new("RGB", (4, 4)).save(path)
    source = ImageProcessor().load_image(path)
    assert default_filename([source.name]) == "logo.v2.h"


def test_save_code(tmp_path):
    code = generate_code(result([1, 2, 3]), OutputOptions())
    path = save_code(code, tmp_path / "out.h")
    assert path.read_text(encoding="utf-8") == code.text
