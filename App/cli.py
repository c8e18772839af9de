"""Command-line converter: images in, C header out.

Examples:
    img2bytes logo.png -o logo.h
    img2bytes logo.png --preset "240×240 (ST7789)" --mode rgb565
    img2bytes frame*.png --name frog --dither atkinson -o frog.h

Exit status is 1 when nothing could be converted and 2 when any image
failed to load or convert.
"""

import argparse
import sys
from pathlib import Path

from img2bytes import ImageProcessor
from img2bytes.codegen import default_filename, save_code
from models import (
    CANVAS_PRESETS,
    BackgroundColor,
    ColorMode,
    Dithering,
    DrawMode,
    OutputFormat,
    OutputOptions,
    ProcessingOptions,
    Scaling,
)


def _choices(enum_cls):
    return [member.value for member in enum_cls]


def build_parser() -> argparse.ArgumentParser:
    defaults = ProcessingOptions()
    output_defaults = OutputOptions()

    parser = argparse.ArgumentParser(
        prog="img2bytes",
        description="Convert images to C/C++ byte arrays for OLED/LCD displays",
    )
    parser.add_argument("images", nargs="+", help="input image(s); several become animation frames")
    parser.add_argument("-o", "--out", help="output file ('-' for stdout, default: <image>.h)")

    canvas = parser.add_argument_group("canvas")
    canvas.add_argument("--width", type=int, default=defaults.canvas_width)
    canvas.add_argument("--height", type=int, default=defaults.canvas_height)
    canvas.add_argument(
        "--preset",
        choices=[label for label, _, _ in CANVAS_PRESETS],
        help="use a display preset instead of --width/--height",
    )
    canvas.add_argument(
        "--background", choices=_choices(BackgroundColor), default=defaults.background_color.value
    )
    canvas.add_argument("--scaling", choices=_choices(Scaling), default=defaults.scaling.value)
    canvas.add_argument("--rotate", type=int, choices=[0, 90, 180, 270], default=defaults.rotation)
    canvas.add_argument("--flip", action="store_true", help="mirror horizontally")
    canvas.add_argument("--no-center-h", dest="center_h", action="store_false")
    canvas.add_argument("--no-center-v", dest="center_v", action="store_false")

    color = parser.add_argument_group("color")
    color.add_argument("--mode", choices=_choices(ColorMode), default=defaults.color_mode.value)
    color.add_argument("--threshold", type=int, default=defaults.threshold, help="0-255, mono only")
    color.add_argument("--dither", choices=_choices(Dithering), default=defaults.dithering.value)
    color.add_argument("--draw-mode", choices=_choices(DrawMode), default=defaults.draw_mode.value)
    color.add_argument("--invert", action="store_true")

    output = parser.add_argument_group("output")
    output.add_argument("--name", default=output_defaults.variable_name, help="C variable name")
    output.add_argument("--format", choices=_choices(OutputFormat), default=output_defaults.format.value)
    output.add_argument("--no-progmem", dest="progmem", action="store_false")
    output.add_argument("--no-size", dest="include_size", action="store_false")
    output.add_argument("--bytes-per-line", type=int, default=output_defaults.bytes_per_line)

    return parser


def options_from_args(args: argparse.Namespace) -> "tuple[ProcessingOptions, OutputOptions]":
    """Build validated options from parsed arguments.

    Raises:
        ValueError: If a value is out of range
    """
    width, height = args.width, args.height
    if args.preset:
        for label, preset_width, preset_height in CANVAS_PRESETS:
            if label == args.preset:
                width, height = preset_width, preset_height

    processing = ProcessingOptions(
        canvas_width=width,
        canvas_height=height,
        background_color=args.background,
        scaling=args.scaling,
        center_h=args.center_h,
        center_v=args.center_v,
        rotation=args.rotate,
        flip_h=args.flip,
        color_mode=args.mode,
        threshold=args.threshold,
        invert=args.invert,
        dithering=args.dither,
        draw_mode=args.draw_mode,
    )
    output = OutputOptions(
        variable_name=args.name,
        format=args.format,
        progmem=args.progmem,
        include_size=args.include_size,
        bytes_per_line=args.bytes_per_line,
    )
    return processing, output


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        processing, output = options_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    processor = ImageProcessor(processing)

    sources = []
    load_failures = 0
    for path in args.images:
        try:
            sources.append(processor.load_image(path))
        except ValueError as e:
            load_failures += 1
            print(f"Warning: skipping {path}: {e}", file=sys.stderr)

    batch = processor.process_batch(sources)
    code = processor.generate_code(batch, output)
    if code.is_empty:
        print("Error: nothing to generate", file=sys.stderr)
        return 1

    if args.out == "-":
        sys.stdout.write(code.text)
        return 0 if batch.ok and not load_failures else 2

    out_path = Path(args.out) if args.out else Path(default_filename([s.name for s in sources]))
    save_code(code, out_path)
    print(
        f"✓ Wrote {out_path} ({code.frame_count} frame(s), {code.total_bytes} bytes, "
        f"{processing.canvas_width}x{processing.canvas_height} {processing.color_mode.value})"
    )
    return 0 if batch.ok and not load_failures else 2


if __name__ == "__main__":
    sys.exit(main())
