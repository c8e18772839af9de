"""Main image processor orchestrating the conversion pipeline.

AIDEV-NOTE: process() is a pure function of (SourceImage, ProcessingOptions):
sampler -> quantizer (+ ditherer for mono) -> packer -> preview. Nothing is
cached between calls, so re-running with changed options always recomputes
from the source.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from PIL import Image

from models import (
    BatchFailure,
    BatchResult,
    ColorMode,
    ConversionResult,
    DrawMode,
    GeneratedCode,
    OutputOptions,
    ProcessingOptions,
    SourceImage,
)

from .codegen import generate_code, parse_bytes
from .packing import pack, unpack_bytes
from .quantization import quantize
from .sampler import sample_canvas


class ImageProcessor:
    """Converts images into packed byte arrays for embedded displays."""

    def __init__(self, options: Optional[ProcessingOptions] = None):
        self.options = options or ProcessingOptions()

    def load_image(self, file_path: Union[str, Path]) -> SourceImage:
        """Load and validate an image file.

        Args:
            file_path: Path to image file (PNG, JPG, BMP, GIF, ...)

        Returns:
            SourceImage named after the file stem

        Raises:
            ValueError: If file cannot be loaded or is invalid
        """
        try:
            with Image.open(file_path) as image:
                # AIDEV-NOTE: Always convert to RGBA for consistent processing
                rgba = image.convert("RGBA")
            return SourceImage.from_image(rgba, name=Path(file_path).stem)
        except Exception as e:
            raise ValueError(f"Failed to load image: {e}") from e

    def process(
        self,
        source: SourceImage,
        options: Optional[ProcessingOptions] = None,
    ) -> ConversionResult:
        """Run the full pipeline for one image.

        Args:
            source: Decoded source image
            options: Overrides the processor's options when given

        Returns:
            ConversionResult with packed bytes and device-view preview
        """
        options = options or self.options

        canvas = sample_canvas(source, options)
        quantized = quantize(canvas, options.color_target)
        byte_array = pack(quantized)

        preview = unpack_bytes(
            byte_array.data,
            byte_array.width,
            byte_array.height,
            byte_array.color_mode,
            byte_array.draw_mode,
        )
        preview.setflags(write=False)

        return ConversionResult(byte_array=byte_array, preview=preview, name=source.name)

    def process_batch(
        self,
        sources: Sequence[SourceImage],
        options: Optional[ProcessingOptions] = None,
        max_workers: int = 1,
    ) -> BatchResult:
        """Process several images, isolating per-image failures.

        Args:
            sources: Images in submission order
            options: Overrides the processor's options when given
            max_workers: Worker threads; 1 processes sequentially

        Returns:
            BatchResult with one slot per source, in submission order
        """
        options = options or self.options
        results: "list[Optional[ConversionResult]]" = [None] * len(sources)
        failures: "list[BatchFailure]" = []

        def run(index: int):
            try:
                results[index] = self.process(sources[index], options)
            except Exception as e:
                return BatchFailure(index=index, name=sources[index].name, message=str(e))
            return None

        if max_workers > 1 and len(sources) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                outcomes = list(executor.map(run, range(len(sources))))
        else:
            outcomes = [run(index) for index in range(len(sources))]

        for failure in outcomes:
            if failure is not None:
                print(f"Warning: could not convert image {failure.index} ({failure.name}): {failure.message}")
                failures.append(failure)

        return BatchResult(results=results, failures=failures)

    def generate_code(
        self,
        results: Union[BatchResult, Iterable[ConversionResult], ConversionResult],
        output_options: Optional[OutputOptions] = None,
    ) -> GeneratedCode:
        """Render results as C code, skipping failed batch slots."""
        if isinstance(results, BatchResult):
            results = results.succeeded
        elif not isinstance(results, ConversionResult):
            results = list(results)
        return generate_code(results, output_options or OutputOptions())

    def decode_code(
        self,
        code: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        color_mode: Optional[ColorMode] = None,
        draw_mode: Optional[DrawMode] = None,
    ):
        """Rebuild an RGBA preview from generated code.

        Missing shape arguments default to the processor's options.

        Returns:
            (height, width, 4) uint8 array, or None if the code holds no bytes
        """
        data = parse_bytes(code)
        if not data:
            return None
        return unpack_bytes(
            data,
            width or self.options.canvas_width,
            height or self.options.canvas_height,
            color_mode or self.options.color_mode,
            draw_mode or self.options.draw_mode,
        )


class RequestCoalescer:
    """Latest-wins bookkeeping for repeated processing requests.

    AIDEV-NOTE: Each request takes a generation number from begin(). When
    a result arrives, is_current() only returns True for the newest generation,
    so results from superseded requests are dropped instead of displayed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def begin(self) -> int:
        """Start a new request, superseding any in flight."""
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation
