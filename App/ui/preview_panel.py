"""Device-view preview with frame animation."""

from __future__ import annotations

import numpy as np
from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QImage, QPixmap
from PyQt6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from models import ConversionResult
from ui.styles import SIZES, preview_stylesheet


def rgba_to_pixmap(pixels: np.ndarray) -> QPixmap:
    """Convert an (H, W, 4) uint8 array to a QPixmap."""
    height, width = pixels.shape[:2]
    data = np.ascontiguousarray(pixels, dtype=np.uint8)
    image = QImage(data.data, width, height, width * 4, QImage.Format.Format_RGBA8888)
    # QImage borrows the buffer; copy before data goes out of scope
    return QPixmap.fromImage(image.copy())


class PreviewPanel(QGroupBox):
    """Shows what the display will render for the selected frame."""

    frame_changed = pyqtSignal(int)

    def __init__(self, parent: QWidget | None = None):
        super().__init__("Preview", parent)
        self.results: list[ConversionResult | None] = []
        self.current_index = 0

        self.animation_timer = QTimer(self)
        self.animation_timer.setInterval(SIZES.ANIMATION_MS)
        self.animation_timer.timeout.connect(self._next_frame)

        self._setup_ui()

    def _setup_ui(self):
        """Initialize the UI components."""
        layout = QVBoxLayout()

        self.image_label = QLabel("Add an image to start")
        self.image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.image_label.setMinimumSize(*SIZES.PREVIEW_MIN_SIZE)
        self.image_label.setStyleSheet(preview_stylesheet())
        layout.addWidget(self.image_label, stretch=1)

        controls = QHBoxLayout()
        self.play_btn = QPushButton("▶ Play")
        self.play_btn.setCheckable(True)
        self.play_btn.setEnabled(False)
        self.play_btn.toggled.connect(self._on_play_toggled)
        controls.addWidget(self.play_btn)

        self.frame_label = QLabel("")
        controls.addWidget(self.frame_label)
        controls.addStretch()

        self.stats_label = QLabel("")
        controls.addWidget(self.stats_label)
        layout.addLayout(controls)

        self.setLayout(layout)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._render()

    # === Public Methods ===

    def set_results(self, results: list[ConversionResult | None]):
        """Replace the displayed results (one per image, failures as None)."""
        self.results = list(results)
        if self.current_index >= len(self.results):
            self.current_index = 0

        animatable = len(self.results) > 1
        self.play_btn.setEnabled(animatable)
        if not animatable:
            self.play_btn.setChecked(False)
        self._render()

    def show_frame(self, index: int):
        """Select which frame is shown while not animating."""
        if 0 <= index < len(self.results):
            self.current_index = index
            self._render()

    def clear(self):
        self.play_btn.setChecked(False)
        self.results = []
        self.current_index = 0
        self.image_label.clear()
        self.image_label.setText("Add an image to start")
        self.frame_label.setText("")
        self.stats_label.setText("")

    # === Internal ===

    def _on_play_toggled(self, playing: bool):
        self.play_btn.setText("■ Stop" if playing else "▶ Play")
        if playing:
            self.animation_timer.start()
        else:
            self.animation_timer.stop()

    def _next_frame(self):
        if not self.results:
            return
        self.current_index = (self.current_index + 1) % len(self.results)
        self.frame_changed.emit(self.current_index)
        self._render()

    def _render(self):
        if not self.results:
            return

        result = self.results[self.current_index]
        self.frame_label.setText(f"Frame {self.current_index + 1}/{len(self.results)}")
        if result is None:
            self.image_label.clear()
            self.image_label.setText("Conversion failed for this image")
            self.stats_label.setText("")
            return

        pixmap = rgba_to_pixmap(result.preview)
        # Integer upscaling keeps single pixels crisp
        target = self.image_label.size()
        factor = max(1, min(target.width() // result.width, target.height() // result.height))
        pixmap = pixmap.scaled(
            result.width * factor,
            result.height * factor,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.FastTransformation,
        )
        self.image_label.setPixmap(pixmap)
        self.stats_label.setText(
            f"{result.width}x{result.height} · "
            f"{result.byte_array.color_mode.value.upper()} · {result.total_bytes} bytes"
        )
