"""Main application window for the Img2Bytes converter."""

from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt, QThread, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QListWidget,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from config_manager import ConfigManager
from img2bytes import ImageProcessor, RequestCoalescer
from img2bytes.codegen import default_filename
from models import BatchResult, OutputOptions, ProcessingOptions, SourceImage
from ui.code_panel import CodePanel
from ui.options_panel import OptionsPanel
from ui.preview_panel import PreviewPanel
from ui.styles import SIZES, status_stylesheet

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp);;All Files (*)"


class ProcessingThread(QThread):
    """Background thread for batch conversion to avoid blocking the UI."""

    converted = pyqtSignal(int, object)  # generation, BatchResult
    failed = pyqtSignal(int, str)  # generation, error message

    def __init__(
        self,
        generation: int,
        sources: "list[SourceImage]",
        options: ProcessingOptions,
    ):
        super().__init__()
        self.generation = generation
        self.sources = sources
        self.options = options

    def run(self):
        """Execute the batch in background."""
        try:
            result = ImageProcessor(self.options).process_batch(self.sources)
            self.converted.emit(self.generation, result)
        except Exception as e:
            self.failed.emit(self.generation, str(e))


class Img2BytesWindow(QMainWindow):
    """Main window: image list, options, preview and generated code."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Img2Bytes Converter v0.1.0")
        self.setMinimumSize(1100, 700)
        self.setAcceptDrops(True)

        # Application state
        self.config_manager = ConfigManager()
        self.processing_options, self.output_options = self.config_manager.load()
        self.processor = ImageProcessor(self.processing_options)
        self.sources: "list[SourceImage]" = []
        self.batch: Optional[BatchResult] = None

        # AIDEV-NOTE: Option changes restart the debounce timer; each run
        # takes a new generation and only the newest generation's result is
        # shown. Older threads finish in the background and are ignored.
        self.coalescer = RequestCoalescer()
        self.debounce_timer = QTimer(self)
        self.debounce_timer.setSingleShot(True)
        self.debounce_timer.setInterval(SIZES.DEBOUNCE_MS)
        self.debounce_timer.timeout.connect(self._start_processing)
        self.threads: "list[ProcessingThread]" = []

        self._setup_ui()
        self._connect_signals()
        self._set_status("Drop images here or use Add…", "IDLE")

    def _setup_ui(self):
        """Initialize the user interface."""
        self._create_menu_bar()

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self._create_image_list())

        center = QSplitter(Qt.Orientation.Vertical)
        self.preview_panel = PreviewPanel()
        self.code_panel = CodePanel()
        center.addWidget(self.preview_panel)
        center.addWidget(self.code_panel)
        splitter.addWidget(center)

        self.options_panel = OptionsPanel(self.processing_options, self.output_options)
        scroll = QScrollArea()
        scroll.setWidget(self.options_panel)
        scroll.setWidgetResizable(True)
        scroll.setMinimumWidth(SIZES.OPTIONS_MIN_WIDTH)
        splitter.addWidget(scroll)

        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

    def _create_menu_bar(self):
        menubar = self.menuBar()
        if menubar is None:
            return

        file_menu = menubar.addMenu("&File")
        if file_menu is None:
            return

        add_action = QAction("Add Images…", self)
        add_action.setShortcut(QKeySequence.StandardKey.Open)
        add_action.triggered.connect(self._on_add_clicked)
        file_menu.addAction(add_action)

        save_action = QAction("Save Code…", self)
        save_action.setShortcut(QKeySequence.StandardKey.Save)
        save_action.triggered.connect(lambda: self.code_panel.save_btn.click())
        file_menu.addAction(save_action)

        file_menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def _create_image_list(self) -> QWidget:
        group = QGroupBox("Images")
        layout = QVBoxLayout()

        self.image_list = QListWidget()
        self.image_list.setMinimumWidth(SIZES.IMAGE_LIST_MIN_WIDTH)
        layout.addWidget(self.image_list)

        buttons = QHBoxLayout()
        self.add_btn = QPushButton("Add…")
        self.remove_btn = QPushButton("Remove")
        self.clear_btn = QPushButton("Clear")
        for btn in (self.add_btn, self.remove_btn, self.clear_btn):
            buttons.addWidget(btn)
        layout.addLayout(buttons)

        group.setLayout(layout)
        return group

    def _connect_signals(self):
        """Connect panel signals to handlers."""
        self.add_btn.clicked.connect(self._on_add_clicked)
        self.remove_btn.clicked.connect(self._on_remove_clicked)
        self.clear_btn.clicked.connect(self._on_clear_clicked)
        self.image_list.currentRowChanged.connect(self.preview_panel.show_frame)
        self.preview_panel.frame_changed.connect(self._on_frame_changed)
        self.options_panel.processing_changed.connect(self._on_processing_changed)
        self.options_panel.output_changed.connect(self._on_output_changed)

    # === Image list ===

    def add_images(self, paths: "list[str]"):
        """Load image files and append them as frames."""
        failed = []
        for path in paths:
            try:
                source = self.processor.load_image(path)
            except ValueError as e:
                failed.append(f"{Path(path).name}: {e}")
                continue
            self.sources.append(source)
            self.image_list.addItem(f"{source.name} ({source.width}x{source.height})")

        if failed:
            self._set_status("; ".join(failed), "ERROR")
        if self.sources and self.image_list.currentRow() < 0:
            self.image_list.setCurrentRow(0)
        self._schedule_processing()

    def _on_add_clicked(self):
        paths, _ = QFileDialog.getOpenFileNames(self, "Add Images", "", IMAGE_FILTER)
        if paths:
            self.add_images(paths)

    def _on_remove_clicked(self):
        row = self.image_list.currentRow()
        if row < 0:
            return
        self.image_list.takeItem(row)
        del self.sources[row]
        self._schedule_processing()

    def _on_clear_clicked(self):
        self.sources = []
        self.image_list.clear()
        self._schedule_processing()

    def _on_frame_changed(self, index: int):
        self.image_list.blockSignals(True)
        self.image_list.setCurrentRow(index)
        self.image_list.blockSignals(False)

    def dragEnterEvent(self, event):
        mime = event.mimeData()
        if mime is not None and mime.hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event):
        mime = event.mimeData()
        if mime is None:
            return
        paths = [url.toLocalFile() for url in mime.urls() if url.isLocalFile()]
        if paths:
            self.add_images(paths)
            event.acceptProposedAction()

    # === Processing ===

    def _on_processing_changed(self, options: ProcessingOptions):
        self.processing_options = options
        self.processor.options = options
        self._schedule_processing()

    def _on_output_changed(self, options: OutputOptions):
        self.output_options = options
        self._update_code()

    def _schedule_processing(self):
        self.debounce_timer.start()

    def _start_processing(self):
        """Kick off a conversion of every image with the current options."""
        generation = self.coalescer.begin()

        if not self.sources:
            self.batch = None
            self.preview_panel.clear()
            self._update_code()
            self._set_status("Drop images here or use Add…", "IDLE")
            return

        self._set_status("Processing…", "BUSY")
        thread = ProcessingThread(generation, list(self.sources), self.processing_options)
        thread.converted.connect(self._on_processing_finished)
        thread.failed.connect(self._on_processing_error)
        # Built-in QThread.finished fires once run() has returned
        thread.finished.connect(lambda: self._release_thread(thread))
        self.threads.append(thread)
        thread.start()

    def _release_thread(self, thread: ProcessingThread):
        if thread in self.threads:
            self.threads.remove(thread)

    def _on_processing_finished(self, generation: int, batch: BatchResult):
        """Handle completed conversion; stale generations are dropped."""
        if not self.coalescer.is_current(generation):
            return

        self.batch = batch
        self.preview_panel.set_results(batch.results)
        self.preview_panel.show_frame(max(0, self.image_list.currentRow()))
        self._update_code()

        if batch.failures:
            details = ", ".join(f"{f.name}: {f.message}" for f in batch.failures)
            self._set_status(f"{len(batch.failures)} image(s) failed: {details}", "ERROR")
        else:
            total = sum(r.total_bytes for r in batch.succeeded)
            self._set_status(f"Converted {len(batch.succeeded)} image(s), {total} bytes", "OK")

    def _on_processing_error(self, generation: int, error_msg: str):
        if not self.coalescer.is_current(generation):
            return
        pretty_msg = error_msg.replace("\n", " ").strip()
        self._set_status(f"Error: {pretty_msg}", "ERROR")

    def _update_code(self):
        if self.batch is None:
            self.code_panel.set_code(self.processor.generate_code([], self.output_options))
            return
        code = self.processor.generate_code(self.batch, self.output_options)
        names = [r.name for r in self.batch.succeeded]
        self.code_panel.set_code(code, default_filename(names))

    def _set_status(self, message: str, state: str):
        status_bar = self.statusBar()
        if status_bar is None:
            return
        status_bar.setStyleSheet(status_stylesheet(state))
        status_bar.showMessage(message)

    # === Window events ===

    def closeEvent(self, event):
        """Persist options and wait for workers before closing."""
        success, error = self.config_manager.save(
            self.options_panel.get_processing_options(),
            self.options_panel.get_output_options(),
        )
        if not success:
            print(f"Warning: Could not save config file: {error}")

        for thread in list(self.threads):
            thread.wait()
        super().closeEvent(event)
