"""Processing and output option controls."""

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QVBoxLayout,
    QWidget,
)

from models import (
    CANVAS_PRESETS,
    MAX_BYTES_PER_LINE,
    MAX_CANVAS_SIZE,
    BackgroundColor,
    ColorMode,
    Dithering,
    DrawMode,
    OutputFormat,
    OutputOptions,
    ProcessingOptions,
    Scaling,
    sanitize_identifier,
)
from ui.widgets import CollapsibleGroupBox, WidgetFactory

CUSTOM_PRESET = "Custom"


class OptionsPanel(QGroupBox):
    """Panel holding every ProcessingOptions / OutputOptions control.

    Widgets never mutate shared state. Each change rebuilds an immutable
    options object and emits it.
    """

    processing_changed = pyqtSignal(object)  # ProcessingOptions
    output_changed = pyqtSignal(object)  # OutputOptions

    def __init__(
        self,
        processing: ProcessingOptions,
        output: OutputOptions,
        parent: QWidget | None = None,
    ):
        super().__init__("Options", parent)
        self._processing = processing
        self._output = output
        self._updating_preset = False

        self._setup_ui()
        self._connect_signals()
        self._update_mono_controls()

    def _setup_ui(self):
        """Initialize the UI components."""
        layout = QVBoxLayout()
        self._create_canvas_group(layout)
        self._create_placement_group(layout)
        self._create_color_group(layout)
        self._create_output_group(layout)
        layout.addStretch()
        self.setLayout(layout)

    def _create_canvas_group(self, parent_layout: QVBoxLayout):
        group = CollapsibleGroupBox("Canvas")
        form = QFormLayout()

        presets = [(label, (w, h)) for label, w, h in CANVAS_PRESETS]
        presets.append((CUSTOM_PRESET, None))
        current = (self._processing.canvas_width, self._processing.canvas_height)
        self.preset_combo = WidgetFactory.create_combo(presets)
        index = WidgetFactory.find_data(self.preset_combo, current)
        self.preset_combo.setCurrentIndex(index if index >= 0 else len(presets) - 1)
        form.addRow("Preset:", self.preset_combo)

        self.width_spin = WidgetFactory.create_int_spinbox(
            1, MAX_CANVAS_SIZE, self._processing.canvas_width, " px"
        )
        form.addRow("Width:", self.width_spin)
        self.height_spin = WidgetFactory.create_int_spinbox(
            1, MAX_CANVAS_SIZE, self._processing.canvas_height, " px"
        )
        form.addRow("Height:", self.height_spin)

        self.background_combo = WidgetFactory.create_combo(
            [(b.value.capitalize(), b) for b in BackgroundColor],
            self._processing.background_color,
        )
        form.addRow("Background:", self.background_combo)

        group.setLayout(form)
        parent_layout.addWidget(group)

    def _create_placement_group(self, parent_layout: QVBoxLayout):
        group = CollapsibleGroupBox("Placement")
        form = QFormLayout()

        scaling_labels = {
            Scaling.ORIGINAL: "Original size",
            Scaling.FIT: "Scale to fit",
            Scaling.STRETCH: "Stretch to fill",
            Scaling.STRETCH_H: "Stretch horizontally",
            Scaling.STRETCH_V: "Stretch vertically",
        }
        self.scaling_combo = WidgetFactory.create_combo(
            [(scaling_labels[s], s) for s in Scaling], self._processing.scaling
        )
        form.addRow("Scaling:", self.scaling_combo)

        self.rotation_combo = WidgetFactory.create_combo(
            [(f"{r}°", r) for r in (0, 90, 180, 270)], self._processing.rotation
        )
        form.addRow("Rotation:", self.rotation_combo)

        self.flip_check = QCheckBox("Flip horizontally")
        self.flip_check.setChecked(self._processing.flip_h)
        form.addRow(self.flip_check)
        self.center_h_check = QCheckBox("Center horizontally")
        self.center_h_check.setChecked(self._processing.center_h)
        form.addRow(self.center_h_check)
        self.center_v_check = QCheckBox("Center vertically")
        self.center_v_check.setChecked(self._processing.center_v)
        form.addRow(self.center_v_check)

        group.setLayout(form)
        parent_layout.addWidget(group)

    def _create_color_group(self, parent_layout: QVBoxLayout):
        group = CollapsibleGroupBox("Color")
        form = QFormLayout()

        self.mode_combo = WidgetFactory.create_combo(
            [(m.label, m) for m in ColorMode], self._processing.color_mode
        )
        form.addRow("Mode:", self.mode_combo)

        self.threshold_slider, self.threshold_label = WidgetFactory.create_slider_with_label(
            0, 255, self._processing.threshold, tooltip="Luminance at or above this is lit"
        )
        threshold_row = QHBoxLayout()
        threshold_row.addWidget(self.threshold_slider)
        threshold_row.addWidget(self.threshold_label)
        form.addRow("Threshold:", threshold_row)

        self.dither_combo = WidgetFactory.create_combo(
            [(d.label, d) for d in Dithering], self._processing.dithering
        )
        form.addRow("Dithering:", self.dither_combo)

        self.draw_mode_combo = WidgetFactory.create_combo(
            [
                ("Horizontal (row-major)", DrawMode.HORIZONTAL),
                ("Vertical (column-major)", DrawMode.VERTICAL),
            ],
            self._processing.draw_mode,
        )
        form.addRow("Draw mode:", self.draw_mode_combo)

        self.invert_check = QCheckBox("Invert colors")
        self.invert_check.setChecked(self._processing.invert)
        form.addRow(self.invert_check)

        group.setLayout(form)
        parent_layout.addWidget(group)

    def _create_output_group(self, parent_layout: QVBoxLayout):
        group = CollapsibleGroupBox("Output")
        form = QFormLayout()

        self.name_edit = QLineEdit(self._output.variable_name)
        self.name_edit.setPlaceholderText("image")
        form.addRow("Variable:", self.name_edit)

        self.format_combo = WidgetFactory.create_combo(
            [(f.value.capitalize(), f) for f in OutputFormat], self._output.format
        )
        form.addRow("Format:", self.format_combo)

        self.bytes_per_line_spin = WidgetFactory.create_int_spinbox(
            1, MAX_BYTES_PER_LINE, self._output.bytes_per_line
        )
        form.addRow("Bytes/line:", self.bytes_per_line_spin)

        self.progmem_check = QCheckBox("PROGMEM")
        self.progmem_check.setChecked(self._output.progmem)
        form.addRow(self.progmem_check)
        self.include_size_check = QCheckBox("Include size #defines")
        self.include_size_check.setChecked(self._output.include_size)
        form.addRow(self.include_size_check)

        group.setLayout(form)
        parent_layout.addWidget(group)

    def _connect_signals(self):
        """Connect widget signals to option rebuilds."""
        self.preset_combo.currentIndexChanged.connect(self._on_preset_changed)
        self.width_spin.valueChanged.connect(self._on_size_changed)
        self.height_spin.valueChanged.connect(self._on_size_changed)

        for combo in (
            self.background_combo,
            self.scaling_combo,
            self.rotation_combo,
            self.mode_combo,
            self.dither_combo,
            self.draw_mode_combo,
        ):
            combo.currentIndexChanged.connect(self._emit_processing)
        for check in (
            self.flip_check,
            self.center_h_check,
            self.center_v_check,
            self.invert_check,
        ):
            check.toggled.connect(self._emit_processing)
        self.threshold_slider.valueChanged.connect(self._emit_processing)
        self.mode_combo.currentIndexChanged.connect(self._update_mono_controls)

        self.name_edit.textEdited.connect(self._on_name_edited)
        self.format_combo.currentIndexChanged.connect(self._emit_output)
        self.bytes_per_line_spin.valueChanged.connect(self._emit_output)
        self.progmem_check.toggled.connect(self._emit_output)
        self.include_size_check.toggled.connect(self._emit_output)

    # === Event Handlers ===

    def _on_preset_changed(self, _index: int):
        size = self.preset_combo.currentData()
        if size is None:
            return
        self._updating_preset = True
        self.width_spin.setValue(size[0])
        self.height_spin.setValue(size[1])
        self._updating_preset = False
        self._emit_processing()

    def _on_size_changed(self, _value: int):
        if self._updating_preset:
            return
        index = WidgetFactory.find_data(
            self.preset_combo, (self.width_spin.value(), self.height_spin.value())
        )
        self.preset_combo.blockSignals(True)
        self.preset_combo.setCurrentIndex(index if index >= 0 else self.preset_combo.count() - 1)
        self.preset_combo.blockSignals(False)
        self._emit_processing()

    def _on_name_edited(self, text: str):
        """Sanitize the variable name as it is typed."""
        cleaned = sanitize_identifier(text, fallback="")
        if cleaned != text:
            self.name_edit.setText(cleaned)
        self._emit_output()

    def _update_mono_controls(self, *_args):
        """Threshold, dithering and draw mode only apply to mono output."""
        is_mono = self.mode_combo.currentData() == ColorMode.MONO
        for widget in (self.threshold_slider, self.dither_combo, self.draw_mode_combo):
            widget.setEnabled(is_mono)

    def _emit_processing(self, *_args):
        self._processing = self.get_processing_options()
        self.processing_changed.emit(self._processing)

    def _emit_output(self, *_args):
        self._output = self.get_output_options()
        self.output_changed.emit(self._output)

    # === Public Methods ===

    def get_processing_options(self) -> ProcessingOptions:
        """Build processing options from current widget values."""
        return ProcessingOptions(
            canvas_width=self.width_spin.value(),
            canvas_height=self.height_spin.value(),
            background_color=self.background_combo.currentData(),
            scaling=self.scaling_combo.currentData(),
            center_h=self.center_h_check.isChecked(),
            center_v=self.center_v_check.isChecked(),
            rotation=self.rotation_combo.currentData(),
            flip_h=self.flip_check.isChecked(),
            color_mode=self.mode_combo.currentData(),
            threshold=self.threshold_slider.value(),
            invert=self.invert_check.isChecked(),
            dithering=self.dither_combo.currentData(),
            draw_mode=self.draw_mode_combo.currentData(),
        )

    def get_output_options(self) -> OutputOptions:
        """Build output options from current widget values."""
        return OutputOptions(
            variable_name=self.name_edit.text(),
            format=self.format_combo.currentData(),
            progmem=self.progmem_check.isChecked(),
            include_size=self.include_size_check.isChecked(),
            bytes_per_line=self.bytes_per_line_spin.value(),
        )
