"""Generated code output panel."""

from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
)

from img2bytes.codegen import save_code
from models import GeneratedCode
from ui.styles import FONTS, SIZES


class CodePanel(QGroupBox):
    """Read-only view of the generated C code with copy and save actions."""

    def __init__(self, parent=None):
        super().__init__("Generated Code", parent)
        self.code = GeneratedCode.empty()
        self.suggested_name = "image.h"
        self._setup_ui()

    def _setup_ui(self):
        """Initialize the UI components."""
        layout = QVBoxLayout()

        self.editor = QPlainTextEdit()
        self.editor.setReadOnly(True)
        self.editor.setFont(FONTS.CODE)
        self.editor.setMinimumHeight(SIZES.CODE_MIN_HEIGHT)
        self.editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        layout.addWidget(self.editor)

        buttons = QHBoxLayout()
        self.copy_btn = QPushButton("Copy")
        self.copy_btn.setMinimumWidth(SIZES.BUTTON_MIN_WIDTH)
        self.copy_btn.clicked.connect(self._on_copy_clicked)
        buttons.addWidget(self.copy_btn)

        self.save_btn = QPushButton("Save .h…")
        self.save_btn.setMinimumWidth(SIZES.BUTTON_MIN_WIDTH)
        self.save_btn.clicked.connect(self._on_save_clicked)
        buttons.addWidget(self.save_btn)

        buttons.addStretch()
        self.status_label = QLabel("")
        buttons.addWidget(self.status_label)
        layout.addLayout(buttons)

        self.setLayout(layout)
        self.set_code(self.code)

    def set_code(self, code: GeneratedCode, suggested_name: str | None = None):
        """Display new code, keeping the scroll position."""
        self.code = code
        if suggested_name:
            self.suggested_name = suggested_name

        scrollbar = self.editor.verticalScrollBar()
        position = scrollbar.value() if scrollbar else 0
        self.editor.setPlainText(code.text)
        if scrollbar:
            scrollbar.setValue(position)

        self.copy_btn.setEnabled(not code.is_empty)
        self.save_btn.setEnabled(not code.is_empty)
        self.status_label.setText("")

    def _on_copy_clicked(self):
        clipboard = QApplication.clipboard()
        if clipboard is None:
            self.status_label.setText("Clipboard unavailable")
            return
        clipboard.setText(self.code.text)
        self.status_label.setText("Copied!")

    def _on_save_clicked(self):
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Generated Code",
            self.suggested_name,
            "C Header (*.h);;Text (*.txt);;All Files (*)",
        )
        if not file_path:
            return
        try:
            saved = save_code(self.code, file_path)
            self.status_label.setText(f"Saved {saved.name}")
        except OSError as e:
            self.status_label.setText(f"Error: {e}")
