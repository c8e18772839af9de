"""UI components for the Img2Bytes converter.

This package contains modular UI panels that can be easily rearranged
in the application layout.
"""

from ui.code_panel import CodePanel
from ui.main_window import Img2BytesWindow
from ui.options_panel import OptionsPanel
from ui.preview_panel import PreviewPanel

__all__ = [
    "Img2BytesWindow",
    "OptionsPanel",
    "PreviewPanel",
    "CodePanel",
]
