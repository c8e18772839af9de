"""Img2Bytes Converter - Main entry point."""

import sys

from PyQt6.QtWidgets import QApplication

from ui.main_window import Img2BytesWindow


def main():
    """Launch the Img2Bytes converter application."""
    app = QApplication(sys.argv)

    app.setApplicationDisplayName("Img2Bytes Converter")
    app.setApplicationName("Img2BytesConverter")

    window = Img2BytesWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
