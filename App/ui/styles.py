"""Centralized styling constants for the Img2Bytes UI.

This module consolidates colors, fonts, and sizes used throughout the application
to ensure consistency and easier maintenance.
"""

from PyQt6.QtGui import QFont


class StatusColors:
    """Status line colors."""

    OK = "green"
    BUSY = "orange"
    ERROR = "red"
    IDLE = "gray"


class ThemeColors:
    """Application theme colors."""

    BORDER_DEFAULT = "gray"
    PREVIEW_BACKDROP = "#404040"


class Fonts:
    """Standard application fonts."""

    CODE = QFont("Courier", 9)


class Sizes:
    """Standard widget sizes and constraints."""

    PREVIEW_MIN_SIZE = (256, 128)
    CODE_MIN_HEIGHT = 160
    IMAGE_LIST_MIN_WIDTH = 180
    OPTIONS_MIN_WIDTH = 280
    BUTTON_MIN_WIDTH = 100

    # Delay before reprocessing after an option change
    DEBOUNCE_MS = 150
    # Frame interval for animation preview
    ANIMATION_MS = 200


STATUS = StatusColors
COLORS = ThemeColors
FONTS = Fonts
SIZES = Sizes


def status_stylesheet(state: str) -> str:
    """Generate status label stylesheet for a state name.

    Args:
        state: 'OK', 'BUSY', 'ERROR' or 'IDLE'

    Returns:
        CSS stylesheet string with appropriate color
    """
    color = getattr(StatusColors, state.upper(), StatusColors.IDLE)
    return f"color: {color};"


def preview_stylesheet() -> str:
    """Stylesheet for the preview area."""
    return (
        f"border: 1px solid {ThemeColors.BORDER_DEFAULT}; "
        f"background-color: {ThemeColors.PREVIEW_BACKDROP};"
    )
