"""Configuration persistence manager for the Img2Bytes converter.

This module handles loading and saving of processing and output options
to/from a JSON file.
"""

import json
from pathlib import Path
from typing import Optional, Tuple

from models import CONFIG_FILE, OutputOptions, ProcessingOptions


class ConfigManager:
    """Handles loading and saving of converter options."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.img2bytes_config.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> Tuple[ProcessingOptions, OutputOptions]:
        """Load options from file, returning defaults if not found.

        Returns:
            Tuple of (ProcessingOptions, OutputOptions) with loaded or default values

        AIDEV-NOTE: Values pass through from_dict, which clamps numbers and
        falls back to defaults for unknown enum strings. A bad file never
        stops the app from starting.
        """
        processing = ProcessingOptions()
        output = OutputOptions()

        try:
            if self.config_path.exists():
                with open(self.config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("top-level JSON value is not an object")
                processing = ProcessingOptions.from_dict(data.get("processing") or {})
                output = OutputOptions.from_dict(data.get("output") or {})
                print(f"✓ Loaded configuration from {self.config_path}")
        except Exception as e:
            print(f"Warning: Could not load config file: {e}")

        return processing, output

    def save(
        self, processing: ProcessingOptions, output: OutputOptions
    ) -> Tuple[bool, Optional[str]]:
        """Save options to file.

        Args:
            processing: Processing options to save
            output: Output options to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        data = {
            "processing": processing.to_dict(),
            "output": output.to_dict(),
        }
        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            return True, None
        except Exception as e:
            return False, str(e)
