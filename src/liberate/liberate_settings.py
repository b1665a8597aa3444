"""Settings module for the liberate-case pass."""

from dataclasses import dataclass
import json
import os
from typing import Any

from liberate.liberate_case import DEFAULT_THRESHOLD
from liberate.liberate_error import LiberateSettingsError


@dataclass
class LiberateSettings:
    """
    Settings controlling the liberate-case pass.
    """
    liberate_case: bool = True
    threshold: int | None = DEFAULT_THRESHOLD  # None means no size limit
    dump_output: bool = False

    def __post_init__(self) -> None:
        self.validate()

    @classmethod
    def create_default(cls) -> "LiberateSettings":
        """Create a new LiberateSettings object with default values."""
        return cls(
            liberate_case=True,
            threshold=DEFAULT_THRESHOLD,
            dump_output=False
        )

    def validate(self) -> None:
        """
        Check the settings are usable.

        Raises:
            LiberateSettingsError: If a flag is not a boolean, or the threshold is
                not a non-negative integer or None
        """
        for key, value in (("liberateCase", self.liberate_case), ("dumpOutput", self.dump_output)):
            if not isinstance(value, bool):
                raise LiberateSettingsError(f"{key} must be true or false, got {value!r}")

        threshold: Any = self.threshold
        if threshold is None:
            return

        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise LiberateSettingsError(f"Threshold must be an integer or null, got {threshold!r}")

        if threshold < 0:
            raise LiberateSettingsError(f"Threshold must not be negative, got {threshold}")

    @classmethod
    def load(cls, path: str) -> "LiberateSettings":
        """
        Load settings from file.

        Args:
            path: Path to the settings file

        Returns:
            LiberateSettings object with loaded values

        Raises:
            json.JSONDecodeError: If file contains invalid JSON
            LiberateSettingsError: If the file contains invalid settings
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise LiberateSettingsError(f"Settings file {path} must contain a JSON object")

        # Missing keys fall back to the defaults
        defaults = cls.create_default()
        return cls(
            liberate_case=data.get("liberateCase", defaults.liberate_case),
            threshold=data.get("threshold", defaults.threshold),
            dump_output=data.get("dumpOutput", defaults.dump_output)
        )

    def save(self, path: str) -> None:
        """
        Save settings to file.

        Args:
            path: Path to save the settings file

        Raises:
            OSError: If there's an issue creating the directory or writing the file
        """
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        data = {
            "liberateCase": self.liberate_case,
            "threshold": self.threshold,
            "dumpOutput": self.dump_output,
        }

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4)
