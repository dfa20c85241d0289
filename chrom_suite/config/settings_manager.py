from datetime import datetime
import logging
import os

import pandas as pd

from ..utils import utils


DEFAULT_SETTINGS_PATH = os.path.join("resources", "templates", "default_settings.csv")


def _to_bool(value) -> bool:
    """Interpret a CSV cell ('True', 'false', 1, ...) as a boolean."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1", "yes"):
            return True
        if text in ("false", "0", "no", ""):
            return False
        raise ValueError(f"Not a boolean value: {value!r}")
    return bool(value)


class SettingsManager:
    """Handles settings import, export, and reset operations.

    Settings are stored in a two column CSV file (`Setting,Value`). A fresh
    manager starts from the defaults shipped with the package.

    Attributes:
        settings (dict): The current settings.
    """

    # Setting name -> conversion applied to values read from file.
    SETTING_TYPES = {
        # Smoothing settings
        "savgol_polynomial_order": int,
        "savgol_frame_length": int,
        # Merge settings
        "merge_rt_resolution": float,
        "merge_add_meta": _to_bool,
    }

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.settings = {}
        self.reset_settings()

    def export_settings(self, save_path: str | None = None) -> str:
        """Export all settings to a CSV file.

        Args:
            save_path: Path of the CSV file. Defaults to a time stamped file
                in the current working directory.

        Returns:
            The path the settings were written to.
        """
        if not save_path:
            current_datetime = datetime.now().strftime("%d-%m-%Y_%H%M")
            save_path = os.path.join(
                os.getcwd(), f"{current_datetime}_chrom_suite_settings.csv"
            )

        settings = self.collect_settings()
        try:
            with open(save_path, "w", encoding="utf-8") as f:
                f.write("Setting,Value\n")
                for key, value in settings.items():
                    f.write(f"{key},{value}\n")
        except OSError:
            self.logger.exception(f"Could not export settings to {save_path}")
            raise

        self.logger.info(f"Settings exported to: {save_path}")
        return save_path

    def import_settings(self, csv_path: str) -> None:
        """Import settings from a CSV file.

        Keep existing values if a setting is missing from the CSV file.

        Args:
            csv_path: Path to the CSV file.

        Raises:
            OSError: If the file cannot be read.
            KeyError: If the file lacks the `Setting` or `Value` column.
            ValueError: If a value cannot be converted to its type.
        """
        try:
            settings = (
                pd.read_csv(csv_path, index_col="Setting", dtype=str)
                ["Value"]
                .to_dict()
            )
        except (OSError, KeyError, ValueError):
            self.logger.exception(f"Could not read settings file {csv_path}")
            raise

        self.apply_settings(settings)
        self.logger.info(f"Settings imported from: {os.path.basename(csv_path)}")

    def reset_settings(self) -> None:
        """Revert to the default settings shipped with the package."""
        self.import_settings(utils.resource_path(DEFAULT_SETTINGS_PATH))

    def collect_settings(self) -> dict:
        """Return a copy of all current settings."""
        return dict(self.settings)

    def apply_settings(self, settings: dict) -> None:
        """Apply settings, converting each value to its type.

        Unknown settings are ignored with a warning; missing settings keep
        their current value. When any value is invalid, no setting is
        changed.

        Args:
            settings: Dictionary of settings to apply.
        """
        # Convert everything first so a bad value leaves the settings untouched.
        converted = {}
        for key, value in settings.items():
            if key not in self.SETTING_TYPES:
                self.logger.warning(f"Ignoring unknown setting: {key}")
                continue
            try:
                converted[key] = self.SETTING_TYPES[key](value)
            except (TypeError, ValueError):
                self.logger.exception(f"Invalid value for {key}: {value!r}")
                raise

        self.settings.update(converted)
