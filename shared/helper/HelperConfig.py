"""Environment-backed settings for the note search engine and its clients."""

import logging
import os
from pathlib import Path


class HelperConfig:
    """Reads settings from environment variables and hands out the app logger.

    Keys are upper-cased before lookup. An unset or empty variable falls back
    to the default; with no default it is an error.
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter) -> None:
        self._logger = logger

    def _read(self, key: str, default):
        name = key.upper()
        raw = (os.getenv(name) or "").strip()
        if raw:
            return name, raw
        if default is None:
            raise ValueError(f"Environment variable '{name}' is not set.")
        return name, None

    def get_string_val(self, key: str, default: str | None = None) -> str:
        _, raw = self._read(key, default)
        return raw if raw is not None else default

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read an int ("42") or float ("0.3") variable.

        Raises:
            ValueError: If unset without default, or not a number.
        """
        name, raw = self._read(key, default)
        if raw is None:
            return default
        try:
            return float(raw) if "." in raw else int(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{name}' is not a valid number: '{raw}'.")

    def get_path_val(self, key: str, default: str | None = None) -> Path:
        """Read a filesystem path, expanding "~"."""
        return Path(self.get_string_val(key, default=default)).expanduser()

    def get_logger(self) -> logging.Logger | logging.LoggerAdapter:
        return self._logger
