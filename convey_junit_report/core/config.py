"""
Configuration management for convey-junit-report.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from convey_junit_report.core.errors import ConfigurationError

CONFIG_ENV_VAR = "CONVEY_JUNIT_REPORT_CONFIG"
DEFAULT_CONFIG_NAME = "convey_junit_report.toml"
CONFIG_TABLE = "convey_junit_report"

SUPPORTED_FORMATS = ("junit", "json", "yaml", "md")

# Values used when neither an argument nor the config file sets a field
DEFAULTS = {
    "use_dot": False,
    "output_format": "junit",
    "verbosity": 0,
}

# Keys accepted from the config file and the TOML type each must have
FILE_KEY_TYPES = {
    "use_dot": bool,
    "output_format": str,
    "runtime_version": str,
    "verbosity": int,
    "log_file": str,
}


@dataclass
class Config:
    """
    Configuration for one conversion run.

    Fields left as None were not given explicitly; the config file may set
    them, and anything still unset falls back to DEFAULTS.
    """

    # Marker selection: False = glyph markers, True = ASCII "dot" markers
    use_dot: Optional[bool] = None

    # Output
    output_format: Optional[str] = None
    runtime_version: Optional[str] = None  # None = current interpreter version

    # Logging
    verbosity: Optional[int] = None  # 0=warnings, 1=progress, 2=details, 3=debug
    log_file: Optional[Path] = None

    config_file: Optional[Path] = None

    def __post_init__(self):
        """Load file values, apply defaults, normalize paths and validate."""
        self._load_config_file()

        for key, default in DEFAULTS.items():
            if getattr(self, key) is None:
                setattr(self, key, default)

        if self.log_file is not None:
            self.log_file = Path(self.log_file)

        if not 0 <= self.verbosity <= 3:
            raise ConfigurationError(f"verbosity must be between 0 and 3, got {self.verbosity}")

        self.output_format = str(self.output_format).lower()
        if self.output_format not in SUPPORTED_FORMATS:
            raise ConfigurationError(
                f"Unsupported output format '{self.output_format}'. "
                f"Choose one of: {', '.join(SUPPORTED_FORMATS)}"
            )

    def _load_config_file(self) -> None:
        """Load unset fields from convey_junit_report.toml if present."""
        env_path = os.environ.get(CONFIG_ENV_VAR)
        explicit = self.config_file is not None or bool(env_path)
        if env_path:
            self.config_file = Path(env_path).resolve()
        elif self.config_file is None:
            self.config_file = Path.cwd() / DEFAULT_CONFIG_NAME
        else:
            self.config_file = Path(self.config_file).resolve()

        if not self.config_file.exists():
            if explicit:
                raise ConfigurationError(f"Config file does not exist: {self.config_file}")
            self.config_file = None
            return

        try:
            try:
                import tomllib  # Python 3.11+
            except ModuleNotFoundError:  # Python 3.10
                import tomli as tomllib

            data = tomllib.loads(self.config_file.read_text(encoding="utf-8"))
            table = data.get(CONFIG_TABLE) or data.get("tool", {}).get(CONFIG_TABLE, {})
            if not isinstance(table, dict):
                return
        except Exception as e:
            raise ConfigurationError(f"Failed to read config file: {self.config_file}: {e}") from e

        for key, value in table.items():
            expected = FILE_KEY_TYPES.get(key)
            if expected is None:
                continue
            # bool is an int subclass
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigurationError(
                    f"{self.config_file}: '{key}' must be {expected.__name__}, "
                    f"got {type(value).__name__} {value!r}"
                )
            if getattr(self, key) is None:
                setattr(self, key, value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "use_dot": self.use_dot,
            "output_format": self.output_format,
            "runtime_version": self.runtime_version,
            "verbosity": self.verbosity,
            "log_file": str(self.log_file) if self.log_file else None,
            "config_file": str(self.config_file) if self.config_file else None,
        }
