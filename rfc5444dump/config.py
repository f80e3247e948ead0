"""
rfc5444dump Configuration Management

Handles loading and validation of configuration from TOML file.
"""

from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

import toml


# Default configuration path
DEFAULT_CONFIG_PATH = Path("~/.config/rfc5444dump/config.toml").expanduser()

# Largest packet the tool will hand to the decoder
MAX_PACKET_SIZE = 65535

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class InputConfig:
    """Input handling."""
    max_packet_size: int = MAX_PACKET_SIZE
    hex: bool = False  # Input is hex text instead of raw bytes


@dataclass
class OutputConfig:
    """Output rendering."""
    format: str = "text"
    expand_addresses: bool = True


@dataclass
class Config:
    """
    Complete rfc5444dump configuration.
    """
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from file.

        Args:
            config_path: Path to config file (default: DEFAULT_CONFIG_PATH)

        Returns:
            Loaded configuration, defaults if the file does not exist

        Raises:
            ValueError: If the file is not valid TOML or a value has the
                wrong type
        """
        path = config_path or DEFAULT_CONFIG_PATH
        config = cls()
        config.config_path = path

        if not path.exists():
            return config

        try:
            data = toml.load(path)
        except toml.TomlDecodeError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e

        try:
            config._apply_dict(data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e
        return config

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """
        Apply dictionary data to config.

        Raises:
            TypeError: If a section is not a table or a value can't be converted
            ValueError: If a value can't be converted
        """
        if "log_level" in data:
            self.log_level = str(data["log_level"]).upper()
        if "log_file" in data:
            self.log_file = Path(data["log_file"])

        for section in ("input", "output"):
            if section in data and not isinstance(data[section], dict):
                raise TypeError(f"[{section}] must be a table")

        if "input" in data:
            i = data["input"]
            if "max_packet_size" in i:
                self.input.max_packet_size = int(i["max_packet_size"])
            if "hex" in i:
                self.input.hex = bool(i["hex"])

        if "output" in data:
            o = data["output"]
            if "format" in o:
                self.output.format = str(o["format"]).lower()
            if "expand_addresses" in o:
                self.output.expand_addresses = bool(o["expand_addresses"])

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.input.max_packet_size < 1 or self.input.max_packet_size > MAX_PACKET_SIZE:
            raise ValueError(f"Invalid max packet size: {self.input.max_packet_size}")

        if self.output.format not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output format: {self.output.format}")

        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")
