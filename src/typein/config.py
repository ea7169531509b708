"""Configuration management for typein."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.editor import DEFAULT_HISTORY_LIMIT

logger = logging.getLogger(__name__)

TYPEIN_HOME = Path(os.environ.get("TYPEIN_HOME", Path.home() / "typein"))
CONFIG_FILE = TYPEIN_HOME / "config" / "typein.conf"
DATA_DIR = TYPEIN_HOME / "data"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """typein configuration."""

    data_dir: str = ""
    # Undo entries kept per session; 0 means unbounded
    history_limit: int = DEFAULT_HISTORY_LIMIT
    autosave: bool = True
    log_level: str = "WARNING"

    @property
    def resolved_data_dir(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}")
    return default


def _strip_value(value: str) -> str:
    """Handle quoted values with inline comments: "value" # comment"""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from typein.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "history_limit":
                try:
                    limit = int(value)
                    if limit < 0:
                        raise ValueError(value)
                    config.history_limit = limit
                except ValueError:
                    logger.warning(f"Invalid HISTORY_LIMIT: {value!r}")
            case "autosave":
                config.autosave = _parse_bool(key, value, config.autosave)
            case "log_level":
                level = value.upper()
                if isinstance(logging.getLevelName(level), int):
                    config.log_level = level
                else:
                    logger.warning(f"Invalid LOG_LEVEL: {value!r}")
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
