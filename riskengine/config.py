from __future__ import annotations

import configparser
from pathlib import Path

from riskengine.exceptions import ConfigError
from riskengine.models.config import AppConfig

CONFIG_FILENAME = ".riskengine.ini"
_SECTION = "riskengine"
_REQUIRED_KEYS = ("actor", "output_format", "normalize_stale_flags")


def config_exists(directory: Path) -> bool:
    return (directory / CONFIG_FILENAME).is_file()


def write_config(directory: Path, config: AppConfig) -> None:
    cp = configparser.ConfigParser()
    cp[_SECTION] = {
        "actor": config.actor,
        "output_format": config.output_format,
        "normalize_stale_flags": "true" if config.normalize_stale_flags else "false",
    }
    path = directory / CONFIG_FILENAME
    with open(path, "w", encoding="utf-8") as f:
        cp.write(f)


def read_config(directory: Path) -> AppConfig:
    path = directory / CONFIG_FILENAME
    if not path.is_file():
        raise ConfigError(
            "Configuration not found. Run riskengine --init first."
        )

    cp = configparser.ConfigParser()
    try:
        cp.read(str(path), encoding="utf-8")
    except configparser.Error as exc:
        raise ConfigError(
            f"Invalid configuration format in {CONFIG_FILENAME}. "
            "Run riskengine --init to reconfigure."
        ) from exc

    if not cp.has_section(_SECTION):
        raise ConfigError(
            f"Invalid configuration: missing [{_SECTION}] section in {CONFIG_FILENAME}."
        )

    for key in _REQUIRED_KEYS:
        if not cp.has_option(_SECTION, key) or not cp.get(_SECTION, key).strip():
            raise ConfigError(
                f"Invalid configuration: missing or empty '{key}' in {CONFIG_FILENAME}. "
                "Run riskengine --init to reconfigure."
            )

    try:
        normalize = cp.getboolean(_SECTION, "normalize_stale_flags")
    except ValueError as exc:
        raise ConfigError(
            f"Invalid configuration: 'normalize_stale_flags' must be true or false in {CONFIG_FILENAME}."
        ) from exc

    return AppConfig(
        actor=cp.get(_SECTION, "actor"),
        output_format=cp.get(_SECTION, "output_format"),
        normalize_stale_flags=normalize,
    )


def load_config(directory: Path) -> AppConfig:
    """Read the configuration if present, otherwise use the defaults."""
    if not config_exists(directory):
        return AppConfig()
    return read_config(directory)
