"""Configuration file handling.

The configuration is a TOML document holding a single key::

    registry_url = "https://localhost:5000"

It lives in the per-OS application directory reported by
``click.get_app_dir`` and is created with the default URL on first use.
"""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click

from .core.types import RegistryEndpoint
from .exceptions import ConfigError, ValidationError

logger = logging.getLogger(__name__)

APP_NAME = "dredge"
CONFIG_FILENAME = "config.toml"
DEFAULT_REGISTRY_URL = "https://localhost:5000"


@dataclass(frozen=True)
class Config:
    """Loaded configuration."""

    registry_url: str = DEFAULT_REGISTRY_URL

    @property
    def endpoint(self) -> RegistryEndpoint:
        return RegistryEndpoint.parse(self.registry_url)


def default_config_path() -> Path:
    return Path(click.get_app_dir(APP_NAME)) / CONFIG_FILENAME


def write_default_config(path: Path) -> None:
    """Create a configuration file holding the default registry URL."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f'registry_url = "{DEFAULT_REGISTRY_URL}"\n', encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write configuration file {path}: {e}") from e
    logger.info("Created default configuration at %s", path)


def load_config(path: Optional[Path] = None) -> Config:
    """Load the configuration, creating the default file if it is missing.

    Args:
        path: Override path; defaults to the per-OS config location

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If the file cannot be read, parsed or holds a bad URL
    """
    path = Path(path) if path is not None else default_config_path()

    if not path.exists():
        write_default_config(path)

    logger.debug("Loading configuration from %s", path)
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse configuration file {path}: {e}") from e

    registry_url = data.get("registry_url")
    if not isinstance(registry_url, str):
        raise ConfigError(f"{path}: registry_url must be set to a URL string")

    config = Config(registry_url=registry_url)
    try:
        config.endpoint
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e
    return config
