"""Configuration file loading and merging."""

import logging
from pathlib import Path

import yaml

from forge.config.schema import DEFAULT_CONFIG, ForgeConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"


def get_home_config_path() -> Path:
    """Get path to global config: ~/.forge/config.yaml."""
    return Path.home() / ".forge" / CONFIG_FILENAME


def get_local_config_path() -> Path:
    """Get path to local config: ./.forge/config.yaml."""
    return Path.cwd() / ".forge" / CONFIG_FILENAME


def home_config_exists() -> bool:
    """Check if the global home config exists."""
    return get_home_config_path().exists()


def local_config_exists() -> bool:
    """Check if the local config exists."""
    return get_local_config_path().exists()


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found, empty or malformed."""
    if not path.exists():
        return None
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError:
        logger.warning("Ignoring malformed config file %s", path)
        return None
    if not isinstance(data, dict):
        return None
    result: dict[str, object] = data
    return result


def load_config() -> ForgeConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.forge/config.yaml)
    3. Local config (./.forge/config.yaml)
    """
    config = DEFAULT_CONFIG

    for path in (get_home_config_path(), get_local_config_path()):
        data = load_yaml_config(path)
        if data:
            logger.debug("Loaded config from %s", path)
            config = config.merge(ForgeConfig.from_dict(data))

    return config


def save_config(config: ForgeConfig, path: Path) -> None:
    """Save config to a YAML file.

    Creates parent directories if needed. Only saves non-None values.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
