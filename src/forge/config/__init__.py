"""Configuration and preflight checks."""

from forge.config.loader import (
    home_config_exists,
    load_config,
    local_config_exists,
    save_config,
)
from forge.config.schema import DEFAULT_CONFIG, ForgeConfig

__all__ = [
    "DEFAULT_CONFIG",
    "ForgeConfig",
    "home_config_exists",
    "load_config",
    "local_config_exists",
    "save_config",
]
