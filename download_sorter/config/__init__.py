"""Configuration loading."""

from .loader import ConfigError, SorterConfig, load_config

__all__ = [
    "ConfigError",
    "SorterConfig",
    "load_config",
]
