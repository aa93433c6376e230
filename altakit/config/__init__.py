"""Configuration loading for altakit."""

from .settings import AltaKitConfig, load_config, parse_config_data

__all__ = ["AltaKitConfig", "load_config", "parse_config_data"]
