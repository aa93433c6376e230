"""YAML configuration for altakit.

Settings are read from an optional ``altakit.yaml``:

    manifest_url: https://example.org/alta/versions.json
    download_base_url: https://example.org/alta/files
    compiler_executable: altac
    timeout: 30

Every key is optional; missing keys keep their defaults.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from altakit.core.exceptions import ConfigError

DEFAULT_CONFIG_FILE = "altakit.yaml"

DEFAULT_DOWNLOAD_BASE_URL = "https://sourceforge.net/projects/alta-lang/files"
DEFAULT_MANIFEST_URL = f"{DEFAULT_DOWNLOAD_BASE_URL}/versions.json/download"


@dataclass(frozen=True)
class AltaKitConfig:
    """Settings shared by the fetcher and checker."""

    manifest_url: str = DEFAULT_MANIFEST_URL
    download_base_url: str = DEFAULT_DOWNLOAD_BASE_URL
    compiler_executable: str = "altac"
    timeout: int = 30


def load_config(config_path: Optional[Path] = None) -> AltaKitConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Explicit file. If None, ``./altakit.yaml`` is used when
            present and defaults otherwise.

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If an explicit file is missing or the content is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE
        if not config_path.exists():
            return AltaKitConfig()
    elif not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}")

    return parse_config_data(data or {})


def parse_config_data(data: Dict[str, Any]) -> AltaKitConfig:
    """Validate a configuration mapping and build the config object."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    known = {f.name: f for f in fields(AltaKitConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    for key, value in data.items():
        expected = int if key == "timeout" else str
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(
                f"Configuration key '{key}' must be of type {expected.__name__}"
            )

    if "timeout" in data and data["timeout"] <= 0:
        raise ConfigError("Configuration key 'timeout' must be positive")

    for key in ("manifest_url", "download_base_url"):
        if key in data:
            data = {**data, key: data[key].rstrip("/")}

    return AltaKitConfig(**data)
