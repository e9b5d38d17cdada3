"""Layered configuration loading.

Merges a primary configuration file with optional override files found
across search paths, then overrides dotted keys from environment variables.

Example:
    from layerconf import load_from_files

    conf, files_used = load_from_files(
        ["config.toml", "config_override.toml"],
        search_paths=["/etc/myapp", "."],
        env_overrides={"DATABASE_HOST": "database.host"},
    )
    conf.get("database.host")
"""

from .loader import (
    ConfigFormat,
    ConfigurationError,
    EmptyConfigError,
    EnvironmentOverrideError,
    FileLoadError,
    FormatError,
    MergeError,
    NoSourcesError,
    PrimaryConfigMissingError,
    deep_merge,
)
from .manager import ConfigLoader, load_from_files, load_from_streams
from .tree import ConfigTree

__version__ = "0.1.0"

__all__ = [
    "ConfigFormat",
    "ConfigLoader",
    "ConfigTree",
    "ConfigurationError",
    "EmptyConfigError",
    "EnvironmentOverrideError",
    "FileLoadError",
    "FormatError",
    "MergeError",
    "NoSourcesError",
    "PrimaryConfigMissingError",
    "deep_merge",
    "load_from_files",
    "load_from_streams",
]
