"""Configuration loader package.

This package provides the file resolver, the environment override loader and
the merger used to combine layered configuration sources.
"""

from .env import EnvironmentLoader, EnvironmentOverrideError
from .file import (
    ConfigFormat,
    ConfigurationError,
    FileLoadError,
    FileResolver,
    FormatError,
    NoSourcesError,
    PrimaryConfigMissingError,
    ResolvedFiles,
)
from .merger import ConfigurationMerger, EmptyConfigError, MergeError, deep_merge

__all__ = [
    "ConfigFormat",
    "ConfigurationError",
    "ConfigurationMerger",
    "EmptyConfigError",
    "EnvironmentLoader",
    "EnvironmentOverrideError",
    "FileLoadError",
    "FileResolver",
    "FormatError",
    "MergeError",
    "NoSourcesError",
    "PrimaryConfigMissingError",
    "ResolvedFiles",
    "deep_merge",
]
