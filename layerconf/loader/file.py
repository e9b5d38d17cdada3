"""File-based configuration resolution and parsing.

Resolves logical config filenames against ordered search paths, opens the
first match for each, and parses open streams as TOML, YAML or JSON.
"""

import json
import logging
import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import IO, Any, Optional, Union

import yaml

logger = logging.getLogger(__name__)


class ConfigFormat(Enum):
    """Supported configuration file formats."""

    TOML = "toml"
    YAML = "yaml"
    JSON = "json"


class ConfigurationError(Exception):
    """Base exception for configuration errors.

    Attributes:
        source: Name of the failing source (path or reader#N), if known
        step: Loading step that failed
    """

    step = "load"

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class NoSourcesError(ConfigurationError):
    """Exception raised when no filenames or streams are provided."""

    pass


class FileLoadError(ConfigurationError):
    """Exception raised when an existing file cannot be opened or read."""

    step = "resolve"


class PrimaryConfigMissingError(FileLoadError):
    """Exception raised when the first config file is not found."""

    pass


class FormatError(ConfigurationError):
    """Exception raised when a source cannot be parsed."""

    step = "parse"


_SUFFIX_FORMATS = {
    ".toml": ConfigFormat.TOML,
    ".yaml": ConfigFormat.YAML,
    ".yml": ConfigFormat.YAML,
    ".json": ConfigFormat.JSON,
}


def detect_format(
    name: Optional[Union[str, Path]], default: ConfigFormat = ConfigFormat.TOML
) -> ConfigFormat:
    """Detect a configuration format from a file name's suffix.

    Unknown or missing suffixes fall back to default.
    """
    if not name:
        return default

    suffix = Path(name).suffix.lower()
    return _SUFFIX_FORMATS.get(suffix, default)


class ResolvedFiles:
    """Open streams and the paths they came from, parallel to the filenames.

    Entries for files that were not found are None in both lists.
    """

    def __init__(
        self, streams: list[Optional[IO[bytes]]], files_used: list[Optional[str]]
    ):
        self.streams = streams
        self.files_used = files_used

    def close(self) -> None:
        """Close every open stream."""
        for stream in self.streams:
            if stream is not None:
                stream.close()

    def __enter__(self) -> "ResolvedFiles":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FileResolver:
    """Resolves logical filenames to open files across search paths."""

    def __init__(self, encoding: str = "utf-8"):
        """Initialize the resolver.

        Args:
            encoding: Encoding used when parsing byte streams
        """
        self.encoding = encoding

    def resolve(
        self, filenames: list[str], search_paths: Optional[list[str]] = None
    ) -> ResolvedFiles:
        """Find and open the first existing file for each filename.

        Args:
            filenames: Logical filenames, in priority order
            search_paths: Directory prefixes tried in order ("" uses the
                filename unmodified; other prefixes are prepended even to
                absolute filenames)

        Returns:
            ResolvedFiles parallel to filenames

        Raises:
            FileLoadError: If an existing path cannot be opened
        """
        if search_paths is None:
            search_paths = [""]

        streams: list[Optional[IO[bytes]]] = [None] * len(filenames)
        files_used: list[Optional[str]] = [None] * len(filenames)
        resolved = ResolvedFiles(streams, files_used)

        for i, fname in enumerate(filenames):
            for path in search_paths:
                # Absolute filenames stay under a non-empty search path.
                name = fname.lstrip(os.sep) if path else fname
                fpath = os.path.join(path, name)
                try:
                    f = open(fpath, "rb")
                except FileNotFoundError:
                    logger.debug(f"Config file not found: {fpath}")
                    continue
                except OSError as e:
                    resolved.close()
                    raise FileLoadError(
                        f"file open failed for {fpath}: {e}", source=fpath
                    ) from e

                streams[i] = f
                files_used[i] = fpath
                logger.debug(f"Resolved {fname} to {fpath}")
                break
            else:
                logger.debug(f"No search path contains {fname}")

        return resolved

    def parse_stream(
        self,
        stream: IO[Any],
        format: ConfigFormat = ConfigFormat.TOML,
        name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Read and parse a single stream.

        Args:
            stream: Text or binary file-like object
            format: Format of the content
            name: Source name used in error messages

        Returns:
            Parsed configuration dictionary

        Raises:
            FileLoadError: If the stream cannot be read or decoded
            FormatError: If parsing fails
        """
        try:
            content = stream.read()
            if isinstance(content, bytes):
                content = content.decode(self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FileLoadError(f"Failed to read {name}: {e}", source=name) from e

        config = self._parse_content(content, format, name)
        logger.info(f"Loaded configuration from {name} ({format.value})")
        return config

    def _parse_content(
        self, content: str, format: ConfigFormat, name: Optional[str]
    ) -> dict[str, Any]:
        """Parse configuration content based on format."""
        try:
            if format == ConfigFormat.TOML:
                config = tomllib.loads(content)
            elif format == ConfigFormat.YAML:
                config = yaml.safe_load(content)
                if config is None:
                    config = {}
            elif format == ConfigFormat.JSON:
                config = json.loads(content)
            else:
                raise FormatError(f"Unsupported format: {format}", source=name)
        except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise FormatError(
                f"failed to load {format.value.upper()}: {name}: {e}", source=name
            ) from e

        if not isinstance(config, dict):
            raise FormatError(
                f"Top level of {name} must be a table, got {type(config).__name__}",
                source=name,
            )

        return config
