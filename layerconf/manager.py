"""Layered configuration loading.

Loads a primary config file plus optional override files found across
search paths, merges them in order, and applies environment variable
overrides on top.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import IO, Any, Optional

from .loader.env import EnvironmentLoader, EnvLookup
from .loader.file import (
    ConfigFormat,
    FileResolver,
    NoSourcesError,
    PrimaryConfigMissingError,
    detect_format,
)
from .loader.merger import ConfigurationMerger, EmptyConfigError, source_name
from .tree import ConfigTree

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and merges layered configuration.

    Example:
        loader = ConfigLoader(
            search_paths=["/etc/myapp", ""],
            env_overrides={"DATABASE_HOST": "database.host"},
        )
        conf, files_used = loader.load_from_files(["config.toml", "local.toml"])
        conf.get("database.host")
    """

    def __init__(
        self,
        search_paths: Optional[list[str]] = None,
        env_overrides: Optional[Mapping[str, str]] = None,
        env_lookup: Optional[EnvLookup] = None,
        encoding: str = "utf-8",
        infer_env_types: bool = False,
    ):
        """Initialize the loader.

        Args:
            search_paths: Default search paths ("" uses filenames as given)
            env_overrides: Default mapping of env var name to config key
            env_lookup: Function returning an env var value or None
            encoding: Encoding of configuration files
            infer_env_types: Convert env values to bool/int/float/JSON
        """
        self.search_paths = [""] if search_paths is None else list(search_paths)
        self.env_overrides = dict(env_overrides or {})

        self._resolver = FileResolver(encoding=encoding)
        self._env_loader = EnvironmentLoader(
            lookup=env_lookup, infer_types=infer_env_types
        )
        self._merger = ConfigurationMerger()

    def load_from_files(
        self,
        filenames: Sequence[str],
        search_paths: Optional[list[str]] = None,
        env_overrides: Optional[Mapping[str, str]] = None,
    ) -> tuple[ConfigTree, list[Optional[str]]]:
        """Load configuration from files.

        All found files are used, each merged on top of the previous ones.
        The first filename must exist; the rest are optional overrides.

        Args:
            filenames: Logical filenames, primary first
            search_paths: Paths searched in order; the first match wins
            env_overrides: Mapping such as {"DATABASE_HOST": "database.host"}

        Returns:
            Tuple of merged configuration and the paths actually used
            (None for optional files that were not found)

        Raises:
            ConfigurationError: If any step fails
        """
        if isinstance(filenames, str):
            raise TypeError("filenames must be a sequence of names, not a string")

        if not filenames:
            raise NoSourcesError("at least one filename must be provided")

        filenames = list(filenames)
        if search_paths is None:
            search_paths = self.search_paths

        with self._resolver.resolve(filenames, search_paths) as resolved:
            if resolved.streams[0] is None:
                raise PrimaryConfigMissingError(
                    f"first config file must exist: {filenames[0]}",
                    source=filenames[0],
                )

            formats = [detect_format(path) for path in resolved.files_used]
            conf = self._load(
                resolved.streams, resolved.files_used, formats, env_overrides
            )

        return conf, list(resolved.files_used)

    def load_from_streams(
        self,
        streams: Sequence[Optional[IO[Any]]],
        env_overrides: Optional[Mapping[str, str]] = None,
        names: Optional[list[Optional[str]]] = None,
        format: Optional[ConfigFormat] = None,
    ) -> ConfigTree:
        """Load configuration from already-open streams.

        Each stream is merged on top of the ones before it. None entries are
        skipped. The streams are not closed.

        Args:
            streams: Text or binary file-like objects, primary first
            env_overrides: Mapping such as {"DATABASE_HOST": "database.host"}
            names: Source names parallel to streams
            format: Format of every stream (detected from names, else TOML)

        Raises:
            ConfigurationError: If any step fails
        """
        if not streams:
            raise NoSourcesError("at least one reader must be provided")

        streams = list(streams)
        source_names = [source_name(names, i) for i in range(len(streams))]
        formats = [format or detect_format(name) for name in source_names]

        return self._load(streams, source_names, formats, env_overrides)

    def _load(
        self,
        streams: list[Optional[IO[Any]]],
        names: list[Optional[str]],
        formats: list[ConfigFormat],
        env_overrides: Optional[Mapping[str, str]],
    ) -> ConfigTree:
        self._merger.clear_history()

        trees = []
        for i, stream in enumerate(streams):
            if stream is None:
                trees.append(None)
                continue
            name = source_name(names, i)
            trees.append(self._resolver.parse_stream(stream, formats[i], name))

        merged = self._merger.merge_trees(trees, names)
        if merged is None:
            raise EmptyConfigError("load resulted in empty config")

        if env_overrides is None:
            env_overrides = self.env_overrides
        env_tree = self._env_loader.load_overrides(env_overrides)
        if env_tree:
            merged = self._merger.merge_two(merged, env_tree, "environment")

        sources = sum(1 for tree in trees if tree is not None)
        logger.info(f"Merged {sources} configuration sources")
        return ConfigTree(merged)

    def get_merge_history(self) -> list[dict[str, Any]]:
        """Get the merge history recorded by this loader."""
        return self._merger.get_merge_history()


def load_from_files(
    filenames: Sequence[str],
    search_paths: Optional[list[str]] = None,
    env_overrides: Optional[Mapping[str, str]] = None,
) -> tuple[ConfigTree, list[Optional[str]]]:
    """Convenience function to load configuration from files.

    See ConfigLoader.load_from_files.
    """
    return ConfigLoader().load_from_files(filenames, search_paths, env_overrides)


def load_from_streams(
    streams: Sequence[Optional[IO[Any]]],
    env_overrides: Optional[Mapping[str, str]] = None,
) -> ConfigTree:
    """Convenience function to load configuration from open streams.

    See ConfigLoader.load_from_streams.
    """
    return ConfigLoader().load_from_streams(streams, env_overrides)
