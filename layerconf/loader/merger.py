"""Configuration merger.

Folds parsed configuration trees left to right with a deep-merge rule: each
tree is merged on top of everything before it, so later sources win.
"""

import copy
import logging
from typing import Any, Optional

from .file import ConfigurationError

logger = logging.getLogger(__name__)


class MergeError(ConfigurationError):
    """Exception raised during configuration merging."""

    step = "merge"


class EmptyConfigError(ConfigurationError):
    """Exception raised when no source contributed to the configuration."""

    step = "merge"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Keys only in base are kept, keys only in override are added, and keys in
    both recurse when both values are dictionaries. Otherwise the override's
    value replaces the base's (lists included). Neither input is modified.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)

    return result


def _check_keys(tree: dict[str, Any], path: str = "") -> None:
    for key, value in tree.items():
        if not isinstance(key, str):
            where = f" under '{path}'" if path else ""
            raise TypeError(f"non-string key {key!r}{where}")
        if isinstance(value, dict):
            _check_keys(value, f"{path}.{key}" if path else key)


class ConfigurationMerger:
    """Folds an ordered list of configuration trees into one.

    Keeps a history of which source contributed which top-level keys.
    """

    def __init__(self):
        self._merge_history: list[dict[str, Any]] = []

    def merge_trees(
        self,
        trees: list[Optional[dict[str, Any]]],
        names: Optional[list[Optional[str]]] = None,
    ) -> Optional[dict[str, Any]]:
        """Merge trees left to right, later trees on top of earlier ones.

        Args:
            trees: Parsed trees; None entries are skipped
            names: Source names parallel to trees, for history and errors

        Returns:
            Merged dictionary, or None if every entry was skipped

        Raises:
            MergeError: If a tree cannot be merged
        """
        result: Optional[dict[str, Any]] = None

        for i, tree in enumerate(trees):
            name = source_name(names, i)
            if tree is None:
                logger.debug(f"Skipping absent source {name}")
                continue

            result = self.merge_two(result, tree, name)

        return result

    def merge_two(
        self,
        base: Optional[dict[str, Any]],
        override: Optional[dict[str, Any]],
        name: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """Merge override on top of base.

        Either side may be None, in which case the other is returned.

        Raises:
            MergeError: If either tree has non-string keys
        """
        try:
            if override is not None:
                _check_keys(override)
            if base is None:
                merged = copy.deepcopy(override)
            elif override is None:
                merged = base
            else:
                merged = deep_merge(base, override)
        except (TypeError, RecursionError) as e:
            raise MergeError(
                f"Failed to merge config from {name}: {e}", source=name
            ) from e

        if override is not None:
            self._merge_history.append(
                {
                    "source": name,
                    "config_keys": list(override.keys()),
                    "merged_keys": list(merged.keys()),
                }
            )

        return merged

    def get_merge_history(self) -> list[dict[str, Any]]:
        """Get the history of merge operations.

        Returns:
            List of merge operation records
        """
        return copy.deepcopy(self._merge_history)

    def clear_history(self):
        """Clear the merge history."""
        self._merge_history.clear()


def source_name(names: Optional[list[Optional[str]]], index: int) -> str:
    if names and index < len(names) and names[index]:
        return names[index]
    return f"reader#{index}"
