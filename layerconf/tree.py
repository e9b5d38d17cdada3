"""Configuration tree with dotted key path access.

Wraps the nested dictionaries produced by the format parsers and provides
get/set/has/delete by dotted path plus serialization back to TOML, YAML and
JSON.
"""

import copy
import json
import logging
from collections.abc import Iterator, Mapping
from typing import Any, Optional

import toml
import yaml

logger = logging.getLogger(__name__)

_MISSING = object()


def split_key(key: str) -> list[str]:
    """Split a dotted key path into its segments.

    Raises:
        ValueError: If the key is empty or contains an empty segment
    """
    if not isinstance(key, str) or not key:
        raise ValueError(f"Invalid config key: {key!r}")

    parts = key.split(".")
    if any(not part for part in parts):
        raise ValueError(f"Invalid config key (empty segment): {key!r}")

    return parts


class ConfigTree:
    """Hierarchical configuration of mapping nodes and scalar leaves.

    Example:
        tree = ConfigTree({"database": {"host": "localhost"}})
        tree.get("database.host")  # "localhost"
        tree.set("database.port", 5432)
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        """Initialize the tree.

        Args:
            data: Initial nested mapping (deep copied)
        """
        if isinstance(data, ConfigTree):
            data = data._data
        self._data: dict[str, Any] = copy.deepcopy(dict(data)) if data else {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key path.

        Args:
            key: Dotted key path, e.g. "section.d"
            default: Value returned when the path does not exist

        Returns:
            The value, a ConfigTree for nested mappings, or default
        """
        value = self._lookup(key)
        if value is _MISSING:
            return default
        if isinstance(value, dict):
            return ConfigTree(value)
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        """Set a value by dotted key path, creating intermediate tables."""
        keys = split_key(key)
        current = self._data

        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            elif not isinstance(current[k], dict):
                logger.warning(
                    f"Replacing non-table value at '{k}' while setting '{key}'"
                )
                current[k] = {}
            current = current[k]

        if isinstance(value, ConfigTree):
            value = value.to_dict()
        current[keys[-1]] = copy.deepcopy(value)

    def has(self, key: str) -> bool:
        """Check whether a dotted key path exists."""
        return self._lookup(key) is not _MISSING

    def delete(self, key: str) -> bool:
        """Delete a leaf or subtree.

        Returns:
            True if something was removed
        """
        keys = split_key(key)
        current = self._data

        for k in keys[:-1]:
            current = current.get(k)
            if not isinstance(current, dict):
                return False

        if keys[-1] not in current:
            return False

        del current[keys[-1]]
        return True

    def keys(self) -> list[str]:
        """Return the top-level keys."""
        return list(self._data.keys())

    def flatten(self) -> dict[str, Any]:
        """Return a mapping of dotted key paths to leaf values."""
        result: dict[str, Any] = {}

        def walk(node: dict[str, Any], prefix: str) -> None:
            for k, v in node.items():
                path = f"{prefix}.{k}" if prefix else k
                if isinstance(v, dict) and v:
                    walk(v, path)
                else:
                    result[path] = copy.deepcopy(v)

        walk(self._data, "")
        return result

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the underlying nested dictionary."""
        return copy.deepcopy(self._data)

    def to_toml(self) -> str:
        """Serialize the tree as TOML."""
        return toml.dumps(self._data)

    def to_yaml(self) -> str:
        """Serialize the tree as YAML."""
        return yaml.dump(
            self._data, default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the tree as JSON."""
        return json.dumps(self._data, indent=indent, default=str, ensure_ascii=False)

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for k in split_key(key):
            if not isinstance(current, dict) or k not in current:
                return _MISSING
            current = current[k]
        return current

    def __getitem__(self, key: str) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        try:
            return self.has(key)
        except ValueError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigTree):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ConfigTree({self._data!r})"
