"""Environment variable configuration overrides.

Builds a configuration tree from a mapping of environment variable names to
dotted config keys, e.g. {"DATABASE_HOST": "database.host"}.
"""

import json
import logging
import os
from collections.abc import Mapping
from typing import Any, Callable, Optional

from ..tree import ConfigTree
from .file import ConfigurationError

logger = logging.getLogger(__name__)

EnvLookup = Callable[[str], Optional[str]]


class EnvironmentOverrideError(ConfigurationError):
    """Exception raised for invalid environment override mappings."""

    step = "environment"


class EnvironmentLoader:
    """Environment variable override loader.

    Supports:
    - Injected lookup function (defaults to os.environ.get)
    - Nested structure from dotted config keys
    - Optional type inference for variable values
    """

    def __init__(
        self, lookup: Optional[EnvLookup] = None, infer_types: bool = False
    ):
        """Initialize the environment loader.

        Args:
            lookup: Function returning a variable's value or None if unset
            infer_types: Convert values to bool/int/float/JSON where possible
        """
        self.lookup = lookup or os.environ.get
        self.infer_types = infer_types

    def load_overrides(
        self, env_overrides: Optional[Mapping[str, str]]
    ) -> dict[str, Any]:
        """Build an override tree from the environment.

        Variables that are not set are skipped.

        Args:
            env_overrides: Mapping of environment variable name to config key

        Returns:
            Nested configuration dictionary

        Raises:
            EnvironmentOverrideError: If a config key is invalid
        """
        tree = ConfigTree()

        for env_key, config_key in (env_overrides or {}).items():
            value = self.lookup(env_key)
            if value is None:
                continue

            if self.infer_types:
                value = self._convert_value(value)

            try:
                tree.set(config_key, value)
            except ValueError as e:
                raise EnvironmentOverrideError(
                    f"Invalid config key for {env_key}: {e}", source=env_key
                ) from e

            logger.debug(f"Applied env var: {env_key} -> {config_key}")

        return tree.to_dict()

    def _convert_value(self, value: str) -> Any:
        """Convert string value with automatic type inference."""
        stripped = value.strip()
        lowered = stripped.lower()

        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False

        try:
            return int(stripped)
        except ValueError:
            pass

        try:
            return float(stripped)
        except ValueError:
            pass

        if stripped.startswith(("{", "[")):
            try:
                return json.loads(stripped)
            except json.JSONDecodeError:
                pass

        return value
