"""Compiler settings with dot-path access and YAML loading."""

from __future__ import annotations

import copy
import os
from typing import Any

import yaml

from sshgrant.errors import ConfigError, ConfigNotFoundError
from sshgrant.rules import DEFAULT_POSITION

__all__ = ["Config", "DEFAULTS"]

DEFAULTS: dict[str, Any] = {
    "pam": {
        "permission": "+",
        "position": "end",
    },
    "firewall": {
        "port": 22,
        "protocol": "tcp",
        "action": "accept",
        "label_format": "022 {name} allow ssh from {host}",
    },
    "tcpwrapper": {
        "service": "sshd",
    },
    "sshd": {
        "match_position": DEFAULT_POSITION,
    },
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Config:
    """Configuration accessor with dot-path key support.

    User data is layered over :data:`DEFAULTS`, so ``Config()`` alone
    yields a working compiler configuration.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = _deep_merge(DEFAULTS, data or {})

    @classmethod
    def load(cls, yaml_path: str) -> Config:
        """Load settings from a YAML file.

        Args:
            yaml_path: Path to the YAML settings file.

        Returns:
            A new Config layered over the defaults.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the YAML is invalid, not a mapping, or has
                unknown sections.
        """
        if not os.path.isfile(yaml_path):
            raise ConfigNotFoundError(config_path=yaml_path)

        with open(yaml_path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_path}: {e}", cause=e) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config must be a mapping, got {type(data).__name__}"
            )
        unknown = [key for key in data if key not in DEFAULTS]
        if unknown:
            raise ConfigError(
                f"Unknown config sections in {yaml_path}: {', '.join(map(str, unknown))}"
            )
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current
