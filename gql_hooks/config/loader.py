"""
Configuration loader for gql_hooks.

Configuration is assembled from, in increasing priority: model defaults, a
JSON or YAML file, ``GQL_HOOKS_*`` environment variables and explicit
overrides.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .models import ClientConfig

ENV_PREFIX = "GQL_HOOKS_"

ENV_MAPPINGS: Dict[str, Tuple[str, ...]] = {
    "URL": ("url",),
    "REQUEST_POLICY": ("request_policy",),
    "PREFER_GET_METHOD": ("prefer_get_method",),
    "SUSPENSE": ("suspense",),
    "TIMEOUT": ("timeout",),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FORMAT": ("logging", "format"),
    "LOG_FILE": ("logging", "file_path"),
    "LOG_STRUCTURED": ("logging", "enable_structured"),
}


class ConfigLoader:
    """Configuration loader with support for multiple sources."""

    def __init__(self, env_prefix: str = ENV_PREFIX) -> None:
        self.config_paths = [
            Path("gql_hooks.yaml"),
            Path("gql_hooks.yml"),
            Path("gql_hooks.json"),
            Path.home() / ".gql_hooks" / "config.yaml",
            Path.home() / ".gql_hooks" / "config.json",
        ]
        self.env_prefix = env_prefix

    def load_config(
        self,
        config_file: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> ClientConfig:
        """
        Load configuration from all available sources.

        Args:
            config_file: Specific config file to load
            environ: Environment mapping (defaults to ``os.environ``)
            **overrides: Values that win over every other source

        Returns:
            Validated ClientConfig

        Raises:
            ConfigurationError: If a source cannot be read or the result is invalid
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_from_file(config_file)
        if file_config:
            config_data = self._deep_merge(config_data, file_config)

        env_config = self._load_from_environment(os.environ if environ is None else environ)
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        if overrides:
            config_data = self._deep_merge(
                config_data, {k: v for k, v in overrides.items() if v is not None}
            )

        try:
            return ClientConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}", source=str(config_file or "")) from e

    def _load_from_file(self, config_file: Optional[Union[str, Path]] = None) -> Optional[Dict[str, Any]]:
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}", source=str(config_path))
            return self._parse_config_file(config_path)

        for config_path in self.config_paths:
            if config_path.exists():
                return self._parse_config_file(config_path)
        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                elif suffix == ".json":
                    data = json.load(f)
                else:
                    raise ConfigurationError(
                        f"Unsupported config file format: {config_path.suffix}",
                        source=str(config_path),
                    )
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to parse config file {config_path}: {e}", source=str(config_path)
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a mapping", source=str(config_path)
            )
        return data

    def _load_from_environment(self, environ: Mapping[str, str]) -> Dict[str, Any]:
        """Map ``GQL_HOOKS_*`` variables onto the config structure; pydantic converts types."""
        config: Dict[str, Any] = {}

        for name, config_path in ENV_MAPPINGS.items():
            value = environ.get(f"{self.env_prefix}{name}")
            if value is None:
                continue
            current = config
            for key in config_path[:-1]:
                current = current.setdefault(key, {})
            current[config_path[-1]] = value

        return config

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(config_file: Optional[Union[str, Path]] = None, **overrides: Any) -> ClientConfig:
    """Load configuration with the default loader."""
    return ConfigLoader().load_config(config_file, **overrides)
