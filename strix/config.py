"""
Config system - layered typed configuration for bootstrap.

Merge precedence (later overrides earlier):
defaults < YAML file < .env file < environment variables < overrides
"""

from typing import Any, Dict, Optional, Type, get_type_hints
from dataclasses import dataclass, fields, MISSING
from pathlib import Path
import json
import logging
import os

import yaml
from dotenv import dotenv_values

from .controller.compiler import DuplicatePolicy
from .faults import FaultDomain, StrixError

logger = logging.getLogger("strix.config")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(StrixError):
    """Raised when configuration validation fails."""

    code = "CONFIG_INVALID"
    domain = FaultDomain.CONFIG


@dataclass(frozen=True)
class StrixConfig:
    """
    Bootstrap settings.

    Attributes:
        simulate_dispatch: Invoke every compiled handler once after compilation
        duplicate_routes: Policy for repeated (verb, path) pairs: allow, warn, error
        log_level: Level the CLI configures logging with
        diagnostics: Attach the logging DI diagnostics listener
    """

    simulate_dispatch: bool = True
    duplicate_routes: str = DuplicatePolicy.WARN.value
    log_level: str = "INFO"
    diagnostics: bool = False

    def __post_init__(self):
        if isinstance(self.duplicate_routes, str):
            object.__setattr__(self, "duplicate_routes", self.duplicate_routes.lower())
        if self.duplicate_routes not in {p.value for p in DuplicatePolicy}:
            raise ConfigError(
                f"duplicate_routes must be one of "
                f"{[p.value for p in DuplicatePolicy]}, got {self.duplicate_routes!r}"
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {list(_LOG_LEVELS)}, got {self.log_level!r}")
        object.__setattr__(self, "log_level", self.log_level.upper())

    @property
    def duplicate_policy(self) -> DuplicatePolicy:
        return DuplicatePolicy(self.duplicate_routes)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Environment keys are matched on the prefix and lower-cased:
    ``STRIX_SIMULATE_DISPATCH=false`` sets ``simulate_dispatch``.
    """

    def __init__(self, env_prefix: str = "STRIX_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        path: Optional[str] = None,
        env_prefix: str = "STRIX_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration with the documented merge strategy.

        Args:
            path: YAML file; ``strix.yaml`` in the working directory if None
            env_prefix: Prefix for environment variables
            env_file: Path to a .env file
            overrides: Manual overrides (highest precedence)
            environ: Environment mapping (``os.environ`` if None)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        if path is None and Path("strix.yaml").exists():
            path = "strix.yaml"
        if path is not None:
            loader._load_yaml_file(Path(path))

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env(os.environ if environ is None else environ)

        if overrides:
            loader.config_data.update(overrides)

        return loader

    def _load_yaml_file(self, path: Path):
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
        self.config_data.update(data)
        logger.debug("Loaded config from %s", path)

    def _load_env_file(self, path: str):
        if not Path(path).exists():
            return
        self._load_from_env({k: v for k, v in dotenv_values(path).items() if v is not None})

    def _load_from_env(self, environ):
        for key, value in environ.items():
            if key.startswith(self.env_prefix):
                name = key[len(self.env_prefix):].lower()
                self.config_data[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self.config_data.get(key, default)

    def to_config(self, config_class: Type[StrixConfig] = StrixConfig) -> StrixConfig:
        """
        Instantiate ``config_class`` from the merged data with type checks.

        Unknown keys are ignored.

        Raises:
            ConfigError: On a type mismatch or a missing required field
        """
        hints = get_type_hints(config_class)
        kwargs = {}

        for field_info in fields(config_class):
            name = field_info.name
            if name in self.config_data:
                value = self.config_data[name]
                expected = hints.get(name, Any)
                if not self._check_type(value, expected):
                    raise ConfigError(
                        f"Config field '{name}' expected {expected.__name__}, "
                        f"got {type(value).__name__}"
                    )
                kwargs[name] = value
            elif field_info.default is MISSING and field_info.default_factory is MISSING:
                raise ConfigError(f"Required config field '{name}' not provided")

        return config_class(**kwargs)

    @staticmethod
    def _check_type(value: Any, expected_type: Any) -> bool:
        if expected_type is Any:
            return True
        if expected_type is bool:
            return isinstance(value, bool)
        if expected_type in (int, float) and isinstance(value, bool):
            return False
        return isinstance(value, expected_type)


def load_config(
    path: Optional[str] = None,
    *,
    env_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> StrixConfig:
    """Shortcut for ``ConfigLoader.load(...).to_config()``."""
    return ConfigLoader.load(
        path,
        env_file=env_file,
        overrides=overrides,
        environ=environ,
    ).to_config()
