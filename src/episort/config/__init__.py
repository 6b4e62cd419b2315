"""Configuration management for episort."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import EpisortConfig
from .resolver import (
    ENV_PREFIX,
    flatten_for_env,
    overrides_from_env,
    resolve_with_precedence,
    set_dotted,
)

DEFAULT_CONFIG_PATH = Path("~/.episort/config.yaml")


class ConfigManager:
    """Own ``~/.episort/config.yaml`` and resolve the settings a command runs with.

    The file stores only what the user chose; defaults, ``EPISORT__`` environment
    variables and command-line overrides are layered on at load time.

    Args:
        config_path: Location of the YAML file; defaults to ``~/.episort/config.yaml``.
        env: Environment consulted for ``EPISORT__`` overrides; defaults to ``os.environ``.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> EpisortConfig:
        """Return the effective configuration: defaults < file < environment < CLI."""
        env: Mapping[str, str] = {}
        if include_env:
            env = env_overrides if env_overrides is not None else self._env
        return resolve_with_precedence(
            defaults=EpisortConfig(),
            file_overrides=self.read_overrides(),
            env_overrides=overrides_from_env(env),
            cli_overrides=cli_overrides,
        )

    def ensure_exists(self) -> Path:
        """Write the default configuration when no file exists yet."""
        if not self._config_path.exists():
            self.save(EpisortConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def read_overrides(self) -> dict[str, Any]:
        """Return the mapping stored in the file, or an empty one when it is missing."""
        return self._parse(self.read_text())

    def save(self, data: EpisortConfig | Mapping[str, Any]) -> None:
        if isinstance(data, EpisortConfig):
            data = data.model_dump(mode="python")
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text(
            yaml.safe_dump(dict(data), sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )

    def set_value(self, key: str, value: Any) -> bool:
        """Store ``value`` at the dotted ``key``.

        Returns:
            bool: False when the file already held that value and nothing was written.

        Raises:
            ConfigError: If the key is malformed or the result fails validation.
        """
        current = self.read_overrides()
        updated = copy.deepcopy(current)
        set_dotted(updated, key, value)
        if updated == current:
            return False
        resolve_with_precedence(defaults=EpisortConfig(), file_overrides=updated)
        self.save(updated)
        return True

    def replace(self, text: str) -> None:
        """Validate ``text`` as a whole configuration file and write it."""
        data = self._parse(text)
        resolve_with_precedence(defaults=EpisortConfig(), file_overrides=data)
        self.save(data)

    @staticmethod
    def _parse(text: str) -> dict[str, Any]:
        try:
            raw = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw


__all__ = [
    "ENV_PREFIX",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "EpisortConfig",
    "flatten_for_env",
    "overrides_from_env",
    "resolve_with_precedence",
    "set_dotted",
]
