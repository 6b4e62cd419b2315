"""Layering of configuration sources into a validated ``EpisortConfig``.

Every episort setting lives one level below a section (``naming.season_folder``,
``parsing.debug``), so overrides from any source reduce to dotted keys applied
over the defaults in order: file, environment, then command line.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import EpisortConfig

ENV_PREFIX = "EPISORT__"


def overrides_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Return dotted-key overrides for every ``EPISORT__SECTION__FIELD`` variable.

    Values are read as YAML literals so ``true``, ``200`` and ``[mkv, mp4]``
    arrive typed; anything YAML cannot read is kept as the raw string.
    """
    overrides: dict[str, Any] = {}
    for name, raw in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        segments = [segment.lower() for segment in name[len(ENV_PREFIX) :].split("__") if segment]
        if len(segments) != 2:
            raise ConfigError(f"{name}: expected {ENV_PREFIX}<SECTION>__<FIELD>.")
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        overrides[".".join(segments)] = value
    return overrides


def set_dotted(target: dict[str, Any], key: str, value: Any) -> None:
    """Assign ``value`` at the dotted ``key`` inside ``target``, creating sections as needed."""
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise ConfigError(
            f"Invalid key {key!r}; use a dotted path such as 'naming.season_folder'."
        )
    node = target
    for segment in segments[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(f"Cannot assign {key}: {segment!r} is not a section.")
        node = child
    node[segments[-1]] = value


def resolve_with_precedence(
    *,
    defaults: EpisortConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> EpisortConfig:
    """Merge configuration sources: defaults < file < environment < CLI.

    Each layer may be nested (as stored in ``config.yaml``) or use dotted keys
    (as produced by :func:`overrides_from_env`); both forms can be mixed.
    """
    merged = defaults.model_dump(mode="python")
    for label, layer in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if not layer:
            continue
        if not isinstance(layer, Mapping):
            raise ConfigError(f"{label.capitalize()} overrides must be a mapping.")
        for key, value in layer.items():
            if not isinstance(key, str):
                raise ConfigError(f"{label.capitalize()} override keys must be strings.")
            _apply(merged, key, value)

    try:
        return EpisortConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: EpisortConfig) -> Dict[str, str]:
    """Return the ``EPISORT__SECTION__FIELD`` variables that reproduce ``config``."""
    flat: Dict[str, str] = {}
    for section, fields in config.model_dump(mode="python").items():
        for name, value in fields.items():
            flat[f"{ENV_PREFIX}{section.upper()}__{name.upper()}"] = _env_literal(value)
    return flat


def _apply(merged: dict[str, Any], key: str, value: Any) -> None:
    if isinstance(value, Mapping):
        for child_key, child_value in value.items():
            _apply(merged, f"{key}.{child_key}", child_value)
        return
    set_dotted(merged, key, value)


def _env_literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return yaml.safe_dump(value, default_flow_style=True).strip()
    return str(value)


__all__ = [
    "ENV_PREFIX",
    "flatten_for_env",
    "overrides_from_env",
    "resolve_with_precedence",
    "set_dotted",
]
