"""Test target configuration — load / save / layer.

Layers (later wins):
    1. Model defaults
    2. assetqa.config.yaml
    3. ASSETQA_* environment variables (``__`` separates nested keys)
    4. Explicit overrides (CLI flags)

Device identifiers, app paths and credentials only ever arrive through
layers 2-4; nothing in the package hardcodes them.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from assetqa.core.exceptions import ConfigError
from assetqa.core.models import AppiumConfig, Config

DEFAULT_CONFIG_FILENAME = "assetqa.config.yaml"
CONFIG_DIRNAME = ".assetqa"
ENV_PREFIX = "ASSETQA_"
_ENV_DELIMITER = "__"
_MASK = "********"
_SECRET_KEYS = frozenset({"password"})


class _FileConfig(Config):
    """Config validated from init kwargs only; the environment is not read."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    *,
    include_env: bool = True,
) -> Config:
    """Build a Config from the YAML file, the environment and overrides.

    Args:
        config_path: YAML file to read. If None, cwd and its parents are searched.
        overrides: Nested dict merged last (highest priority).
        include_env: Apply ASSETQA_* variables. Disabled when the result is
            written back to disk, so secrets from the environment stay there.

    Returns:
        Validated Config instance.

    Raises:
        ConfigError: If the YAML cannot be read/parsed or validation fails.
    """
    if config_path is None:
        config_path = find_config_file()

    file_data: dict[str, Any] = {}
    if config_path is not None and config_path.exists():
        file_data = _read_yaml(config_path)

    # Env vars are merged by hand so they win over the file; the merged dict
    # is then passed as init kwargs, which BaseSettings ranks highest.
    merged = _deep_merge(file_data, _env_layer()) if include_env else file_data
    if overrides:
        merged = _deep_merge(merged, overrides)

    try:
        if not include_env:
            return _FileConfig(**merged)
        return Config(**merged)
    except ValidationError as e:
        msg = f"Config validation failed: {e}"
        raise ConfigError(msg) from e


def save_config(config: Config, path: Path) -> None:
    """Write Config to a YAML file, creating parent directories."""
    data = config.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:  # noqa: PTH123
        yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)


def masked_dump(config: Config) -> dict[str, Any]:
    """Return config as a JSON-able dict with secrets replaced."""
    return _mask(config.model_dump(mode="json"))


def require_session_target(appium: AppiumConfig) -> None:
    """Check that the settings needed to launch the app are present.

    Raises:
        ConfigError: If neither an app path nor a bundle id is configured.
    """
    if not appium.app_path and not appium.bundle_id:
        msg = (
            "No test target configured: set appium.app_path or appium.bundle_id "
            f"(env: {ENV_PREFIX}APPIUM__APP_PATH / {ENV_PREFIX}APPIUM__BUNDLE_ID)"
        )
        raise ConfigError(msg)


def find_config_file(start: Path | None = None) -> Path | None:
    """Look for the config file in start (default cwd) and every parent."""
    current = start or Path.cwd()
    for directory in [current, *current.parents]:
        for candidate in (
            directory / DEFAULT_CONFIG_FILENAME,
            directory / CONFIG_DIRNAME / DEFAULT_CONFIG_FILENAME,
        ):
            if candidate.exists():
                return candidate
    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:  # noqa: PTH123
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Failed to parse YAML: {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Failed to read config: {path}: {e}"
        raise ConfigError(msg) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file must be a YAML mapping, got {type(data).__name__}: {path}"
        raise ConfigError(msg)
    return data


def _env_layer() -> dict[str, Any]:
    """ASSETQA_APPIUM__UDID=x  ->  {"appium": {"udid": "x"}}"""
    layer: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = key[len(ENV_PREFIX) :].lower().split(_ENV_DELIMITER)
        node = layer
        for part in path[:-1]:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[path[-1]] = value
    return layer


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _mask(data: dict[str, Any]) -> dict[str, Any]:
    masked: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            masked[key] = _mask(value)
        elif key in _SECRET_KEYS and value:
            masked[key] = _MASK
        else:
            masked[key] = value
    return masked
