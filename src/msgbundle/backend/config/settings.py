"""Settings loader wrapping the shared schema models."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import ConfigurationError, RetrieverSettings

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
SETTINGS_FILE = CONFIG_DIRECTORY / "settings.yaml"

SETTINGS_FILE_ENV = "MSGBUNDLE_SETTINGS_FILE"
CACHE_ENABLED_ENV = "MSGBUNDLE_CACHE_ENABLED"
DEFAULT_LOCALE_ENV = "MSGBUNDLE_DEFAULT_LOCALE"
ALLOWED_ORIGINS_ENV = "MSGBUNDLE_ALLOWED_ORIGINS"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_LOGGER = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must define a mapping at the top level")
    return data


def parse_flag(raw: str) -> bool:
    """Interpret an environment flag, rejecting ambiguous values."""

    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"Unrecognised boolean value: {raw!r}")


def settings_path() -> Path:
    """Return the settings file in effect, honouring the environment override."""

    override = os.getenv(SETTINGS_FILE_ENV)
    return Path(override) if override else SETTINGS_FILE


def _apply_environment(raw: dict[str, Any]) -> dict[str, Any]:
    cache_flag = os.getenv(CACHE_ENABLED_ENV)
    if cache_flag:
        raw["cache_enabled"] = parse_flag(cache_flag)

    default_locale = os.getenv(DEFAULT_LOCALE_ENV)
    if default_locale is not None:
        if default_locale.strip():
            raw["default_locale"] = default_locale.strip()
        else:
            _LOGGER.warning("Ignoring empty value for %s", DEFAULT_LOCALE_ENV)

    origins = os.getenv(ALLOWED_ORIGINS_ENV)
    if origins is not None:
        raw["allowed_origins"] = origins

    return raw


@lru_cache(maxsize=1)
def load_settings() -> RetrieverSettings:
    """Load, validate and cache the retriever settings."""

    path = settings_path()
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    raw = _apply_environment(_load_yaml(path))

    directory = raw.get("bundle_directory")
    if directory is not None and not Path(directory).is_absolute():
        raw["bundle_directory"] = (path.parent / directory).resolve()

    try:
        settings = RetrieverSettings.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Settings validation failed: {error}") from error

    _LOGGER.debug(
        "Loaded settings from %s (resources=%s, cache_enabled=%s)",
        path,
        ", ".join(settings.resource_names) or "<none>",
        settings.cache_enabled,
    )
    return settings


__all__ = [
    "ALLOWED_ORIGINS_ENV",
    "CACHE_ENABLED_ENV",
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "DEFAULT_LOCALE_ENV",
    "RetrieverSettings",
    "SETTINGS_FILE",
    "SETTINGS_FILE_ENV",
    "load_settings",
    "parse_flag",
    "settings_path",
]
