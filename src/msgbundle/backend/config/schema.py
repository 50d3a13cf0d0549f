"""Pydantic models describing the retriever settings file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ConfigurationError(ValueError):
    """Raised when settings values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class RetrieverSettings(ImmutableModel):
    """Settings shared by the message retriever and the HTTP layer."""

    resource_names: tuple[str, ...] = Field(default=(), alias="resources")
    cache_enabled: bool = True
    default_locale: str = "en"
    bundle_directory: Path | None = None
    allowed_origins: tuple[str, ...] = ()

    @field_validator("resource_names", "allowed_origins", mode="before")
    @classmethod
    def _coerce_sequence(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(item.strip() for item in value.split(",") if item.strip())
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
        raise ConfigurationError("Expected a list of strings")

    @model_validator(mode="after")
    def _validate_values(self) -> RetrieverSettings:
        for name in self.resource_names:
            if not name.strip():
                raise ConfigurationError("Resource names must be non-empty")
        if len(set(self.resource_names)) != len(self.resource_names):
            raise ConfigurationError("Resource names must be unique")
        if not self.default_locale.strip():
            raise ConfigurationError("A default locale is required")

        from msgbundle.backend.app.localization.locales import normalise_locale

        try:
            normalise_locale(self.default_locale)
        except ValueError as error:
            raise ConfigurationError(f"Invalid default locale: {error}") from error
        return self


__all__ = ["ConfigurationError", "ImmutableModel", "RetrieverSettings"]
