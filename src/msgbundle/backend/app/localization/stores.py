"""Resource stores, the factory protocol and the process-wide store cache."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from .locales import candidate_locales, normalise_locale

_LOGGER = logging.getLogger(__name__)

CATALOGUE_SUFFIXES = (".json", ".yaml", ".yml")


class MissingResourceError(LookupError):
    """Base error for anything that cannot be found in the bundle layer."""

    def __init__(self, message: str, *, resource_name: str = "", key: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.resource_name = resource_name
        self.key = key

    def __str__(self) -> str:
        return self.message


class MissingKeyError(MissingResourceError, KeyError):
    """Raised by a store when it holds no value for the requested key."""


class ResourceNotFoundError(MissingResourceError):
    """Raised by a factory when no store can be opened for a resource name."""


class InvalidResourceNameError(ResourceNotFoundError, ValueError):
    """Raised when a resource name cannot map to a catalogue location."""


@runtime_checkable
class ResourceStore(Protocol):
    """Key to string mapping for one resource name and locale."""

    def get_string(self, key: str) -> str:
        """Return the value for ``key`` or raise :class:`MissingKeyError`."""
        ...


@runtime_checkable
class ResourceStoreFactory(Protocol):
    """Opens the store for a resource name and locale."""

    def open(self, resource_name: str, locale: str) -> ResourceStore:
        """Return a store or raise :class:`ResourceNotFoundError`."""
        ...


class MappingResourceStore:
    """In-memory store that falls back to a less specific parent store."""

    def __init__(
        self,
        messages: Mapping[str, str],
        parent: MappingResourceStore | None = None,
        locale: str = "",
    ) -> None:
        self._messages = dict(messages)
        self.parent = parent
        self.locale = locale

    def get_string(self, key: str) -> str:
        store: MappingResourceStore | None = self
        while store is not None:
            if key in store._messages:
                return store._messages[key]
            store = store.parent
        raise MissingKeyError(
            f"Can't find resource for key {key!r} (locale {self.locale or 'root'})",
            key=key,
        )

    def keys(self) -> set[str]:
        """Return every key visible through the parent chain."""

        visible: set[str] = set()
        store: MappingResourceStore | None = self
        while store is not None:
            visible.update(store._messages)
            store = store.parent
        return visible

    def __contains__(self, key: object) -> bool:
        return key in self.keys()

    def __repr__(self) -> str:
        return f"MappingResourceStore(locale={self.locale!r}, size={len(self._messages)})"


CacheKey = tuple[str, ...]


class StoreCache:
    """Process-wide cache of opened stores.

    Keys carry the owning factory's identity plus resource name and locale,
    so factories sharing one cache never see each other's stores.

    :meth:`clear` drops every cached store for every consumer; it is not
    scoped to a resource, key or locale and is not atomic with respect to
    concurrent loads.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._stores: dict[CacheKey, ResourceStore] = {}

    def get_or_load(
        self, key: CacheKey, loader: Callable[[], ResourceStore]
    ) -> ResourceStore:
        if not self.enabled:
            return loader()

        store = self._stores.get(key)
        if store is None:
            store = loader()
            self._stores[key] = store
        return store

    def clear(self) -> None:
        dropped = len(self._stores)
        self._stores.clear()
        _LOGGER.debug("Cleared %d cached resource store(s)", dropped)

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False
        self.clear()

    def __len__(self) -> int:
        return len(self._stores)

    def __iter__(self) -> Iterator[CacheKey]:
        return iter(list(self._stores))


shared_store_cache = StoreCache()


def flatten_messages(tree: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested catalogue mappings into dotted keys with string values."""

    items: dict[str, str] = {}
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            items.update(flatten_messages(value, path))
        else:
            items[path] = "" if value is None else str(value)
    return items


def load_catalogue(path: Path) -> dict[str, str]:
    """Read a JSON or YAML catalogue file into a flat key/value mapping."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            if path.suffix == ".json":
                payload = json.load(handle)
            else:
                payload = yaml.safe_load(handle)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as error:
        raise ResourceNotFoundError(
            f"Unreadable catalogue {path}: {error}", resource_name=path.stem
        ) from error

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ResourceNotFoundError(
            f"Catalogue {path} must define a mapping at the top level",
            resource_name=path.stem,
        )
    return flatten_messages(payload)


def resource_path(resource_name: str) -> Path:
    """Map a dotted resource name onto a relative catalogue path."""

    segments = resource_name.split(".")
    for segment in segments:
        if not segment.strip() or "/" in segment or "\\" in segment:
            raise InvalidResourceNameError(
                f"Invalid resource name: {resource_name!r}", resource_name=resource_name
            )
    return Path(*segments)


class CatalogueStoreFactory:
    """Open stores from ``<name>_<locale>.json|yaml`` catalogues in a directory.

    Dots in a resource name map to sub-directories, so ``errors.validation``
    for ``el_GR`` reads ``errors/validation_el_GR.json`` and falls back through
    ``errors/validation_el.json`` to the root ``errors/validation.json``. When
    the requested locale has no catalogue at all, the default locale's chain is
    tried before the root.
    """

    def __init__(
        self,
        directory: Path | str,
        default_locale: str = "en",
        cache: StoreCache | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.default_locale = normalise_locale(default_locale) or default_locale
        self.cache = cache if cache is not None else shared_store_cache

    def open(self, resource_name: str, locale: str) -> ResourceStore:
        base = self.directory / resource_path(resource_name)
        tag = normalise_locale(locale) or ""
        key = (str(self.directory), self.default_locale, resource_name, tag)
        return self.cache.get_or_load(key, lambda: self._build_store(resource_name, base, tag))

    def available_locales(self, resource_name: str) -> tuple[str, ...]:
        """List the locale suffixes with catalogues for ``resource_name``."""

        base = self.directory / resource_path(resource_name)
        if not base.parent.is_dir():
            return ()

        prefix = f"{base.name}_"
        locales = {
            entry.stem[len(prefix):]
            for entry in base.parent.iterdir()
            if entry.suffix in CATALOGUE_SUFFIXES and entry.stem.startswith(prefix)
        }
        return tuple(sorted(locales))

    def _find_catalogue(self, base: Path, tag: str) -> Path | None:
        stem = f"{base.name}_{tag}" if tag else base.name
        for suffix in CATALOGUE_SUFFIXES:
            candidate = base.with_name(stem + suffix)
            if candidate.is_file():
                return candidate
        return None

    def _locale_files(self, base: Path, tag: str) -> list[tuple[str, Path]]:
        found: list[tuple[str, Path]] = []
        for candidate in candidate_locales(tag):
            path = self._find_catalogue(base, candidate)
            if path is not None:
                found.append((candidate, path))
        return found

    def _build_store(self, resource_name: str, base: Path, tag: str) -> ResourceStore:
        found = self._locale_files(base, tag)
        if not found and tag != self.default_locale:
            found = self._locale_files(base, self.default_locale)

        root_path = self._find_catalogue(base, "")
        if not found and root_path is None:
            raise ResourceNotFoundError(
                f"Can't find bundle for base name {resource_name}, locale {tag or 'root'}",
                resource_name=resource_name,
            )

        parent = MappingResourceStore(load_catalogue(root_path)) if root_path else None
        for locale, path in reversed(found):
            parent = MappingResourceStore(load_catalogue(path), parent=parent, locale=locale)

        _LOGGER.debug(
            "Opened resource store %s for locale %s from %d catalogue(s)",
            resource_name,
            tag or "root",
            len(found) + (root_path is not None),
        )
        return parent  # type: ignore[return-value]


__all__ = [
    "CATALOGUE_SUFFIXES",
    "CatalogueStoreFactory",
    "InvalidResourceNameError",
    "MappingResourceStore",
    "MissingKeyError",
    "MissingResourceError",
    "ResourceNotFoundError",
    "ResourceStore",
    "ResourceStoreFactory",
    "StoreCache",
    "flatten_messages",
    "load_catalogue",
    "resource_path",
    "shared_store_cache",
]
