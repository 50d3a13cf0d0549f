"""Retrieve message patterns from an ordered list of resource stores.

Long messages may be split across rows. When a store has no value for
``key`` the retriever looks for ``key#1``, ``key#2``... and joins the rows it
finds, stopping at the first missing row.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from .locales import LocaleContext, resolve_locale
from .stores import MissingKeyError, ResourceStore, ResourceStoreFactory, StoreCache

_LOGGER = logging.getLogger(__name__)

ROW_SEPARATOR = "#"


class MessagePatternRetriever(Protocol):
    """Anything that can resolve a raw message pattern for a locale and key."""

    def retrieve(
        self, locale: str | None, key: str, context: LocaleContext | None = None
    ) -> str | None: ...


def retrieve_from_store(store: ResourceStore, key: str) -> str | None:
    """Return the value for ``key`` in ``store``, joining split rows if needed."""

    try:
        return store.get_string(key)
    except MissingKeyError:
        pass

    try:
        first_row = store.get_string(f"{key}{ROW_SEPARATOR}1")
    except MissingKeyError:
        return None

    rows = [first_row]
    row = 2
    while True:
        try:
            rows.append(store.get_string(f"{key}{ROW_SEPARATOR}{row}"))
        except MissingKeyError:
            return "".join(rows)
        row += 1


class MessageRetriever:
    """Resolve messages by searching the configured resource names in order.

    Every resource name is consulted; a value found in a later resource
    overrides one found earlier, while a miss leaves the earlier value in
    place.
    """

    def __init__(
        self,
        resource_names: Iterable[str],
        factory: ResourceStoreFactory,
        cache: StoreCache,
        default_locale: str = "en",
    ) -> None:
        self._resource_names = tuple(resource_names)
        self._factory = factory
        self._cache = cache
        self.default_locale = default_locale

    @property
    def resource_names(self) -> tuple[str, ...]:
        return self._resource_names

    def configure_resource_names(self, resource_names: Iterable[str]) -> None:
        """Replace the whole resource-name list."""

        self._resource_names = tuple(resource_names)

    @property
    def factory(self) -> ResourceStoreFactory:
        return self._factory

    def use_factory(self, factory: ResourceStoreFactory) -> None:
        self._factory = factory

    def retrieve(
        self,
        locale: str | None,
        key: str,
        context: LocaleContext | None = None,
    ) -> str | None:
        if not self._cache.enabled:
            self._cache.clear()

        effective_locale = resolve_locale(locale, context, self.default_locale)

        pattern: str | None = None
        for resource_name in self._resource_names:
            store = self._factory.open(resource_name, effective_locale)
            value = retrieve_from_store(store, key)
            if value is None:
                _LOGGER.debug(
                    "Key %s not found in %s for locale %s",
                    key,
                    resource_name,
                    effective_locale,
                )
                continue
            pattern = value
        return pattern


__all__ = [
    "MessagePatternRetriever",
    "MessageRetriever",
    "ROW_SEPARATOR",
    "retrieve_from_store",
]
