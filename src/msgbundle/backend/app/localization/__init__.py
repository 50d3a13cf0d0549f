"""Message lookup helpers wired to the configured resource bundles."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from msgbundle.backend.config.settings import load_settings

from .formatting import MessageHelper, format_message, placeholders
from .locales import (
    LocaleContext,
    best_match,
    candidate_locales,
    normalise_locale,
    resolve_locale,
)
from .retriever import MessagePatternRetriever, MessageRetriever, retrieve_from_store
from .stores import (
    CatalogueStoreFactory,
    InvalidResourceNameError,
    MappingResourceStore,
    MissingKeyError,
    MissingResourceError,
    ResourceNotFoundError,
    ResourceStore,
    ResourceStoreFactory,
    StoreCache,
    shared_store_cache,
)

BUNDLE_DIRECTORY = Path(__file__).resolve().parents[3] / "bundles"


@lru_cache(maxsize=1)
def get_retriever() -> MessageRetriever:
    """Return the process retriever built from the loaded settings."""

    settings = load_settings()
    if settings.cache_enabled:
        shared_store_cache.enable()
    else:
        shared_store_cache.disable()

    factory = CatalogueStoreFactory(
        settings.bundle_directory or BUNDLE_DIRECTORY,
        default_locale=settings.default_locale,
        cache=shared_store_cache,
    )
    return MessageRetriever(
        settings.resource_names,
        factory,
        shared_store_cache,
        default_locale=settings.default_locale,
    )


def get_message_helper(context: LocaleContext | None = None) -> MessageHelper:
    """Return a formatting helper bound to the process retriever."""

    return MessageHelper(get_retriever(), context)


__all__ = [
    "BUNDLE_DIRECTORY",
    "CatalogueStoreFactory",
    "InvalidResourceNameError",
    "LocaleContext",
    "MappingResourceStore",
    "MessageHelper",
    "MessagePatternRetriever",
    "MessageRetriever",
    "MissingKeyError",
    "MissingResourceError",
    "ResourceNotFoundError",
    "ResourceStore",
    "ResourceStoreFactory",
    "StoreCache",
    "best_match",
    "candidate_locales",
    "format_message",
    "get_message_helper",
    "get_retriever",
    "normalise_locale",
    "placeholders",
    "resolve_locale",
    "retrieve_from_store",
    "shared_store_cache",
]
