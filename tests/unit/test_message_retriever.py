"""Unit coverage for ordered resource search and split-message assembly."""

from __future__ import annotations

from typing import Mapping

import pytest

from msgbundle.backend.app.localization import (
    InvalidResourceNameError,
    LocaleContext,
    MappingResourceStore,
    MessageRetriever,
    ResourceNotFoundError,
    StoreCache,
    retrieve_from_store,
)


class FakeFactory:
    """Serve in-memory stores keyed by resource name, recording every open."""

    def __init__(self, bundles: Mapping[str, Mapping[str, str]]) -> None:
        self.bundles = bundles
        self.opened: list[tuple[str, str]] = []

    def open(self, resource_name: str, locale: str) -> MappingResourceStore:
        self.opened.append((resource_name, locale))
        if resource_name not in self.bundles:
            raise ResourceNotFoundError(
                f"No bundle {resource_name}", resource_name=resource_name
            )
        return MappingResourceStore(self.bundles[resource_name], locale=locale)


class RecordingStore(MappingResourceStore):
    def __init__(self, messages: Mapping[str, str]) -> None:
        super().__init__(messages)
        self.requested: list[str] = []

    def get_string(self, key: str) -> str:
        self.requested.append(key)
        return super().get_string(key)


def _retriever(*bundles: Mapping[str, str]) -> MessageRetriever:
    names = [f"bundle{index}" for index in range(len(bundles))]
    factory = FakeFactory(dict(zip(names, bundles)))
    return MessageRetriever(names, factory, StoreCache(), default_locale="en")


def test_direct_value_wins_over_split_rows() -> None:
    store = RecordingStore({"greeting": "Hi", "greeting#1": "Hello, ", "greeting#2": "World!"})

    assert retrieve_from_store(store, "greeting") == "Hi"
    assert store.requested == ["greeting"]


def test_split_rows_are_joined_without_separator() -> None:
    retriever = _retriever({"greeting#1": "Hello, ", "greeting#2": "World!"})

    assert retriever.retrieve("en", "greeting") == "Hello, World!"


def test_gap_truncates_after_last_contiguous_row() -> None:
    retriever = _retriever({"msg#1": "A", "msg#3": "C"})

    assert retriever.retrieve("en", "msg") == "A"


def test_split_rows_have_no_fixed_upper_bound() -> None:
    rows = {f"long#{row}": str(row % 10) for row in range(1, 251)}
    store = MappingResourceStore(rows)

    expected = "".join(str(row % 10) for row in range(1, 251))
    assert retrieve_from_store(store, "long") == expected


def test_missing_key_returns_none() -> None:
    retriever = _retriever({"other": "value"}, {"another": "value"})

    assert retriever.retrieve("en", "absent") is None


def test_later_resource_overrides_earlier_value() -> None:
    retriever = _retriever({"title": "From A"}, {"title": "From B"})

    assert retriever.retrieve("en", "title") == "From B"


def test_miss_in_later_resource_keeps_earlier_value() -> None:
    retriever = _retriever({"title": "From A"}, {"unrelated": "x"})

    assert retriever.retrieve("en", "title") == "From A"


def test_every_resource_is_consulted_in_order() -> None:
    retriever = _retriever({"title": "A"}, {"title": "B"}, {"title": "C"})

    retriever.retrieve("el", "title")

    assert retriever.factory.opened == [  # type: ignore[attr-defined]
        ("bundle0", "el"),
        ("bundle1", "el"),
        ("bundle2", "el"),
    ]


def test_factory_failure_propagates() -> None:
    factory = FakeFactory({"present": {"title": "x"}})
    retriever = MessageRetriever(["present", "missing"], factory, StoreCache())

    with pytest.raises(ResourceNotFoundError):
        retriever.retrieve("en", "title")


def test_invalid_resource_name_is_a_resource_error() -> None:
    assert issubclass(InvalidResourceNameError, ResourceNotFoundError)
    assert issubclass(InvalidResourceNameError, ValueError)


def test_locale_resolution_prefers_explicit_then_context_then_default() -> None:
    retriever = _retriever({"title": "x"})
    factory = retriever.factory
    context = LocaleContext(current_locale="el-gr")

    retriever.retrieve("fr", "title", context)
    retriever.retrieve(None, "title", context)
    retriever.retrieve(None, "title", LocaleContext())
    retriever.retrieve(None, "title")

    assert [locale for _, locale in factory.opened] == [  # type: ignore[attr-defined]
        "fr",
        "el_GR",
        "en",
        "en",
    ]


def test_configure_resource_names_replaces_whole_list() -> None:
    factory = FakeFactory({"a": {"title": "A"}, "b": {"title": "B"}})
    retriever = MessageRetriever(["a", "b"], factory, StoreCache())

    retriever.configure_resource_names(["a"])

    assert retriever.resource_names == ("a",)
    assert retriever.retrieve("en", "title") == "A"


def test_use_factory_swaps_store_source() -> None:
    retriever = MessageRetriever(["a"], FakeFactory({"a": {"title": "old"}}), StoreCache())

    retriever.use_factory(FakeFactory({"a": {"title": "new"}}))

    assert retriever.retrieve("en", "title") == "new"


class CountingCache(StoreCache):
    def __init__(self) -> None:
        super().__init__()
        self.events: list[str] = []

    def clear(self) -> None:
        self.events.append("clear")
        super().clear()


class EventFactory(FakeFactory):
    def __init__(self, bundles, events: list[str]) -> None:
        super().__init__(bundles)
        self.events = events

    def open(self, resource_name: str, locale: str) -> MappingResourceStore:
        self.events.append("open")
        return super().open(resource_name, locale)


def test_disabling_cache_invalidates_before_next_lookup() -> None:
    cache = CountingCache()
    factory = EventFactory({"a": {"title": "A"}}, cache.events)
    retriever = MessageRetriever(["a"], factory, cache)

    retriever.retrieve("en", "title")
    assert cache.events == ["open"]

    cache.enabled = False
    retriever.retrieve("en", "title")

    assert cache.events == ["open", "clear", "open"]


def test_enabled_cache_is_left_untouched() -> None:
    cache = CountingCache()
    retriever = MessageRetriever(["a"], FakeFactory({"a": {"title": "A"}}), cache)

    retriever.retrieve("en", "title")
    retriever.retrieve("en", "title")

    assert cache.events == []
