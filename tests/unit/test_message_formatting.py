"""Unit coverage for placeholder substitution and the message helper."""

from __future__ import annotations

from msgbundle.backend.app.localization import (
    LocaleContext,
    MappingResourceStore,
    MessageHelper,
    MessageRetriever,
    StoreCache,
    format_message,
    placeholders,
)


class SingleStoreFactory:
    def __init__(self, messages: dict[str, str]) -> None:
        self.messages = messages
        self.locales: list[str] = []

    def open(self, resource_name: str, locale: str) -> MappingResourceStore:
        self.locales.append(locale)
        return MappingResourceStore(self.messages, locale=locale)


def _helper(messages: dict[str, str], context: LocaleContext | None = None):
    factory = SingleStoreFactory(messages)
    retriever = MessageRetriever(["messages"], factory, StoreCache())
    return MessageHelper(retriever, context), factory


def test_format_message_substitutes_known_placeholders() -> None:
    pattern = "{{ count }} item(s) for {{name}}, {{ missing }}"

    assert format_message(pattern, {"count": 3, "name": "Ada"}) == (
        "3 item(s) for Ada, {{ missing }}"
    )


def test_placeholders_lists_names() -> None:
    assert placeholders("{{ a }} and {{b.c}} and {{ a }}") == {"a", "b.c"}


def test_helper_formats_split_messages() -> None:
    helper, _ = _helper({"welcome#1": "Welcome, ", "welcome#2": "{{ name }}!"})

    assert helper.get_message("welcome", name="Ada") == "Welcome, Ada!"


def test_helper_falls_back_to_default_then_key() -> None:
    helper, _ = _helper({})

    assert helper.get_message("absent", default="Hi {{ name }}", name="Ada") == "Hi Ada"
    assert helper.get_message("absent") == "absent"
    assert not helper.has_message("absent")


def test_helper_passes_context_to_retriever() -> None:
    helper, factory = _helper({"title": "x"}, LocaleContext(current_locale="el"))

    assert helper("title") == "x"
    assert factory.locales == ["el"]
