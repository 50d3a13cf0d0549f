"""Placeholder substitution on top of raw message patterns."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from .locales import LocaleContext
from .retriever import MessagePatternRetriever

PLACEHOLDER_PATTERN = re.compile(r"{{\s*([a-zA-Z0-9_.-]+)\s*}}")


def placeholders(pattern: str) -> set[str]:
    """Return the placeholder names referenced by ``pattern``."""

    return set(PLACEHOLDER_PATTERN.findall(pattern))


def format_message(pattern: str, params: Mapping[str, Any]) -> str:
    """Substitute ``{{ name }}`` placeholders, leaving unknown names untouched."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in params:
            return str(params[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, pattern)


@dataclass(frozen=True)
class MessageHelper:
    """Callable-style accessor returning formatted messages."""

    retriever: MessagePatternRetriever
    context: LocaleContext | None = None

    def get_message(
        self,
        key: str,
        locale: str | None = None,
        *,
        default: str | None = None,
        **params: Any,
    ) -> str:
        pattern = self.retriever.retrieve(locale, key, self.context)
        if pattern is None:
            pattern = default if default is not None else key
        return format_message(pattern, params)

    def has_message(self, key: str, locale: str | None = None) -> bool:
        return self.retriever.retrieve(locale, key, self.context) is not None

    def __call__(self, key: str, **params: Any) -> str:
        return self.get_message(key, **params)


__all__ = ["MessageHelper", "PLACEHOLDER_PATTERN", "format_message", "placeholders"]
