"""Locale tag handling and the ambient request context."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_SEPARATOR = re.compile(r"[-_]")


def normalise_locale(tag: str | None) -> str | None:
    """Normalise a locale tag to ``language[_REGION[_variant]]``.

    ``None`` and blank tags yield ``None`` so callers can fall back to the
    ambient or default locale. Tags whose language part is not alphabetic
    raise ``ValueError``.
    """

    if tag is None or not tag.strip():
        return None

    parts = [part for part in _SEPARATOR.split(tag.strip()) if part]
    if not parts or not parts[0].isalpha():
        raise ValueError(f"Invalid locale tag: {tag!r}")

    normalised = [parts[0].lower()]
    if len(parts) > 1:
        normalised.append(parts[1].upper())
    normalised.extend(parts[2:])
    return "_".join(normalised)


def candidate_locales(tag: str | None) -> tuple[str, ...]:
    """Return the lookup chain for ``tag``, most specific first.

    The root bundle is not part of the chain; ``el_GR_x`` yields
    ``("el_GR_x", "el_GR", "el")``.
    """

    normalised = normalise_locale(tag)
    if normalised is None:
        return ()

    parts = normalised.split("_")
    return tuple("_".join(parts[:size]) for size in range(len(parts), 0, -1))


def best_match(accepted: Iterable[str], available: Iterable[str]) -> str | None:
    """Pick the first accepted tag that shares a language with ``available``."""

    available_tags = {normalise_locale(tag) for tag in available}
    available_tags.discard(None)
    for tag in accepted:
        try:
            candidates = candidate_locales(tag)
        except ValueError:
            continue
        for candidate in candidates:
            if candidate in available_tags:
                return candidate
    return None


@dataclass(frozen=True)
class LocaleContext:
    """Request-scoped state exposing the current locale, if any."""

    current_locale: str | None = None


def resolve_locale(
    explicit: str | None,
    context: LocaleContext | None,
    default: str,
) -> str:
    """Resolve the effective locale: explicit, then context, then default."""

    for tag in (explicit, context.current_locale if context else None):
        normalised = normalise_locale(tag)
        if normalised is not None:
            return normalised
    return normalise_locale(default) or default


__all__ = [
    "LocaleContext",
    "best_match",
    "candidate_locales",
    "normalise_locale",
    "resolve_locale",
]
