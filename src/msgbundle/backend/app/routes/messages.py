"""Resolve individual messages for HTTP clients."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from msgbundle.backend.app.http import message_not_found
from msgbundle.backend.app.localization import (
    CatalogueStoreFactory,
    LocaleContext,
    MessageRetriever,
    best_match,
    format_message,
    get_retriever,
    resolve_locale,
)

blueprint = Blueprint("messages", __name__, url_prefix="/api/v1/messages")


def _available_locales(retriever: MessageRetriever) -> set[str]:
    factory = retriever.factory
    if not isinstance(factory, CatalogueStoreFactory):
        return set()

    locales: set[str] = set()
    for resource_name in retriever.resource_names:
        locales.update(factory.available_locales(resource_name))
    return locales


def request_locale_context(retriever: MessageRetriever) -> LocaleContext:
    """Derive the ambient locale for the current request from ``Accept-Language``."""

    accepted = [tag for tag, _quality in request.accept_languages]
    return LocaleContext(current_locale=best_match(accepted, _available_locales(retriever)))


@blueprint.get("/<path:key>")
def get_message(key: str):
    """Return the message for ``key`` with query parameters filled in."""

    retriever = get_retriever()
    params = request.args.to_dict()
    locale_hint = params.pop("locale", None)
    context = request_locale_context(retriever)

    pattern = retriever.retrieve(locale_hint, key, context)
    locale = resolve_locale(locale_hint, context, retriever.default_locale)
    if pattern is None:
        return message_not_found(key, locale).to_response()

    payload = {
        "key": key,
        "locale": locale,
        "message": format_message(pattern, params),
    }
    return jsonify(payload), 200
