"""Expose the active retriever configuration to API consumers."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from msgbundle.backend.app.localization import get_retriever, shared_store_cache
from msgbundle.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Describe the resource search order and runtime metadata."""

    retriever = get_retriever()
    return {
        "version": get_project_version(),
        "resource_names": list(retriever.resource_names),
    }


@blueprint.get("/")
def get_configuration():
    """Return resource names, locale defaults and cache state."""

    retriever = get_retriever()
    payload = {
        **get_configuration_metadata(),
        "default_locale": retriever.default_locale,
        "cache_enabled": shared_store_cache.enabled,
    }
    return jsonify(payload), 200
