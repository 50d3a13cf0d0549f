"""JSON problem payloads returned by the message API."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify

from .localization import ResourceNotFoundError


@dataclass(frozen=True)
class ProblemResponse:
    """RFC 7807-style error body plus the HTTP status to send it with."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, **self.extra}
        if self.message:
            payload["message"] = self.message
        return payload

    def to_response(self) -> tuple[Any, int]:
        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    return ProblemResponse(error=error, status=status, message=message, extra=extra)


def message_not_found(key: str, locale: str) -> ProblemResponse:
    """No configured resource holds ``key`` for ``locale``."""

    return problem_response(
        "message_not_found",
        status=HTTPStatus.NOT_FOUND,
        message=f"No message configured for {key!r}",
        key=key,
        locale=locale,
    )


def resource_unavailable(error: ResourceNotFoundError) -> ProblemResponse:
    """A configured bundle is missing or unreadable; the fault is server-side."""

    return problem_response(
        "resource_unavailable",
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
        message=str(error),
        resource=error.resource_name,
    )


__all__ = [
    "ProblemResponse",
    "message_not_found",
    "problem_response",
    "resource_unavailable",
]
