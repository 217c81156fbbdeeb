"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify

from transtable.config.schema import ConfigurationError
from transtable.errors import (
    BundleNotFoundError,
    NotFoundError,
    RowError,
    SchemaError,
    TranslationError,
)


@dataclass(frozen=True)
class ProblemResponse:
    """Lightweight representation of an RFC 7807-style error payload."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
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
    """Convenience factory mirroring Flask's ``jsonify`` interface."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


_ERROR_CODES: tuple[tuple[type[Exception], str, HTTPStatus], ...] = (
    (NotFoundError, "not_found", HTTPStatus.NOT_FOUND),
    (BundleNotFoundError, "bundle_not_found", HTTPStatus.NOT_FOUND),
    (RowError, "row_error", HTTPStatus.UNPROCESSABLE_ENTITY),
    (SchemaError, "schema_error", HTTPStatus.UNPROCESSABLE_ENTITY),
    (ConfigurationError, "invalid_settings", HTTPStatus.UNPROCESSABLE_ENTITY),
)


def problem_from_error(error: Exception) -> ProblemResponse:
    """Map pipeline exceptions onto problem responses carrying their context."""

    context = error.context() if isinstance(error, TranslationError) else {}
    message = error.message if isinstance(error, TranslationError) else str(error)

    for error_type, code, status in _ERROR_CODES:
        if isinstance(error, error_type):
            return problem_response(code, status=status, message=message, **context)

    return problem_response(
        "translation_error",
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
        message=message,
        **context,
    )


__all__ = ["ProblemResponse", "problem_from_error", "problem_response"]
