"""Helpers turning HTTP request parameters into import/export settings."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from flask import Request
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest

from transtable.config.schema import ALL_TOKEN, ConfigurationError, ExportSettings, ImportFilter

DEFAULT_EXPORT_FILENAME = "translations.csv"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_flag(params: Mapping[str, Any], name: str, default: bool) -> bool:
    raw = params.get(name)
    if raw is None:
        return default
    value = str(raw).strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise BadRequest(f"Parameter '{name}' must be a boolean flag")


def parse_import_filter(req: Request) -> ImportFilter:
    """Build an ``ImportFilter`` from form fields, falling back to query arguments."""

    params = req.form if req.form else req.args
    locales = params.get("locales")
    if not locales:
        raise BadRequest("Parameter 'locales' is required")

    payload = {
        "locales": locales,
        "bundles": params.get("bundles", ALL_TOKEN),
        "domains": params.get("domains", ALL_TOKEN),
    }
    if params.get("separator"):
        payload["separator"] = params["separator"]

    try:
        return ImportFilter.model_validate(payload)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid import parameters: {error}") from error


def parse_export_settings(req: Request) -> ExportSettings:
    """Build ``ExportSettings`` from query arguments of an export request."""

    params = req.args
    reference = params.get("reference")
    if not reference:
        raise BadRequest("Parameter 'reference' is required")

    filename = Path(params.get("filename") or DEFAULT_EXPORT_FILENAME).name
    payload: dict[str, Any] = {
        "bundles": params.get("bundles", ALL_TOKEN),
        "domains": params.get("domains", ALL_TOKEN),
        "locales": params.get("locales", ALL_TOKEN),
        "reference_locale": reference,
        "only_missing": _parse_flag(params, "only_missing", False),
        "include_bom": _parse_flag(params, "bom", False),
        "escape_newlines": not _parse_flag(params, "raw_newlines", False),
        "output_path": filename,
    }
    if params.get("separator"):
        payload["separator"] = params["separator"]

    try:
        return ExportSettings.model_validate(payload)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid export parameters: {error}") from error


__all__ = ["DEFAULT_EXPORT_FILENAME", "parse_export_settings", "parse_import_filter"]
