"""Endpoints importing uploaded tables and exporting registered bundles."""

from __future__ import annotations

import logging
import tempfile
from http import HTTPStatus
from pathlib import Path
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from transtable.app.http import problem_response
from transtable.app.request_parser import parse_export_settings, parse_import_filter
from transtable.config.settings import load_bundle_manifest
from transtable.errors import TableIOError
from transtable.services import (
    CollectingReporter,
    DirectoryFileFinder,
    ManifestBundleRegistry,
    TranslationsExporter,
    import_table,
)
from transtable.tabular.serializer import render_table

blueprint = Blueprint("catalogue", __name__, url_prefix="/api/v1/catalogue")

logger = logging.getLogger(__name__)


def _configured_manifest():
    path = current_app.config.get("TRANSTABLE_MANIFEST")
    if not path:
        return None
    try:
        return load_bundle_manifest(path)
    except FileNotFoundError:
        logger.warning("Configured bundle manifest is missing: %s", path)
        return None


def _unavailable() -> tuple[Any, int]:
    return problem_response(
        "manifest_not_configured",
        status=HTTPStatus.SERVICE_UNAVAILABLE,
        message="No bundle manifest configured; set TRANSTABLE_MANIFEST",
    ).to_response()


@blueprint.post("/import")
def import_upload() -> tuple[Any, int]:
    """Parse an uploaded tabular file and return the resulting table as JSON."""

    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise BadRequest("Multipart field 'file' is required")

    import_filter = parse_import_filter(request)

    with tempfile.TemporaryDirectory(prefix="transtable-") as workdir:
        source = Path(workdir) / "upload.csv"
        upload.save(source)
        try:
            table = import_table(source, import_filter)
        except TableIOError as error:
            # The temporary path means nothing to the client; only the upload name is reported.
            logger.info("Rejected unreadable upload %s: %s", upload.filename, error.message)
            return problem_response(
                "unreadable_upload",
                status=HTTPStatus.UNPROCESSABLE_ENTITY,
                message=error.message,
                source=upload.filename,
            ).to_response()

    logger.info("Imported %d entr(y/ies) from upload %s", len(table), upload.filename)
    payload = {
        "meta": {
            "source": upload.filename,
            "entries": len(table),
            "bundles": table.bundles(),
            "locales": list(import_filter.locales),
        },
        "translations": table.to_dict(),
    }
    return jsonify(payload), HTTPStatus.OK


@blueprint.get("/export")
def export_download():
    """Aggregate the configured bundles and return the table as a download."""

    manifest = _configured_manifest()
    if manifest is None:
        return _unavailable()

    settings = parse_export_settings(request)
    reporter = CollectingReporter(logger)
    exporter = TranslationsExporter(
        ManifestBundleRegistry(manifest),
        DirectoryFileFinder.from_manifest(manifest),
        reporter,
    )
    table, locales = exporter.build(settings)
    body = render_table(
        table,
        locales,
        separator=settings.separator,
        only_missing=settings.only_missing,
        include_bom=settings.include_bom,
        escape_newlines_in_values=settings.escape_newlines,
    )

    mimetype = "text/tab-separated-values" if settings.separator == "\t" else "text/csv"
    response = Response(body, status=HTTPStatus.OK, mimetype=mimetype)
    response.headers["Content-Disposition"] = (
        f'attachment; filename="{settings.output_path.name}"'
    )
    response.headers["X-Transtable-Locales"] = ",".join(locales)
    return response


@blueprint.get("/bundles")
def list_bundles() -> tuple[Any, int]:
    """Describe the bundles declared in the configured manifest."""

    manifest = _configured_manifest()
    if manifest is None:
        return _unavailable()

    payload = {
        "application": manifest.application is not None,
        "bundles": [
            {"name": entry.name, "parent": entry.parent} for entry in manifest.bundles
        ],
    }
    return jsonify(payload), HTTPStatus.OK
