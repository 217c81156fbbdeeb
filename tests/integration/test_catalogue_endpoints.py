"""Integration tests for the catalogue import/export API."""

from __future__ import annotations

import io
from http import HTTPStatus

from flask.testing import FlaskClient

UPLOAD = (
    "Bundle\tDomain\tKey\ten\tfr\n"
    "app\tmessages\thello\tHello\tBonjour\n"
    "CoreBundle\tvalidators\trequired\tRequired\tObligatoire\n"
)


def _upload(client: FlaskClient, body: str, **fields: str):
    data = {"file": (io.BytesIO(body.encode("utf-8")), "catalogue.tsv"), **fields}
    return client.post("/api/v1/catalogue/import", data=data, content_type="multipart/form-data")


def test_import_returns_translations(client: FlaskClient) -> None:
    response = _upload(client, UPLOAD, locales="fr", bundles="CoreBundle")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["meta"] == {
        "source": "catalogue.tsv",
        "entries": 1,
        "bundles": ["CoreBundle"],
        "locales": ["fr"],
    }
    assert payload["translations"] == {
        "CoreBundle": {"validators": {"required": {"fr": "Obligatoire"}}}
    }


def test_import_requires_file(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/catalogue/import", data={"locales": "en"}, content_type="multipart/form-data"
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "bad_request"


def test_import_reports_missing_locale_column(client: FlaskClient) -> None:
    response = _upload(client, UPLOAD, locales="de")

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    payload = response.get_json()
    assert payload["error"] == "schema_error"
    assert payload["column"] == "de"


def test_import_reports_short_rows(client: FlaskClient) -> None:
    body = "Bundle\tDomain\tKey\ten\tfr\napp\tmessages\thello\tHello\n"

    response = _upload(client, body, locales="en,fr")

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    payload = response.get_json()
    assert payload["error"] == "row_error"
    assert payload["row"] == 1
    assert payload["locale"] == "fr"
    assert payload["column"] == 5


def test_import_rejects_undecodable_upload(client: FlaskClient) -> None:
    body = "Bundle\tDomain\tKey\tfr\napp\tmessages\thello\tcaf\xe9\n".encode("latin-1")
    data = {"file": (io.BytesIO(body), "latin1.tsv"), "locales": "fr"}

    response = client.post("/api/v1/catalogue/import", data=data, content_type="multipart/form-data")

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    payload = response.get_json()
    assert payload["error"] == "unreadable_upload"
    assert payload["source"] == "latin1.tsv"
    assert "path" not in payload


def test_import_rejects_invalid_settings(client: FlaskClient) -> None:
    response = _upload(client, UPLOAD, locales="en", separator="::")

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert response.get_json()["error"] == "invalid_settings"


def test_export_without_manifest(client: FlaskClient) -> None:
    response = client.get("/api/v1/catalogue/export?reference=en")

    assert response.status_code == HTTPStatus.SERVICE_UNAVAILABLE
    assert response.get_json()["error"] == "manifest_not_configured"


def test_export_downloads_table(manifest_client: FlaskClient) -> None:
    response = manifest_client.get(
        "/api/v1/catalogue/export",
        query_string={"reference": "fr", "bundles": "ChildBundle", "filename": "core.tsv"},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.mimetype == "text/tab-separated-values"
    assert response.headers["Content-Disposition"] == 'attachment; filename="core.tsv"'
    assert response.headers["X-Transtable-Locales"] == "fr,de,en"
    assert response.get_data(as_text=True).splitlines() == [
        "Bundle\tDomain\tKey\tfr\tde\ten",
        "CoreBundle\tvalidators\trequired\t\tPflichtfeld\tRequired",
    ]


def test_export_only_missing_as_csv(manifest_client: FlaskClient) -> None:
    response = manifest_client.get(
        "/api/v1/catalogue/export",
        query_string={"reference": "en", "bundles": "app", "separator": ",", "only_missing": "1"},
    )

    assert response.status_code == HTTPStatus.OK
    assert response.mimetype == "text/csv"
    assert response.get_data(as_text=True).splitlines() == [
        "Bundle,Domain,Key,en,fr",
        "app,messages,menu.quit,Quit,",
    ]


def test_export_unknown_bundle(manifest_client: FlaskClient) -> None:
    response = manifest_client.get("/api/v1/catalogue/export?reference=en&bundles=Nope")

    assert response.status_code == HTTPStatus.NOT_FOUND
    payload = response.get_json()
    assert payload["error"] == "bundle_not_found"
    assert payload["bundle"] == "Nope"


def test_list_bundles(manifest_client: FlaskClient) -> None:
    response = manifest_client.get("/api/v1/catalogue/bundles")

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {
        "application": True,
        "bundles": [
            {"name": "CoreBundle", "parent": None},
            {"name": "ChildBundle", "parent": "CoreBundle"},
        ],
    }
