"""Integration tests for application endpoints."""

from http import HTTPStatus

from flask.testing import FlaskClient

from transtable.app import create_app
from transtable.version import get_project_version


def test_health_endpoint(client: FlaskClient) -> None:
    """Ensure the health endpoint returns a successful status payload."""
    response = client.get("/health")
    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["status"] == "ok"
    assert payload["version"] == get_project_version()
    assert payload["manifest_configured"] is False
    assert response.mimetype == "application/json"


def test_health_reports_configured_manifest(manifest_client: FlaskClient) -> None:
    payload = manifest_client.get("/health").get_json()

    assert payload["manifest_configured"] is True


def test_environment_configures_upload_limit(monkeypatch) -> None:
    monkeypatch.setenv("TRANSTABLE_MAX_UPLOAD_BYTES", "2048")
    monkeypatch.setenv("TRANSTABLE_MANIFEST", "/srv/manifest.yaml")

    app = create_app({"TESTING": True})

    assert app.config["MAX_CONTENT_LENGTH"] == 2048
    assert app.config["TRANSTABLE_MANIFEST"] == "/srv/manifest.yaml"


def test_invalid_upload_limit_falls_back_to_default(monkeypatch) -> None:
    monkeypatch.setenv("TRANSTABLE_MAX_UPLOAD_BYTES", "-5")

    app = create_app({"TESTING": True})

    assert app.config["MAX_CONTENT_LENGTH"] == 16 * 1024 * 1024
