"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from typing import Callable, Sequence  # noqa: E402

import pytest  # noqa: E402
import yaml  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from transtable.app import create_app  # noqa: E402

TableWriter = Callable[..., Path]


@pytest.fixture()
def write_table(tmp_path: Path) -> TableWriter:
    """Return a helper writing delimited rows to a file under ``tmp_path``."""

    def _write(
        rows: Sequence[Sequence[str]],
        name: str = "catalogue.tsv",
        separator: str = "\t",
    ) -> Path:
        path = tmp_path / name
        lines = [separator.join(row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


def _dump(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(payload, allow_unicode=True), encoding="utf-8")


@pytest.fixture()
def bundle_tree(tmp_path: Path) -> Path:
    """Create application and bundle catalogues plus a manifest; return the manifest."""

    root = tmp_path / "project"
    _dump(root / "translations" / "messages.en.yaml", {"hello": "Hello", "menu": {"quit": "Quit"}})
    _dump(root / "translations" / "messages.fr.yaml", {"hello": "Bonjour"})
    _dump(root / "bundles" / "core" / "validators.en.yaml", {"required": "Required"})
    _dump(root / "bundles" / "core" / "validators.de.yaml", {"required": "Pflichtfeld"})
    (root / "bundles" / "child").mkdir(parents=True)

    _dump(
        root / "manifest.yaml",
        {
            "application": {"path": "translations"},
            "bundles": [
                {"name": "CoreBundle", "path": "bundles/core"},
                {"name": "ChildBundle", "path": "bundles/child", "parent": "CoreBundle"},
            ],
        },
    )
    return root / "manifest.yaml"


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app({"TESTING": True, "TRANSTABLE_MANIFEST": None})
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def manifest_client(bundle_tree: Path) -> FlaskClient:
    """Client for an application serving the ``bundle_tree`` manifest."""

    application = create_app({"TESTING": True, "TRANSTABLE_MANIFEST": str(bundle_tree)})
    return application.test_client()
