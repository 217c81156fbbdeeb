"""Tests for the ``transtable`` command line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from transtable.cli import main


@pytest.fixture()
def source(write_table) -> Path:
    return write_table(
        [
            ["Bundle", "Domain", "Key", "en", "fr"],
            ["app", "messages", "hello", "Hello", "Bonjour"],
            ["app", "messages", "bye", "Bye", "Au revoir"],
            ["CoreBundle", "validators", "required", "Required", "Obligatoire"],
        ]
    )


def test_import_prints_summary(source: Path, capsys) -> None:
    exit_code = main(["import", str(source), "en,fr"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "app/messages: 2 key(s)" in out
    assert "CoreBundle/validators: 1 key(s)" in out
    assert "Imported 3 entr(y/ies)" in out


def test_import_writes_catalogues(source: Path, tmp_path: Path) -> None:
    output = tmp_path / "catalogues"

    exit_code = main(["import", str(source), "fr", "--bundles", "CoreBundle", "--output-dir", str(output)])

    assert exit_code == 0
    written = yaml.safe_load((output / "CoreBundle" / "validators.fr.yaml").read_text(encoding="utf-8"))
    assert written == {"required": "Obligatoire"}
    assert not (output / "app").exists()


def test_import_reports_missing_locale_column(source: Path, capsys) -> None:
    exit_code = main(["import", str(source), "de"])

    assert exit_code == 1
    assert "locale column de is missing" in capsys.readouterr().err


def test_import_requires_locales(source: Path, capsys) -> None:
    exit_code = main(["import", str(source)])

    assert exit_code == 1
    assert "error:" in capsys.readouterr().err


def test_import_reads_settings_file(source: Path, tmp_path: Path, capsys) -> None:
    settings = tmp_path / "import.yaml"
    settings.write_text("locales: [en]\ndomains: validators\n", encoding="utf-8")

    exit_code = main(["import", str(source), "--settings", str(settings)])

    assert exit_code == 0
    assert "Imported 1 entr(y/ies)" in capsys.readouterr().out


def test_export_writes_table(bundle_tree: Path, tmp_path: Path, capsys) -> None:
    output = tmp_path / "export.csv"

    exit_code = main(
        [
            "export",
            str(bundle_tree),
            str(output),
            "--bundles",
            "app",
            "--reference",
            "en",
            "--separator",
            "comma",
            "--bom",
        ]
    )

    assert exit_code == 0
    assert "Exported 2 row(s)" in capsys.readouterr().out
    content = output.read_bytes()
    assert content.startswith(b"\xef\xbb\xbfBundle,Domain,Key,en,fr\n")
    assert b"app,messages,hello,Hello,Bonjour\n" in content


def test_export_unknown_bundle_fails(bundle_tree: Path, tmp_path: Path, capsys) -> None:
    output = tmp_path / "export.tsv"

    exit_code = main(["export", str(bundle_tree), str(output), "--bundles", "Nope", "--reference", "en"])

    assert exit_code == 1
    assert "Nope" in capsys.readouterr().err
    assert not output.exists()


def test_export_requires_reference(bundle_tree: Path, tmp_path: Path) -> None:
    assert main(["export", str(bundle_tree), str(tmp_path / "out.tsv")]) == 1


def test_validate_manifest_command(bundle_tree: Path, capsys) -> None:
    exit_code = main(["validate-manifest", str(bundle_tree)])

    assert exit_code == 0
    assert "OK" in capsys.readouterr().out
