"""Exported tables can be edited and imported back into catalogues."""

from __future__ import annotations

from pathlib import Path

import yaml

from transtable.cli import main


def test_export_edit_import_cycle(bundle_tree: Path, tmp_path: Path) -> None:
    exported = tmp_path / "export.tsv"
    assert main(["export", str(bundle_tree), str(exported), "--bundles", "app", "--reference", "en"]) == 0

    lines = exported.read_text(encoding="utf-8").splitlines()
    assert lines[2] == "app\tmessages\tmenu.quit\tQuit\t"
    lines[2] = "app\tmessages\tmenu.quit\tQuit\tQuitter\\nmaintenant"
    exported.write_text("\n".join(lines) + "\n", encoding="utf-8")

    catalogues = tmp_path / "catalogues"
    assert main(["import", str(exported), "fr", "--output-dir", str(catalogues)]) == 0

    payload = yaml.safe_load((catalogues / "app" / "messages.fr.yaml").read_text(encoding="utf-8"))
    assert payload == {"hello": "Bonjour", "menu": {"quit": "Quitter\nmaintenant"}}
