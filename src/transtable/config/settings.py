"""YAML loaders wrapping the import/export schema models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import (
    ApplicationEntry,
    BundleEntry,
    BundleManifest,
    ConfigurationError,
    ExportSettings,
    ImportFilter,
    Selector,
)


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigurationError(f"Unable to parse {path.name}: {error}") from error
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=8)
def _read_manifest(path: str, _mtime_ns: int) -> BundleManifest:
    manifest_path = Path(path)
    raw_manifest = _load_yaml(manifest_path)

    try:
        manifest = BundleManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Bundle manifest validation failed: {error}") from error

    return manifest.resolved(manifest_path.parent)


def load_bundle_manifest(path: str | Path) -> BundleManifest:
    """Load a bundle manifest, anchoring relative paths at its directory.

    Results are cached per file and invalidated when the file changes.
    """

    manifest_path = Path(path).expanduser().resolve()
    if not manifest_path.is_file():
        raise FileNotFoundError(f"Bundle manifest not found: {manifest_path}")

    return _read_manifest(str(manifest_path), manifest_path.stat().st_mtime_ns)


def load_import_filter(path: str | Path, **overrides: Any) -> ImportFilter:
    """Read an import filter from YAML; keyword overrides win over file values."""

    raw = _load_yaml(Path(path))
    raw.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return ImportFilter.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Import settings validation failed: {error}") from error


def load_export_settings(path: str | Path, **overrides: Any) -> ExportSettings:
    """Read export settings from YAML.

    A relative ``output_path`` is taken relative to the settings file.
    """

    settings_path = Path(path)
    raw = _load_yaml(settings_path)

    output = raw.get("output_path")
    if isinstance(output, str) and output and not Path(output).is_absolute():
        raw["output_path"] = settings_path.parent / output

    raw.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return ExportSettings.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Export settings validation failed: {error}") from error


__all__ = [
    "ApplicationEntry",
    "BundleEntry",
    "BundleManifest",
    "ConfigurationError",
    "ExportSettings",
    "ImportFilter",
    "Selector",
    "load_bundle_manifest",
    "load_export_settings",
    "load_import_filter",
]
