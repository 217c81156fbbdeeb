"""Settings models and loaders for import/export runs."""

from .schema import (
    ALL_TOKEN,
    APP_BUNDLE_NAME,
    BundleEntry,
    BundleManifest,
    ConfigurationError,
    ExportSettings,
    ImportFilter,
    Selector,
)
from .settings import load_bundle_manifest, load_export_settings, load_import_filter

__all__ = [
    "ALL_TOKEN",
    "APP_BUNDLE_NAME",
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
