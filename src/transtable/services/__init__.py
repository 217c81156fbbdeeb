"""Service-layer helpers for importing and exporting translation tables."""

from .catalogue import load_catalogue_file, read_catalogue, write_catalogues
from .discovery import (
    APPLICATION,
    BundleHandle,
    DirectoryFileFinder,
    ManifestBundleRegistry,
    TranslationFile,
)
from .exporter import TranslationsExporter, order_locales, resolve_locales
from .importer import import_table
from .reporting import CollectingReporter, LoggingReporter, Reporter

__all__ = [
    "APPLICATION",
    "BundleHandle",
    "CollectingReporter",
    "DirectoryFileFinder",
    "LoggingReporter",
    "ManifestBundleRegistry",
    "Reporter",
    "TranslationFile",
    "TranslationsExporter",
    "import_table",
    "load_catalogue_file",
    "order_locales",
    "read_catalogue",
    "resolve_locales",
    "write_catalogues",
]
