"""Import and export bundle/domain translation catalogues as tabular files."""

from .config import ExportSettings, ImportFilter, Selector
from .errors import (
    BundleNotFoundError,
    BundleResolutionError,
    NotFoundError,
    RowError,
    SchemaError,
    TableIOError,
    TranslationError,
)
from .services import TranslationsExporter, import_table
from .table import TableEntry, TranslationTable
from .tabular import serialize, should_export_row

__all__ = [
    "BundleNotFoundError",
    "BundleResolutionError",
    "ExportSettings",
    "ImportFilter",
    "NotFoundError",
    "RowError",
    "SchemaError",
    "Selector",
    "TableEntry",
    "TableIOError",
    "TranslationError",
    "TranslationTable",
    "TranslationsExporter",
    "import_table",
    "serialize",
    "should_export_row",
]
