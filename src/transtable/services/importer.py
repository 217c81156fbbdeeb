"""Build translation tables from delimited sources."""

from __future__ import annotations

import logging
from pathlib import Path

from transtable.config.schema import ImportFilter
from transtable.errors import RowError, SchemaError
from transtable.table import TranslationTable
from transtable.tabular.parser import (
    BUNDLE_COLUMN,
    DOMAIN_COLUMN,
    KEY_COLUMN,
    MANDATORY_COLUMNS,
    TabularReader,
    unescape_newlines,
)

logger = logging.getLogger(__name__)


def _locate_columns(reader: TabularReader, import_filter: ImportFilter) -> dict[str, int]:
    """Validate the header and return 1-based column numbers of requested locales."""

    for column in MANDATORY_COLUMNS:
        if reader.column_index(column) is None:
            raise SchemaError(
                f"mandatory column {column} is missing", path=reader.path, column=column
            )

    columns: dict[str, int] = {}
    for locale in import_filter.locales:
        position = reader.column_index(locale)
        if position is None:
            raise SchemaError(
                f"locale column {locale} is missing", path=reader.path, column=locale
            )
        columns[locale] = position + 1
    return columns


def import_table(source: str | Path, import_filter: ImportFilter) -> TranslationTable:
    """Parse ``source`` into a table restricted by ``import_filter``.

    Raises ``NotFoundError``, ``TableIOError``, ``SchemaError`` or ``RowError``;
    nothing is returned when any of them occurs.
    """

    table = TranslationTable()
    skipped = 0

    with TabularReader(source, import_filter.separator) as reader:
        columns = _locate_columns(reader, import_filter)

        for row in reader.rows():
            bundle = row.get(BUNDLE_COLUMN)
            domain = row.get(DOMAIN_COLUMN)
            if bundle not in import_filter.bundles or domain not in import_filter.domains:
                continue

            key = row.get(KEY_COLUMN)
            if not bundle or not domain or not key:
                logger.warning(
                    "Skipping row %d of %s: Bundle, Domain and Key must not be empty",
                    row.index,
                    reader.path,
                )
                skipped += 1
                continue

            for locale in import_filter.locales:
                cell = row.get(locale)
                if cell is None:
                    raise RowError(row.index, locale, path=reader.path, column=columns[locale])
                table.set(bundle, domain, key, locale, unescape_newlines(cell))

    logger.debug(
        "Imported %d entr(y/ies) from %s (%d row(s) skipped)", len(table), source, skipped
    )
    return table


__all__ = ["import_table"]
