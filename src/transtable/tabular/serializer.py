"""Render translation tables back to delimited text."""

from __future__ import annotations

import codecs
import csv
import io
import logging
import os
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import BinaryIO

from transtable.config.schema import DEFAULT_SEPARATOR, ExportSettings
from transtable.errors import TableIOError
from transtable.table import TranslationTable

from .parser import MANDATORY_COLUMNS, escape_newlines

logger = logging.getLogger(__name__)

UTF8_BOM = codecs.BOM_UTF8
LINE_TERMINATOR = "\n"


def should_export_row(
    entry_locales: Mapping[str, str],
    ordered_locales: Sequence[str],
    only_missing: bool,
) -> bool:
    """Decide whether a keyed entry belongs in the output.

    With ``only_missing`` the entry is kept only when at least one of
    ``ordered_locales`` has no stored value.
    """

    if not only_missing:
        return True
    return any(locale not in entry_locales for locale in ordered_locales)


def write_table(
    stream: BinaryIO,
    table: TranslationTable,
    ordered_locales: Sequence[str],
    *,
    separator: str = DEFAULT_SEPARATOR,
    only_missing: bool = False,
    include_bom: bool = False,
    escape_newlines_in_values: bool = True,
) -> int:
    """Write ``table`` to a binary ``stream`` and return the number of data rows."""

    if include_bom:
        stream.write(UTF8_BOM)

    text = io.TextIOWrapper(stream, encoding="utf-8", newline="", write_through=True)
    writer = csv.writer(text, delimiter=separator, lineterminator=LINE_TERMINATOR)
    writer.writerow([*MANDATORY_COLUMNS, *ordered_locales])

    written = 0
    for entry in table:
        if not should_export_row(entry.locales, ordered_locales, only_missing):
            continue
        values = [entry.locales.get(locale, "") for locale in ordered_locales]
        if escape_newlines_in_values:
            values = [escape_newlines(value) for value in values]
        writer.writerow([entry.bundle, entry.domain, entry.key, *values])
        written += 1

    text.flush()
    text.detach()
    return written


def render_table(
    table: TranslationTable,
    ordered_locales: Sequence[str],
    **options: object,
) -> bytes:
    """Return the serialised table as bytes; accepts the ``write_table`` options."""

    buffer = io.BytesIO()
    write_table(buffer, table, ordered_locales, **options)  # type: ignore[arg-type]
    return buffer.getvalue()


def serialize(
    table: TranslationTable,
    ordered_locales: Sequence[str],
    settings: ExportSettings,
) -> int:
    """Write ``table`` to ``settings.output_path``.

    Content goes to a temporary sibling first and replaces the target only
    once fully written, so a failed run never leaves a truncated file.
    """

    target = Path(settings.output_path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handle = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        )
    except OSError as error:
        raise TableIOError(f"Unable to prepare output: {error}", path=target) from error

    temporary = Path(handle.name)
    try:
        with handle:
            written = write_table(
                handle.file,
                table,
                ordered_locales,
                separator=settings.separator,
                only_missing=settings.only_missing,
                include_bom=settings.include_bom,
                escape_newlines_in_values=settings.escape_newlines,
            )
        os.chmod(temporary, 0o644)
        os.replace(temporary, target)
    except OSError as error:
        temporary.unlink(missing_ok=True)
        raise TableIOError(f"Unable to write output: {error}", path=target) from error
    except BaseException:
        temporary.unlink(missing_ok=True)
        raise

    logger.info("Exported %d row(s) with %d locale column(s) to %s", written, len(ordered_locales), target)
    return written


__all__ = ["UTF8_BOM", "render_table", "serialize", "should_export_row", "write_table"]
