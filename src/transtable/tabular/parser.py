"""Lazy, forward-only reader for delimited translation tables."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import IO

from transtable.config.schema import DEFAULT_SEPARATOR
from transtable.errors import NotFoundError, SchemaError, TableIOError

logger = logging.getLogger(__name__)

# Exported files may start with a byte-order marker; utf-8-sig drops it.
SOURCE_ENCODING = "utf-8-sig"

BUNDLE_COLUMN = "Bundle"
DOMAIN_COLUMN = "Domain"
KEY_COLUMN = "Key"
MANDATORY_COLUMNS = (BUNDLE_COLUMN, DOMAIN_COLUMN, KEY_COLUMN)

ESCAPED_NEWLINE = "\\n"


def unescape_newlines(value: str) -> str:
    """Turn the literal two-character ``\\n`` sequence into a newline."""

    return value.replace(ESCAPED_NEWLINE, "\n")


def escape_newlines(value: str) -> str:
    return value.replace("\r\n", "\n").replace("\n", ESCAPED_NEWLINE)


@dataclass(frozen=True)
class TabularRow:
    """A data record keyed by header name.

    Cells beyond the header width are dropped; cells missing from a short
    record are absent from ``cells`` rather than empty.
    """

    index: int
    cells: Mapping[str, str]

    def get(self, column: str) -> str | None:
        return self.cells.get(column)


class TabularReader:
    """Context manager exposing a header and a single pass over data rows."""

    def __init__(self, source: str | Path, separator: str = DEFAULT_SEPARATOR) -> None:
        self.path = Path(source)
        self.separator = separator
        self._handle: IO[str] | None = None
        self._reader: Iterator[list[str]] | None = None
        self._header: tuple[str, ...] | None = None
        self._consumed = False

    def __enter__(self) -> TabularReader:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def open(self) -> None:
        if not self.path.exists():
            raise NotFoundError(f'File "{self.path}" not found', path=self.path)
        try:
            self._handle = self.path.open("r", encoding=SOURCE_ENCODING, newline="")
        except OSError as error:
            raise TableIOError(f"Error loading file: {error}", path=self.path) from error

        self._reader = csv.reader(self._handle, delimiter=self.separator)
        try:
            self._header = self._read_header()
        except Exception:
            self.close()
            raise

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            self._reader = None

    def _next_record(self) -> list[str] | None:
        if self._reader is None:
            raise RuntimeError("TabularReader must be opened before reading records")
        try:
            return next(self._reader)
        except StopIteration:
            return None
        except UnicodeDecodeError as error:
            raise TableIOError(f"File is not valid UTF-8: {error}", path=self.path) from error
        except csv.Error as error:
            raise TableIOError(f"Unable to parse delimited data: {error}", path=self.path) from error

    def _read_header(self) -> tuple[str, ...]:
        record = self._next_record()
        if not record or not any(cell.strip() for cell in record):
            raise SchemaError("File has no header row", path=self.path)

        header = tuple(cell.strip() for cell in record)
        seen: set[str] = set()
        for name in header:
            if name and name in seen:
                raise SchemaError(f"duplicate column {name}", path=self.path, column=name)
            seen.add(name)
        return header

    @property
    def header(self) -> tuple[str, ...]:
        if self._header is None:
            raise RuntimeError("TabularReader must be opened before reading the header")
        return self._header

    def column_index(self, name: str) -> int | None:
        """Return the 0-based header position of ``name`` or ``None``."""

        try:
            return self.header.index(name)
        except ValueError:
            return None

    def rows(self) -> Iterator[TabularRow]:
        """Yield data rows one at a time; the sequence cannot be restarted."""

        if self._reader is None:
            raise RuntimeError("TabularReader must be opened before iterating rows")
        if self._consumed:
            raise RuntimeError("Rows have already been consumed; reopen the source")
        self._consumed = True

        header = self.header
        index = 0
        while True:
            record = self._next_record()
            if record is None:
                return
            index += 1
            if not record:
                logger.debug("Skipping blank row %d in %s", index, self.path)
                continue
            yield TabularRow(index=index, cells=dict(zip(header, record)))


def iter_rows(source: str | Path, separator: str = DEFAULT_SEPARATOR) -> Iterator[TabularRow]:
    """Convenience generator streaming the data rows of ``source``."""

    with TabularReader(source, separator) as reader:
        yield from reader.rows()


__all__ = [
    "BUNDLE_COLUMN",
    "DOMAIN_COLUMN",
    "KEY_COLUMN",
    "MANDATORY_COLUMNS",
    "SOURCE_ENCODING",
    "TabularReader",
    "TabularRow",
    "escape_newlines",
    "iter_rows",
    "unescape_newlines",
]
