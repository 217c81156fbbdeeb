"""Delimited-text reading and writing for translation tables."""

from .parser import MANDATORY_COLUMNS, TabularReader, TabularRow, iter_rows
from .serializer import render_table, serialize, should_export_row, write_table

__all__ = [
    "MANDATORY_COLUMNS",
    "TabularReader",
    "TabularRow",
    "iter_rows",
    "render_table",
    "serialize",
    "should_export_row",
    "write_table",
]
