"""Exception hierarchy raised by the translation table pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class TranslationError(Exception):
    """Base class for failures that abort an import or export run."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None

    def context(self) -> dict[str, Any]:
        """Return the locating details attached to this error."""

        return {"path": self.path} if self.path else {}

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message


class NotFoundError(TranslationError, FileNotFoundError):
    """Raised when a tabular source does not exist."""


class TableIOError(TranslationError, OSError):
    """Raised when a source cannot be read or an output cannot be written."""


class SchemaError(TranslationError, ValueError):
    """Raised when a header lacks mandatory or requested columns."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        column: str | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.column = column

    def context(self) -> dict[str, Any]:
        payload = super().context()
        if self.column is not None:
            payload["column"] = self.column
        return payload


class RowError(TranslationError, ValueError):
    """Raised when an accepted row has no cell for a requested locale."""

    def __init__(
        self,
        row: int,
        locale: str,
        *,
        path: str | Path | None = None,
        column: int | None = None,
    ) -> None:
        message = f"missing value on row {row} for locale '{locale}'"
        if column is not None:
            message += f" (column {column})"
        super().__init__(message, path=path)
        self.row = row
        self.locale = locale
        self.column = column

    def context(self) -> dict[str, Any]:
        payload = super().context()
        payload.update({"row": self.row, "locale": self.locale})
        if self.column is not None:
            payload["column"] = self.column
        return payload


class BundleNotFoundError(TranslationError, LookupError):
    """Raised when the bundle registry does not know a bundle name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Bundle '{name}' is not registered")
        self.name = name

    def context(self) -> dict[str, Any]:
        return {"bundle": self.name}


class BundleResolutionError(TranslationError):
    """Raised when following a bundle's parent chain loops back on itself."""

    def __init__(self, chain: list[str]) -> None:
        super().__init__(f"Bundle parent chain is cyclic: {' -> '.join(chain)}")
        self.chain = list(chain)

    def context(self) -> dict[str, Any]:
        return {"chain": list(self.chain)}


__all__ = [
    "BundleNotFoundError",
    "BundleResolutionError",
    "NotFoundError",
    "RowError",
    "SchemaError",
    "TableIOError",
    "TranslationError",
]
