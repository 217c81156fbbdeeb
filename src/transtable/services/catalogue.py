"""Per-domain, per-locale catalogue files (YAML or JSON) read and written as tables."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from transtable.errors import NotFoundError, SchemaError, TableIOError
from transtable.table import TranslationTable

from .discovery import TranslationFile

logger = logging.getLogger(__name__)

CATALOGUE_EXTENSION = "yaml"


def flatten_messages(tree: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Collapse nested catalogue mappings into dotted keys."""

    items: dict[str, str] = {}
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            items.update(flatten_messages(value, path))
        else:
            items[path] = "" if value is None else str(value)
    return items


def expand_messages(messages: Mapping[str, str]) -> dict[str, Any]:
    """Rebuild nested mappings from dotted keys.

    When a key is both a message and the prefix of another one (``menu`` and
    ``menu.quit``) no nesting can hold both, so the messages are returned flat.
    """

    tree: dict[str, Any] = {}
    for key, value in messages.items():
        *parents, leaf = key.split(".")
        node = tree
        for part in parents:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                return dict(messages)
            node = child
        if leaf in node:
            return dict(messages)
        node[leaf] = value
    return tree


def read_catalogue(path: Path) -> dict[str, str]:
    """Return the flattened messages stored in a YAML or JSON catalogue."""

    if not path.exists():
        raise NotFoundError(f'File "{path}" not found', path=path)

    try:
        with path.open("r", encoding="utf-8-sig") as handle:
            if path.suffix.lower() == ".json":
                payload = json.load(handle)
            else:
                payload = yaml.safe_load(handle)
    except OSError as error:
        raise TableIOError(f"Error loading catalogue: {error}", path=path) from error
    except UnicodeDecodeError as error:
        raise TableIOError(f"Catalogue is not valid UTF-8: {error}", path=path) from error
    except (json.JSONDecodeError, yaml.YAMLError) as error:
        raise SchemaError(f"Unable to parse catalogue: {error}", path=path) from error

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise SchemaError("Catalogue must define a mapping at the top level", path=path)
    return flatten_messages(payload)


def load_catalogue_file(file: TranslationFile) -> TranslationTable:
    """Load a discovered catalogue file under its bundle, domain and locale."""

    table = TranslationTable()
    locale = file.locale
    if locale is None:
        logger.warning("Skipping %s: no locale segment in file name", file.path)
        return table

    for key, value in read_catalogue(file.path).items():
        table.set(file.bundle, file.domain, key, locale, value)
    return table


def write_catalogues(
    table: TranslationTable,
    output_directory: str | Path,
    *,
    overwrite_existing: bool = False,
) -> list[Path]:
    """Write ``table`` as ``<bundle>/<domain>.<locale>.yaml`` files.

    Existing files are merged: their values are kept unless
    ``overwrite_existing`` is set, in which case imported values replace them.
    Dotted keys are written back as nested mappings (see ``expand_messages``).
    """

    grouped: dict[tuple[str, str, str], dict[str, str]] = {}
    for entry in table:
        for locale, value in entry.locales.items():
            grouped.setdefault((entry.bundle, entry.domain, locale), {})[entry.key] = value

    root = Path(output_directory)
    written: list[Path] = []
    for (bundle, domain, locale), messages in grouped.items():
        target = root / bundle / f"{domain}.{locale}.{CATALOGUE_EXTENSION}"
        merged = read_catalogue(target) if target.exists() else {}
        for key, value in messages.items():
            if overwrite_existing or not merged.get(key):
                merged[key] = value

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8") as handle:
                yaml.safe_dump(
                    expand_messages(merged),
                    handle,
                    allow_unicode=True,
                    sort_keys=False,
                    default_flow_style=False,
                )
        except OSError as error:
            raise TableIOError(f"Unable to write catalogue: {error}", path=target) from error

        logger.debug("Wrote %d message(s) to %s", len(merged), target)
        written.append(target)

    return written


__all__ = ["expand_messages", "flatten_messages", "load_catalogue_file", "read_catalogue", "write_catalogues"]
