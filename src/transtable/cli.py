"""Command line entry points for importing and exporting translation tables."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from transtable.config import validator
from transtable.config.schema import (
    ALL_TOKEN,
    ConfigurationError,
    DEFAULT_SEPARATOR,
    ExportSettings,
    ImportFilter,
)
from transtable.config.settings import (
    load_bundle_manifest,
    load_export_settings,
    load_import_filter,
)
from transtable.errors import TranslationError
from transtable.services import (
    DirectoryFileFinder,
    LoggingReporter,
    ManifestBundleRegistry,
    TranslationsExporter,
    import_table,
    write_catalogues,
)
from transtable.table import TranslationTable
from transtable.version import get_project_version

logger = logging.getLogger(__name__)


def _add_selection_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--domains",
        default=None,
        help=f"Comma separated domains to include ('{ALL_TOKEN}' for every domain)",
    )
    parser.add_argument(
        "--separator",
        default=None,
        help="Single character column separator; '\\t' or 'tab' for tabs (default: tab)",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="YAML file providing defaults for these options",
    )


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transtable",
        description="Import and export bundle translation catalogues as tabular files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_project_version()}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Parse a tabular file into catalogues")
    import_parser.add_argument("csv", type=Path, help="Tabular file to import")
    import_parser.add_argument("locales", nargs="?", default=None, help="Comma separated locales to import")
    import_parser.add_argument(
        "--bundles",
        default=None,
        help=f"Comma separated bundles to include ('{ALL_TOKEN}' for every bundle)",
    )
    _add_selection_options(import_parser)
    import_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write <bundle>/<domain>.<locale>.yaml catalogues into this directory",
    )
    import_parser.add_argument(
        "--overwrite-existing",
        action="store_true",
        help="Replace values already present in existing catalogues",
    )

    export_parser = subparsers.add_parser("export", help="Aggregate bundle catalogues into one table")
    export_parser.add_argument("manifest", type=Path, help="Bundle manifest (YAML)")
    export_parser.add_argument("output", type=Path, nargs="?", default=None, help="Tabular file to write")
    export_parser.add_argument(
        "--bundles",
        default=None,
        help=f"Comma separated bundles to export; 'app' and '{ALL_TOKEN}' are reserved",
    )
    export_parser.add_argument("--locales", default=None, help="Comma separated locales or 'all'")
    export_parser.add_argument("--reference", default=None, help="Reference locale placed first")
    _add_selection_options(export_parser)
    export_parser.add_argument(
        "--only-missing",
        action="store_true",
        default=None,
        help="Only export rows lacking at least one locale value",
    )
    export_parser.add_argument(
        "--bom",
        action="store_true",
        default=None,
        help="Prefix the output with a UTF-8 byte-order mark",
    )
    export_parser.add_argument(
        "--raw-newlines",
        action="store_true",
        default=None,
        help="Write embedded newlines as-is instead of the \\n escape",
    )

    validate_parser = subparsers.add_parser("validate-manifest", help="Check bundle manifests")
    validate_parser.add_argument("manifests", nargs="+", help="Bundle manifest files")

    return parser


def _build_import_filter(args: argparse.Namespace) -> ImportFilter:
    options: dict[str, Any] = {
        "locales": args.locales,
        "bundles": args.bundles,
        "domains": args.domains,
        "separator": args.separator,
    }
    if args.settings is not None:
        return load_import_filter(args.settings, **options)

    defaults = {"bundles": ALL_TOKEN, "domains": ALL_TOKEN, "separator": DEFAULT_SEPARATOR}
    payload = {**defaults, **{key: value for key, value in options.items() if value is not None}}
    try:
        return ImportFilter.model_validate(payload)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid import options: {error}") from error


def _build_export_settings(args: argparse.Namespace) -> ExportSettings:
    options: dict[str, Any] = {
        "output_path": args.output,
        "bundles": args.bundles,
        "locales": args.locales,
        "domains": args.domains,
        "reference_locale": args.reference,
        "separator": args.separator,
        "only_missing": args.only_missing,
        "include_bom": args.bom,
        "escape_newlines": False if args.raw_newlines else None,
    }
    if args.settings is not None:
        return load_export_settings(args.settings, **options)

    defaults = {"bundles": ALL_TOKEN, "locales": ALL_TOKEN, "domains": ALL_TOKEN}
    payload = {**defaults, **{key: value for key, value in options.items() if value is not None}}
    try:
        return ExportSettings.model_validate(payload)
    except ValidationError as error:
        raise ConfigurationError(f"Invalid export options: {error}") from error


def _summarise(table: TranslationTable) -> list[str]:
    counts: dict[tuple[str, str], int] = {}
    for entry in table:
        scope = (entry.bundle, entry.domain)
        counts[scope] = counts.get(scope, 0) + 1
    return [f"{bundle}/{domain}: {count} key(s)" for (bundle, domain), count in counts.items()]


def cmd_import(args: argparse.Namespace) -> int:
    import_filter = _build_import_filter(args)
    table = import_table(args.csv, import_filter)

    if args.output_dir is None:
        for line in _summarise(table):
            print(line)
        print(f"Imported {len(table)} entr(y/ies) from {args.csv}")
        return 0

    written = write_catalogues(table, args.output_dir, overwrite_existing=args.overwrite_existing)
    print(f"Wrote {len(written)} catalogue file(s) to {args.output_dir}")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    settings = _build_export_settings(args)
    manifest = load_bundle_manifest(args.manifest)
    exporter = TranslationsExporter(
        ManifestBundleRegistry(manifest),
        DirectoryFileFinder.from_manifest(manifest),
        LoggingReporter(logger),
    )
    rows = exporter.export(settings)
    print(f"Exported {rows} row(s) to {settings.output_path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``transtable`` console script."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "validate-manifest":
        return validator.main(args.manifests)

    handlers = {"import": cmd_import, "export": cmd_export}
    try:
        return handlers[args.command](args)
    except (TranslationError, ConfigurationError, FileNotFoundError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
