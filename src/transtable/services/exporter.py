"""Aggregate bundle translations into one table and write it as a tabular file."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from transtable.config.schema import (
    ALL_TOKEN,
    APP_BUNDLE_NAME,
    ExportSettings,
    ImportFilter,
    Selector,
)
from transtable.errors import BundleResolutionError
from transtable.table import TranslationTable
from transtable.tabular.parser import MANDATORY_COLUMNS, TabularReader
from transtable.tabular.serializer import serialize

from .catalogue import load_catalogue_file
from .discovery import (
    APPLICATION,
    BundleHandle,
    BundleRegistry,
    LookupScope,
    TranslationFile,
    TranslationFileFinder,
)
from .importer import import_table
from .reporting import LoggingReporter, Reporter

logger = logging.getLogger(__name__)


def order_locales(locales: Iterable[str], reference_locale: str) -> list[str]:
    """Put ``reference_locale`` first, keeping the others in their given order."""

    return [reference_locale, *(locale for locale in locales if locale != reference_locale)]


def resolve_locales(
    requested: Selector,
    files: Sequence[TranslationFile],
    table: TranslationTable | None = None,
) -> list[str]:
    """Return the locale columns to export before reference ordering.

    An explicit selection is used as is. Otherwise locales come from the
    ``<domain>.<locale>.<extension>`` file names, first seen first; files
    whose names carry no locale are skipped. Locales only present in the
    aggregated table (multi-locale tabular sources) are appended.
    """

    if not requested.is_all:
        return list(requested.names)

    seen: dict[str, None] = {}
    for file in files:
        if file.locale is None:
            logger.debug("No locale segment in %s; skipped for locale inference", file.filename)
            continue
        seen.setdefault(file.locale, None)

    if table is not None:
        for locale in table.locales():
            seen.setdefault(locale, None)

    return list(seen)


def _unique_files(files: Iterable[TranslationFile]) -> list[TranslationFile]:
    unique: dict[TranslationFile, None] = {}
    for file in files:
        unique.setdefault(file, None)
    return list(unique)


class TranslationsExporter:
    """Discovers translation files for bundles and exports them as one table."""

    def __init__(
        self,
        registry: BundleRegistry,
        finder: TranslationFileFinder,
        reporter: Reporter | None = None,
    ) -> None:
        self.registry = registry
        self.finder = finder
        self.reporter = reporter or LoggingReporter()

    def export(self, settings: ExportSettings) -> int:
        """Aggregate and write ``settings.output_path``; returns rows written.

        The output file is only touched after aggregation succeeded.
        """

        table, locales = self.build(settings)
        return serialize(table, locales, settings)

    def build(self, settings: ExportSettings) -> tuple[TranslationTable, list[str]]:
        """Return the aggregated table and its ordered locale columns."""

        files = self.collect_files(settings)
        self.reporter.report(f"Loading {len(files)} translation file(s).")
        table = self.aggregate(files, settings)
        locales = order_locales(
            resolve_locales(settings.locales, files, table), settings.reference_locale
        )
        return table, locales

    def collect_files(self, settings: ExportSettings) -> list[TranslationFile]:
        files: list[TranslationFile] = []
        for name in settings.bundles:
            if name == APP_BUNDLE_NAME:
                files.extend(self._scope_files(APPLICATION, settings))
                continue

            if name == ALL_TOKEN:
                files.extend(self._scope_files(APPLICATION, settings))
                for handle in self.registry.list_bundles():
                    files.extend(self._bundle_files(handle, settings))
                continue

            handle = self.registry.resolve_bundle(name)
            files.extend(self._bundle_files(handle, settings))

        return _unique_files(files)

    def resolve_lookup_bundle(self, handle: BundleHandle) -> BundleHandle:
        """Follow parent references up to the bundle that owns the files."""

        chain = [handle.name]
        current = handle
        while True:
            parent = self.registry.get_parent(current)
            if parent is None:
                return current
            if parent.name in chain:
                raise BundleResolutionError([*chain, parent.name])
            chain.append(parent.name)
            current = parent
            self.reporter.report(
                f"Using: {current.name} as bundle to lookup translations files for."
            )

    def _bundle_files(self, handle: BundleHandle, settings: ExportSettings) -> list[TranslationFile]:
        return self._scope_files(self.resolve_lookup_bundle(handle), settings)

    def _scope_files(self, scope: LookupScope, settings: ExportSettings) -> list[TranslationFile]:
        files: list[TranslationFile] = []
        reference = Selector.of([settings.reference_locale])
        for locales in (settings.locales, reference):
            found = self.finder.find_translation_files(scope, locales, settings.domains)
            if found is not None:
                files.extend(found)
        return files

    def aggregate(
        self,
        files: Iterable[TranslationFile],
        settings: ExportSettings,
    ) -> TranslationTable:
        """Merge every file into one table; earlier files win on conflicts."""

        table = TranslationTable()
        for file in files:
            table = table.merge(self.load_file(file, settings))
        logger.info("Aggregated %d entr(y/ies) across %d bundle(s)", len(table), len(table.bundles()))
        return table

    def load_file(self, file: TranslationFile, settings: ExportSettings) -> TranslationTable:
        if not file.is_tabular:
            return load_catalogue_file(file)

        import_filter = self._import_filter_for(file, settings)
        if import_filter is None:
            logger.warning("Skipping %s: none of the requested locales has a column", file.path)
            return TranslationTable()
        return import_table(file.path, import_filter)

    def _import_filter_for(self, file: TranslationFile, settings: ExportSettings) -> ImportFilter | None:
        if file.locale is not None:
            return ImportFilter(
                bundles=Selector.everything(),
                domains=Selector.everything(),
                locales=(file.locale,),
                separator=settings.separator,
            )

        with TabularReader(file.path, settings.separator) as reader:
            header = reader.header

        if settings.locales.is_all:
            wanted = [column for column in header if column and column not in MANDATORY_COLUMNS]
        else:
            wanted = [*settings.locales.names, settings.reference_locale]
        locales = [locale for locale in dict.fromkeys(wanted) if locale in header]
        if not locales:
            return None

        return ImportFilter(
            bundles=Selector.everything(),
            domains=settings.domains,
            locales=tuple(locales),
            separator=settings.separator,
        )


__all__ = ["TranslationsExporter", "order_locales", "resolve_locales"]
