"""Bundle registry and translation file discovery collaborators."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union

from transtable.config.schema import APP_BUNDLE_NAME, BundleManifest, Selector
from transtable.errors import BundleNotFoundError

logger = logging.getLogger(__name__)

TABULAR_SUFFIXES = frozenset({".csv", ".tsv", ".txt"})
CATALOGUE_SUFFIXES = frozenset({".yaml", ".yml", ".json"})


@dataclass(frozen=True)
class BundleHandle:
    """A registered bundle; ``parent`` names the bundle it defers lookups to."""

    name: str
    path: Path | None = None
    parent: str | None = None


@dataclass(frozen=True)
class ApplicationScope:
    """Marker for application-level translations outside any bundle."""

    name: str = APP_BUNDLE_NAME


APPLICATION = ApplicationScope()

LookupScope = Union[BundleHandle, ApplicationScope]


def parse_filename(filename: str) -> tuple[str, str | None]:
    """Split ``<domain>.<locale>.<extension>`` into domain and locale.

    Names with fewer than three segments carry no locale.
    """

    parts = filename.split(".")
    if len(parts) < 3 or not parts[0] or not parts[1]:
        return parts[0], None
    return parts[0], parts[1]


@dataclass(frozen=True)
class TranslationFile:
    """A discovered translation file attributed to a bundle."""

    path: Path
    bundle: str

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def domain(self) -> str:
        return parse_filename(self.filename)[0]

    @property
    def locale(self) -> str | None:
        return parse_filename(self.filename)[1]

    @property
    def is_tabular(self) -> bool:
        return self.path.suffix.lower() in TABULAR_SUFFIXES


class BundleRegistry(Protocol):
    def resolve_bundle(self, name: str) -> BundleHandle: ...

    def list_bundles(self) -> list[BundleHandle]: ...

    def get_parent(self, handle: BundleHandle) -> BundleHandle | None: ...


class TranslationFileFinder(Protocol):
    def find_translation_files(
        self,
        scope: LookupScope,
        locales: Selector,
        domains: Selector,
    ) -> list[TranslationFile] | None: ...


class ManifestBundleRegistry:
    """Registry backed by the bundles declared in a manifest."""

    def __init__(self, manifest: BundleManifest) -> None:
        self._handles = {
            entry.name: BundleHandle(entry.name, entry.path, entry.parent)
            for entry in manifest.bundles
        }

    def resolve_bundle(self, name: str) -> BundleHandle:
        try:
            return self._handles[name]
        except KeyError as exc:
            raise BundleNotFoundError(name) from exc

    def list_bundles(self) -> list[BundleHandle]:
        return list(self._handles.values())

    def get_parent(self, handle: BundleHandle) -> BundleHandle | None:
        if handle.parent is None:
            return None
        return self.resolve_bundle(handle.parent)


class DirectoryFileFinder:
    """Finder listing ``<domain>.<locale>.<extension>`` files in bundle directories."""

    def __init__(self, application_path: Path | None = None) -> None:
        self.application_path = application_path

    @classmethod
    def from_manifest(cls, manifest: BundleManifest) -> DirectoryFileFinder:
        application = manifest.application.path if manifest.application else None
        return cls(application)

    def _directory_for(self, scope: LookupScope) -> Path | None:
        if isinstance(scope, ApplicationScope):
            return self.application_path
        return scope.path

    def find_translation_files(
        self,
        scope: LookupScope,
        locales: Selector,
        domains: Selector,
    ) -> list[TranslationFile] | None:
        directory = self._directory_for(scope)
        if directory is None or not directory.is_dir():
            logger.debug("No translation directory for %s", scope.name)
            return None

        found: list[TranslationFile] = []
        for path in sorted(directory.iterdir()):
            suffix = path.suffix.lower()
            if not path.is_file() or suffix not in TABULAR_SUFFIXES | CATALOGUE_SUFFIXES:
                continue

            candidate = TranslationFile(path=path, bundle=scope.name)
            if candidate.locale is None:
                # Multi-locale tables: domains and locales are filtered per row.
                if not candidate.is_tabular:
                    logger.debug("Ignoring %s: no locale segment in file name", path)
                    continue
            elif candidate.domain not in domains or candidate.locale not in locales:
                continue
            found.append(candidate)

        return found


__all__ = [
    "APPLICATION",
    "ApplicationScope",
    "BundleHandle",
    "BundleRegistry",
    "CATALOGUE_SUFFIXES",
    "DirectoryFileFinder",
    "LookupScope",
    "ManifestBundleRegistry",
    "TABULAR_SUFFIXES",
    "TranslationFile",
    "TranslationFileFinder",
    "parse_filename",
]
