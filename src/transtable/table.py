"""In-memory aggregation of bundle/domain/key/locale translation values."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

Locales = dict[str, str]
Keys = dict[str, Locales]
Domains = dict[str, Keys]


@dataclass(frozen=True)
class TableEntry:
    """One keyed row of the table together with its per-locale values."""

    bundle: str
    domain: str
    key: str
    locales: Mapping[str, str]


class TranslationTable:
    """Nested bundle -> domain -> key -> locale -> value mapping.

    Bundles, domains and keys keep their first-seen order; nothing is ever
    re-sorted. Empty values are never stored.
    """

    def __init__(self, data: Mapping[str, Mapping[str, Mapping[str, Mapping[str, str]]]] | None = None) -> None:
        self._bundles: dict[str, Domains] = {}
        if data:
            for bundle, domains in data.items():
                for domain, keys in domains.items():
                    for key, locales in keys.items():
                        for locale, value in locales.items():
                            self.set(bundle, domain, key, locale, value)

    def _slot(self, bundle: str, domain: str, key: str) -> Locales:
        domains = self._bundles.setdefault(bundle, {})
        keys = domains.setdefault(domain, {})
        return keys.setdefault(key, {})

    def set(self, bundle: str, domain: str, key: str, locale: str, value: str) -> bool:
        """Store ``value``, replacing any previous one. Empty values are ignored."""

        if not value:
            return False
        self._slot(bundle, domain, key)[locale] = value
        return True

    def add(self, bundle: str, domain: str, key: str, locale: str, value: str) -> bool:
        """Store ``value`` only when no value exists yet for that locale."""

        if not value:
            return False
        locales = self._slot(bundle, domain, key)
        if locale in locales:
            return False
        locales[locale] = value
        return True

    def get(self, bundle: str, domain: str, key: str, locale: str) -> str | None:
        return (
            self._bundles.get(bundle, {})
            .get(domain, {})
            .get(key, {})
            .get(locale)
        )

    def merge(self, other: TranslationTable) -> TranslationTable:
        """Fold ``other`` into this table and return ``self``.

        Values already present win over those coming from ``other``.
        """

        for entry in other:
            for locale, value in entry.locales.items():
                self.add(entry.bundle, entry.domain, entry.key, locale, value)
        return self

    def bundles(self) -> list[str]:
        return list(self._bundles)

    def domains(self, bundle: str) -> list[str]:
        return list(self._bundles.get(bundle, {}))

    def locales(self) -> list[str]:
        """Return distinct locale codes in first-seen order."""

        seen: dict[str, None] = {}
        for entry in self:
            for locale in entry.locales:
                seen.setdefault(locale, None)
        return list(seen)

    def __iter__(self) -> Iterator[TableEntry]:
        for bundle, domains in self._bundles.items():
            for domain, keys in domains.items():
                for key, locales in keys.items():
                    yield TableEntry(bundle, domain, key, locales)

    def __len__(self) -> int:
        return sum(len(keys) for domains in self._bundles.values() for keys in domains.values())

    def __bool__(self) -> bool:
        return bool(self._bundles)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TranslationTable):
            return self.to_dict() == other.to_dict()
        if isinstance(other, Mapping):
            return self.to_dict() == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"TranslationTable(bundles={self.bundles()!r}, entries={len(self)})"

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy as plain nested dictionaries."""

        return {
            bundle: {
                domain: {key: dict(locales) for key, locales in keys.items()}
                for domain, keys in domains.items()
            }
            for bundle, domains in self._bundles.items()
        }


__all__ = ["TableEntry", "TranslationTable"]
