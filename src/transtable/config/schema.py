"""Pydantic models describing import filters, export settings and bundle manifests."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Self

ALL_TOKEN = "all"
APP_BUNDLE_NAME = "app"
RESERVED_BUNDLE_NAMES = frozenset({APP_BUNDLE_NAME, ALL_TOKEN})
DEFAULT_SEPARATOR = "\t"

_SEPARATOR_ALIASES = {"\\t": "\t", "tab": "\t", "comma": ",", "semicolon": ";"}


class ConfigurationError(ValueError):
    """Raised when settings or manifest values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def split_tokens(value: Any) -> tuple[str, ...]:
    """Normalise a comma separated string or an iterable into unique tokens."""

    if value is None:
        return ()
    if isinstance(value, str):
        raw: Iterable[Any] = value.split(",")
    elif isinstance(value, Iterable):
        raw = value
    else:
        raise ConfigurationError("Expected a comma separated string or a list of names")

    tokens: dict[str, None] = {}
    for item in raw:
        token = str(item).strip()
        if token:
            tokens.setdefault(token, None)
    return tuple(tokens)


def _coerce_separator(value: Any) -> str:
    if value is None:
        return DEFAULT_SEPARATOR
    separator = _SEPARATOR_ALIASES.get(str(value).lower(), str(value))
    if len(separator) != 1:
        raise ConfigurationError(f"Separator must be a single character, got {value!r}")
    if separator in {'"', "\r", "\n"}:
        raise ConfigurationError(f"Separator {value!r} cannot be used as a delimiter")
    return separator


class Selector(ImmutableModel):
    """Either every name (``members`` is ``None``) or an ordered subset of names."""

    members: tuple[str, ...] | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_tokens(cls, data: Any) -> Any:
        if isinstance(data, (Selector, Mapping)):
            return data
        tokens = split_tokens(data)
        if tokens == (ALL_TOKEN,):
            return {"members": None}
        return {"members": tokens}

    @classmethod
    def everything(cls) -> Selector:
        return cls(members=None)

    @classmethod
    def of(cls, names: Iterable[str]) -> Selector:
        return cls(members=tuple(dict.fromkeys(names)))

    @classmethod
    def parse(cls, value: str | Iterable[str] | None) -> Selector:
        """Build a selector from user tokens; ``["all"]`` selects everything."""

        return cls.model_validate(value)

    @property
    def is_all(self) -> bool:
        return self.members is None

    @property
    def names(self) -> tuple[str, ...]:
        return self.members or ()

    def __contains__(self, name: object) -> bool:
        return self.members is None or name in self.members

    def __str__(self) -> str:
        return ALL_TOKEN if self.members is None else ",".join(self.members)


class ImportFilter(ImmutableModel):
    """Selection applied while importing a tabular source."""

    bundles: Selector = Field(default_factory=Selector.everything)
    domains: Selector = Field(default_factory=Selector.everything)
    locales: tuple[str, ...]
    separator: str = DEFAULT_SEPARATOR

    @field_validator("locales", mode="before")
    @classmethod
    def _coerce_locales(cls, value: Any) -> tuple[str, ...]:
        return split_tokens(value)

    @field_validator("separator", mode="before")
    @classmethod
    def _validate_separator(cls, value: Any) -> str:
        return _coerce_separator(value)

    @model_validator(mode="after")
    def _validate_locales(self) -> Self:
        if not self.locales:
            raise ConfigurationError("At least one locale must be requested for import")
        if ALL_TOKEN in self.locales:
            raise ConfigurationError("Import locales must be listed explicitly")
        return self


class ExportSettings(ImmutableModel):
    """Options driving bundle discovery and tabular serialisation on export."""

    bundles: tuple[str, ...]
    domains: Selector = Field(default_factory=Selector.everything)
    locales: Selector = Field(default_factory=Selector.everything)
    reference_locale: str
    separator: str = DEFAULT_SEPARATOR
    only_missing: bool = False
    include_bom: bool = False
    escape_newlines: bool = True
    output_path: Path

    @field_validator("bundles", mode="before")
    @classmethod
    def _coerce_bundles(cls, value: Any) -> tuple[str, ...]:
        return split_tokens(value)

    @field_validator("separator", mode="before")
    @classmethod
    def _validate_separator(cls, value: Any) -> str:
        return _coerce_separator(value)

    @field_validator("reference_locale", mode="before")
    @classmethod
    def _strip_reference(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        if not self.bundles:
            raise ConfigurationError("At least one bundle must be selected for export")
        if not self.reference_locale or self.reference_locale == ALL_TOKEN:
            raise ConfigurationError("A concrete reference locale is required for export")
        return self


class ApplicationEntry(ImmutableModel):
    """Location of the application-level translation files."""

    path: Path


class BundleEntry(ImmutableModel):
    """Registered bundle with its translation directory and optional parent."""

    name: str
    path: Path
    parent: str | None = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ConfigurationError("Bundle names must not be blank")
        if name in RESERVED_BUNDLE_NAMES:
            raise ConfigurationError(f"Bundle name '{name}' is reserved")
        return name


class BundleManifest(ImmutableModel):
    """Manifest describing where bundles keep their translation files."""

    application: ApplicationEntry | None = None
    bundles: Sequence[BundleEntry] = ()

    @model_validator(mode="after")
    def _validate_bundles(self) -> Self:
        seen: set[str] = set()
        for entry in self.bundles:
            if entry.name in seen:
                raise ConfigurationError(
                    f"Duplicate bundle '{entry.name}' declared in the bundle manifest"
                )
            seen.add(entry.name)
        for entry in self.bundles:
            if entry.parent is not None and entry.parent not in seen:
                raise ConfigurationError(
                    f"Bundle '{entry.name}' declares unknown parent '{entry.parent}'"
                )
        return self

    def get_entry(self, name: str) -> BundleEntry:
        for entry in self.bundles:
            if entry.name == name:
                return entry
        raise KeyError(name)

    def resolved(self, base_directory: Path) -> BundleManifest:
        """Return a copy whose relative paths are anchored at ``base_directory``."""

        def _anchor(path: Path) -> Path:
            return path if path.is_absolute() else (base_directory / path)

        application = None
        if self.application is not None:
            application = self.application.model_copy(
                update={"path": _anchor(self.application.path)}
            )
        bundles = tuple(
            entry.model_copy(update={"path": _anchor(entry.path)}) for entry in self.bundles
        )
        return self.model_copy(update={"application": application, "bundles": bundles})

    @property
    def bundle_names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.bundles)


__all__ = [
    "ALL_TOKEN",
    "APP_BUNDLE_NAME",
    "ApplicationEntry",
    "BundleEntry",
    "BundleManifest",
    "ConfigurationError",
    "DEFAULT_SEPARATOR",
    "ExportSettings",
    "ImmutableModel",
    "ImportFilter",
    "RESERVED_BUNDLE_NAMES",
    "Selector",
    "split_tokens",
]
