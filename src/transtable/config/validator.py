"""Utilities for validating bundle manifests and surfacing issues."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from .schema import BundleManifest, ConfigurationError
from .settings import load_bundle_manifest

TRANSLATION_SUFFIXES = (".yaml", ".yml", ".json", ".csv", ".tsv", ".txt")


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_directory(scope: str, path: Path) -> list[str]:
    errors: list[str] = []

    if not path.exists():
        errors.append(_format_scope(scope, f"translation directory {path} does not exist"))
        return errors
    if not path.is_dir():
        errors.append(_format_scope(scope, f"translation path {path} is not a directory"))
        return errors

    for candidate in sorted(path.iterdir()):
        if candidate.suffix.lower() not in TRANSLATION_SUFFIXES:
            continue
        if len(candidate.name.split(".")) < 3:
            errors.append(
                _format_scope(
                    scope,
                    f"file '{candidate.name}' does not follow <domain>.<locale>.<extension>",
                )
            )

    return errors


def _validate_parent_chains(manifest: BundleManifest) -> list[str]:
    errors: list[str] = []
    parents = {entry.name: entry.parent for entry in manifest.bundles}

    for name in parents:
        chain = [name]
        current = parents.get(name)
        while current is not None:
            if current in chain:
                chain.append(current)
                errors.append(
                    _format_scope(
                        f"bundles.{name}",
                        f"parent chain is cyclic: {' -> '.join(chain)}",
                    )
                )
                break
            chain.append(current)
            current = parents.get(current)

    return errors


def validate_manifest(manifest: BundleManifest) -> list[str]:
    """Return human readable issues detected in ``manifest``."""

    errors: list[str] = []

    if manifest.application is None and not manifest.bundles:
        errors.append(_format_scope("manifest", "no application or bundle entries declared"))

    if manifest.application is not None:
        errors.extend(_validate_directory("application", manifest.application.path))

    for entry in manifest.bundles:
        errors.extend(_validate_directory(f"bundles.{entry.name}", entry.path))

    errors.extend(_validate_parent_chains(manifest))

    return errors


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate bundle manifests and report issues helpful to contributors."
    )
    parser.add_argument(
        "manifests",
        nargs="+",
        type=Path,
        help="Bundle manifest files to validate",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    exit_code = 0

    for path in args.manifests:
        try:
            manifest = load_bundle_manifest(path)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{path}] failed to load manifest: {error}")
            exit_code = 1
            continue

        issues = validate_manifest(manifest)
        if issues:
            exit_code = 1
            print(f"[{path}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{path}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
