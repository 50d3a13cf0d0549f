"""Lint catalogue files for split-message rows that can never be assembled."""

from __future__ import annotations

import argparse
from collections import defaultdict
from pathlib import Path
from typing import Mapping, Sequence

from .retriever import ROW_SEPARATOR
from .stores import CATALOGUE_SUFFIXES, ResourceNotFoundError, load_catalogue


def _split_rows(messages: Mapping[str, str]) -> tuple[dict[str, set[int]], list[str]]:
    rows: dict[str, set[int]] = defaultdict(set)
    errors: list[str] = []

    for key in messages:
        if ROW_SEPARATOR not in key:
            continue
        base, _, suffix = key.rpartition(ROW_SEPARATOR)
        if not suffix.isdigit():
            errors.append(f"{key}: row suffix {suffix!r} is not a number")
            continue
        row = int(suffix)
        if row < 1:
            errors.append(f"{key}: rows are numbered from 1")
            continue
        rows[base].add(row)

    return rows, errors


def validate_catalogue(messages: Mapping[str, str]) -> list[str]:
    """Return issues with the split-message rows defined in ``messages``."""

    rows, errors = _split_rows(messages)

    for base in sorted(rows):
        numbers = rows[base]
        if base in messages:
            errors.append(f"{base}: rows are shadowed by a direct value and never used")
            continue
        if 1 not in numbers:
            errors.append(f"{base}: rows {sorted(numbers)} have no first row")
            continue

        gap = 1
        while gap in numbers:
            gap += 1
        unreachable = sorted(number for number in numbers if number > gap)
        if unreachable:
            errors.append(
                f"{base}: row {gap} is missing so rows {unreachable} are never assembled"
            )

    return errors


def validate_directory(directory: Path) -> dict[str, list[str]]:
    """Validate every catalogue below ``directory`` keyed by relative path."""

    results: dict[str, list[str]] = {}
    for path in sorted(directory.rglob("*")):
        if path.suffix not in CATALOGUE_SUFFIXES or not path.is_file():
            continue
        label = path.relative_to(directory).as_posix()
        try:
            messages = load_catalogue(path)
        except ResourceNotFoundError as error:
            results[label] = [str(error)]
            continue
        results[label] = validate_catalogue(messages)
    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report split-message rows that the retriever would never assemble."
    )
    parser.add_argument(
        "directory",
        nargs="?",
        type=Path,
        help="Bundle directory to scan (defaults to the packaged bundles)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    from . import BUNDLE_DIRECTORY

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    directory: Path = args.directory or BUNDLE_DIRECTORY

    if not directory.is_dir():
        print(f"Bundle directory not found: {directory}")
        return 1

    results = validate_directory(directory)
    if not results:
        print(f"No catalogues found in {directory}")
        return 1

    exit_code = 0
    for label, issues in results.items():
        if issues:
            exit_code = 1
            print(f"[{label}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{label}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
