"""Per-entry type and pattern filtering, and shaping of surviving paths."""

from __future__ import annotations

import os

from lsfnd.paths import ResolvedPaths
from lsfnd.types import EntryClassification, ResolvedOptions, TypeFilter


def type_matches(classification: EntryClassification, type_filter: TypeFilter) -> bool:
    is_file = classification.is_file
    is_dir = classification.is_directory
    if type_filter is TypeFilter.DIRECTORY:
        return is_dir and not is_file
    if type_filter is TypeFilter.FILE:
        return is_file and not is_dir
    return is_file or is_dir


def pattern_matches(entry: str, options: ResolvedOptions) -> bool:
    """True if `match` finds `entry` and `exclude`, when set, does not."""
    if not options.match.search(entry):
        return False
    return options.exclude is None or not options.exclude.search(entry)


def shape_entry(entry: str, options: ResolvedOptions, paths: ResolvedPaths) -> str:
    """Render an absolute entry path by priority: absolute, then basename, then relative."""
    if options.absolute:
        return entry
    if options.basename:
        return os.path.basename(entry)
    return os.path.normpath(os.path.join(paths.anchor, os.path.relpath(entry, paths.directory)))


def accept_entry(
    entry: str,
    classification: EntryClassification,
    options: ResolvedOptions,
    paths: ResolvedPaths,
    type_filter: TypeFilter,
) -> str | None:
    """
    Return the shaped form of `entry` if it passes the type filter and the
    patterns, or `None` if it is filtered out.
    """
    if not (type_matches(classification, type_filter) and pattern_matches(entry, options)):
        return None
    return shape_entry(entry, options, paths)
