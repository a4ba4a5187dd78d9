"""
Directory listing with concurrent per-entry probing.

`ls()` reads the directory (recursively if requested), then classifies and
filters every entry concurrently, joining on a single `asyncio.gather`.
The blocking counterparts in `lsfnd.sync` share the preparation and
finishing steps defined here, so both produce identical output.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass

import aiofiles.os

from lsfnd.classify import classify_async
from lsfnd.defaults import CANONICAL_ENCODING
from lsfnd.encoding import encode_to, is_same_encoding
from lsfnd.exceptions import DirectoryReadError
from lsfnd.filtering import accept_entry
from lsfnd.options import OptionsInput, resolve_options
from lsfnd.paths import ResolvedPaths, resolve_paths
from lsfnd.types import DirectorySpec, ResolvedOptions, TypeFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingPlan:
    """Everything a listing needs once the arguments are validated."""

    paths: ResolvedPaths
    options: ResolvedOptions
    type_filter: TypeFilter


def prepare_listing(
    dirpath: DirectorySpec,
    options: OptionsInput = None,
    type_filter: TypeFilter | int | str | None = None,
) -> ListingPlan:
    """Validate and resolve all arguments. Raises before any directory is read."""
    resolved = resolve_options(options)
    paths = resolve_paths(dirpath, resolved.root_dir)
    return ListingPlan(paths=paths, options=resolved, type_filter=TypeFilter.coerce(type_filter))


def read_error(path: str, error: OSError) -> DirectoryReadError:
    return DirectoryReadError(error.errno, error.strerror, path)


def scan_subdirectory_failed(path: str, error: OSError) -> None:
    logger.debug("Skipping unreadable subdirectory %s: %s", path, error)


def finish_listing(results: Iterable[str | None], plan: ListingPlan) -> list[str]:
    """Drop filtered-out entries, convert to the requested encoding and sort."""
    entries = [entry for entry in results if entry is not None]
    encoding = plan.options.encoding
    if not is_same_encoding(encoding, CANONICAL_ENCODING):
        entries = [encode_to(entry, CANONICAL_ENCODING, encoding) for entry in entries]
    entries.sort()
    return entries


def scan_directory(path: str) -> list[tuple[str, bool]]:
    """Read one directory level as `(name, is_dir)` pairs; symlinks count as non-directories."""
    with os.scandir(path) as entries:
        return [(entry.name, entry.is_dir(follow_symlinks=False)) for entry in entries]


# The whole scan, iteration included, runs in the executor.
_scan = aiofiles.os.wrap(scan_directory)


async def read_directory_async(path: str, recursive: bool) -> list[str]:
    """
    Read the entry names of `path`, as paths relative to it. With `recursive`,
    subdirectories (not symlinks to them) are descended into; a subdirectory
    that cannot be read is skipped, but a failure on `path` itself raises
    `DirectoryReadError`.
    """
    logger.debug("Reading directory %s (recursive=%s)", path, recursive)
    try:
        top = await _scan(path)
    except OSError as e:
        raise read_error(path, e) from e

    names: list[str] = []
    pending: list[tuple[str, list[tuple[str, bool]]]] = [("", top)]
    while pending:
        prefix, scanned = pending.pop()
        for name, is_dir in scanned:
            rel = os.path.join(prefix, name) if prefix else name
            names.append(rel)
            if recursive and is_dir:
                sub = os.path.join(path, rel)
                try:
                    pending.append((rel, await _scan(sub)))
                except OSError as e:
                    scan_subdirectory_failed(sub, e)
    return names


async def _process_entry(entry: str, plan: ListingPlan) -> str | None:
    classification = await classify_async(entry)
    return accept_entry(entry, classification, plan.options, plan.paths, plan.type_filter)


async def ls(
    dirpath: DirectorySpec,
    options: OptionsInput = None,
    type_filter: TypeFilter | int | str | None = None,
) -> list[str]:
    """
    List the entries of `dirpath`, filtered and shaped by `options`.

    `options` is a `ListingOptions`, a mapping of option names, a compiled
    pattern (shorthand for `match`), or `None` for the defaults. `type_filter`
    selects files, directories or both (`TypeFilter`, its names, 0/1/2/4, or
    `None`). Entries are classified concurrently; the result is sorted.

    Raises `DirectoryReadError` if the directory cannot be read, and the
    argument errors from `lsfnd.exceptions` before touching the filesystem.
    """
    plan = prepare_listing(dirpath, options, type_filter)
    directory = plan.paths.directory
    names = await read_directory_async(directory, plan.options.recursive)
    results = await asyncio.gather(
        *(_process_entry(os.path.join(directory, name), plan) for name in names)
    )
    return finish_listing(results, plan)


async def ls_files(dirpath: DirectorySpec, options: OptionsInput = None) -> list[str]:
    """List only regular files. See `ls()`."""
    return await ls(dirpath, options, TypeFilter.FILE)


async def ls_dirs(dirpath: DirectorySpec, options: OptionsInput = None) -> list[str]:
    """List only directories. See `ls()`."""
    return await ls(dirpath, options, TypeFilter.DIRECTORY)
