"""Blocking counterparts of the `lsfnd.lister` functions."""

from __future__ import annotations

import logging
import os

from lsfnd.classify import classify
from lsfnd.filtering import accept_entry
from lsfnd.lister import (
    finish_listing,
    prepare_listing,
    read_error,
    scan_directory,
    scan_subdirectory_failed,
)
from lsfnd.options import OptionsInput
from lsfnd.types import DirectorySpec, TypeFilter

logger = logging.getLogger(__name__)


def read_directory(path: str, recursive: bool) -> list[str]:
    """Blocking version of `lsfnd.lister.read_directory_async`."""
    logger.debug("Reading directory %s (recursive=%s)", path, recursive)
    try:
        top = scan_directory(path)
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
                    pending.append((rel, scan_directory(sub)))
                except OSError as e:
                    scan_subdirectory_failed(sub, e)
    return names


def ls(
    dirpath: DirectorySpec,
    options: OptionsInput = None,
    type_filter: TypeFilter | int | str | None = None,
) -> list[str]:
    """
    Synchronously list the entries of `dirpath`, one entry at a time.
    Arguments, errors and output are the same as `lsfnd.lister.ls()`.
    """
    plan = prepare_listing(dirpath, options, type_filter)
    directory = plan.paths.directory
    results: list[str | None] = []
    for name in read_directory(directory, plan.options.recursive):
        entry = os.path.join(directory, name)
        results.append(
            accept_entry(entry, classify(entry), plan.options, plan.paths, plan.type_filter)
        )
    return finish_listing(results, plan)


def ls_files(dirpath: DirectorySpec, options: OptionsInput = None) -> list[str]:
    """List only regular files. See `ls()`."""
    return ls(dirpath, options, TypeFilter.FILE)


def ls_dirs(dirpath: DirectorySpec, options: OptionsInput = None) -> list[str]:
    """List only directories. See `ls()`."""
    return ls(dirpath, options, TypeFilter.DIRECTORY)
