"""
Classification of a single entry as a regular file or a directory.

Classification comes from `stat()` when it works. When it fails (some
protected directories refuse metadata reads but can still be opened), the
entry is probed by opening it as a directory: success means a directory,
`ENOTDIR` means a regular file, and any other failure is raised as
`EntryProbeError` with the stat failure chained.
"""

from __future__ import annotations

import errno
import logging
import os
import stat

import aiofiles.os

from lsfnd.exceptions import EntryProbeError
from lsfnd.types import EntryClassification

logger = logging.getLogger(__name__)

_DIRECTORY = EntryClassification(is_file=False, is_directory=True)
_FILE = EntryClassification(is_file=True, is_directory=False)


def _from_stat(st: os.stat_result) -> EntryClassification:
    return EntryClassification(
        is_file=stat.S_ISREG(st.st_mode), is_directory=stat.S_ISDIR(st.st_mode)
    )


def _probe_failed(path: str, probe_error: OSError, stat_error: OSError) -> EntryClassification:
    if probe_error.errno == errno.ENOTDIR:
        return _FILE
    raise EntryProbeError(probe_error.errno, probe_error.strerror, path) from stat_error


def classify(path: str) -> EntryClassification:
    """Classify `path`, falling back to a directory-open probe if `stat()` fails."""
    try:
        return _from_stat(os.stat(path))
    except OSError as stat_error:
        logger.debug("stat failed for %s (%s), probing as directory", path, stat_error)
        try:
            with os.scandir(path):
                pass
        except OSError as probe_error:
            return _probe_failed(path, probe_error, stat_error)
        return _DIRECTORY


async def classify_async(path: str) -> EntryClassification:
    """Same as `classify()`, with the stat and the probe run off the event loop."""
    try:
        return _from_stat(await aiofiles.os.stat(path))
    except OSError as stat_error:
        logger.debug("stat failed for %s (%s), probing as directory", path, stat_error)
        try:
            entries = await aiofiles.os.scandir(path)
        except OSError as probe_error:
            return _probe_failed(path, probe_error, stat_error)
        entries.close()
        return _DIRECTORY
