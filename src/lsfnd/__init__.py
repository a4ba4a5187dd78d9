"""
List files and directories, filtered by regular expressions.

Usage::

    import asyncio
    import re

    from lsfnd import ls, ls_files_sync, TypeFilter

    entries = asyncio.run(ls("docs", {"recursive": True, "match": r"\\.md$"}))
    files = ls_files_sync("file:./src", re.compile(r"\\.py$"))

`ls`, `ls_files` and `ls_dirs` are coroutines that classify entries
concurrently; the `*_sync` variants block and produce identical output.
"""

from lsfnd.config import LsfndConfig, find_config_file, load_config, merge_options
from lsfnd.defaults import CANONICAL_ENCODING, DEFAULT_OPTIONS, DefaultOptions
from lsfnd.exceptions import (
    ConfigError,
    DirectoryReadError,
    EntryProbeError,
    InvalidArgumentTypeError,
    InvalidEncodingError,
    InvalidTypeFilterError,
    InvalidURLSchemeError,
    ListingError,
)
from lsfnd.lister import ls, ls_dirs, ls_files
from lsfnd.paths import file_url_to_path
from lsfnd.sync import ls as ls_sync
from lsfnd.sync import ls_dirs as ls_dirs_sync
from lsfnd.sync import ls_files as ls_files_sync
from lsfnd.types import EntryClassification, ListingOptions, ResolvedOptions, TypeFilter

__all__ = [
    "CANONICAL_ENCODING",
    "ConfigError",
    "DEFAULT_OPTIONS",
    "DefaultOptions",
    "DirectoryReadError",
    "EntryClassification",
    "EntryProbeError",
    "InvalidArgumentTypeError",
    "InvalidEncodingError",
    "InvalidTypeFilterError",
    "InvalidURLSchemeError",
    "ListingError",
    "ListingOptions",
    "LsfndConfig",
    "ResolvedOptions",
    "TypeFilter",
    "file_url_to_path",
    "find_config_file",
    "load_config",
    "ls",
    "ls_dirs",
    "ls_dirs_sync",
    "ls_files",
    "ls_files_sync",
    "ls_sync",
    "merge_options",
]
