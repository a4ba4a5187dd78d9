"""Value types shared by the listing pipeline."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, TypeAlias, Union
from urllib.parse import ParseResult, SplitResult

from lsfnd.exceptions import InvalidTypeFilterError

FileURL: TypeAlias = Union[SplitResult, ParseResult]
"""A structured URL value, as produced by `urllib.parse.urlsplit` or `urlparse`."""

DirectorySpec: TypeAlias = Union[str, os.PathLike[str], FileURL]
"""A plain path, a `file:` URL string, or a structured `file:` URL."""


class TypeFilter(IntEnum):
    """
    Which kinds of entries a listing returns.

    `LS_A`, `LS_D` and `LS_F` are aliases of `ALL`, `DIRECTORY` and `FILE`.
    The integer `0` and `None` are accepted by `coerce()` as `ALL`.
    """

    ALL = 1
    DIRECTORY = 2
    FILE = 4

    LS_A = 1
    LS_D = 2
    LS_F = 4

    @classmethod
    def coerce(cls, value: TypeFilter | int | str | None) -> TypeFilter:
        """Map every accepted surface form onto one of the three canonical members."""
        if value is None:
            return cls.ALL
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidTypeFilterError(f"Invalid type filter: {value!r}")
        if isinstance(value, int):
            if value == 0:
                return cls.ALL
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str) and value in cls.__members__:
            return cls[value]
        valid = ", ".join([*cls.__members__, "0", "1", "2", "4", "None"])
        raise InvalidTypeFilterError(f"Invalid type filter: {value!r} (valid: {valid})")


@dataclass
class ListingOptions:
    """
    Caller-supplied listing options. Fields left as `None` fall back to
    `DEFAULT_OPTIONS`.

    `match` and `exclude` may be compiled patterns or pattern strings; both are
    searched against the full absolute path of each entry. Output shape priority
    is `absolute` > `basename` > relative to `root_dir`.
    """

    encoding: str | None = None
    recursive: bool | None = None
    match: re.Pattern[str] | str | None = None
    exclude: re.Pattern[str] | str | None = None
    root_dir: DirectorySpec | None = None
    absolute: bool | None = None
    basename: bool | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ListingOptions:
        """Build options from a plain mapping, accepting `rootDir` as an alias of `root_dir`."""
        root_dir = data.get("root_dir")
        if root_dir is None:
            root_dir = data.get("rootDir")
        return cls(
            encoding=data.get("encoding"),
            recursive=data.get("recursive"),
            match=data.get("match"),
            exclude=data.get("exclude"),
            root_dir=root_dir,
            absolute=data.get("absolute"),
            basename=data.get("basename"),
        )


@dataclass(frozen=True)
class ResolvedOptions:
    """Fully populated options. `exclude=None` means nothing is excluded."""

    encoding: str
    recursive: bool
    match: re.Pattern[str]
    exclude: re.Pattern[str] | None
    root_dir: DirectorySpec
    absolute: bool
    basename: bool


@dataclass(frozen=True, slots=True)
class EntryClassification:
    """Whether a single entry is a regular file or a directory. Never both."""

    is_file: bool
    is_directory: bool
