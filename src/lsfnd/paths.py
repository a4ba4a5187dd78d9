"""
Resolution of directory specifications into absolute paths.

A directory may be given as a plain path, a `file:` URL string (including the
relaxed forms `file:./rel`, `file:../rel` and a bare `file:` for the root), or
a structured URL from `urllib.parse`. Only the `file:` scheme is accepted.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass
from urllib.parse import ParseResult, SplitResult, unquote, urlsplit
from urllib.request import url2pathname

from lsfnd.exceptions import InvalidArgumentTypeError, InvalidURLSchemeError
from lsfnd.types import DirectorySpec

logger = logging.getLogger(__name__)

_WINDOWS = sys.platform == "win32"

# A leading `scheme:` token. Drive-letter paths match this too and are told
# apart with `WIN32_PATH_PATTERN`.
_URL_SCHEME_PATTERN = re.compile(r"^[A-Za-z]+:")

WIN32_PATH_PATTERN = re.compile(
    r'^[A-Za-z]:?(?:\\|/)(?:[^\\/:*?"<>|\r\n]+(?:\\|/))*[^\\/:*?"<>|\r\n]*$'
)

_LOCAL_HOSTS = ("", "localhost")


@dataclass(frozen=True)
class ResolvedPaths:
    """
    The absolute directory being listed, the absolute `root_dir`, and the
    relative anchor from `root_dir` to the directory used for relative output.
    """

    directory: str
    root_dir: str
    anchor: str


def is_win32_path(value: str) -> bool:
    """Check whether `value` is shaped like a Windows drive path (`C:\\...` or `C:/...`)."""
    return bool(value) and WIN32_PATH_PATTERN.match(os.path.normpath(value)) is not None


def _root_path() -> str:
    # The root of the current drive on Windows.
    return os.path.abspath(os.sep)


def _url_path_to_local(url_path: str) -> str:
    if not url_path or url_path == "/":
        return _root_path()
    return url2pathname(url_path).replace("\\", "/")


def _structured_url_to_path(url: SplitResult | ParseResult) -> str:
    if url.scheme.lower() != "file":
        raise InvalidURLSchemeError(f"Unsupported URL scheme: '{url.scheme}:'")
    if url.netloc.lower() not in _LOCAL_HOSTS:
        raise InvalidURLSchemeError(f"File URL host must be empty or localhost: {url.netloc!r}")
    return _url_path_to_local(url.path)


def file_url_to_path(url: str | SplitResult | ParseResult) -> str:
    """
    Convert a `file:` URL to a filesystem path.

    Unlike `urllib.request.url2pathname`, this also accepts relative forms such
    as `file:./docs`, which come back relative (`./docs`), and treats `file:`,
    `file://` and `file:///` as the filesystem root.
    """
    if isinstance(url, (SplitResult, ParseResult)):
        return _structured_url_to_path(url)

    if url[:5].lower() != "file:":
        raise InvalidURLSchemeError(f"Unsupported URL scheme: {url!r}")
    rest = url[5:]
    if rest in ("", "//", "///"):
        return _root_path()
    if rest.startswith("."):
        return unquote(rest)
    if rest.startswith("/"):
        return _structured_url_to_path(urlsplit(url))
    raise InvalidURLSchemeError(f"Invalid file URL: {url!r}")


def is_url_like(value: str) -> bool:
    """True if `value` starts with a `scheme:` token and is read as a URL, not a path."""
    return _URL_SCHEME_PATTERN.match(value) is not None


def _resolve_url_string(value: str) -> str:
    if value[:5].lower() == "file:":
        return file_url_to_path(value)
    # A drive path is only a path on a Windows host.
    if _WINDOWS and is_win32_path(value):
        return value
    scheme = value.split(":", 1)[0]
    raise InvalidURLSchemeError(f"Unsupported URL scheme: '{scheme}:' in {value!r}")


def resolve_directory(dirpath: DirectorySpec) -> str:
    """
    Resolve a directory specification to an absolute, normalized path.
    Relative paths are taken from the current working directory.
    """
    if isinstance(dirpath, (SplitResult, ParseResult)):
        path = _structured_url_to_path(dirpath)
    elif isinstance(dirpath, str):
        path = _resolve_url_string(dirpath) if is_url_like(dirpath) else dirpath
    elif isinstance(dirpath, os.PathLike):
        path = os.fspath(dirpath)
        if not isinstance(path, str):
            raise InvalidArgumentTypeError(
                f"Expected a str path, got {type(path).__name__} from {dirpath!r}"
            )
    else:
        raise InvalidArgumentTypeError(
            f"Expected a path string, os.PathLike or file URL, got {type(dirpath).__name__}"
        )
    return os.path.abspath(os.path.normpath(path))


def resolve_paths(dirpath: DirectorySpec, root_dir: DirectorySpec) -> ResolvedPaths:
    """Resolve the listed directory and `root_dir` together, with the relative anchor."""
    directory = resolve_directory(dirpath)
    root = resolve_directory(root_dir)
    try:
        anchor = os.path.relpath(directory, root)
    except ValueError:
        # Different drives on Windows; no relative form exists.
        logger.debug("No relative path from %s to %s, using absolute anchor", root, directory)
        anchor = directory
    return ResolvedPaths(directory=directory, root_dir=root, anchor=anchor)
