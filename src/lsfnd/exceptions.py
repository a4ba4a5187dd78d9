"""Exceptions for lsfnd."""

from __future__ import annotations


class ListingError(Exception):
    """Base class for every error raised by a listing call."""


class InvalidArgumentTypeError(ListingError, TypeError):
    """Raised when the directory or the options argument has an unsupported type."""


class InvalidURLSchemeError(ListingError, ValueError):
    """Raised when a URL-shaped directory or `root_dir` does not use the `file:` scheme.

    Also raised for strings that look like a URL but fail the platform's
    path/URL disambiguation (e.g. a Windows drive path on a POSIX host).
    """


class InvalidTypeFilterError(ListingError, TypeError):
    """Raised when the type filter is not one of the `TypeFilter` forms."""


class InvalidEncodingError(ListingError, LookupError):
    """Raised when an output encoding name is not recognized."""


class DirectoryReadError(ListingError, OSError):
    """Raised when the listed directory itself cannot be read.

    Carries the `errno`, `strerror` and `filename` of the underlying
    `OSError`, which is also chained as `__cause__`.
    """


class EntryProbeError(ListingError, OSError):
    """Raised when an entry can be neither stat'ed nor opened as a directory.

    The attributes describe the directory-open failure; the original stat
    failure is chained as `__cause__`.
    """


class ConfigError(ListingError, ValueError):
    """Raised when an lsfnd config file holds an invalid option.

    The message names the file and the offending key; parse, pattern and
    encoding errors are chained as `__cause__`.
    """
