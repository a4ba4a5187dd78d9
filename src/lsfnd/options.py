"""Resolution of caller options into a fully populated `ResolvedOptions`."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Union

from lsfnd.defaults import DEFAULT_OPTIONS
from lsfnd.encoding import normalize_encoding
from lsfnd.exceptions import InvalidArgumentTypeError
from lsfnd.types import ListingOptions, ResolvedOptions

OptionsInput = Union[ListingOptions, Mapping[str, Any], re.Pattern[str], None]
"""Options as accepted at the API boundary: options, a bare match pattern, or nothing."""


def _compile(pattern: re.Pattern[str] | str) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, str):
        return re.compile(pattern)
    raise InvalidArgumentTypeError(
        f"Expected a pattern or a pattern string, got {type(pattern).__name__}"
    )


def as_listing_options(raw: OptionsInput) -> ListingOptions:
    """Turn any accepted options form into a `ListingOptions`, without applying defaults."""
    if raw is None:
        return ListingOptions()
    if isinstance(raw, re.Pattern):
        return ListingOptions(match=raw)
    if isinstance(raw, ListingOptions):
        return raw
    if isinstance(raw, Mapping):
        return ListingOptions.from_mapping(raw)
    kind = "array" if isinstance(raw, (list, tuple)) else type(raw).__name__
    raise InvalidArgumentTypeError(f"Unknown type of 'options': {kind}")


def resolve_options(raw: OptionsInput) -> ResolvedOptions:
    """
    Merge caller options with `DEFAULT_OPTIONS`.

    A bare pattern only overrides `match`. `None` fields fall back to the
    defaults, string patterns are compiled (`re.error` if invalid), and the
    encoding name is validated here so bad names fail before any I/O.
    """
    opts = as_listing_options(raw)
    defaults = DEFAULT_OPTIONS

    encoding = opts.encoding if opts.encoding is not None else defaults.encoding
    normalize_encoding(encoding)

    return ResolvedOptions(
        encoding=encoding,
        recursive=bool(opts.recursive) if opts.recursive is not None else defaults.recursive,
        match=_compile(opts.match) if opts.match is not None else defaults.match,
        exclude=_compile(opts.exclude) if opts.exclude is not None else defaults.exclude,
        root_dir=opts.root_dir if opts.root_dir is not None else defaults.root_dir,
        absolute=bool(opts.absolute) if opts.absolute is not None else defaults.absolute,
        basename=bool(opts.basename) if opts.basename is not None else defaults.basename,
    )
