"""
Default listing options.

`DEFAULT_OPTIONS.root_dir` reads the working directory each time it is
accessed, so relative output follows `os.chdir()` between calls.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

CANONICAL_ENCODING = "utf8"

# Any non-empty path matches.
MATCH_ALL: re.Pattern[str] = re.compile(r".+")


@dataclass(frozen=True)
class DefaultOptions:
    """Read-only snapshot of the default value of every listing option."""

    encoding: str = CANONICAL_ENCODING
    recursive: bool = False
    match: re.Pattern[str] = MATCH_ALL
    exclude: re.Pattern[str] | None = None
    absolute: bool = False
    basename: bool = False

    @property
    def root_dir(self) -> str:
        return os.getcwd()


DEFAULT_OPTIONS = DefaultOptions()
