"""
Listing defaults kept in TOML.

A config file is `.lsfnd.toml`, `lsfnd.toml`, or a `pyproject.toml` with a
`[tool.lsfnd]` table. Its keys are the listing options (snake or kebab case).
Everything is checked when the file is loaded: value types, `match` and
`exclude` are compiled, the encoding is looked up, and a relative plain-path
`root-dir` is anchored at the directory holding the file. Listing functions
never read config on their own; callers opt in with `merge_options()`.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from lsfnd.encoding import normalize_encoding
from lsfnd.exceptions import ConfigError, InvalidEncodingError
from lsfnd.options import OptionsInput, as_listing_options
from lsfnd.paths import is_url_like
from lsfnd.types import ListingOptions

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)

# Per directory, the first of these that carries lsfnd settings wins.
CONFIG_FILENAMES = (".lsfnd.toml", "lsfnd.toml", "pyproject.toml")

_BOOL_KEYS = frozenset({"recursive", "absolute", "basename"})
_PATTERN_KEYS = frozenset({"match", "exclude"})


@dataclass(frozen=True)
class LsfndConfig:
    """
    Validated settings from one config file. `None` marks an option the file
    does not set, so explicit options and built-in defaults can fill it.
    """

    encoding: str | None = None
    recursive: bool | None = None
    match: re.Pattern[str] | None = None
    exclude: re.Pattern[str] | None = None
    root_dir: str | None = None
    absolute: bool | None = None
    basename: bool | None = None
    source: Path | None = None


_OPTION_NAMES = frozenset(f.name for f in fields(LsfndConfig)) - {"source"}


def _lsfnd_table(path: Path) -> dict[str, Any] | None:
    """The lsfnd settings of `path`, or `None` if it has none. Raises `ConfigError` on bad TOML."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: not valid TOML: {e}") from e
    if path.name != "pyproject.toml":
        return data
    table = data.get("tool", {}).get("lsfnd")
    return table if isinstance(table, dict) else None


def find_config_file(start_dir: Path) -> Path | None:
    """
    Return the nearest config file at or above `start_dir`, or `None`.
    A `pyproject.toml` only counts if it parses and has a `[tool.lsfnd]` table.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if filename == "pyproject.toml":
                try:
                    if _lsfnd_table(candidate) is None:
                        continue
                except (ConfigError, OSError):
                    logger.debug("Skipping unreadable %s", candidate)
                    continue
            logger.debug("Found config %s", candidate)
            return candidate
    return None


def _option_name(key: str, path: Path) -> str:
    name = "root_dir" if key == "rootDir" else key.replace("-", "_")
    if name not in _OPTION_NAMES:
        raise ConfigError(f"{path}: unknown option {key!r}")
    return name


def _check_value(name: str, value: Any, path: Path) -> Any:
    if name in _BOOL_KEYS:
        if not isinstance(value, bool):
            raise ConfigError(f"{path}: {name} must be true or false, got {value!r}")
        return value
    if not isinstance(value, str):
        raise ConfigError(f"{path}: {name} must be a string, got {value!r}")
    if name in _PATTERN_KEYS:
        try:
            return re.compile(value)
        except re.error as e:
            raise ConfigError(f"{path}: {name} is not a valid pattern: {e}") from e
    if name == "encoding":
        try:
            normalize_encoding(value)
        except InvalidEncodingError as e:
            raise ConfigError(f"{path}: {e}") from e
        return value
    # root_dir: plain relative paths are relative to the config file.
    if is_url_like(value) or os.path.isabs(value):
        return value
    return os.path.normpath(os.path.join(path.parent.resolve(), value))


def load_config(config_path: Path) -> LsfndConfig:
    """
    Load and validate the lsfnd settings of `config_path`. Raises `ConfigError`
    for invalid TOML, unknown keys, nested tables and ill-typed values.
    """
    table = _lsfnd_table(config_path) or {}
    values: dict[str, Any] = {}
    for key, value in table.items():
        if isinstance(value, dict):
            raise ConfigError(f"{config_path}: unexpected table [{key}]")
        name = _option_name(key, config_path)
        values[name] = _check_value(name, value, config_path)
    return LsfndConfig(source=config_path, **values)


def merge_options(options: OptionsInput, config: LsfndConfig | None) -> ListingOptions:
    """
    Fill the options a caller left unset from `config`.

    Precedence: explicit option > config file > built-in defaults. A bare
    pattern passed as `options` counts as an explicit `match`.
    """
    explicit = as_listing_options(options)
    if config is None:
        return explicit
    values: dict[str, Any] = {}
    for name in sorted(_OPTION_NAMES):
        value = getattr(explicit, name)
        values[name] = value if value is not None else getattr(config, name)
    return ListingOptions(**values)
