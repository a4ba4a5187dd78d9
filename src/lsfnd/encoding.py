"""
Conversion of result strings between text encodings.

Paths are probed in the canonical `utf8` form. A result string is moved to
another encoding by taking its bytes in the source encoding and rendering
those bytes in the target encoding, so `hex` turns `"a"` into `"61"` and
`latin1` turns `"é"` into `"Ã©"`. Undecodable filename bytes survive the
trip through surrogate escapes.
"""

from __future__ import annotations

import base64
import binascii
import codecs
from collections.abc import Callable

from lsfnd.exceptions import InvalidEncodingError

# Node-style names that Python's codec registry does not know.
_ALIASES: dict[str, str] = {
    "binary": "latin-1",
    "ucs2": "utf-16-le",
    "ucs-2": "utf-16-le",
    "utf16le": "utf-16-le",
}


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


# Binary-to-text encodings: (bytes -> str, str -> bytes).
_BINARY_TEXT: dict[str, tuple[Callable[[bytes], str], Callable[[str], bytes]]] = {
    "hex": (bytes.hex, bytes.fromhex),
    "base64": (lambda data: base64.b64encode(data).decode("ascii"), base64.b64decode),
    "base64url": (_b64url_encode, _b64url_decode),
}

# Fixed-width codecs; a trailing partial code unit is dropped on decode.
_CODE_UNIT: dict[str, int] = {
    "utf-16": 2,
    "utf-16-le": 2,
    "utf-16-be": 2,
    "utf-32": 4,
    "utf-32-le": 4,
    "utf-32-be": 4,
}


def normalize_encoding(name: str) -> str:
    """
    Return the lookup key for an encoding name, or raise `InvalidEncodingError`.
    Binary-to-text names are kept as-is; text codecs map to Python's codec name.
    """
    if not isinstance(name, str) or not name:
        raise InvalidEncodingError(f"Unknown encoding: {name!r}")
    key = name.lower()
    if key in _BINARY_TEXT:
        return key
    try:
        codec = codecs.lookup(_ALIASES.get(key, key)).name
        # Rejects bytes-to-bytes and str-to-str codecs such as zlib and rot13.
        "".encode(codec)
        b"".decode(codec)
    except LookupError:
        raise InvalidEncodingError(f"Unknown encoding: {name!r}") from None
    return codec


def is_same_encoding(a: str, b: str) -> bool:
    return normalize_encoding(a) == normalize_encoding(b)


def to_bytes(value: str, encoding: str) -> bytes:
    key = normalize_encoding(encoding)
    if key in _BINARY_TEXT:
        try:
            return _BINARY_TEXT[key][1](value)
        except (ValueError, binascii.Error) as e:
            raise ValueError(f"Not valid {key} text: {value!r}") from e
    return value.encode(key, errors="surrogateescape")


def from_bytes(data: bytes, encoding: str) -> str:
    key = normalize_encoding(encoding)
    if key in _BINARY_TEXT:
        return _BINARY_TEXT[key][0](data)
    unit = _CODE_UNIT.get(key)
    if unit:
        data = data[: len(data) - len(data) % unit]
    try:
        return data.decode(key, errors="surrogateescape")
    except UnicodeDecodeError:
        # Only bytes >= 0x80 can be escaped; anything else becomes U+FFFD.
        return data.decode(key, errors="replace")


def encode_to(value: str, source: str, target: str) -> str:
    """Re-express `value`, a string in the `source` encoding, in the `target` encoding."""
    if is_same_encoding(source, target):
        return value
    return from_bytes(to_bytes(value, source), target)
