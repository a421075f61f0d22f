"""ASCII-only rendering of generated source text.

Characters outside the 7-bit range are written as ``\\uXXXX`` escapes, the
form every Java source reader decodes before tokenising. Code points above
the Basic Multilingual Plane become a UTF-16 surrogate pair of escapes so
each escape stays four hex digits wide.
"""

from __future__ import annotations

__all__ = ["encode"]

_ASCII_LIMIT = 128
_BMP_LIMIT = 0x10000


def _escape(ch: str) -> str:
    code = ord(ch)
    if code < _ASCII_LIMIT:
        return ch
    if code >= _BMP_LIMIT:
        high, low = divmod(code - _BMP_LIMIT, 0x400)
        return f"\\u{0xD800 + high:04x}\\u{0xDC00 + low:04x}"
    return f"\\u{code:04x}"


def encode(text: str) -> str:
    """Return ``text`` with every non-ASCII character escaped."""

    if text.isascii():
        return text
    return "".join(_escape(ch) for ch in text)
