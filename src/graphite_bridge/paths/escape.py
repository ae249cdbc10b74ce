"""
Label value escaping for graphite paths.

Every byte of the UTF-8 encoded value has exactly one disposition:

- printable ASCII that is not structural is copied verbatim
- ``. / = %`` are percent-encoded (path separators, tag delimiters, escape char)
- ``( ) { } , ' " \\`` are backslash-escaped (structural in tagged formats)
- anything else (controls, space, DEL, UTF-8 continuation bytes) is percent-encoded

Percent encodings always use two uppercase hex digits, e.g. ``ö`` -> ``%C3%B6``.
"""

from __future__ import annotations

import string
from enum import Enum

from graphite_bridge.core.errors import FormatError


class ByteDisposition(Enum):
    """How a single byte is written into a path segment."""

    VERBATIM = "verbatim"
    PERCENT = "percent"
    BACKSLASH = "backslash"


PERCENT_ENCODED = b"./=%"
BACKSLASH_ESCAPED = b"(){},'\"\\"
PRINTABLE = (string.digits + string.ascii_letters + string.punctuation).encode("ascii")


def _build_table() -> tuple[ByteDisposition, ...]:
    table = []
    for byte in range(256):
        if byte in PERCENT_ENCODED:
            table.append(ByteDisposition.PERCENT)
        elif byte in BACKSLASH_ESCAPED:
            table.append(ByteDisposition.BACKSLASH)
        elif byte in PRINTABLE:
            table.append(ByteDisposition.VERBATIM)
        else:
            table.append(ByteDisposition.PERCENT)
    return tuple(table)


DISPOSITIONS = _build_table()


def _encode_byte(byte: int, disposition: ByteDisposition) -> str:
    if disposition is ByteDisposition.VERBATIM:
        return chr(byte)
    if disposition is ByteDisposition.BACKSLASH:
        return "\\" + chr(byte)
    return f"%{byte:02X}"


_ENCODED = tuple(_encode_byte(byte, disposition) for byte, disposition in enumerate(DISPOSITIONS))

_HEX_DIGITS = frozenset(string.hexdigits)


def escape(value: str) -> str:
    """Encode a label value (or metric name) for embedding in a path segment."""
    return "".join(_ENCODED[byte] for byte in value.encode("utf-8"))


def escape_for_template(value: object) -> str:
    """
    Escape helper exposed to rule templates as ``escape``.

    Non-string values (numbers from template data) are stringified first.
    """
    return escape(str(value))


def unescape(value: str) -> str:
    """
    Decode a path segment produced by :func:`escape`.

    Raises:
        FormatError: On truncated or non-hex percent sequences, a dangling
            backslash, or a byte sequence that is not valid UTF-8
    """
    decoded = bytearray()
    i = 0
    length = len(value)
    while i < length:
        char = value[i]
        if char == "%":
            digits = value[i + 1 : i + 3]
            if len(digits) != 2 or not all(d in _HEX_DIGITS for d in digits):
                raise FormatError(
                    "Malformed percent escape",
                    details={"segment": value, "position": i},
                )
            decoded.append(int(digits, 16))
            i += 3
        elif char == "\\":
            if i + 1 >= length:
                raise FormatError(
                    "Dangling backslash escape",
                    details={"segment": value, "position": i},
                )
            decoded.extend(value[i + 1].encode("utf-8"))
            i += 2
        else:
            decoded.extend(char.encode("utf-8"))
            i += 1

    try:
        return decoded.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError(
            "Escaped segment is not valid UTF-8",
            details={"segment": value, "reason": e.reason},
        ) from e
