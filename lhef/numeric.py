"""Conversion of record tokens to numbers and back.

Integers are Fortran ``INTEGER`` (32 bit) in the LHEF standard, floats are
``DOUBLE PRECISION``. Floats are written in the shortest form that parses
back to the same value, so a read/write cycle is lossless.
"""

from __future__ import annotations

import math
from typing import Optional

from .errors import ConversionError, MissingEntry

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

_INT_CHARS = frozenset("+-0123456789")
_FLOAT_WORDS = frozenset({"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity", "nan", "+nan", "-nan"})
_FLOAT_CHARS = frozenset("+-.0123456789eE")


def parse_int(field: str, token: Optional[str]) -> int:
    """Parse a 32-bit integer field.

    ``field`` names the record entry (e.g. ``"IDUP(3)"``) and is used in the
    error when the token is missing or not a number.
    """
    if token is None:
        raise MissingEntry(field)
    if not token or not _INT_CHARS.issuperset(token):
        raise ConversionError(field, token)
    try:
        value = int(token)
    except ValueError:
        raise ConversionError(field, token) from None
    if not INT_MIN <= value <= INT_MAX:
        raise ConversionError(field, token)
    return value


def parse_float(field: str, token: Optional[str]) -> float:
    """Parse a double precision field.

    Plain decimal and exponent notation are accepted, as well as ``inf`` and
    ``nan``. Python-only spellings such as ``1_000`` are rejected.
    """
    if token is None:
        raise MissingEntry(field)
    if token.lower() not in _FLOAT_WORDS and (not token or not _FLOAT_CHARS.issuperset(token)):
        raise ConversionError(field, token)
    try:
        return float(token)
    except ValueError:
        raise ConversionError(field, token) from None


def format_int(value: int) -> str:
    return str(int(value))


def format_float(value: float) -> str:
    """Shortest representation of ``value`` that round-trips exactly."""
    value = float(value)
    if math.isnan(value):
        return "nan"
    return repr(value)
