"""Positional schema of the numeric record lines.

Each record line is a whitespace separated list of numbers. A schema is an
ordered tuple of :class:`FieldSpec`; a field either holds one number
(``width == 0``) or a fixed-size array spread over ``width`` consecutive
tokens. Field labels in error messages follow the Fortran common block
notation of the LHEF paper (hep-ph/0109068): ``IDWTUP``, ``EBMUP(2)``,
``XSECUP(3)`` and ``PUP(3, 4)`` for the fourth momentum component of the
third particle.
"""

from __future__ import annotations

import numbers
from typing import Any, Iterator, NamedTuple, Optional

from .errors import InvalidValue
from .numeric import INT_MAX, INT_MIN, format_float, format_int, parse_float, parse_int


class FieldSpec(NamedTuple):
    name: str
    kind: type
    width: int = 0


# <init> first line
INIT_LINE = (
    FieldSpec("IDBMUP", int, 2),
    FieldSpec("EBMUP", float, 2),
    FieldSpec("PDFGUP", int, 2),
    FieldSpec("PDFSUP", int, 2),
    FieldSpec("IDWTUP", int),
    FieldSpec("NPRUP", int),
)

# one line per subprocess, NPRUP lines
SUBPROCESS_LINE = (
    FieldSpec("XSECUP", float),
    FieldSpec("XERRUP", float),
    FieldSpec("XMAXUP", float),
    FieldSpec("LPRUP", int),
)

# <event> first line
EVENT_LINE = (
    FieldSpec("NUP", int),
    FieldSpec("IDRUP", int),
    FieldSpec("XWGTUP", float),
    FieldSpec("SCALUP", float),
    FieldSpec("AQEDUP", float),
    FieldSpec("AQCDUP", float),
)

# one line per particle, NUP lines
PARTICLE_LINE = (
    FieldSpec("IDUP", int),
    FieldSpec("ISTUP", int),
    FieldSpec("MOTHUP", int, 2),
    FieldSpec("ICOLUP", int, 2),
    FieldSpec("PUP", float, 5),
    FieldSpec("VTIMUP", float),
    FieldSpec("SPINUP", float),
)

SUBPROCESS_FIELDS = tuple(f.name for f in SUBPROCESS_LINE)
PARTICLE_FIELDS = tuple(f.name for f in PARTICLE_LINE)


def field_label(spec: FieldSpec, row: Optional[int] = None, col: Optional[int] = None) -> str:
    """Name of one entry, 1-based like the Fortran arrays."""
    idx = [str(i + 1) for i in (row, col) if i is not None]
    if not idx:
        return spec.name
    return f"{spec.name}({', '.join(idx)})"


def _parse_one(spec: FieldSpec, label: str, tokens: Iterator[str]):
    token = next(tokens, None)
    if spec.kind is int:
        return parse_int(label, token)
    return parse_float(label, token)


def parse_record(schema: tuple[FieldSpec, ...], line: str, row: Optional[int] = None) -> dict[str, Any]:
    """Parse one record line according to ``schema``.

    ``row`` is the 0-based index of the line within a repeated section
    (subprocess or particle lines) and only affects error labels. Tokens
    beyond the schema are ignored.
    """
    tokens = iter(line.split())
    values: dict[str, Any] = {}
    for spec in schema:
        if spec.width == 0:
            values[spec.name] = _parse_one(spec, field_label(spec, row), tokens)
        else:
            values[spec.name] = tuple(
                _parse_one(spec, field_label(spec, row, col), tokens) for col in range(spec.width)
            )
    return values


def _format_value(kind: type, value) -> str:
    if kind is int:
        return format_int(value)
    return format_float(value)


def format_record(schema: tuple[FieldSpec, ...], values: dict[str, Any]) -> str:
    """Render one record line (without the trailing newline)."""
    out = []
    for spec in schema:
        value = values[spec.name]
        if spec.width == 0:
            out.append(_format_value(spec.kind, value))
        else:
            out.extend(_format_value(spec.kind, v) for v in value)
    return " ".join(out)


def check_width(spec: FieldSpec, value) -> bool:
    """True if a fixed-size array field holds exactly ``spec.width`` entries."""
    try:
        return len(value) == spec.width
    except TypeError:
        return False


def _valid_value(kind: type, value) -> bool:
    if isinstance(value, bool):
        return False
    if kind is int:
        return isinstance(value, numbers.Integral) and INT_MIN <= value <= INT_MAX
    return isinstance(value, numbers.Real)


def validate_record(schema: tuple[FieldSpec, ...], values: dict[str, Any], row: Optional[int] = None) -> None:
    """Raise :class:`InvalidValue` for the first entry ``format_record`` cannot write faithfully.

    Integers must be integral and fit in 32 bits; floats must be real numbers.
    Fixed-size array fields are expected to have the right width already.
    """
    for spec in schema:
        value = values[spec.name]
        if spec.width == 0:
            if not _valid_value(spec.kind, value):
                raise InvalidValue(field_label(spec, row), value)
            continue
        for col, v in enumerate(value):
            if not _valid_value(spec.kind, v):
                raise InvalidValue(field_label(spec, row, col), v)
