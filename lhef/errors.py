"""
Exception hierarchy for lhef.

Every exception raised by the reader or writer derives from :class:`LHEFError`,
so a single ``except LHEFError`` catches any format problem. Failures of the
underlying stream are not wrapped: they surface as the built-in ``OSError``
(``ValueError`` when writing to a closed stream).

::

    LHEFError
    ├── ParseError
    │   ├── BadFirstLine
    │   ├── UnsupportedVersion
    │   ├── MissingVersion
    │   ├── BadHeaderStart
    │   ├── BadXmlTag
    │   ├── BadXmlHeader
    │   ├── BadEventStart
    │   ├── MissingEntry
    │   ├── ConversionError
    │   └── EndOfFile
    └── WriteError
        ├── MismatchedSubprocesses
        ├── MismatchedParticles
        ├── InvalidAttribute
        ├── InvalidValue
        ├── BadState
        └── WriteToFailed
"""

from __future__ import annotations

from typing import Optional


class LHEFError(Exception):
    """Base class for all lhef errors."""


class ParseError(LHEFError):
    """Input does not follow the LHEF grammar.

    ``line`` is the 1-based number of the input line being processed when the
    error was detected, or ``None`` if unknown (e.g. when a grammar helper is
    called directly on a string).
    """

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


class BadFirstLine(ParseError):
    def __init__(self, first_line: str):
        super().__init__(
            f"First line {first_line.rstrip()!r} in input does not start with '<LesHouchesEvents version='"
        )
        self.first_line = first_line


class UnsupportedVersion(ParseError):
    def __init__(self, version: str):
        super().__init__(f"Unsupported version {version}, only 1.0, 2.0, 3.0 are supported")
        self.version = version


class MissingVersion(ParseError):
    def __init__(self):
        super().__init__("Version information missing")


class BadHeaderStart(ParseError):
    def __init__(self, text: str):
        super().__init__(
            f"Encountered unrecognized line {text.rstrip()!r}, expected a header starting with "
            "'<!--', '<header', or the init block starting with '<init'"
        )
        self.text = text


class BadXmlTag(ParseError):
    def __init__(self, tag: str):
        super().__init__(f"Encountered malformed xml tag: {tag.rstrip()!r}")
        self.tag = tag


class BadXmlHeader(ParseError):
    """The structured ``<header>`` block is not well-formed XML."""

    def __init__(self, reason: str):
        super().__init__(f"Failed to parse xml header: {reason}")
        self.reason = reason


class BadEventStart(ParseError):
    def __init__(self, text: str):
        super().__init__(
            f"Encountered unrecognized line {text.rstrip()!r}, expected an event starting with '<event'"
        )
        self.text = text


class MissingEntry(ParseError):
    def __init__(self, field: str):
        super().__init__(f"Missing entry '{field}'")
        self.field = field


class ConversionError(ParseError):
    def __init__(self, field: str, token: str):
        super().__init__(f"Failed to convert '{field}' to number: {token!r}")
        self.field = field
        self.token = token


class EndOfFile(ParseError):
    def __init__(self, block: str):
        super().__init__(f"Encountered '{block}' block without closing tag")
        self.block = block


class WriteError(LHEFError):
    """The writer refused or could not complete an operation."""


class MismatchedSubprocesses(WriteError):
    def __init__(self, detail: str = ""):
        msg = "Mismatch between NPRUP and length of at least one of XSECUP, XERRUP, XMAXUP, LPRUP."
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class MismatchedParticles(WriteError):
    def __init__(self, detail: str = ""):
        msg = "Mismatch between NUP and length of at least one of IDUP, ISTUP, MOTHUP, ICOLUP, PUP, VTIMUP, SPINUP."
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class InvalidAttribute(WriteError):
    def __init__(self, name: str, value: str):
        super().__init__(f"Cannot write xml attribute {name!r}={value!r}")
        self.name = name
        self.value = value


class InvalidValue(WriteError):
    """A record field holds a value that cannot be written as its LHEF type."""

    def __init__(self, field: str, value):
        super().__init__(f"Cannot write {value!r} as '{field}'")
        self.field = field
        self.value = value


class BadState(WriteError):
    def __init__(self, state, attempt: str):
        super().__init__(f"Writer is in state '{state.value}', cannot write '{attempt}'.")
        self.state = state
        self.attempt = attempt


class WriteToFailed(WriteError):
    def __init__(self):
        super().__init__(
            "Writer is in 'failed' state. Output was written, but the file may be broken anyway."
        )
