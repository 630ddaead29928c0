"""Streaming LHEF reader.

Construction consumes everything up to and including ``</init>``; events are
then pulled one at a time with :meth:`Reader.hepeup` or by iterating::

    with open("events.lhe") as f:
        reader = Reader(f)
        print(reader.version, reader.heprup().XSECUP)
        for event in reader:
            ...
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import IO, Iterator, Optional

from ..errors import (
    BadEventStart,
    BadFirstLine,
    BadHeaderStart,
    BadXmlTag,
    ConversionError,
    EndOfFile,
    MissingVersion,
    ParseError,
    UnsupportedVersion,
)
from ..models import Event, RunInfo, XmlElement
from ..records import EVENT_LINE, INIT_LINE, PARTICLE_LINE, SUBPROCESS_LINE, parse_record
from ..syntax import (
    COMMENT_END,
    COMMENT_START,
    EVENT_END,
    EVENT_START,
    HEADER_END,
    HEADER_START,
    INIT_END,
    INIT_START,
    LHEF_LAST_LINE,
    LHEF_TAG,
    SUPPORTED_VERSIONS,
    opens_tag,
    parse_attributes,
)
from ..xmltree import parse_xml

logger = logging.getLogger(__name__)


class _LineSource:
    """Line-by-line access to a text or binary stream, counting lines."""

    def __init__(self, stream: IO):
        self.stream = stream
        self.line_number = 0

    def readline(self) -> str:
        """Next line including its newline; ``""`` at end of stream."""
        line = self.stream.readline()
        if isinstance(line, bytes):
            line = line.decode("utf-8", "replace")
        if line:
            self.line_number += 1
        return line

    def read_block(self, end_tag: str, block: str) -> list[str]:
        """Lines up to, not including, the line whose stripped text is ``end_tag``."""
        lines = []
        while True:
            line = self.readline()
            if not line:
                raise EndOfFile(block)
            if line.strip() == end_tag:
                return lines
            lines.append(line)


@contextmanager
def _located(source: _LineSource):
    """Attach the current line number to parse errors raised in the block."""
    try:
        yield
    except ParseError as e:
        if e.line is None:
            e.line = source.line_number
        raise


def _remove_last_newline(text: str) -> str:
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


def parse_version(source: _LineSource) -> str:
    first_line = source.readline()
    tag = first_line.strip()
    if not opens_tag(tag, LHEF_TAG) or not tag.endswith(">"):
        raise BadFirstLine(first_line)
    try:
        attr = parse_attributes(tag)
    except BadXmlTag:
        raise BadFirstLine(first_line) from None
    version = attr.get("version")
    if version is None:
        raise MissingVersion()
    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersion(version)
    return version


def parse_header(source: _LineSource) -> tuple[str, Optional[XmlElement], str]:
    """Read comment and ``<header>`` blocks up to the ``<init`` line.

    Returns the comment text, the parsed header tree (or ``None``) and the
    ``<init ...>`` opening line.
    """
    comments: list[str] = []
    xml_header = None
    while True:
        line = source.readline()
        if not line:
            raise EndOfFile("header")
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(COMMENT_START):
            if stripped != COMMENT_START:
                raise BadHeaderStart(line)
            body = source.read_block(COMMENT_END, "header")
            comments.append(_remove_last_newline("".join(body)))
            logger.debug("comment block with %d lines", len(body))
        elif opens_tag(line, HEADER_START):
            text = [line]
            if not stripped.endswith(HEADER_END):
                text.extend(_read_xml_header(source))
            xml_header = parse_xml("".join(text))
            logger.debug("xml header with %d children", len(xml_header.children))
        elif opens_tag(line, INIT_START):
            return "\n".join(comments), xml_header, line
        else:
            raise BadHeaderStart(line)


def _read_xml_header(source: _LineSource) -> list[str]:
    lines = []
    while True:
        line = source.readline()
        if not line:
            raise EndOfFile("header")
        lines.append(line)
        if line.strip().endswith(HEADER_END):
            return lines


def parse_init(init_open: str, source: _LineSource) -> RunInfo:
    fields = parse_record(INIT_LINE, source.readline())
    n = fields["NPRUP"]
    if n < 0:
        raise ConversionError("NPRUP", str(n))
    subprocesses = [parse_record(SUBPROCESS_LINE, source.readline(), row=i) for i in range(n)]
    info = "".join(source.read_block(INIT_END, "init"))
    attr = parse_attributes(init_open)
    return RunInfo(
        XSECUP=[s["XSECUP"] for s in subprocesses],
        XERRUP=[s["XERRUP"] for s in subprocesses],
        XMAXUP=[s["XMAXUP"] for s in subprocesses],
        LPRUP=[s["LPRUP"] for s in subprocesses],
        info=info,
        attr=attr,
        **fields,
    )


def parse_event(event_open: str, source: _LineSource) -> Event:
    fields = parse_record(EVENT_LINE, source.readline())
    n = fields["NUP"]
    if n < 0:
        raise ConversionError("NUP", str(n))
    particles = [parse_record(PARTICLE_LINE, source.readline(), row=i) for i in range(n)]
    info = "".join(source.read_block(EVENT_END, "event"))
    attr = parse_attributes(event_open)
    return Event(
        IDUP=[p["IDUP"] for p in particles],
        ISTUP=[p["ISTUP"] for p in particles],
        MOTHUP=[p["MOTHUP"] for p in particles],
        ICOLUP=[p["ICOLUP"] for p in particles],
        PUP=[p["PUP"] for p in particles],
        VTIMUP=[p["VTIMUP"] for p in particles],
        SPINUP=[p["SPINUP"] for p in particles],
        info=info,
        attr=attr,
        **fields,
    )


class Reader:
    """Reader for the LHEF format.

    ``stream`` is anything with a ``readline()`` method returning ``str`` or
    UTF-8 encoded ``bytes``. The reader takes over the stream: nothing else
    should read from it while the reader is in use.

    Raises a :class:`~lhef.errors.ParseError` subclass if the file does not
    start with a valid version line, header and ``<init>`` block.
    """

    def __init__(self, stream: IO, *, close_stream: bool = False):
        self._stream = stream
        self._close_stream = close_stream
        self._source = _LineSource(stream)
        self._exhausted = False
        self._n_events = 0
        with _located(self._source):
            self._version = parse_version(self._source)
            logger.debug("LHEF version %s", self._version)
            self._header, self._xml_header, init_open = parse_header(self._source)
            self._heprup = parse_init(init_open, self._source)
        logger.debug("run info with %d subprocesses", self._heprup.NPRUP)

    @property
    def version(self) -> str:
        return self._version

    @property
    def header(self) -> str:
        """Text of the comment header, empty if the file has none."""
        return self._header

    @property
    def xml_header(self) -> Optional[XmlElement]:
        return self._xml_header

    @property
    def line_number(self) -> int:
        """Number of lines consumed so far."""
        return self._source.line_number

    def heprup(self) -> RunInfo:
        """Run information from the ``<init>`` block."""
        return self._heprup

    def hepeup(self) -> Optional[Event]:
        """Next event, or ``None`` once ``</LesHouchesEvents>`` was reached.

        After the closing tag every call returns ``None`` without touching
        the stream.
        """
        if self._exhausted:
            return None
        with _located(self._source):
            while True:
                line = self._source.readline()
                if not line:
                    raise EndOfFile("LesHouchesEvents")
                if line.strip():
                    break
            if opens_tag(line, EVENT_START):
                event = parse_event(line, self._source)
                self._n_events += 1
                return event
            if line.strip() == LHEF_LAST_LINE:
                self._exhausted = True
                logger.debug("end of event file after %d events", self._n_events)
                return None
            raise BadEventStart(line)

    # block names without the Fortran common block spelling
    run_info = heprup
    event = hepeup

    def __iter__(self) -> Iterator[Event]:
        while True:
            event = self.hepeup()
            if event is None:
                return
            yield event

    def close(self) -> None:
        if self._close_stream:
            self._stream.close()

    def __enter__(self) -> Reader:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
