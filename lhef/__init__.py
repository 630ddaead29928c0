"""lhef: streaming reader and writer for Les Houches Event Files."""

from __future__ import annotations

__version__ = "0.6.0"

from .models import Event, HEPEUP, HEPRUP, LHEFile, RunInfo, XmlElement
from .io import Reader, Writer, WriterState, open_reader, open_writer
from .convert import copy, info, iter_events, read, write
from .errors import LHEFError, ParseError, WriteError
from .status import (
    INCOMING,
    INCOMING_BEAM,
    INTERMEDIATE_DOC,
    INTERMEDIATE_RESONANCE,
    INTERMEDIATE_SPACELIKE,
    OUTGOING,
)

__all__ = [
    "__version__",
    "Reader",
    "Writer",
    "WriterState",
    "open_reader",
    "open_writer",
    "read",
    "write",
    "copy",
    "info",
    "iter_events",
    "LHEFile",
    "RunInfo",
    "Event",
    "HEPRUP",
    "HEPEUP",
    "XmlElement",
    "LHEFError",
    "ParseError",
    "WriteError",
    "INCOMING",
    "OUTGOING",
    "INTERMEDIATE_SPACELIKE",
    "INTERMEDIATE_RESONANCE",
    "INTERMEDIATE_DOC",
    "INCOMING_BEAM",
]
