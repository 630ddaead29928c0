"""Streaming LHEF writer.

The writer enforces the order of the blocks in the file::

    with Writer(out, "3.0") as writer:
        writer.header("generated by ...")      # optional
        writer.xml_header(tree)                # optional
        writer.heprup(run_info)
        for event in events:
            writer.hepeup(event)
        writer.finish()

Leaving the ``with`` block, :meth:`Writer.close` and garbage collection all
write the closing ``</LesHouchesEvents>`` tag if the caller did not call
:meth:`Writer.finish`, so an abandoned writer still leaves a well-formed file.
"""

from __future__ import annotations

import enum
import io
import logging
from typing import IO

from ..errors import (
    BadState,
    MismatchedParticles,
    MismatchedSubprocesses,
    UnsupportedVersion,
    WriteToFailed,
)
from ..models import Event, RunInfo, XmlElement
from ..records import (
    EVENT_LINE,
    INIT_LINE,
    PARTICLE_FIELDS,
    PARTICLE_LINE,
    SUBPROCESS_FIELDS,
    SUBPROCESS_LINE,
    check_width,
    format_record,
    validate_record,
)
from ..syntax import (
    COMMENT_END,
    COMMENT_START,
    EVENT_END,
    EVENT_START,
    INIT_END,
    INIT_START,
    LHEF_LAST_LINE,
    LHEF_TAG_OPEN,
    SUPPORTED_VERSIONS,
    format_attributes,
)
from ..xmltree import header_to_string

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "3.0"


class WriterState(enum.Enum):
    # next block is a header or the init block
    EXPECTING_HEADER_OR_INIT = "expecting header or init"
    # next block is an event, or the file is closed
    EXPECTING_EVENT_OR_FINISH = "expecting event or finish"
    # closing tag written, nothing more may follow
    FINISHED = "finished"
    # a write to the stream failed, output may be broken
    FAILED = "failed"


def _info_block(info: str) -> str:
    if not info or info.endswith("\n"):
        return info
    return info + "\n"


def _check_run_info(run: RunInfo) -> None:
    n = run.NPRUP
    for name in SUBPROCESS_FIELDS:
        if len(getattr(run, name)) != n:
            raise MismatchedSubprocesses(f"NPRUP={n}, len({name})={len(getattr(run, name))}")
    for spec in INIT_LINE:
        if spec.width and not check_width(spec, getattr(run, spec.name)):
            raise MismatchedSubprocesses(f"{spec.name} needs {spec.width} entries")
    validate_record(INIT_LINE, vars(run))
    for i, entries in enumerate(run.subprocesses()):
        validate_record(SUBPROCESS_LINE, dict(zip(SUBPROCESS_FIELDS, entries)), row=i)


def _check_event(event: Event) -> None:
    n = event.NUP
    for name in PARTICLE_FIELDS:
        if len(getattr(event, name)) != n:
            raise MismatchedParticles(f"NUP={n}, len({name})={len(getattr(event, name))}")
    for spec in PARTICLE_LINE:
        if not spec.width:
            continue
        for i, entry in enumerate(getattr(event, spec.name)):
            if not check_width(spec, entry):
                raise MismatchedParticles(f"{spec.name}({i + 1}) needs {spec.width} entries")
    validate_record(EVENT_LINE, vars(event))
    for i, entries in enumerate(event.particles()):
        validate_record(PARTICLE_LINE, dict(zip(PARTICLE_FIELDS, entries)), row=i)


def format_run_info(run: RunInfo) -> str:
    """The complete ``<init>`` block of ``run``."""
    out = [INIT_START, format_attributes(run.attr), ">\n"]
    out.append(format_record(INIT_LINE, vars(run)))
    out.append("\n")
    for entries in run.subprocesses():
        out.append(format_record(SUBPROCESS_LINE, dict(zip(SUBPROCESS_FIELDS, entries))))
        out.append("\n")
    out.append(_info_block(run.info))
    out.append(INIT_END + "\n")
    return "".join(out)


def format_event(event: Event) -> str:
    """The complete ``<event>`` block of ``event``."""
    out = [EVENT_START, format_attributes(event.attr), ">\n"]
    out.append(format_record(EVENT_LINE, vars(event)))
    out.append("\n")
    for entries in event.particles():
        out.append(format_record(PARTICLE_LINE, dict(zip(PARTICLE_FIELDS, entries))))
        out.append("\n")
    out.append(_info_block(event.info))
    out.append(EVENT_END + "\n")
    return "".join(out)


def _is_binary(stream: IO) -> bool:
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode = getattr(stream, "mode", "")
    return isinstance(mode, str) and "b" in mode


class Writer:
    """Writer for the LHEF format.

    ``stream`` is a text stream, or a binary stream that receives UTF-8. The
    version tag is written immediately.

    Calls out of order raise :class:`~lhef.errors.BadState` without writing.
    Once a write to the stream has raised ``OSError`` the writer is in the
    ``FAILED`` state for good: later calls still write their output but then
    raise :class:`~lhef.errors.WriteToFailed`.
    """

    def __init__(self, stream: IO, version: str = DEFAULT_VERSION, *, close_stream: bool = False):
        if version not in SUPPORTED_VERSIONS:
            raise UnsupportedVersion(version)
        self._stream = stream
        self._binary = _is_binary(stream)
        self._close_stream = close_stream
        self._state = WriterState.EXPECTING_HEADER_OR_INIT
        self._n_events = 0
        self._emit(f'{LHEF_TAG_OPEN}"{version}">\n')

    @property
    def state(self) -> WriterState:
        return self._state

    @property
    def n_events(self) -> int:
        """Number of events written so far."""
        return self._n_events

    def _emit(self, output: str) -> None:
        data = output.encode("utf-8") if self._binary else output
        self._stream.write(data)

    def _assert_state(self, expected: WriterState, attempt: str) -> None:
        if self._state is not expected and self._state is not WriterState.FAILED:
            raise BadState(self._state, attempt)

    def _write(self, output: str) -> None:
        try:
            self._emit(output)
        except (OSError, ValueError):
            # ValueError: write to a closed stream
            self._state = WriterState.FAILED
            raise
        if self._state is WriterState.FAILED:
            raise WriteToFailed()

    def header(self, header: str) -> None:
        """Write a comment header ``<!-- ... -->``."""
        self._assert_state(WriterState.EXPECTING_HEADER_OR_INIT, "header")
        self._write(f"{COMMENT_START}\n{header}\n{COMMENT_END}\n")

    def xml_header(self, header: XmlElement) -> None:
        """Write a structured ``<header>`` block.

        If the root element is not called ``header``, a ``<header>`` element
        is wrapped around it. Line breaks may be added so that the header tags
        sit on lines of their own.
        """
        self._assert_state(WriterState.EXPECTING_HEADER_OR_INIT, "xml header")
        self._write(header_to_string(header))

    def heprup(self, run_info: RunInfo) -> None:
        """Write the run information ``<init>`` block."""
        self._assert_state(WriterState.EXPECTING_HEADER_OR_INIT, "init")
        _check_run_info(run_info)
        self._write(format_run_info(run_info))
        self._state = WriterState.EXPECTING_EVENT_OR_FINISH

    def hepeup(self, event: Event) -> None:
        """Write one ``<event>`` block."""
        self._assert_state(WriterState.EXPECTING_EVENT_OR_FINISH, "event")
        _check_event(event)
        self._write(format_event(event))
        self._n_events += 1

    # block names without the Fortran common block spelling
    run_info = heprup
    event = hepeup

    def finish(self) -> None:
        """Write the closing ``</LesHouchesEvents>`` tag."""
        self._assert_state(WriterState.EXPECTING_EVENT_OR_FINISH, "finish")
        self._write(LHEF_LAST_LINE + "\n")
        self._state = WriterState.FINISHED
        logger.debug("finished event file with %d events", self._n_events)

    def _finish_quietly(self) -> None:
        if self._state is not WriterState.EXPECTING_EVENT_OR_FINISH:
            return
        try:
            self.finish()
        except Exception as e:
            logger.warning("could not close event file: %s", e)

    def close(self) -> None:
        """Finish the file if needed, flush, and close an owned stream.

        Errors of the implicit finish are logged, not raised.
        """
        self._finish_quietly()
        if self._state is WriterState.FAILED:
            logger.warning("event file written by a failed writer may be incomplete")
        flush = getattr(self._stream, "flush", None)
        if flush is not None and not getattr(self._stream, "closed", False):
            try:
                flush()
            except OSError:
                if self._state is not WriterState.FAILED:
                    raise
        if self._close_stream:
            self._stream.close()

    def __enter__(self) -> Writer:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def __del__(self):
        # partially constructed writers have no state
        if getattr(self, "_state", None) is WriterState.EXPECTING_EVENT_OR_FINISH:
            self._finish_quietly()
