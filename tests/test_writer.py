from __future__ import annotations

import io
import logging
import sys
from dataclasses import replace

import pytest

from lhef import Event, RunInfo, Writer, WriterState, XmlElement
from lhef.errors import (
    BadState,
    InvalidAttribute,
    InvalidValue,
    MismatchedParticles,
    MismatchedSubprocesses,
    UnsupportedVersion,
    WriteToFailed,
)

MINIMAL_OUTPUT = """<LesHouchesEvents version="3.0">
<init>
2212 2212 7000.0 7000.0 0 0 230000 230000 2 1
120588124.02 702517.48228 94290.49 1
</init>
</LesHouchesEvents>
"""


class FlakyStream(io.StringIO):
    """Text stream whose writes fail while ``broken`` is set."""

    def __init__(self):
        super().__init__()
        self.broken = False

    def write(self, s):
        if self.broken:
            raise OSError("disk full")
        return super().write(s)


def test_version_line_is_written_on_construction():
    out = io.StringIO()
    writer = Writer(out, "1.0")
    assert out.getvalue() == '<LesHouchesEvents version="1.0">\n'
    assert writer.state is WriterState.EXPECTING_HEADER_OR_INIT


def test_unsupported_version_writes_nothing():
    out = io.StringIO()
    with pytest.raises(UnsupportedVersion):
        Writer(out, "4.0")
    assert out.getvalue() == ""


def test_minimal_file(run_info):
    out = io.StringIO()
    writer = Writer(out)
    writer.heprup(run_info)
    assert writer.state is WriterState.EXPECTING_EVENT_OR_FINISH
    writer.finish()
    assert writer.state is WriterState.FINISHED
    assert out.getvalue() == MINIMAL_OUTPUT


def test_event_block(run_info, event):
    out = io.StringIO()
    with Writer(out) as writer:
        writer.heprup(run_info)
        writer.hepeup(replace(event, attr={"npLO": " 2 "}))
        writer.finish()
        assert writer.n_events == 1
    text = out.getvalue()
    expected = (
        '<event npLO=" 2 ">\n'
        "4 1 84515.12 91.188 0.007546771 0.1190024\n"
        "1 -1 0 0 503 0 0.0 0.0 4.7789443449 4.7789443449 0.0 0.0 1.0\n"
        "21 -1 0 0 501 502 0.0 0.0 -1240.3761329 1240.3761329 0.0 0.0 -1.0\n"
        "21 1 1 2 503 502 37.283715118 21.98166528 -1132.689358 1133.5159684 0.0 0.0 -1.0\n"
        "1 1 1 2 501 0 -37.283715118 -21.98166528 -102.90783056 111.63910879 0.0 0.0 1.0\n"
        "<mgrwt>\n"
        "<rscale>  2 0.91188000E+02</rscale>\n"
        "<asrwt>0</asrwt>\n"
        "</mgrwt>\n"
        "</event>\n"
        "</LesHouchesEvents>\n"
    )
    assert text.endswith("</init>\n" + expected)


def test_info_gets_a_trailing_newline(run_info):
    out = io.StringIO()
    writer = Writer(out)
    writer.heprup(replace(run_info, info="<generator>x</generator>"))
    assert out.getvalue().endswith("<generator>x</generator>\n</init>\n")


def test_headers(run_info):
    out = io.StringIO()
    writer = Writer(out, "2.0")
    writer.header("generated by a test\nsecond line")
    writer.xml_header(XmlElement("MGVersion", text="3.5"))
    writer.xml_header(XmlElement("header", text="\n", children=[XmlElement("a", attributes={"k": "v"}, tail="\n")]))
    assert out.getvalue() == (
        '<LesHouchesEvents version="2.0">\n'
        "<!--\ngenerated by a test\nsecond line\n-->\n"
        "<header>\n<MGVersion>3.5</MGVersion>\n</header>\n"
        '<header>\n<a k="v"></a>\n</header>\n'
    )


def test_out_of_order_calls_are_rejected(run_info, event):
    out = io.StringIO()
    writer = Writer(out)
    before = out.getvalue()

    with pytest.raises(BadState) as excinfo:
        writer.hepeup(event)
    assert excinfo.value.state is WriterState.EXPECTING_HEADER_OR_INIT
    assert excinfo.value.attempt == "event"
    with pytest.raises(BadState):
        writer.finish()
    assert writer.state is WriterState.EXPECTING_HEADER_OR_INIT
    assert out.getvalue() == before

    writer.heprup(run_info)
    for call in (lambda: writer.header("x"), lambda: writer.xml_header(XmlElement("a")), lambda: writer.heprup(run_info)):
        with pytest.raises(BadState):
            call()
    assert writer.state is WriterState.EXPECTING_EVENT_OR_FINISH

    writer.finish()
    after = out.getvalue()
    with pytest.raises(BadState) as excinfo:
        writer.hepeup(event)
    assert "finished" in str(excinfo.value)
    with pytest.raises(BadState):
        writer.finish()
    assert out.getvalue() == after


def test_mismatched_subprocesses_write_nothing(run_info):
    out = io.StringIO()
    writer = Writer(out)
    before = out.getvalue()
    with pytest.raises(MismatchedSubprocesses):
        writer.heprup(replace(run_info, NPRUP=2))
    with pytest.raises(MismatchedSubprocesses):
        writer.heprup(replace(run_info, LPRUP=[]))
    with pytest.raises(MismatchedSubprocesses):
        writer.heprup(replace(run_info, EBMUP=(7000.0,)))
    assert out.getvalue() == before
    assert writer.state is WriterState.EXPECTING_HEADER_OR_INIT


def test_mismatched_particles_write_nothing(run_info, event):
    out = io.StringIO()
    writer = Writer(out)
    writer.heprup(run_info)
    before = out.getvalue()
    with pytest.raises(MismatchedParticles):
        writer.hepeup(replace(event, NUP=3))
    with pytest.raises(MismatchedParticles):
        writer.hepeup(replace(event, SPINUP=[]))
    with pytest.raises(MismatchedParticles):
        writer.hepeup(replace(event, PUP=[p[:4] for p in event.PUP]))
    with pytest.raises(InvalidAttribute):
        writer.hepeup(replace(event, attr={"quote": "'\""}))
    assert out.getvalue() == before
    assert writer.n_events == 0


def test_failed_write_latches(run_info, event):
    out = FlakyStream()
    writer = Writer(out)
    out.broken = True
    with pytest.raises(OSError):
        writer.heprup(run_info)
    assert writer.state is WriterState.FAILED

    out.broken = False
    with pytest.raises(WriteToFailed):
        writer.hepeup(event)
    assert out.getvalue().endswith("</event>\n")
    with pytest.raises(WriteToFailed):
        writer.finish()
    assert writer.state is WriterState.FAILED
    assert out.getvalue().endswith("</LesHouchesEvents>\n")


def test_with_block_finishes_file(run_info):
    out = io.StringIO()
    with Writer(out) as writer:
        writer.heprup(run_info)
    assert writer.state is WriterState.FINISHED
    assert out.getvalue() == MINIMAL_OUTPUT


def test_close_without_init_writes_no_closing_tag():
    out = io.StringIO()
    Writer(out).close()
    assert out.getvalue() == '<LesHouchesEvents version="3.0">\n'


def test_garbage_collection_finishes_file(run_info):
    out = io.StringIO()
    writer = Writer(out)
    writer.heprup(run_info)
    del writer
    assert out.getvalue() == MINIMAL_OUTPUT


def test_implicit_finish_failure_is_logged(run_info, caplog):
    out = FlakyStream()
    writer = Writer(out)
    writer.heprup(run_info)
    out.broken = True
    with caplog.at_level(logging.WARNING, logger="lhef.io.writer"):
        writer.close()
    assert writer.state is WriterState.FAILED
    assert "could not close event file" in caplog.text


def test_binary_stream(run_info):
    out = io.BytesIO()
    with Writer(out) as writer:
        writer.heprup(run_info)
    assert out.getvalue() == MINIMAL_OUTPUT.encode("utf-8")


def test_owned_stream_is_closed(run_info):
    out = io.StringIO()
    writer = Writer(out, close_stream=True)
    writer.heprup(run_info)
    writer.close()
    assert out.closed


def test_empty_run_and_event():
    out = io.StringIO()
    with Writer(out) as writer:
        writer.heprup(RunInfo())
        writer.hepeup(Event())
    assert out.getvalue() == (
        '<LesHouchesEvents version="3.0">\n'
        "<init>\n0 0 0.0 0.0 0 0 0 0 0 0\n</init>\n"
        "<event>\n0 0 0.0 0.0 0.0 0.0\n</event>\n"
        "</LesHouchesEvents>\n"
    )


def test_failed_writer_still_writes_preamble_blocks(run_info):
    out = FlakyStream()
    writer = Writer(out)
    out.broken = True
    with pytest.raises(OSError):
        writer.header("lost")
    assert writer.state is WriterState.FAILED
    out.broken = False

    with pytest.raises(WriteToFailed):
        writer.header("kept")
    assert out.getvalue().endswith("<!--\nkept\n-->\n")
    with pytest.raises(WriteToFailed):
        writer.xml_header(XmlElement("MGVersion", text="3.5"))
    assert out.getvalue().endswith("<header>\n<MGVersion>3.5</MGVersion>\n</header>\n")
    with pytest.raises(WriteToFailed):
        writer.heprup(run_info)
    assert out.getvalue().endswith("</init>\n")
    assert writer.state is WriterState.FAILED


def test_closed_stream_latches_failure(run_info, event):
    out = io.StringIO()
    writer = Writer(out)
    writer.heprup(run_info)
    out.close()
    with pytest.raises(ValueError):
        writer.hepeup(event)
    assert writer.state is WriterState.FAILED
    assert writer.n_events == 0


def test_dropping_writer_on_closed_stream_is_quiet(run_info, monkeypatch, caplog):
    unraisable = []
    monkeypatch.setattr(sys, "unraisablehook", unraisable.append)
    out = io.StringIO()
    writer = Writer(out)
    writer.heprup(run_info)
    out.close()
    with caplog.at_level(logging.WARNING, logger="lhef.io.writer"):
        del writer
    assert unraisable == []
    assert "could not close event file" in caplog.text


def test_block_name_aliases(run_info, event):
    out = io.StringIO()
    with Writer(out) as writer:
        writer.run_info(run_info)
        writer.event(event)
        assert writer.n_events == 1
    assert out.getvalue().count("<event>") == 1


@pytest.mark.parametrize(
    "change,field",
    [
        ({"IDRUP": True}, "IDRUP"),
        ({"IDRUP": 1.7}, "IDRUP"),
        ({"IDRUP": 2**31}, "IDRUP"),
        ({"XWGTUP": "1.0"}, "XWGTUP"),
        ({"IDUP": [1, 21, 21, -(2**31) - 1]}, "IDUP(4)"),
        ({"MOTHUP": [(0, 0), (0, 0), (1, 2.0), (1, 2)]}, "MOTHUP(3, 2)"),
    ],
)
def test_unwritable_event_values(run_info, event, change, field):
    out = io.StringIO()
    writer = Writer(out)
    writer.heprup(run_info)
    before = out.getvalue()
    with pytest.raises(InvalidValue) as excinfo:
        writer.hepeup(replace(event, **change))
    assert excinfo.value.field == field
    assert out.getvalue() == before
    assert writer.state is WriterState.EXPECTING_EVENT_OR_FINISH


def test_unwritable_run_values(run_info):
    out = io.StringIO()
    writer = Writer(out)
    with pytest.raises(InvalidValue) as excinfo:
        writer.heprup(replace(run_info, LPRUP=[1.5]))
    assert excinfo.value.field == "LPRUP(1)"
    with pytest.raises(InvalidValue) as excinfo:
        writer.heprup(replace(run_info, IDBMUP=(2212, False)))
    assert excinfo.value.field == "IDBMUP(2)"
    assert writer.state is WriterState.EXPECTING_HEADER_OR_INIT
    assert out.getvalue() == '<LesHouchesEvents version="3.0">\n'
