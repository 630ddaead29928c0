"""High-level read/write/copy/info API."""

from __future__ import annotations

import itertools
import logging
from collections import Counter
from pathlib import Path
from typing import Iterator, Optional, Union

from .io.files import open_reader, open_writer
from .models import Event, LHEFile
from .pdg import particle_name

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read(filepath: PathLike, max_events: int = -1) -> LHEFile:
    """Load a whole event file into memory."""
    with open_reader(filepath) as reader:
        events = list(itertools.islice(reader, max_events)) if max_events >= 0 else list(reader)
        lhe = LHEFile(
            version=reader.version,
            header=reader.header,
            xml_header=reader.xml_header,
            run_info=reader.heprup(),
            events=events,
        )
    logger.debug("read %d events from %s", len(lhe.events), filepath)
    return lhe


def iter_events(filepath: PathLike) -> Iterator[Event]:
    """Stream the events of ``filepath`` one at a time."""
    with open_reader(filepath) as reader:
        yield from reader


def write(filepath: PathLike, lhe: LHEFile) -> None:
    """Write ``lhe`` to ``filepath`` (gzip-compressed for ``.gz``)."""
    with open_writer(filepath, lhe.version) as writer:
        if lhe.header:
            writer.header(lhe.header)
        if lhe.xml_header is not None:
            writer.xml_header(lhe.xml_header)
        writer.heprup(lhe.run_info)
        for event in lhe.events:
            writer.hepeup(event)
        writer.finish()


def copy(
    input_path: PathLike,
    output_path: PathLike,
    *,
    version: Optional[str] = None,
    max_events: int = -1,
) -> int:
    """Re-serialize an event file without holding it in memory.

    Returns the number of events written. ``version`` overrides the version
    tag of the output.
    """
    with open_reader(input_path) as reader:
        with open_writer(output_path, version or reader.version) as writer:
            if reader.header:
                writer.header(reader.header)
            if reader.xml_header is not None:
                writer.xml_header(reader.xml_header)
            writer.heprup(reader.heprup())
            events = itertools.islice(reader, max_events) if max_events >= 0 else reader
            for event in events:
                writer.hepeup(event)
            writer.finish()
            n = writer.n_events
    logger.debug("copied %d events from %s to %s", n, input_path, output_path)
    return n


def info(filepath: PathLike) -> dict:
    """Summary of an event file: run information and event statistics."""
    n_events = 0
    total_particles = 0
    sum_weights = 0.0
    pdg_counts: Counter = Counter()
    status_counts: Counter = Counter()
    process_counts: Counter = Counter()
    event_attr_keys: set[str] = set()

    with open_reader(filepath) as reader:
        run = reader.heprup()
        for ev in reader:
            n_events += 1
            total_particles += ev.NUP
            sum_weights += ev.XWGTUP
            pdg_counts.update(ev.IDUP)
            status_counts.update(ev.ISTUP)
            process_counts[ev.IDRUP] += 1
            event_attr_keys.update(ev.attr)
        version = reader.version
        has_header = bool(reader.header)
        xml_header = reader.xml_header

    return {
        "version": version,
        "has_comment_header": has_header,
        "xml_header_children": [c.name for c in xml_header.children] if xml_header else [],
        "beam_pdg_id": list(run.IDBMUP),
        "beam_energy": list(run.EBMUP),
        "pdf_group": list(run.PDFGUP),
        "pdf_set": list(run.PDFSUP),
        "weight_scheme": run.IDWTUP,
        "subprocesses": [
            {"id": lprup, "xsec": xsec, "xerr": xerr, "xmax": xmax}
            for xsec, xerr, xmax, lprup in run.subprocesses()
        ],
        "init_attributes": sorted(run.attr),
        "n_events": n_events,
        "total_particles": total_particles,
        "avg_particles_per_event": total_particles / max(1, n_events),
        "sum_weights": sum_weights,
        "events_per_process": dict(sorted(process_counts.items())),
        "status_counts": dict(sorted(status_counts.items())),
        "top_particles": [(particle_name(pid), count) for pid, count in pdg_counts.most_common(20)],
        "event_attributes": sorted(event_attr_keys),
    }
