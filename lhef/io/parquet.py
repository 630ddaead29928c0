from __future__ import annotations

import json
import logging
from typing import Iterable, Optional

from ..models import Event, RunInfo
from ..records import PARTICLE_FIELDS
from ..serialize import run_info_from_dict, run_info_to_dict, stable_json_dumps

logger = logging.getLogger(__name__)


def _require_pyarrow():
    try:
        import pyarrow as pa  # type: ignore
        import pyarrow.parquet as pq  # type: ignore
    except ImportError as e:  # pragma: no cover
        raise ImportError("Parquet support requires 'pyarrow'. Install lhef[parquet].") from e
    return pa, pq


_META_PREFIX = "lhef."


def _md_set(md: dict[str, str], key: str, value: str) -> None:
    md[f"{_META_PREFIX}{key}"] = value


def _md_get(md: dict[str, str], key: str) -> Optional[str]:
    return md.get(f"{_META_PREFIX}{key}")


def _encode_run_info(run_info: Optional[RunInfo]) -> dict[str, str]:
    md: dict[str, str] = {}
    _md_set(md, "run_info_json", stable_json_dumps(run_info_to_dict(run_info or RunInfo())))
    return md


def _decode_run_info(md: dict[str, str]) -> RunInfo:
    raw = _md_get(md, "run_info_json")
    if not raw:
        return RunInfo()
    return run_info_from_dict(json.loads(raw))


def _particle_row(entries: tuple) -> dict:
    row = dict(zip(PARTICLE_FIELDS, entries))
    mothers, colours, p = row.pop("MOTHUP"), row.pop("ICOLUP"), row.pop("PUP")
    row["MOTHUP1"], row["MOTHUP2"] = mothers
    row["ICOLUP1"], row["ICOLUP2"] = colours
    row["PX"], row["PY"], row["PZ"], row["E"], row["M"] = p
    return row


def _event_scalars(i: int, ev: Event) -> dict:
    return {
        "event_number": i,
        "NUP": ev.NUP,
        "IDRUP": ev.IDRUP,
        "XWGTUP": ev.XWGTUP,
        "SCALUP": ev.SCALUP,
        "AQEDUP": ev.AQEDUP,
        "AQCDUP": ev.AQCDUP,
        "info": ev.info,
        "attr_json": stable_json_dumps(ev.attr),
    }


def write_parquet(
    path: str,
    events: Iterable[Event],
    run_info: Optional[RunInfo] = None,
    *,
    columnar: bool = False,
    metadata: Optional[dict] = None,
) -> int:
    """Write events to a Parquet file and return the number of events.

    The flat layout has one row per particle with the event scalars repeated;
    the columnar layout has one row per event with a list of particle structs.
    Run information is stored as JSON in the schema metadata.
    """
    pa, pq = _require_pyarrow()

    md = _encode_run_info(run_info)
    _md_set(md, "layout", "columnar" if columnar else "flat")
    for k, v in (metadata or {}).items():
        md[str(k)] = str(v)

    rows = []
    n_events = 0
    for i, ev in enumerate(events):
        n_events += 1
        scalars = _event_scalars(i, ev)
        if columnar:
            rows.append({**scalars, "particles": [_particle_row(p) for p in ev.particles()]})
        else:
            rows.extend({**scalars, **_particle_row(p)} for p in ev.particles())

    table = pa.Table.from_pylist(rows)
    table = table.replace_schema_metadata(md)
    pq.write_table(table, path)
    logger.debug("wrote %d events to %s (%s)", n_events, path, md[f"{_META_PREFIX}layout"])
    return n_events


def _event_from_rows(scalars: dict, particles: list[dict]) -> Event:
    return Event(
        NUP=int(scalars["NUP"]),
        IDRUP=int(scalars["IDRUP"]),
        XWGTUP=float(scalars["XWGTUP"]),
        SCALUP=float(scalars["SCALUP"]),
        AQEDUP=float(scalars["AQEDUP"]),
        AQCDUP=float(scalars["AQCDUP"]),
        IDUP=[int(p["IDUP"]) for p in particles],
        ISTUP=[int(p["ISTUP"]) for p in particles],
        MOTHUP=[(int(p["MOTHUP1"]), int(p["MOTHUP2"])) for p in particles],
        ICOLUP=[(int(p["ICOLUP1"]), int(p["ICOLUP2"])) for p in particles],
        PUP=[
            (float(p["PX"]), float(p["PY"]), float(p["PZ"]), float(p["E"]), float(p["M"]))
            for p in particles
        ],
        VTIMUP=[float(p["VTIMUP"]) for p in particles],
        SPINUP=[float(p["SPINUP"]) for p in particles],
        info=scalars.get("info") or "",
        attr=json.loads(scalars.get("attr_json") or "{}"),
    )


def read_parquet(path: str) -> tuple[RunInfo, list[Event]]:
    """Read back a file written by :func:`write_parquet`.

    Events without particles are not representable in the flat layout and
    are therefore missing from its output.
    """
    pa, pq = _require_pyarrow()
    table = pq.read_table(path)
    md: dict[str, str] = {}
    if table.schema.metadata:
        for k, v in table.schema.metadata.items():
            md[k.decode("utf-8", "replace")] = v.decode("utf-8", "replace")
    run_info = _decode_run_info(md)

    rows = table.to_pylist()
    if "particles" in table.column_names:
        return run_info, [_event_from_rows(row, row["particles"] or []) for row in rows]

    events: list[Event] = []
    current: list[dict] = []
    for row in rows:
        if current and row["event_number"] != current[0]["event_number"]:
            events.append(_event_from_rows(current[0], current))
            current = []
        current.append(row)
    if current:
        events.append(_event_from_rows(current[0], current))
    return run_info, events
