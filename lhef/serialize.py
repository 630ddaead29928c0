"""Plain-data views of the LHEF records.

The dictionaries produced here contain only ``dict``, ``list``, ``str``,
``int`` and ``float`` values and are suitable for JSON or columnar storage.
``*_from_dict`` restores the tuple-typed fixed-size arrays, so
``event_from_dict(event_to_dict(ev)) == ev``.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Optional

from .models import Event, RunInfo, XmlElement


def stable_json_dumps(obj: Any) -> str:
    """Deterministic JSON for embedding and comparison."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _lists(obj):
    if isinstance(obj, (list, tuple)):
        return [_lists(x) for x in obj]
    return obj


def run_info_to_dict(run: RunInfo) -> dict[str, Any]:
    return {k: _lists(v) if not isinstance(v, dict) else dict(v) for k, v in asdict(run).items()}


def run_info_from_dict(d: dict[str, Any]) -> RunInfo:
    return RunInfo(
        IDBMUP=tuple(int(x) for x in d.get("IDBMUP", (0, 0))),
        EBMUP=tuple(float(x) for x in d.get("EBMUP", (0.0, 0.0))),
        PDFGUP=tuple(int(x) for x in d.get("PDFGUP", (0, 0))),
        PDFSUP=tuple(int(x) for x in d.get("PDFSUP", (0, 0))),
        IDWTUP=int(d.get("IDWTUP", 0)),
        NPRUP=int(d.get("NPRUP", 0)),
        XSECUP=[float(x) for x in d.get("XSECUP", [])],
        XERRUP=[float(x) for x in d.get("XERRUP", [])],
        XMAXUP=[float(x) for x in d.get("XMAXUP", [])],
        LPRUP=[int(x) for x in d.get("LPRUP", [])],
        info=str(d.get("info", "")),
        attr={str(k): str(v) for k, v in (d.get("attr") or {}).items()},
    )


def event_to_dict(event: Event) -> dict[str, Any]:
    return {k: _lists(v) if not isinstance(v, dict) else dict(v) for k, v in asdict(event).items()}


def event_from_dict(d: dict[str, Any]) -> Event:
    return Event(
        NUP=int(d.get("NUP", 0)),
        IDRUP=int(d.get("IDRUP", 0)),
        XWGTUP=float(d.get("XWGTUP", 0.0)),
        SCALUP=float(d.get("SCALUP", 0.0)),
        AQEDUP=float(d.get("AQEDUP", 0.0)),
        AQCDUP=float(d.get("AQCDUP", 0.0)),
        IDUP=[int(x) for x in d.get("IDUP", [])],
        ISTUP=[int(x) for x in d.get("ISTUP", [])],
        MOTHUP=[tuple(int(x) for x in m) for m in d.get("MOTHUP", [])],
        ICOLUP=[tuple(int(x) for x in c) for c in d.get("ICOLUP", [])],
        PUP=[tuple(float(x) for x in p) for p in d.get("PUP", [])],
        VTIMUP=[float(x) for x in d.get("VTIMUP", [])],
        SPINUP=[float(x) for x in d.get("SPINUP", [])],
        info=str(d.get("info", "")),
        attr={str(k): str(v) for k, v in (d.get("attr") or {}).items()},
    )


def xml_to_dict(el: Optional[XmlElement]) -> Optional[dict[str, Any]]:
    if el is None:
        return None
    return {
        "name": el.name,
        "attributes": dict(el.attributes),
        "text": el.text,
        "children": [xml_to_dict(c) for c in el.children],
        "tail": el.tail,
    }


def xml_from_dict(d: Optional[dict[str, Any]]) -> Optional[XmlElement]:
    if d is None:
        return None
    return XmlElement(
        name=d["name"],
        attributes=dict(d.get("attributes") or {}),
        text=d.get("text"),
        children=[xml_from_dict(c) for c in d.get("children") or []],
        tail=d.get("tail"),
    )
