"""
Record types of the Les Houches Event File format.

Field names follow the Fortran common blocks HEPRUP and HEPEUP defined in
the Les Houches accord (hep-ph/0109068), so ``run.XSECUP`` or
``event.PUP`` mean exactly what they mean in generator code. Records are
frozen: readers build them once and writers only consume them. Freezing
only stops field rebinding; the lists and dicts inside stay mutable, so the
records are not hashable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .records import PARTICLE_FIELDS, SUBPROCESS_FIELDS
from .status import INCOMING, OUTGOING


@dataclass(frozen=True)
class RunInfo:
    """Generator run information (HEPRUP).

    Attributes:
        IDBMUP: PDG ids of the two beams.
        EBMUP: Beam energies in GeV.
        PDFGUP: PDF author groups of the two beams (PDFLIB convention).
        PDFSUP: PDF set ids of the two beams.
        IDWTUP: Weighting strategy (+-1 .. +-4).
        NPRUP: Number of subprocesses; length of the four lists below.
        XSECUP: Cross section per subprocess in pb.
        XERRUP: Statistical error of XSECUP.
        XMAXUP: Maximum event weight per subprocess.
        LPRUP: Subprocess ids.
        info: Free text after the subprocess lines, up to ``</init>``.
        attr: Attributes of the ``<init>`` tag.
    """

    IDBMUP: tuple[int, int] = (0, 0)
    EBMUP: tuple[float, float] = (0.0, 0.0)
    PDFGUP: tuple[int, int] = (0, 0)
    PDFSUP: tuple[int, int] = (0, 0)
    IDWTUP: int = 0
    NPRUP: int = 0
    XSECUP: list[float] = field(default_factory=list)
    XERRUP: list[float] = field(default_factory=list)
    XMAXUP: list[float] = field(default_factory=list)
    LPRUP: list[int] = field(default_factory=list)
    info: str = ""
    attr: dict[str, str] = field(default_factory=dict)

    __hash__ = None  # type: ignore[assignment]

    def subprocesses(self) -> Iterator[tuple[float, float, float, int]]:
        """Yield ``(XSECUP, XERRUP, XMAXUP, LPRUP)`` per subprocess."""
        return zip(*(getattr(self, name) for name in SUBPROCESS_FIELDS))

    @property
    def total_cross_section(self) -> float:
        return sum(self.XSECUP)


@dataclass(frozen=True)
class Event:
    """A single event (HEPEUP).

    Attributes:
        NUP: Number of particles; length of all per-particle lists.
        IDRUP: Id of the subprocess the event belongs to.
        XWGTUP: Event weight.
        SCALUP: Scale of the event in GeV.
        AQEDUP: QED coupling used for the event.
        AQCDUP: QCD coupling used for the event.
        IDUP: PDG id per particle.
        ISTUP: Status code per particle (-1 incoming, 1 outgoing,
            2 intermediate resonance, ...).
        MOTHUP: 1-based indices of the first and last mother.
        ICOLUP: Colour and anticolour flow tags.
        PUP: ``(px, py, pz, E, m)`` in GeV.
        VTIMUP: Invariant lifetime c*tau in mm.
        SPINUP: Cosine of the angle between spin vector and 3-momentum of
            the decaying particle; 9.0 for unknown.
        info: Free text after the particle lines, up to ``</event>``.
        attr: Attributes of the ``<event>`` tag.
    """

    NUP: int = 0
    IDRUP: int = 0
    XWGTUP: float = 0.0
    SCALUP: float = 0.0
    AQEDUP: float = 0.0
    AQCDUP: float = 0.0
    IDUP: list[int] = field(default_factory=list)
    ISTUP: list[int] = field(default_factory=list)
    MOTHUP: list[tuple[int, int]] = field(default_factory=list)
    ICOLUP: list[tuple[int, int]] = field(default_factory=list)
    PUP: list[tuple[float, float, float, float, float]] = field(default_factory=list)
    VTIMUP: list[float] = field(default_factory=list)
    SPINUP: list[float] = field(default_factory=list)
    info: str = ""
    attr: dict[str, str] = field(default_factory=dict)

    __hash__ = None  # type: ignore[assignment]

    def particles(self) -> Iterator[tuple]:
        """Yield ``(IDUP, ISTUP, MOTHUP, ICOLUP, PUP, VTIMUP, SPINUP)`` per particle."""
        return zip(*(getattr(self, name) for name in PARTICLE_FIELDS))

    @property
    def incoming(self) -> list[int]:
        """Indices of incoming particles."""
        return [i for i, st in enumerate(self.ISTUP) if st == INCOMING]

    @property
    def outgoing(self) -> list[int]:
        """Indices of stable outgoing particles."""
        return [i for i, st in enumerate(self.ISTUP) if st == OUTGOING]


# Names used by the Les Houches accord
HEPRUP = RunInfo
HEPEUP = Event


@dataclass
class XmlElement:
    """Element of the structured ``<header>`` block.

    ``text`` is the character data before the first child, ``tail`` the
    character data following this element inside its parent.
    """

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    children: list[XmlElement] = field(default_factory=list)
    tail: Optional[str] = None

    def find(self, name: str) -> Optional[XmlElement]:
        """First direct child called ``name``."""
        for child in self.children:
            if child.name == name:
                return child
        return None


@dataclass
class LHEFile:
    """A complete event file held in memory.

    For large samples use :class:`lhef.io.reader.Reader` directly, which
    yields one event at a time.
    """

    version: str = "3.0"
    header: str = ""
    xml_header: Optional[XmlElement] = None
    run_info: RunInfo = field(default_factory=RunInfo)
    events: list[Event] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)

    def __getitem__(self, idx):
        return self.events[idx]
