"""Test fixtures.

Small deterministic event files are (re)generated under ``tests/fixtures/``
at configure time, so the suite does not depend on binary test data being
shipped with the sources.
"""

from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from lhef import Event, RunInfo

FIXTURES = Path(__file__).resolve().parent / "fixtures"

TWO_EVENTS_LHE = """<LesHouchesEvents version="3.0">
<!--
File generated with HEJ (test sample)
-->
<header>
<MGVersion>
#5.2.3.3
</MGVersion>
<MG5ProcCard>
generate p p > j j
</MG5ProcCard>
</header>
<init testattribute="testvalue">
2212 2212 7000.0 7000.0 0 0 230000 230000 2 1
120588124.02 702517.48228 94290.49 1
<generator name='HEJ' version="2.0">HEJ</generator>
</init>
<event attr0="t0" attr1="">
4 1 84515.12 91.188 0.007546771 0.1190024
1 -1 0 0 503 0 0.0 0.0 4.7789443449 4.7789443449 0.0 0.0 1.0
21 -1 0 0 501 502 0.0 0.0 -1240.3761329 1240.3761329 0.0 0.0 -1.0
21 1 1 2 503 502 37.283715118 21.98166528 -1132.689358 1133.5159684 0.0 0.0 -1.0
1 1 1 2 501 0 -37.283715118 -21.98166528 -102.90783056 111.63910879 0.0 0.0 1.0
<mgrwt>
<rscale>  2 0.91188000E+02</rscale>
<asrwt>0</asrwt>
</mgrwt>
</event>
<event>
2 1 0.5E+03 91.188 0.007546771 0.1190024
 22 -1 0 0 0 0  0.0 0.0 10.0 10.0 0.0 0.0 9.0
 22 -1 0 0 0 0  0.0 0.0 -10.0 10.0 0.0 0.0 9.0
</event>
</LesHouchesEvents>
"""

MINIMAL_LHE = """<LesHouchesEvents version="1.0">
<init>
11 -11 45.6 45.6 0 0 0 0 3 0
</init>
</LesHouchesEvents>
"""


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def pytest_configure(config):  # noqa: D401
    """Ensure fixtures exist before any tests run."""
    _write_text(FIXTURES / "two_events.lhe", TWO_EVENTS_LHE)
    _write_text(FIXTURES / "minimal.lhe", MINIMAL_LHE)
    with gzip.open(FIXTURES / "two_events.lhe.gz", "wt", encoding="utf-8") as f:
        f.write(TWO_EVENTS_LHE)


@pytest.fixture
def two_events_path() -> Path:
    return FIXTURES / "two_events.lhe"


@pytest.fixture
def run_info() -> RunInfo:
    return RunInfo(
        IDBMUP=(2212, 2212),
        EBMUP=(7000.0, 7000.0),
        PDFGUP=(0, 0),
        PDFSUP=(230000, 230000),
        IDWTUP=2,
        NPRUP=1,
        XSECUP=[120588124.02],
        XERRUP=[702517.48228],
        XMAXUP=[94290.49],
        LPRUP=[1],
    )


@pytest.fixture
def event() -> Event:
    return Event(
        NUP=4,
        IDRUP=1,
        XWGTUP=84515.12,
        SCALUP=91.188,
        AQEDUP=0.007546771,
        AQCDUP=0.1190024,
        IDUP=[1, 21, 21, 1],
        ISTUP=[-1, -1, 1, 1],
        MOTHUP=[(0, 0), (0, 0), (1, 2), (1, 2)],
        ICOLUP=[(503, 0), (501, 502), (503, 502), (501, 0)],
        PUP=[
            (0.0, 0.0, 4.7789443449, 4.7789443449, 0.0),
            (0.0, 0.0, -1240.3761329, 1240.3761329, 0.0),
            (37.283715118, 21.98166528, -1132.689358, 1133.5159684, 0.0),
            (-37.283715118, -21.98166528, -102.90783056, 111.63910879, 0.0),
        ],
        VTIMUP=[0.0, 0.0, 0.0, 0.0],
        SPINUP=[1.0, -1.0, -1.0, 1.0],
        info=(
            "<mgrwt>\n"
            "<rscale>  2 0.91188000E+02</rscale>\n"
            "<asrwt>0</asrwt>\n"
            "</mgrwt>\n"
        ),
    )
