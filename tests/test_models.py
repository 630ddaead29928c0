from dataclasses import FrozenInstanceError

import pytest

import lhef
from lhef import Event, RunInfo
from lhef.status import INCOMING_BEAM, INTERMEDIATE_RESONANCE


def test_status_codes():
    assert (lhef.INCOMING, lhef.OUTGOING) == (-1, 1)
    assert (lhef.INTERMEDIATE_SPACELIKE, lhef.INTERMEDIATE_RESONANCE, lhef.INTERMEDIATE_DOC) == (-2, 2, 3)
    assert lhef.INCOMING_BEAM == -9


def test_incoming_and_outgoing_follow_status_codes():
    ev = Event(NUP=4, ISTUP=[INCOMING_BEAM, lhef.INCOMING, INTERMEDIATE_RESONANCE, lhef.OUTGOING])
    assert ev.incoming == [1]
    assert ev.outgoing == [3]


def test_records_are_frozen_but_not_hashable(run_info, event):
    with pytest.raises(FrozenInstanceError):
        run_info.NPRUP = 2
    with pytest.raises(FrozenInstanceError):
        event.NUP = 0
    with pytest.raises(TypeError):
        hash(run_info)
    with pytest.raises(TypeError):
        hash(Event())
    assert RunInfo() == RunInfo()
