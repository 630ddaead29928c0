"""Particle names for summaries.

Names come from scikit-hep ``particle`` when it is installed; otherwise a
short table of the particles that dominate generator output is used.
"""

from __future__ import annotations

from functools import lru_cache

_BUILTIN_NAMES = {
    1: "d", -1: "dbar",
    2: "u", -2: "ubar",
    3: "s", -3: "sbar",
    4: "c", -4: "cbar",
    5: "b", -5: "bbar",
    6: "t", -6: "tbar",
    11: "e-", -11: "e+",
    12: "nu_e", -12: "nu_ebar",
    13: "mu-", -13: "mu+",
    14: "nu_mu", -14: "nu_mubar",
    15: "tau-", -15: "tau+",
    16: "nu_tau", -16: "nu_taubar",
    21: "g",
    22: "gamma",
    23: "Z0",
    24: "W+", -24: "W-",
    25: "H",
    2212: "p", -2212: "pbar",
}

try:
    from particle import Particle as _Particle  # type: ignore
except ImportError:  # pragma: no cover
    _Particle = None


@lru_cache(maxsize=None)
def particle_name(pdg_id: int) -> str:
    """Short name of ``pdg_id``; the number itself if unknown."""
    if _Particle is not None:
        try:
            return _Particle.from_pdgid(pdg_id).name
        except Exception:
            pass
    return _BUILTIN_NAMES.get(pdg_id, str(pdg_id))
