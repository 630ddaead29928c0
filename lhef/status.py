"""Particle status codes (``ISTUP``) of the Les Houches accord."""

# incoming particle
INCOMING = -1
# outgoing final state particle
OUTGOING = 1
# intermediate space-like propagator defining an x and Q^2 to be preserved
INTERMEDIATE_SPACELIKE = -2
# intermediate resonance, mass to be preserved
INTERMEDIATE_RESONANCE = 2
# intermediate resonance, for documentation only
INTERMEDIATE_DOC = 3
# incoming beam particle at time t = -inf
INCOMING_BEAM = -9
