"""Classification of association and dissociation reactions in active networks."""

from __future__ import annotations

from .model import Configuration, rotation_matrix

DP_SITES = 2
TPP_SITES = 3
DP_TYPE = 1
TPP_TYPE = 0


def reaction_type(itype, itype2, jtype, jtype2) -> int:
    """Reaction class of a bond between two particles.

    0: DP with DP; 1: DP with a tri-patch site the active force points toward;
    2: DP with a tri-patch site the active force points away from.
    """
    if itype == DP_TYPE:
        check_type, check_type2 = jtype, jtype2
    elif jtype == DP_TYPE:
        check_type, check_type2 = itype, itype2
    else:
        raise ValueError(f"neither particle type {itype} nor {jtype} is a di-patch particle")
    if check_type == DP_TYPE:
        return 0
    if check_type == TPP_TYPE and check_type2 == 0:
        return 1
    if check_type == TPP_TYPE and check_type2 == 1:
        return 2
    raise ValueError("cannot determine the reaction type")


def _active_direction(config: Configuration, index):
    particle = config.particles[index]
    return rotation_matrix(particle.q) @ config.type_of(index).active_force


def association_type2(config: Configuration) -> None:
    """Label every site of di- and tri-patch particles by the active force direction."""
    for index, particle in enumerate(config.particles):
        ptype = config.type_of(index)
        if ptype.nsites == DP_SITES:
            particle.a_type2 = [0, 0]
        elif ptype.nsites == TPP_SITES:
            if ptype.activity == 0:
                particle.a_type2 = [0] * ptype.nsites
            else:
                force = _active_direction(config, index)
                particle.a_type2 = [
                    0 if float(force @ particle.patchvectors[isite]) > 0 else 1
                    for isite in range(ptype.nsites)
                ]


def dissociation_type2(config: Configuration, ipart, isite) -> int:
    """Label of site ``isite`` of ``ipart``; -1 for particles that are neither kind."""
    ptype = config.type_of(ipart)
    if ptype.nsites == DP_SITES:
        return 0
    if ptype.nsites == TPP_SITES:
        if ptype.activity == 0:
            return 0
        force = _active_direction(config, ipart)
        patch = config.particles[ipart].patchvectors[isite]
        return 0 if float(force @ patch) > 0 else 1
    return -1