"""Time correlation of association and dissociation of patch bonds."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .clusters import particle_distance
from .model import Configuration
from .output import write_stats_length
from .reactions import association_type2, dissociation_type2, reaction_type
from .statistics import StatsLength

BREAK_DISTANCE = 0.5
REACTION_TYPES = 4
TOTAL = REACTION_TYPES - 1
MAX_TYPE2 = 5


@dataclass
class BondRecord:
    """A bond between site ``isite`` of ``ipart`` and site ``jsite`` of ``jpart``."""

    ipart: int
    isite: int
    jpart: int
    jsite: int
    start_time: float = 0.0
    end_time: float = 0.0
    itype2: int = -1
    jtype2: int = -1


@dataclass
class SiteInventory:
    """The free sites, as ``(particle, site)`` pairs, and the bonds of a snapshot."""

    free_sites: list = field(default_factory=list)
    bonds: list = field(default_factory=list)


def _partner_site(config: Configuration, ipart, jpart) -> int:
    partner = config.particles[jpart]
    for bonded, site in zip(partner.bonds, partner.bound_site):
        if bonded == ipart:
            return site
    raise ValueError(f"particle {jpart} does not record its bond with particle {ipart}")


def identify_bound_and_free_sites(config: Configuration) -> SiteInventory:
    """Sort every site of every particle into a free site or a unique bond."""
    inventory = SiteInventory()
    for ipart, particle in enumerate(config.particles):
        for isite in range(config.type_of(ipart).nsites):
            jpart = next(
                (j for j, site in zip(particle.bonds, particle.bound_site) if site == isite),
                None,
            )
            if jpart is None:
                inventory.free_sites.append((ipart, isite))
            elif ipart < jpart:
                jsite = _partner_site(config, ipart, jpart)
                inventory.bonds.append(
                    BondRecord(ipart, isite, jpart, jsite, start_time=config.c_time)
                )
    maxsites = sum(config.type_of(i).nsites for i in range(config.nparts))
    nfree, nbonds = len(inventory.free_sites), len(inventory.bonds)
    if nfree > maxsites or nfree + 2 * nbonds != maxsites:
        raise ValueError(
            f"{nfree} free sites and {nbonds} bonds do not account for {maxsites} sites"
        )
    return inventory


def update_autocorrelation(accumulator: StatsLength, counts, max_tau) -> bool:
    """Add the decay ``counts`` normalised to its first value; return whether it was added.

    Nothing is added when ``counts[0]`` is zero.  The counts must not increase.
    """
    counts = list(counts)[:max_tau]
    if not counts or counts[0] == 0:
        return False
    for lag, (current, following) in enumerate(zip(counts, counts[1:])):
        if current < following:
            raise ValueError(f"the count increases after lag {lag}: {current} < {following}")
    for stats, count in zip(accumulator.bins, counts):
        stats.add(count / counts[0])
    return True


def _site_type2(config: Configuration, ipart, isite) -> int:
    labels = config.particles[ipart].a_type2
    if isite >= len(labels):
        raise ValueError(f"site {isite} of particle {ipart} has no association label")
    value = labels[isite]
    if not 0 <= value <= MAX_TYPE2:
        raise ValueError(f"invalid association label {value} for particle {ipart}")
    return value


@dataclass
class AutocorrelationMeasurement:
    """Survival probabilities of free sites and of bonds, per reaction type.

    Reaction types 0 to 2 are those of :func:`reaction_type`; type 3 counts all.
    """

    length: int
    association: list = field(init=False)
    dissociation: list = field(init=False)

    def __post_init__(self) -> None:
        self.association = [StatsLength(self.length) for _ in range(REACTION_TYPES)]
        self.dissociation = [StatsLength(self.length) for _ in range(REACTION_TYPES)]

    def _origin(self, slices, tau_0, max_tau) -> None:
        slice0 = slices[tau_0]
        inventory = identify_bound_and_free_sites(slice0)
        association_type2(slice0)
        for record in inventory.bonds:
            record.itype2 = dissociation_type2(slice0, record.ipart, record.isite)
            record.jtype2 = dissociation_type2(slice0, record.jpart, record.jsite)
            if record.itype2 < 0 or record.jtype2 < 0:
                raise ValueError(
                    f"bond {record.ipart}-{record.jpart} has an unclassified site"
                )

        span = max_tau - tau_0
        assoc = [[0] * span for _ in range(REACTION_TYPES)]
        dissoc = [[0] * span for _ in range(REACTION_TYPES)]
        free = inventory.free_sites
        bonds = inventory.bonds

        for tau in range(span):
            slice1 = slices[tau_0 + tau]

            i = 0
            while i < len(free):
                ipart, isite = free[i]
                iptype = slice0.particles[ipart].ptype
                itype2 = _site_type2(slice0, ipart, isite)
                current = slice1.particles[ipart]
                jpart = next(
                    (j for j, site in zip(current.bonds, current.bound_site) if site == isite),
                    None,
                )
                if jpart is None:
                    i += 1
                    continue
                jsite = _partner_site(slice1, ipart, jpart)
                del free[i]
                if (jpart, jsite) in free:
                    index = free.index((jpart, jsite))
                    del free[index]
                    if index < i:
                        i -= 1
                jptype = slice0.particles[jpart].ptype
                jtype2 = _site_type2(slice0, jpart, jsite)
                kind = reaction_type(iptype, itype2, jptype, jtype2)
                for lag in range(tau):
                    assoc[kind][lag] += 1
                    assoc[TOTAL][lag] += 1

            surviving = []
            for record in bonds:
                if particle_distance(slice1, record.ipart, record.jpart) >= BREAK_DISTANCE:
                    kind = reaction_type(
                        slice0.particles[record.ipart].ptype,
                        record.itype2,
                        slice0.particles[record.jpart].ptype,
                        record.jtype2,
                    )
                    for lag in range(tau):
                        dissoc[kind][lag] += 1
                        dissoc[TOTAL][lag] += 1
                else:
                    surviving.append(record)
            bonds[:] = surviving

        for lag in range(span):
            assoc[TOTAL][lag] += len(free)
            dissoc[TOTAL][lag] += len(bonds)

        for n in range(REACTION_TYPES):
            update_autocorrelation(self.association[n], assoc[n], span)
            update_autocorrelation(self.dissociation[n], dissoc[n], span)

    def measure(self, slices, max_tau) -> None:
        """Use every one of the first ``max_tau`` snapshots as a time origin."""
        if max_tau > self.length:
            raise ValueError(f"max_tau {max_tau} exceeds the {self.length} tracked lags")
        if max_tau > len(slices):
            raise ValueError(f"max_tau {max_tau} exceeds the {len(slices)} snapshots")
        for tau_0 in range(max_tau):
            self._origin(slices, tau_0, max_tau)

    def write(self, directory=".", max_tau=None) -> list:
        """Write every accumulator holding data; return the paths written."""
        limit = self.length if max_tau is None else max_tau
        written = []
        for n in range(REACTION_TYPES):
            for name, stats in (
                (f"association_reaction{n}", self.association[n]),
                (f"dissociation_reaction{n}", self.dissociation[n]),
            ):
                stats.filename = str(Path(directory) / name)
                if write_stats_length(stats, limit):
                    written.append(Path(stats.filename))
        return written