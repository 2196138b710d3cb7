"""Geometry between particle pairs, bond lookups and cluster analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from .model import Configuration, minimum_image


class PairGeometry(NamedTuple):
    surface_distance: float
    length: float
    vector: np.ndarray


@dataclass
class ClusterTable:
    """The particles of every cluster, indexed by cluster id."""

    members: list = field(default_factory=list)

    @property
    def sizes(self) -> list:
        return [len(m) for m in self.members]


def particle_vector(config: Configuration, i, j) -> np.ndarray:
    """Minimum-image vector pointing from particle ``i`` to ``j``."""
    return minimum_image(config.particles[j].r - config.particles[i].r, config.box)


def distance_length_vector(config: Configuration, i, j) -> PairGeometry:
    vec = particle_vector(config, i, j)
    length = float(np.sqrt(vec @ vec))
    surface = length - (config.type_of(i).radius + config.type_of(j).radius)
    return PairGeometry(surface, length, vec)


def particle_distance(config: Configuration, i, j) -> float:
    """Surface-to-surface distance between particles ``i`` and ``j``."""
    return distance_length_vector(config, i, j).surface_distance


def bond_check(config: Configuration, i, j) -> bool:
    return j in config.particles[i].bonds or i in config.particles[j].bonds


def cluster_analysis(config: Configuration) -> int:
    """Label every particle with its cluster id and return the number of clusters."""
    n = config.nparts
    assigned = [False] * n
    ncluster = 0
    for start in range(n):
        if assigned[start]:
            continue
        assigned[start] = True
        frontier = [start]
        while frontier:
            j = frontier.pop()
            config.particles[j].cluster_id = ncluster
            for k in range(n):
                if not assigned[k] and k != j and bond_check(config, j, k):
                    assigned[k] = True
                    frontier.append(k)
        ncluster += 1
    config.nclusters = ncluster
    return ncluster


def clustersize_identification(config: Configuration) -> ClusterTable:
    """Group particles by their cluster id."""
    members = [[] for _ in range(config.nclusters)]
    for index, particle in enumerate(config.particles):
        cid = particle.cluster_id
        if cid >= len(members):
            members.extend([] for _ in range(cid + 1 - len(members)))
        members[cid].append(index)
    return ClusterTable(members)


def unwrap_cluster(config: Configuration, members, ref) -> None:
    """Shift the members of one cluster so that it is contiguous across the box edges.

    Starting from ``ref`` the bond network is walked depth first and every newly
    reached particle is placed at its bonded predecessor plus the minimum-image
    vector between the two.
    """
    remaining = set(members)
    remaining.discard(ref)
    positions = {ref: config.particles[ref].r.copy()}
    stack = [(ref, iter(list(config.particles[ref].bonds)))]
    while stack:
        i, neighbours = stack[-1]
        for j in neighbours:
            if j in remaining:
                remaining.discard(j)
                positions[j] = positions[i] + particle_vector(config, i, j)
                stack.append((j, iter(list(config.particles[j].bonds))))
                break
        else:
            stack.pop()
    for index, pos in positions.items():
        config.particles[index].r = pos


def link_all_clusters(config: Configuration) -> ClusterTable:
    cluster_analysis(config)
    table = clustersize_identification(config)
    for members in table.members:
        if members:
            unwrap_cluster(config, members, members[0])
    return table


def check_max_bonds(config: Configuration, isotropic_sites) -> None:
    """Raise if a patchy particle makes more bonds than it has sites."""
    for index, particle in enumerate(config.particles):
        nsites = config.type_of(index).nsites
        if nsites == isotropic_sites:
            continue
        if particle.nbonds > nsites:
            raise ValueError(
                f"particle {index} has {particle.nbonds} bonds but only {nsites} sites"
            )


def particle_in_wall(config: Configuration, index) -> bool:
    return bool(config.particles[index].r[2] <= config.type_of(index).radius)