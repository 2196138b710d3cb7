"""Particles, particle types and configurations of patchy colloids in a periodic box."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field

import numpy as np


def _vec(values=(0.0, 0.0, 0.0)) -> np.ndarray:
    return np.asarray(values, dtype=float).copy()


@dataclass
class ParticleType:
    """Shared properties of a species of particle."""

    radius: float = 0.5
    nsites: int = 0
    sites: list = field(default_factory=list)
    nparticles: int = 0
    activity: int = 0
    active_force: np.ndarray = field(default_factory=lambda: _vec((1.0, 0.0, 0.0)))

    def __post_init__(self) -> None:
        self.sites = [_vec(s) for s in self.sites]
        self.active_force = _vec(self.active_force)


@dataclass
class Particle:
    """A single particle together with the bonds it currently makes."""

    ptype: int = 0
    r: np.ndarray = field(default_factory=_vec)
    q: np.ndarray = field(default_factory=lambda: _vec((1.0, 0.0, 0.0, 0.0)))
    f: np.ndarray = field(default_factory=_vec)
    t: np.ndarray = field(default_factory=_vec)
    patchvectors: list = field(default_factory=list)
    bonds: list = field(default_factory=list)
    bond_energy: list = field(default_factory=list)
    bond_distance: list = field(default_factory=list)
    bond_switch: list = field(default_factory=list)
    bound_site: list = field(default_factory=list)
    cluster_id: int = 0
    a_type2: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.r = _vec(self.r)
        self.q = _vec(self.q)
        self.f = _vec(self.f)
        self.t = _vec(self.t)

    @property
    def nbonds(self) -> int:
        return len(self.bonds)

    def add_bond(self, jpart, erep, ebond, distance, eattr) -> None:
        """Record a bond with ``jpart``; the reverse bond is not recorded."""
        self.bonds.append(jpart)
        self.bond_energy.append(erep + ebond)
        self.bond_distance.append(distance)
        self.bond_switch.append(ebond / eattr)

    def clear_bonds(self) -> None:
        self.bonds.clear()
        self.bond_energy.clear()
        self.bond_distance.clear()
        self.bond_switch.clear()
        self.bound_site.clear()


@dataclass
class Configuration:
    """A snapshot of all particles in a periodic box."""

    particles: list = field(default_factory=list)
    types: list = field(default_factory=list)
    box: np.ndarray = field(default_factory=lambda: _vec((10.0, 10.0, 10.0)))
    c_time: float = 0.0
    energy: float = 0.0
    nbonds: int = 0
    nclusters: int = 0

    def __post_init__(self) -> None:
        self.box = _vec(self.box)

    @property
    def nparts(self) -> int:
        return len(self.particles)

    def type_of(self, index) -> ParticleType:
        return self.types[self.particles[index].ptype]

    def copy(self) -> "Configuration":
        return _copy.deepcopy(self)

    def update_patch_vectors(self, index=None) -> None:
        """Rotate the body-frame sites into lab-frame patch vectors."""
        indices = range(self.nparts) if index is None else [index]
        for i in indices:
            particle = self.particles[i]
            rot = rotation_matrix(particle.q)
            particle.patchvectors = [rot @ site for site in self.type_of(i).sites]


def minimum_image(vector, box) -> np.ndarray:
    """Return the periodic image of ``vector`` closest to the origin."""
    v = np.asarray(vector, dtype=float)
    b = np.asarray(box, dtype=float)
    return v - b * np.round(v / b)


def rotation_matrix(q) -> np.ndarray:
    """Rotation matrix of the unit quaternion ``(q0, q1, q2, q3)``."""
    q0, q1, q2, q3 = (float(x) for x in q)
    return np.array(
        [
            [q0 * q0 + q1 * q1 - q2 * q2 - q3 * q3, 2 * (q1 * q2 - q0 * q3), 2 * (q1 * q3 + q0 * q2)],
            [2 * (q1 * q2 + q0 * q3), q0 * q0 - q1 * q1 + q2 * q2 - q3 * q3, 2 * (q2 * q3 - q0 * q1)],
            [2 * (q1 * q3 - q0 * q2), 2 * (q2 * q3 + q0 * q1), q0 * q0 - q1 * q1 - q2 * q2 + q3 * q3],
        ]
    )


def normalize_quaternion(q) -> np.ndarray:
    arr = np.asarray(q, dtype=float)
    norm = float(np.linalg.norm(arr))
    if norm == 0.0:
        raise ValueError("cannot normalise a zero quaternion")
    return arr / norm