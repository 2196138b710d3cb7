"""Cluster-size statistics and chain position output for relaxation runs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

import numpy as np

from .model import Configuration, minimum_image, rotation_matrix
from .output import write_stats_length
from .statistics import StatsLength

HISTOGRAM_FILE = "clustersize_histogram.out"
DISTRIBUTION_FILE = "clustersize_distribution.out"
XY_HEADER = ",x,y,fx,fy,particle,time\n"


@dataclass
class ClusterSizeAccumulator:
    """Running statistics of how often clusters of every size occur."""

    nparts: int
    histogram: StatsLength = field(init=False)
    distribution: StatsLength = field(init=False)

    def __post_init__(self) -> None:
        self.histogram = StatsLength(self.nparts, HISTOGRAM_FILE)
        self.distribution = StatsLength(self.nparts, DISTRIBUTION_FILE)

    def update(self, sizes, nparts=None) -> None:
        """Add one snapshot, given the size of every cluster in it."""
        sizes = list(sizes)
        length = self.nparts if nparts is None else nparts
        if length > self.nparts:
            raise ValueError(f"cannot track {length} sizes, only {self.nparts} bins")
        if not sizes:
            raise ValueError("a snapshot needs at least one cluster")
        frequency = [0] * length
        for size in sizes:
            if not 1 <= size <= length:
                raise ValueError(f"cluster size {size} outside 1..{length}")
            frequency[size - 1] += 1
        nclusters = len(sizes)
        for count, hist, dist in zip(
            frequency, self.histogram.bins, self.distribution.bins
        ):
            hist.add(count)
            dist.add(count / nclusters)

    def write(self, directory=".") -> bool:
        """Write the normalised size distribution; return whether it was written."""
        self.distribution.filename = str(Path(directory) / DISTRIBUTION_FILE)
        return write_stats_length(self.distribution, self.distribution.length)


class AlignedChain(NamedTuple):
    positions: np.ndarray
    rotation: np.ndarray


def aligned_chain_positions(config: Configuration) -> AlignedChain:
    """Unfold a chain from particle 0 and rotate it so its end lies on the +x axis.

    The chain is walked in index order using minimum-image steps, so particle 0
    sits at the origin.  The rotation is about the z axis.
    """
    if config.nparts < 2:
        raise ValueError("a chain needs at least two particles")
    positions = [np.zeros(3)]
    for previous, current in zip(config.particles, config.particles[1:]):
        step = minimum_image(current.r - previous.r, config.box)
        positions.append(positions[-1] + step)
    end = positions[-1]
    planar = np.array([end[0], end[1], 0.0])
    norm = float(np.linalg.norm(planar))
    if norm == 0.0:
        raise ValueError("the chain ends where it starts in the xy plane")
    direction = planar / norm
    angle = math.degrees(math.acos(max(-1.0, min(1.0, direction[0]))))
    if direction[1] > 0.0:
        angle = 360.0 - angle
    half = math.radians(angle) / 2.0
    rot = rotation_matrix((math.cos(half), 0.0, 0.0, math.sin(half)))
    aligned = np.array([rot @ p for p in positions])
    return AlignedChain(aligned, rot)


@dataclass
class XYPositionWriter:
    """Appends the aligned xy positions of a chain to a CSV file."""

    path: Path = Path("xypos.csv")
    linecount: int = 0
    cycle: float = 0.0

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    def write(self, config: Configuration, with_forces) -> None:
        """Append one snapshot; forces and simulation time only ``with_forces``."""
        if not self.path.exists():
            self.path.write_text(XY_HEADER)
        chain = aligned_chain_positions(config)
        lines = []
        for index, (pos, particle) in enumerate(zip(chain.positions, config.particles)):
            if with_forces:
                force = chain.rotation @ particle.f
                lines.append(
                    f"{self.linecount},{pos[0]:.5f},{pos[1]:.5f},"
                    f"{force[0]:.5f},{force[1]:.5f},{index},{config.c_time:.5f}\n"
                )
            else:
                lines.append(
                    f"{self.linecount},{pos[0]:.5f},{pos[1]:.5f},0.0,0.0,"
                    f"{index},{self.cycle:.5f}\n"
                )
            self.linecount += 1
        with open(self.path, "a") as handle:
            handle.write("".join(lines))
        self.cycle += 0.1