import numpy as np
import pytest

from patchysim.model import Configuration, Particle, ParticleType
from patchysim.relaxation import (
    ClusterSizeAccumulator,
    XYPositionWriter,
    aligned_chain_positions,
)


def _chain(points, box=(10.0, 10.0, 10.0)):
    particles = [Particle(ptype=0, r=p) for p in points]
    return Configuration(particles=particles, types=[ParticleType(radius=0.5)], box=box)


def test_histogram_counts_sizes():
    acc = ClusterSizeAccumulator(4)
    acc.update([2, 1, 1], 4)
    means = [b.mean for b in acc.histogram.bins]
    assert means == [2, 1, 0, 0]
    assert sum((i + 1) * m for i, m in enumerate(means)) == 4


def test_distribution_is_normalised():
    acc = ClusterSizeAccumulator(5)
    acc.update([3, 1, 1], 5)
    acc.update([5], 5)
    total = sum(b.mean for b in acc.distribution.bins)
    assert total == pytest.approx(1.0)
    assert all(b.n == 2 for b in acc.distribution.bins)


def test_invalid_size_raises():
    acc = ClusterSizeAccumulator(3)
    with pytest.raises(ValueError):
        acc.update([0, 3], 3)
    with pytest.raises(ValueError):
        acc.update([4], 3)


def test_write_distribution(tmp_path):
    acc = ClusterSizeAccumulator(3)
    assert acc.write(tmp_path) is False
    acc.update([1, 2], 3)
    assert acc.write(tmp_path) is True
    lines = (tmp_path / "clustersize_distribution.out").read_text().splitlines()
    assert len(lines) == 3
    assert [line.split()[0] for line in lines] == ["1", "2", "3"]


def test_chain_aligned_along_x():
    config = _chain([(0, 0, 0), (0, 1, 0), (0, 2, 0)])
    chain = aligned_chain_positions(config)
    assert np.allclose(chain.positions[0], 0.0)
    assert chain.positions[-1][0] == pytest.approx(2.0)
    assert chain.positions[-1][1] == pytest.approx(0.0, abs=1e-12)


def test_chain_across_boundary_preserves_bond_lengths():
    config = _chain([(4.5, 0, 0), (-4.5, 0.3, 0), (-3.6, 1.0, 0)])
    chain = aligned_chain_positions(config)
    steps = np.linalg.norm(np.diff(chain.positions, axis=0), axis=1)
    assert steps[0] == pytest.approx(np.hypot(1.0, 0.3))
    assert chain.positions[-1][1] == pytest.approx(0.0, abs=1e-12)
    assert chain.positions[-1][0] > 0


def test_closed_chain_raises():
    config = _chain([(0, 0, 0), (1, 0, 0), (0, 0, 0)])
    with pytest.raises(ValueError):
        aligned_chain_positions(config)


def test_xy_writer_without_forces(tmp_path):
    path = tmp_path / "xypos.csv"
    writer = XYPositionWriter(path)
    config = _chain([(0, 0, 0), (1, 0, 0)])
    writer.write(config, False)
    writer.write(config, False)
    lines = path.read_text().splitlines()
    assert lines[0] == ",x,y,fx,fy,particle,time"
    assert len(lines) == 5
    assert writer.linecount == 4
    assert lines[3].split(",")[0] == "2"
    assert lines[3].split(",")[-1] == "0.10000"


def test_xy_writer_with_forces(tmp_path):
    path = tmp_path / "xypos.csv"
    writer = XYPositionWriter(path)
    config = _chain([(0, 0, 0), (1, 0, 0)])
    config.particles[1].f = np.array([0.5, 0.0, 0.0])
    config.c_time = 3.0
    writer.write(config, True)
    fields = path.read_text().splitlines()[2].split(",")
    assert float(fields[3]) == pytest.approx(0.5)
    assert float(fields[6]) == pytest.approx(3.0)