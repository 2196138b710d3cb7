import math

import pytest

from patchysim.breakage import NBINS_MECH, BreakageTracker, TSTRecord
from patchysim.breakage_report import (
    BondNumbering,
    append_value,
    chain_bond_numbers,
    mechanism_probabilities,
    ring_bond_numbers,
    write_histogram,
    write_s_values,
    write_transition_sums,
    write_value,
)
from patchysim.model import Configuration, Particle, ParticleType


def make_chain(n):
    particles = []
    for i in range(n):
        bonds = [j for j in (i - 1, i + 1) if 0 <= j < n]
        particles.append(Particle(ptype=0, bonds=bonds))
    return Configuration(particles=particles, types=[ParticleType(nsites=2, nparticles=n)])


def make_ring():
    particles = [
        Particle(ptype=0, bonds=[1, 2]),
        Particle(ptype=1, bonds=[0, 2]),
        Particle(ptype=1, bonds=[1, 0]),
    ]
    types = [ParticleType(nsites=3, nparticles=1), ParticleType(nsites=2, nparticles=2)]
    return Configuration(particles=particles, types=types)


def test_chain_numbers_follow_the_chain():
    config = make_chain(4)
    numbering = chain_bond_numbers(config)
    assert numbering.nred_bonds == config.nparts - 1
    numbers = [numbering.bond(i, i + 1) for i in range(config.nparts - 1)]
    assert numbers == list(range(config.nparts - 1))
    assert all(numbering.bond(i + 1, i) == numbering.reduced(i, i + 1) for i in range(3))


def test_chain_without_bonds_raises():
    config = Configuration(
        particles=[Particle(), Particle()], types=[ParticleType(nsites=2)]
    )
    with pytest.raises(ValueError):
        chain_bond_numbers(config)


def test_ring_is_not_a_chain():
    with pytest.raises(ValueError):
        chain_bond_numbers(make_ring())


def test_ring_numbering():
    config = make_ring()
    numbering = ring_bond_numbers(config)
    assert numbering.nred_bonds == 3
    pairs = numbering.pairs()
    assert pairs == [(0, 1), (0, 2), (1, 2)]
    assert {numbering.reduced(i, j) for i, j in pairs} == set(range(numbering.nred_bonds))
    assert {numbering.bond(i, j) for i, j in pairs} == set(range(len(pairs)))
    for i, j in pairs:
        assert numbering.reduced(i, j) == numbering.reduced(j, i)


def test_ring_with_wrong_types_raises():
    config = make_ring()
    config.types = [ParticleType(nsites=2, nparticles=1), ParticleType(nsites=3, nparticles=2)]
    with pytest.raises(ValueError):
        ring_bond_numbers(config)


def test_write_histogram_round_trip(tmp_path):
    values = [0.5, 0.25, 1.0]
    path = write_histogram("S_hist", values, 3, tmp_path)
    assert path.name == "S_hist_bond3.out"
    lines = path.read_text().splitlines()
    assert lines[0] == "0.50000"
    assert [float(v) for v in lines] == values


def test_write_value_overwrites_and_append_adds(tmp_path):
    write_value("invflux_12", 1.5, 0, tmp_path)
    path = write_value("invflux_12", 2.5, 0, tmp_path)
    assert path.read_text() == "2.5000000000\n"
    append_value("invflux_12", 3.25, 0, tmp_path)
    assert [float(v) for v in path.read_text().splitlines()] == [2.5, 3.25]


def test_mechanism_probabilities():
    record = TSTRecord(n_13=4, n_24=2)
    record.n_1to3[0] = 2
    record.n_2to4[0] = 1
    result = mechanism_probabilities(record)
    assert result.p_1to3[0] == pytest.approx(2 / 4)
    assert result.p_2to4[0] == pytest.approx(1 / 2)
    assert result.p_mech[0] == pytest.approx(1 / 2)
    assert result.p_1to3[1] == 0.0
    assert math.isnan(result.p_2to4[1])
    assert len(result.p_mech) == NBINS_MECH


def test_write_s_values_writes_all_files(tmp_path):
    record = TSTRecord(n_13=1, n_24=1)
    record.n_1to3[3] = 1
    record.n_2to4[3] = 1
    paths = write_s_values(record, 7, tmp_path)
    names = {p.name for p in paths}
    assert "S_hist_n_2to4_bond7.out" in names
    assert "P_mech_bond7.out" in names
    assert len(names) == 7
    for path in paths:
        assert len(path.read_text().splitlines()) == NBINS_MECH


def test_transition_sums_chain(tmp_path):
    numbering = chain_bond_numbers(make_chain(3))
    tracker = BreakageTracker(2)
    tracker.total[0].n_1 = 5
    tracker.total[0].n_13 = 2
    tracker.total[0].n_24 = 1
    tracker.total[0].tau_sim = 4.0
    path = write_transition_sums(tracker, numbering, tmp_path, ring=False)
    lines = path.read_text().splitlines()
    assert lines[0] == "bond,N_1,N_1->3,N_2->4,<tau_sim>"
    fields = lines[1].split(",")
    assert [int(v) for v in fields[:4]] == [0, 5, 2, 1]
    assert float(fields[4]) == pytest.approx(4.0)
    assert len(lines) == 1 + numbering.nred_bonds


def test_transition_sums_ring_sums_lifetimes(tmp_path):
    numbering = ring_bond_numbers(make_ring())
    tracker = BreakageTracker(3)
    for record in tracker.total:
        record.tau_sim = 1.5
        record.n_1 = 2
    path = write_transition_sums(tracker, numbering, tmp_path, ring=True)
    lines = path.read_text().splitlines()
    assert lines[0] == "bond,N_1,N_1->3,N_2->4,time"
    rows = [line.split(",") for line in lines[1:]]
    assert sum(int(r[1]) for r in rows) == 6
    assert sum(float(r[4]) for r in rows) == pytest.approx(4.5)


def test_empty_numbering_has_no_pairs():
    numbering = BondNumbering()
    numbering.assign(2, 1, 0)
    assert numbering.pairs() == [(1, 2)]
    assert numbering.bond(1, 2) == numbering.bond(2, 1)