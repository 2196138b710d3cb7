"""Bond numbering of chains and rings, and file output of breakage statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

from .breakage import NBINS_MECH, BreakageTracker, TSTRecord
from .clusters import bond_check
from .model import Configuration
from .statistics import RunningStatistics

TRANSITION_FILE = "transition_sums_N.out"
RING_HEADER = "bond,N_1,N_1->3,N_2->4,time"
CHAIN_HEADER = "bond,N_1,N_1->3,N_2->4,<tau_sim>"
TPP_SITES = 3
DP_SITES = 2


@dataclass
class BondNumbering:
    """Bond numbers and reduced bond numbers of the bonded particle pairs.

    Every bond has its own bond number; bonds that are equivalent by symmetry
    (the same position along a chain of a ring) share a reduced bond number.
    ``tau_sims`` holds, per reduced bond, the running average of the lifetimes
    reported for chains.
    """

    bond_numbers: dict = field(default_factory=dict)
    reduced_numbers: dict = field(default_factory=dict)
    nred_bonds: int = 0
    tau_sims: list = field(default_factory=list)

    def _set(self, table, i, j, number) -> None:
        table[(i, j)] = number
        table[(j, i)] = number

    def assign(self, i, j, number) -> None:
        self._set(self.bond_numbers, i, j, number)

    def assign_reduced(self, i, j, number) -> None:
        self._set(self.reduced_numbers, i, j, number)

    def bond(self, i, j) -> int:
        return self.bond_numbers[(i, j)]

    def reduced(self, i, j) -> int:
        return self.reduced_numbers[(i, j)]

    def pairs(self) -> list:
        """The numbered pairs ``(i, j)`` with ``i < j``, in increasing order."""
        return sorted(pair for pair in self.bond_numbers if pair[0] < pair[1])

    def ensure_tau_stats(self) -> None:
        while len(self.tau_sims) < self.nred_bonds:
            self.tau_sims.append(RunningStatistics())


def chain_bond_numbers(config: Configuration) -> BondNumbering:
    """Number the bonds of a linear chain; bond and reduced numbers coincide."""
    numbering = BondNumbering()
    number = 0
    for i in range(config.nparts):
        for j in range(i + 1, config.nparts):
            if bond_check(config, i, j):
                numbering.assign(i, j, number)
                numbering.assign_reduced(i, j, number)
                number += 1
    numbering.nred_bonds = number
    if number == 0:
        raise ValueError("no bonds found")
    if number != config.nparts - 1:
        raise ValueError(
            f"a chain of {config.nparts} particles needs {config.nparts - 1} bonds, found {number}"
        )
    numbering.ensure_tau_stats()
    return numbering


def ring_bond_numbers(config: Configuration) -> BondNumbering:
    """Number the bonds of a ring of tri-patch nodes joined by di-patch chains.

    The first particles are the tri-patch particles (type 0), followed by the
    di-patch particles (type 1), ordered chain by chain.
    """
    if len(config.types) < 2:
        raise ValueError("a ring needs a tri-patch and a di-patch particle type")
    if config.types[0].nsites != TPP_SITES and config.types[1].nsites != DP_SITES:
        raise ValueError("first type should be TPP, and second DP particle")
    ndp = config.types[1].nparticles
    ntpp = config.types[0].nparticles
    if ntpp <= 0:
        raise ValueError("a ring needs at least one tri-patch particle")
    lchain = ndp // ntpp
    first_dp = ntpp
    remaining = set(range(ntpp, ntpp + ndp))

    numbering = BondNumbering(nred_bonds=lchain + 1)
    bond_nr = 0
    redbond_nr = 0
    dpc = first_dp
    for _chain in range(ntpp):
        redbond_nr = 0
        for _ in range(lchain):
            for bound in config.particles[dpc].bonds:
                if dpc < bound or bound < ntpp:
                    numbering.assign(dpc, bound, bond_nr)
                    bond_nr += 1
                if bound in remaining or bound < ntpp:
                    numbering.assign_reduced(dpc, bound, redbond_nr)
                    if bound >= first_dp:
                        remaining.discard(bound)
                    redbond_nr += 1
            remaining.discard(dpc)
            dpc += 1
    if redbond_nr != numbering.nred_bonds:
        raise ValueError("problem with finding reduced bond numbers for rings")
    numbering.ensure_tau_stats()
    return numbering


def _bond_file(name, bond, directory) -> Path:
    return Path(directory) / f"{name}_bond{bond}.out"


def write_histogram(name, values, bond, directory=".") -> Path:
    """Write one value per line to ``<name>_bond<bond>.out``, overwriting it."""
    path = _bond_file(name, bond, directory)
    path.write_text("".join(f"{v:.5f}\n" for v in values))
    return path


def write_value(name, value, bond, directory=".") -> Path:
    path = _bond_file(name, bond, directory)
    path.write_text(f"{value:.10f}\n")
    return path


def append_value(name, value, bond, directory=".") -> Path:
    path = _bond_file(name, bond, directory)
    with open(path, "a") as handle:
        handle.write(f"{value:.10f}\n")
    return path


class MechanismProbabilities(NamedTuple):
    p_1to3: list
    p_2to4: list
    p_mech: list


def _divide(numerator, denominator) -> float:
    if denominator == 0:
        return math.copysign(math.inf, numerator) if numerator != 0 else math.nan
    return numerator / denominator


def mechanism_probabilities(record: TSTRecord) -> MechanismProbabilities:
    """Per-S-bin probabilities of crossing lambda_23, of separating, and the mechanism."""
    p_1to3 = [_divide(n, record.n_13) for n in record.n_1to3]
    p_2to4 = [_divide(b, a) for b, a in zip(record.n_2to4, record.n_1to3)]
    p_mech = [_divide(n, record.n_24) for n in record.n_2to4]
    return MechanismProbabilities(p_1to3, p_2to4, p_mech)


def write_s_values(record: TSTRecord, bond, directory=".") -> list:
    """Write the S histograms and mechanism probabilities of one bond."""
    probabilities = mechanism_probabilities(record)
    outputs = (
        ("S_hist_n_2to4", record.n_2to4),
        ("S_hist_n_1to3", record.n_1to3),
        ("S_hist_n_3to1", record.n_3to1),
        ("S_hist_lambda_23", record.s_hist_lambda_23_all),
        ("P_1to3", probabilities.p_1to3),
        ("P_2to4", probabilities.p_2to4),
        ("P_mech", probabilities.p_mech),
    )
    return [
        write_histogram(name, list(values)[:NBINS_MECH], bond, directory)
        for name, values in outputs
    ]


def write_transition_sums(
    tracker: BreakageTracker, numbering: BondNumbering, directory=".", ring=False
) -> Path:
    """Sum the crossing counts over bonds sharing a reduced number and write them.

    For rings the summed lifetimes are written; for chains the running average
    of the lifetimes, kept in ``numbering.tau_sims``.
    """
    nred = numbering.nred_bonds
    numbering.ensure_tau_stats()
    n_1 = [0] * nred
    n_13 = [0] * nred
    n_24 = [0] * nred
    time = [0.0] * nred
    for i, j in numbering.pairs():
        red = numbering.reduced(i, j)
        total = tracker.total[numbering.bond(i, j)]
        n_1[red] += total.n_1
        n_13[red] += total.n_13
        n_24[red] += total.n_24
        if ring:
            time[red] += total.tau_sim
        else:
            numbering.tau_sims[red].add(total.tau_sim)

    if ring:
        lines = [RING_HEADER + "\n"] + [
            f"{r},{n_1[r]},{n_13[r]},{n_24[r]},{time[r]:.15f}\n" for r in range(nred)
        ]
    else:
        lines = [CHAIN_HEADER + "\n"] + [
            f"{r},{n_1[r]},{n_13[r]},{n_24[r]},{numbering.tau_sims[r].mean:.6f}\n"
            for r in range(nred)
        ]
    path = Path(directory) / TRANSITION_FILE
    path.write_text("".join(lines))
    return path