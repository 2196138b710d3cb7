"""Transition-state bookkeeping of bond breakage between pairs of particles.

A bond is watched as it moves between four regions of the (distance, S)
landscape.  The regions are separated by the interfaces lambda_12 and lambda_23,
defined on the energy E_lambda = S * U_attr(r), and by a distance threshold
beyond which the bond counts as broken.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import NamedTuple

from .statistics import RunningStatistics

NBINS_MECH = 25
S_LAMBDA_12 = 0.7
S_LAMBDA_23 = 0.01
BONDBREAKAGE_THRESHOLD = 0.5
PROBABILITY_FILE = "TST_all_P_tau.out"
PROBABILITY_HEADER = "#P_lambda23_lambda12,Psep,Prebind,invflux_12,tau_sim,bond"


class Region(IntEnum):
    """Region of the landscape a bond is in."""

    BOUND = 1
    TRANSITION = 2
    UNBOUND = 3
    BROKEN = 4


@dataclass
class Lambdas:
    """Positions of the interfaces, the same for all bonds."""

    bondbreakage_treshold: float
    s_lambda_12: float
    s_lambda_23: float
    lambda_12: float
    lambda_23: float

    @classmethod
    def from_minimum(cls, e_smin) -> "Lambdas":
        """Interfaces at fixed fractions of the potential minimum ``e_smin``."""
        return cls(
            bondbreakage_treshold=BONDBREAKAGE_THRESHOLD,
            s_lambda_12=S_LAMBDA_12,
            s_lambda_23=S_LAMBDA_23,
            lambda_12=S_LAMBDA_12 * e_smin,
            lambda_23=S_LAMBDA_23 * e_smin,
        )


def region_of(surface_distance, e_lambda, lambdas: Lambdas, s_cutoff) -> Region:
    """Region of a bond at ``surface_distance`` with interface energy ``e_lambda``.

    ``e_lambda`` is only consulted when the distance lies within ``s_cutoff``.
    """
    if surface_distance > lambdas.bondbreakage_treshold:
        return Region.BROKEN
    if surface_distance > s_cutoff:
        return Region.UNBOUND
    if e_lambda is None:
        raise ValueError("an interface energy is needed within the cutoff")
    if e_lambda <= lambdas.lambda_12:
        return Region.BOUND
    if lambdas.lambda_12 < e_lambda <= lambdas.lambda_23:
        return Region.TRANSITION
    if e_lambda >= lambdas.lambda_23:
        return Region.UNBOUND
    raise ValueError(
        f"cannot locate E_lambda={e_lambda} between the interfaces "
        f"{lambdas.lambda_12} and {lambdas.lambda_23}"
    )


def update_histogram(hist, s) -> int:
    """Add one count for switching value ``s`` in [0, 1]; return the bin used."""
    width = 1.0 / NBINS_MECH
    index = int(s / width)
    if index == NBINS_MECH:
        index = NBINS_MECH - 1
    if not 0 <= index < NBINS_MECH:
        raise ValueError(f"S={s} lies outside the histogram range")
    hist[index] += 1
    return index


def _histogram() -> list:
    return [0.0] * NBINS_MECH


@dataclass
class TSTRecord:
    """Crossing counts, flags and histograms of one bond."""

    loc: int = 0
    n_13: int = 0
    n_31: int = 0
    n_24: int = 0
    n_1: int = 0
    flag_from1: bool = False
    flag_from3: bool = False
    last_lambda_12_time: float = 0.0
    tau_sim: float = 0.0
    s_mech: float = 0.0
    s_hist_lambda_23_all: list = field(default_factory=_histogram)
    n_1to3: list = field(default_factory=_histogram)
    n_2to4: list = field(default_factory=_histogram)
    n_3to1: list = field(default_factory=_histogram)
    p_lambda23_lambda12: RunningStatistics = field(default_factory=RunningStatistics)
    psep: RunningStatistics = field(default_factory=RunningStatistics)
    prebind: RunningStatistics = field(default_factory=RunningStatistics)
    invflux_12: RunningStatistics = field(default_factory=RunningStatistics)
    tau_12: RunningStatistics = field(default_factory=RunningStatistics)


class BreakageProbabilities(NamedTuple):
    p_lambda23_lambda12: float
    psep: float
    prebind: float


def _ratio(numerator, denominator) -> float:
    if denominator == 0:
        return math.inf if numerator > 0 else math.nan
    return numerator / denominator


class BreakageTracker:
    """Tracks interface crossings of ``nbonds`` bonds.

    ``current`` holds the records of the breakage event in progress, ``total``
    the records accumulated over all events.  When ``directory`` is given, every
    breakage appends its probabilities to a file there.
    """

    def __init__(self, nbonds, directory=None) -> None:
        self.current = [TSTRecord() for _ in range(nbonds)]
        self.total = [TSTRecord() for _ in range(nbonds)]
        self.directory = None if directory is None else Path(directory)
        self._header_written = False

    @staticmethod
    def _require(s_value):
        if s_value is None:
            raise ValueError("a switching value is needed to cross lambda_23")
        return s_value

    def check_crossing(self, bond, newloc, time, s_value=None) -> bool:
        """Register that ``bond`` is in region ``newloc`` at ``time``.

        ``s_value`` is the bond's current switching value; it is needed when
        lambda_23 is crossed.  Returns True when the bond has broken.
        """
        cur = self.current[bond]
        tot = self.total[bond]
        newloc = Region(newloc)

        if not cur.flag_from1 and not cur.flag_from3:
            if cur.loc == Region.BOUND and newloc == Region.TRANSITION:
                cur.flag_from1 = True
                cur.last_lambda_12_time = time
            cur.loc = newloc
            return False

        if newloc == cur.loc:
            return False

        move = (cur.loc, newloc)
        if move == (Region.BOUND, Region.TRANSITION):
            if cur.flag_from1:
                timedif = time - cur.last_lambda_12_time
                cur.invflux_12.add(timedif)
                tot.invflux_12.add(timedif)
                cur.n_1 += 1
                cur.last_lambda_12_time = time
            elif cur.flag_from3:
                raise ValueError(
                    f"bond {bond} crossed lambda_12 forward while coming from region 3"
                )
        elif move == (Region.TRANSITION, Region.UNBOUND):
            s = self._require(s_value)
            if not cur.flag_from3 and cur.flag_from1:
                cur.n_13 += 1
                cur.s_mech = s
                update_histogram(tot.n_1to3, s)
                cur.flag_from1 = False
                cur.flag_from3 = True
            cur.tau_sim = time
            update_histogram(tot.s_hist_lambda_23_all, s)
        elif move == (Region.TRANSITION, Region.BOUND):
            if not cur.flag_from1 and cur.flag_from3:
                cur.n_31 += 1
                update_histogram(tot.n_3to1, cur.s_mech)
                cur.s_mech = -1.0
                cur.flag_from1 = True
                cur.flag_from3 = False
        elif move == (Region.UNBOUND, Region.TRANSITION):
            s = self._require(s_value)
            if not cur.flag_from3 and cur.flag_from1:
                raise ValueError(
                    f"bond {bond} crossed lambda_23 backward while coming from region 1"
                )
            update_histogram(tot.s_hist_lambda_23_all, s)
        elif move == (Region.UNBOUND, Region.BROKEN):
            cur.n_24 += 1
            tot.tau_sim += cur.tau_sim
            update_histogram(tot.n_2to4, cur.s_mech)
            cur.s_mech = -1.0
            self.breakage_probabilities(bond)
            return True
        else:
            raise ValueError(
                f"bond {bond} jumped from region {int(cur.loc)} to {int(newloc)} "
                f"at time {time}"
            )
        cur.loc = newloc
        return False

    def reset_bond(self, bond, loc) -> None:
        """Add the event's counts to the totals and restart ``bond`` in region ``loc``."""
        cur = self.current[bond]
        tot = self.total[bond]
        cur.loc = Region(loc)
        tot.n_13 += cur.n_13
        tot.n_31 += cur.n_31
        tot.n_24 += cur.n_24
        tot.n_1 += cur.n_1
        cur.flag_from1 = False
        cur.flag_from3 = False
        cur.n_13 = cur.n_31 = cur.n_24 = cur.n_1 = 0
        cur.last_lambda_12_time = 0.0
        cur.tau_sim = 0.0
        cur.invflux_12.reset()

    def breakage_probabilities(self, bond) -> BreakageProbabilities:
        """Conditional probabilities of the finished event, added to the totals."""
        cur = self.current[bond]
        tot = self.total[bond]
        result = BreakageProbabilities(
            _ratio(cur.n_13, cur.n_1),
            _ratio(cur.n_24, cur.n_13),
            _ratio(cur.n_31, cur.n_13),
        )
        tot.p_lambda23_lambda12.add(result.p_lambda23_lambda12)
        tot.psep.add(result.psep)
        tot.prebind.add(result.prebind)

        if self.directory is not None:
            path = self.directory / PROBABILITY_FILE
            if not self._header_written:
                path.write_text(PROBABILITY_HEADER + "\n")
                self._header_written = True
            line = (
                f"{result.p_lambda23_lambda12:.15f},{result.psep:.15f},"
                f"{result.prebind:.15f},{cur.invflux_12.mean:.15f},"
                f"{cur.tau_sim:.15f},{bond}\n"
            )
            with open(path, "a") as handle:
                handle.write(line)
        return result