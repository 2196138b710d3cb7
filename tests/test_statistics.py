import numpy as np

from patchysim.statistics import (
    RunningStatistics,
    StatsLength,
    running_mean,
    running_variance2,
)

DATA = [2.5, -1.0, 4.0, 0.5, 3.25, 7.0]


def test_running_matches_numpy():
    stats = RunningStatistics()
    for x in DATA:
        stats.add(x)
    assert stats.n == len(DATA)
    assert np.isclose(stats.mean, np.mean(DATA))
    assert np.isclose(stats.variance2, np.var(DATA))


def test_functions_single_step():
    u_new = running_mean(0.0, 4.0, 0)
    assert u_new == 4.0
    assert running_variance2(4.0, 0.0, 0.0, u_new, 0) == 0.0


def test_reset():
    stats = RunningStatistics()
    stats.add(1.0)
    stats.add(3.0)
    stats.reset()
    assert (stats.mean, stats.variance2, stats.n) == (0.0, 0.0, 0)


def test_stats_length_has_data():
    sl = StatsLength(5, "hist.out")
    assert len(sl.bins) == 5
    assert not sl.has_data()
    sl.bins[3].add(1.0)
    assert sl.has_data()
    assert not sl.has_data(3)