"""Running mean and variance accumulators."""

from __future__ import annotations

from dataclasses import dataclass, field


def running_mean(u_old, x_new, n_old) -> float:
    """Mean after adding ``x_new`` to ``n_old`` measurements of mean ``u_old``."""
    return u_old + (x_new - u_old) / (n_old + 1)


def running_variance2(x_new, s_old2, u_old, u_new, n_old) -> float:
    """Population variance after adding ``x_new``."""
    return (s_old2 * n_old + (x_new - u_new) * (x_new - u_old)) / (n_old + 1)


@dataclass
class RunningStatistics:
    """Running mean and (population) variance of a stream of values."""

    mean: float = 0.0
    variance2: float = 0.0
    n: int = 0

    def add(self, x_new) -> None:
        u_new = running_mean(self.mean, x_new, self.n)
        self.variance2 = running_variance2(x_new, self.variance2, self.mean, u_new, self.n)
        self.mean = u_new
        self.n += 1

    def reset(self) -> None:
        self.mean = 0.0
        self.variance2 = 0.0
        self.n = 0


@dataclass
class StatsLength:
    """A row of running statistics, one per bin, written to ``filename``."""

    length: int
    filename: str = ""
    bins: list = field(init=False)

    def __post_init__(self) -> None:
        self.bins = [RunningStatistics() for _ in range(self.length)]

    def has_data(self, length=None) -> bool:
        """True if any of the first ``length`` bins holds a measurement."""
        limit = self.length if length is None else length
        return any(b.n > 0 for b in self.bins[:limit])