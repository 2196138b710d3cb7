"""Plain-text output of configurations, energies, statistics and reports."""

from __future__ import annotations

from pathlib import Path

from .clusters import ClusterTable
from .model import Configuration
from .statistics import RunningStatistics, StatsLength


def write_configuration(config: Configuration, path) -> None:
    """Write positions and quaternions of all particles, overwriting ``path``."""
    box = config.box
    lines = [f"{config.nparts} {box[0]:.6f}  {box[1]:.6f}  {box[2]:.6f} \n"]
    for particle in config.particles:
        values = (*particle.r, *particle.q)
        lines.append(" ".join(f"{v:.6f}" for v in values) + "\n")
    Path(path).write_text("".join(lines))


def append_energy(config: Configuration, path, with_time) -> None:
    """Append the energy, preceded by the simulation time if ``with_time``."""
    if with_time:
        line = f"{config.c_time:8.12f} {config.energy:8.12f}\n"
    else:
        line = f"{config.energy:8.12f}\n"
    with open(path, "a") as handle:
        handle.write(line)


def write_statistics(stats: RunningStatistics, path) -> None:
    """Write mean, variance and count of a single accumulator."""
    Path(path).write_text(f"{stats.mean:8.12f} {stats.variance2:8.12f} {stats.n}\n")


def write_stats_length(stats: StatsLength, length) -> bool:
    """Write the first ``length`` bins to ``stats.filename`` if any holds data.

    Returns whether the file was written.
    """
    if not stats.has_data(length):
        return False
    lines = (
        f"{i + 1} {b.mean:8.12f} {b.variance2:8.12f} {b.n}\n"
        for i, b in enumerate(stats.bins[:length])
    )
    Path(stats.filename).write_text("".join(lines))
    return True


def _type_file(name, ptype, directory) -> Path:
    return Path(directory) / f"{name}_ptype{ptype}.out"


def append_type_value(name, ptype, value, directory=".") -> None:
    with open(_type_file(name, ptype, directory), "a") as handle:
        handle.write(f"{value:.10f}\n")


def write_type_value(name, ptype, value, directory=".") -> None:
    _type_file(name, ptype, directory).write_text(f"{value:.10f}\n")


def count_empty_and_monomers(sizes, nparts) -> tuple:
    """Return ``(empty clusters, monomers)``; the sizes must add up to ``nparts``."""
    sizes = list(sizes)
    if sum(sizes) != nparts:
        raise ValueError(
            "the cluster sizes do not add up to the number of particles"
        )
    return sizes.count(0), sizes.count(1)


def cluster_report(table: ClusterTable) -> str:
    """One line per cluster listing its size and members."""
    lines = []
    for cid, members in enumerate(table.members):
        listing = "".join(f" {p}, " for p in members)
        lines.append(f"   ID # {cid} \\w {len(members)} particles:   {listing} ")
    return "\n".join(lines)


def configuration_report(config: Configuration) -> str:
    """A human-readable dump of the configuration and every particle."""
    lines = [
        "",
        "     >>>>> Slice Information <<<<<<",
        f"            energy               {config.energy:10.10f}",
        f"            nbonds               {config.nbonds}",
        f"            nparts               {config.nparts}",
        f"             c_time               {config.c_time:10.10f}",
    ]
    for n, particle in enumerate(config.particles):
        r, f = particle.r, particle.f
        lines += [
            "",
            f"                 particle      {n}     ",
            f"                 cluster id    {particle.cluster_id}     ",
            f"                 ptype         {particle.ptype}     ",
            f"                 position    ( {r[0]:10.5f}  {r[1]:10.5f}  {r[2]:10.5f})     ",
            f"                 force       ( {f[0]:10.5f}  {f[1]:10.5f}  {f[2]:10.5f})     ",
        ]
        for p in particle.patchvectors:
            lines.append(
                f"                 patchvector          ( {p[0]:10.5f}  {p[1]:10.5f}  {p[2]:10.5f})     "
            )
        bonds = "".join(
            f"{j} (EBond={e:.15f}),    "
            for j, e in zip(particle.bonds, particle.bond_energy)
        )
        lines.append(
            f"                 has {particle.nbonds} bonds with:           {bonds}"
        )
    return "\n".join(lines) + "\n"