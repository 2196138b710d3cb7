# patchysim

`patchysim` analyses configurations of patchy colloidal particles. These
particles carry a few attractive sites on their surface and link up into
chains, rings and networks. You build the configurations in memory and give
them to the analysis functions.

## Modules

- **`patchysim.model`**: `ParticleType`, `Particle` and `Configuration`.
  A `Particle` holds a position, an orientation quaternion, force and torque,
  patch vectors and bond lists (`add_bond`, `clear_bonds`).
  `Configuration.update_patch_vectors` rotates the body-frame sites of each
  type into lab-frame patch vectors. The module also has the helpers
  `minimum_image`, `rotation_matrix` and `normalize_quaternion`.
- **`patchysim.statistics`**: `running_mean` and `running_variance2`.
  `RunningStatistics` keeps a running mean and population variance through
  `add` and `reset`. `StatsLength` is a row of such accumulators with a file
  name attached.
- **`patchysim.clusters`**: minimum-image pair geometry (`particle_vector`,
  `particle_distance`, `distance_length_vector`) and `bond_check`.
  `cluster_analysis` labels every particle with a cluster id.
  `clustersize_identification` returns a `ClusterTable` of members per
  cluster. `unwrap_cluster` and `link_all_clusters` make clusters contiguous
  across periodic boundaries. Also provided are `check_max_bonds` and
  `particle_in_wall`.
- **`patchysim.output`**: text writers and reports. `write_configuration`
  writes a snapshot and `append_energy` appends to an energy log.
  `write_statistics` and `write_stats_length` write accumulators.
  `append_type_value` and `write_type_value` write per-type values to files
  named `<name>_ptype<n>.out`. `count_empty_and_monomers`, `cluster_report` and
  `configuration_report` return counts and readable summaries.
- **`patchysim.relaxation`**: `ClusterSizeAccumulator` keeps running histograms
  and normalised distributions of cluster sizes and writes
  `clustersize_distribution.out`. `aligned_chain_positions` unfolds a chain from
  particle 0 and rotates it about z so that its end lies on the +x axis.
  `XYPositionWriter` appends those positions, with forces if asked, to a CSV
  file (`xypos.csv` by default).
- **`patchysim.reactions`**: `reaction_type` classifies a bond as DP–DP, or as
  DP bound to a tri-patch site that the active force points toward or away
  from. `association_type2` and `dissociation_type2` label sites by the
  direction of the active force.
- **`patchysim.autocorrelation`**: `identify_bound_and_free_sites` sorts every
  site of a snapshot into free sites and unique `BondRecord`s, returned as a
  `SiteInventory`. `AutocorrelationMeasurement.measure` takes a list of
  snapshots and builds survival curves of free sites (association) and of
  bonds (dissociation) for reaction types 0–2 and their total (type 3).
  `write` produces `association_reaction<n>` and `dissociation_reaction<n>`.
- **`patchysim.breakage`**: transition-state bookkeeping of bond breakage.
  `Lambdas.from_minimum` places the interfaces λ₁₂ and λ₂₃ at fixed fractions
  of the potential minimum. `region_of` maps a surface distance and interface
  energy to a `Region`. `BreakageTracker.check_crossing` registers region
  changes per bond and keeps `TSTRecord` counts and S histograms, and
  returns True on breakage. It also provides `reset_bond` and
  `breakage_probabilities`, which can append to `TST_all_P_tau.out`.
  `update_histogram` bins a switching value.
- **`patchysim.breakage_report`**: `chain_bond_numbers` and `ring_bond_numbers`
  return a `BondNumbering` of bond and reduced bond numbers.
  `mechanism_probabilities`, `write_s_values`, `write_histogram`,
  `write_value`, `append_value` and `write_transition_sums` (which writes
  `transition_sums_N.out`) produce the breakage output files.

## Installation

```
pip install .
```

Install the test dependencies with `pip install .[test]`, then run `pytest`.

## Example

```python
from patchysim.statistics import RunningStatistics

stats = RunningStatistics()
for x in (1.0, 2.0, 3.0):
    stats.add(x)
print(stats.mean, stats.variance2)  # 2.0 0.666...
```

Fill in the bond lists of the particles first. Then call `cluster_analysis`
on the `Configuration`, and after it `clustersize_identification` to get the
members of each cluster.

## What the package does not do

- It does not run simulations. It has no dynamics or Monte Carlo moves, and no
  interaction potentials or switching functions. Bond lists, bound sites,
  forces, interface energies and switching values come from the caller.
- It does not read trajectory files. `AutocorrelationMeasurement.measure`
  expects the snapshots as `Configuration` objects already in memory.
- It has no command-line program.