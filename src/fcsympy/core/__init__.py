from .distribute import distribute_force_constants
from .parallel import partition_ranges, resolve_n_threads, run_partitioned
from .permutation import PermutationMatch, compute_all_permutations, compute_permutation
from .smallest_vectors import copy_smallest_vectors, get_smallest_vectors
from .symmetrize import (
    get_drift_force_constants,
    get_permutation_residual,
    set_permutation_symmetry,
    set_translational_invariance,
    symmetrize_compact_force_constants,
    symmetrize_force_constants,
)
from .types import DEFAULT_SYMPREC, NUM_IMAGES, search_directions, wrap_fractional

__all__ = [
    "DEFAULT_SYMPREC",
    "NUM_IMAGES",
    "search_directions",
    "wrap_fractional",
    "partition_ranges",
    "resolve_n_threads",
    "run_partitioned",
    "PermutationMatch",
    "compute_permutation",
    "compute_all_permutations",
    "copy_smallest_vectors",
    "get_smallest_vectors",
    "distribute_force_constants",
    "set_permutation_symmetry",
    "set_translational_invariance",
    "symmetrize_force_constants",
    "symmetrize_compact_force_constants",
    "get_drift_force_constants",
    "get_permutation_residual",
]
