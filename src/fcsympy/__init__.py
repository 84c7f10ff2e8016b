from .core import (
    PermutationMatch,
    compute_all_permutations,
    compute_permutation,
    copy_smallest_vectors,
    distribute_force_constants,
    get_smallest_vectors,
    symmetrize_compact_force_constants,
    symmetrize_force_constants,
)
from .modeling import SupercellSymmetry, SymmetryConfig, compact_fc_to_full_fc, enforce_translational_asr

__all__ = [
    "PermutationMatch",
    "compute_permutation",
    "compute_all_permutations",
    "copy_smallest_vectors",
    "get_smallest_vectors",
    "distribute_force_constants",
    "symmetrize_force_constants",
    "symmetrize_compact_force_constants",
    "SupercellSymmetry",
    "SymmetryConfig",
    "compact_fc_to_full_fc",
    "enforce_translational_asr",
]
