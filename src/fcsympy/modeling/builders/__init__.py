from .fc_builder import compact_fc_to_full_fc, full_fc_to_compact_fc
from .symmetry_builder import (
    build_supercell_symmetry,
    fractional_to_cartesian_rotations,
    infer_s2p,
    resolve_atom_mappings,
    translation_operations,
)

__all__ = [
    "build_supercell_symmetry",
    "fractional_to_cartesian_rotations",
    "translation_operations",
    "infer_s2p",
    "resolve_atom_mappings",
    "compact_fc_to_full_fc",
    "full_fc_to_compact_fc",
]
