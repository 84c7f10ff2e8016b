from .builders import (
    build_supercell_symmetry,
    compact_fc_to_full_fc,
    fractional_to_cartesian_rotations,
    full_fc_to_compact_fc,
    infer_s2p,
    resolve_atom_mappings,
    translation_operations,
)
from .fc_tools import enforce_translational_asr
from .schema import SupercellSymmetry, SymmetryConfig
from .validators import force_constants_layout, validate_supercell_symmetry

__all__ = [
    "SupercellSymmetry",
    "SymmetryConfig",
    "build_supercell_symmetry",
    "fractional_to_cartesian_rotations",
    "translation_operations",
    "infer_s2p",
    "resolve_atom_mappings",
    "compact_fc_to_full_fc",
    "full_fc_to_compact_fc",
    "enforce_translational_asr",
    "validate_supercell_symmetry",
    "force_constants_layout",
]
