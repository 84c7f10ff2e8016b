from .fc_validator import force_constants_layout
from .symmetry_validator import validate_supercell_symmetry

__all__ = ["validate_supercell_symmetry", "force_constants_layout"]
