from .config import SymmetryConfig
from .supercell_symmetry import SupercellSymmetry

__all__ = ["SupercellSymmetry", "SymmetryConfig"]
