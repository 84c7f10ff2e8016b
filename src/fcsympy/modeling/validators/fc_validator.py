"""Validation helpers for force-constant arrays."""

from __future__ import annotations

import numpy as np

from fcsympy.modeling.schema import SupercellSymmetry


def force_constants_layout(force_constants: np.ndarray, symmetry: SupercellSymmetry | None = None) -> str:
    """Return ``"full"`` or ``"compact"`` for an IFC array, raising on bad shapes."""

    fc = np.asarray(force_constants)
    if fc.ndim != 4 or fc.shape[2:] != (3, 3):
        raise ValueError(f"Force constants must have shape (n_rows, n_atoms, 3, 3), got {fc.shape}.")
    if symmetry is None:
        if fc.shape[0] != fc.shape[1]:
            raise ValueError("Compact force constants require the supercell symmetry tables.")
        return "full"
    natom = symmetry.n_atoms
    if fc.shape[1] != natom:
        raise ValueError(f"Force constants have {fc.shape[1]} columns but the supercell has {natom} atoms.")
    if fc.shape[0] == natom:
        return "full"
    if fc.shape[0] == symmetry.n_primitive:
        return "compact"
    raise ValueError(
        f"Force constants have {fc.shape[0]} rows; expected {natom} (full) or {symmetry.n_primitive} (compact)."
    )
