"""Utility transforms for force-constant arrays."""

from __future__ import annotations

import numpy as np

from fcsympy.core import symmetrize_compact_force_constants, symmetrize_force_constants

from .builders import translation_operations
from .schema import SupercellSymmetry, SymmetryConfig
from .validators import force_constants_layout, validate_supercell_symmetry


def enforce_translational_asr(
    force_constants: np.ndarray,
    symmetry: SupercellSymmetry | None = None,
    config: SymmetryConfig | None = None,
) -> tuple[np.ndarray, float]:
    """Return a permutation-symmetric copy with sum-rule diagonal blocks.

    Each self block becomes ``-(S + S.T) / 2`` with ``S`` the sum of the
    other blocks in its row, so the row sums left over are ``(S - S.T) / 2``.
    They vanish exactly when ``S`` is symmetric, which site symmetry ensures
    for a field already covariant under the crystal's operations.

    Full ``(N, N, 3, 3)`` arrays need no symmetry tables. Compact
    ``(Np, N, 3, 3)`` arrays are symmetrized with the pure lattice
    translations of ``symmetry``.

    Returns:
        (corrected_fc, max_residual_before_correction)
    """

    config = config or SymmetryConfig()
    layout = force_constants_layout(force_constants, symmetry)
    corrected = np.array(force_constants, dtype=config.dtype, copy=True, order="C")
    residual_max = float(np.max(np.abs(corrected.sum(axis=1)))) if corrected.size else 0.0

    if layout == "full":
        symmetrize_force_constants(corrected, n_threads=config.n_threads)
        return corrected, residual_max

    validate_supercell_symmetry(symmetry)
    ops = translation_operations(symmetry.rotations_cart)
    if ops.size == 0:
        raise ValueError("Compact symmetrization needs at least the identity among the operations.")
    symmetrize_compact_force_constants(
        corrected,
        np.asarray(symmetry.permutations)[ops],
        symmetry.s2p,
        symmetry.p2s,
        n_threads=config.n_threads,
    )
    return corrected, residual_max
