"""Conversions between compact and full force-constant arrays."""

from __future__ import annotations

import logging

import numpy as np

from fcsympy.core import distribute_force_constants, symmetrize_force_constants
from fcsympy.core.types import as_index_array, check_index_range
from fcsympy.modeling.schema import SupercellSymmetry, SymmetryConfig
from fcsympy.modeling.validators import force_constants_layout, validate_supercell_symmetry

from .symmetry_builder import resolve_atom_mappings

logger = logging.getLogger(__name__)

Array = np.ndarray


def full_fc_to_compact_fc(full_fc: Array, p2s: Array) -> Array:
    """Copy the representative rows of a full ``(N, N, 3, 3)`` array."""

    fc = np.asarray(full_fc)
    force_constants_layout(fc)
    prim = as_index_array(p2s, "p2s")
    check_index_range(prim, fc.shape[0], "p2s")
    return np.ascontiguousarray(fc[prim])


def compact_fc_to_full_fc(
    compact_fc: Array,
    symmetry: SupercellSymmetry,
    config: SymmetryConfig | None = None,
) -> Array:
    """Expand ``(Np, N, 3, 3)`` force constants to every supercell atom.

    Representative rows are placed at ``p2s`` and the remaining rows are
    filled by symmetry distribution. With ``config.symmetrize`` the result
    is then made permutation symmetric and translationally invariant.
    """

    config = config or SymmetryConfig()
    validate_supercell_symmetry(symmetry)
    force_constants_layout(compact_fc, symmetry)
    if np.asarray(compact_fc).shape[0] != symmetry.n_primitive:
        raise ValueError("compact_fc must have one row per p2s atom.")
    map_atoms, map_syms = resolve_atom_mappings(symmetry)
    p2s = as_index_array(symmetry.p2s, "p2s")
    sources = np.unique(map_atoms)
    if not np.all(np.isin(sources, p2s)):
        raise ValueError("Every representative in map_atoms must have a row in the compact array (p2s).")

    natom = symmetry.n_atoms
    full = np.zeros((natom, natom, 3, 3), dtype=config.dtype)
    full[p2s] = compact_fc
    distribute_force_constants(
        full,
        np.arange(natom),
        symmetry.rotations_cart,
        symmetry.permutations,
        map_atoms,
        map_syms,
        n_threads=config.n_threads,
    )
    if config.symmetrize:
        symmetrize_force_constants(full, n_threads=config.n_threads)
    logger.debug("Expanded compact force constants from %d to %d rows.", p2s.size, natom)
    return full
