"""Validation helpers for supercell symmetry tables."""

from __future__ import annotations

import numpy as np

from fcsympy.core.types import as_index_array, check_index_range
from fcsympy.modeling.schema import SupercellSymmetry


def validate_supercell_symmetry(symmetry: SupercellSymmetry) -> None:
    lattice = np.asarray(symmetry.lattice, dtype=float)
    if lattice.shape != (3, 3):
        raise ValueError("SupercellSymmetry.lattice must have shape (3, 3).")
    if abs(float(np.linalg.det(lattice))) < 1e-12:
        raise ValueError("SupercellSymmetry.lattice must be non-singular.")
    positions = np.asarray(symmetry.positions, dtype=float)
    if positions.ndim != 2 or positions.shape[1] != 3 or positions.shape[0] == 0:
        raise ValueError("SupercellSymmetry.positions must be a non-empty (n_atoms, 3) array.")
    natom = positions.shape[0]

    perms = as_index_array(symmetry.permutations, "permutations", ndim=2)
    if perms.shape[0] == 0 or perms.shape[1] != natom:
        raise ValueError(f"SupercellSymmetry.permutations must have shape (n_ops, {natom}).")
    check_index_range(perms, natom, "permutations")
    for s, perm in enumerate(perms):
        if np.unique(perm).size != natom:
            raise ValueError(f"permutations[{s}] is not a permutation of the supercell atoms.")

    rots = np.asarray(symmetry.rotations_cart, dtype=float)
    if rots.shape != (perms.shape[0], 3, 3):
        raise ValueError("permutations and rotations are different length")

    p2s = as_index_array(symmetry.p2s, "p2s")
    if p2s.size == 0:
        raise ValueError("SupercellSymmetry.p2s must list at least one atom.")
    check_index_range(p2s, natom, "p2s")
    if np.unique(p2s).size != p2s.size:
        raise ValueError("SupercellSymmetry.p2s must not contain repeated atoms.")
    s2p = as_index_array(symmetry.s2p, "s2p")
    if s2p.shape != (natom,):
        raise ValueError("wrong shape for s2p")
    if not np.all(np.isin(s2p, p2s)):
        raise ValueError("Every s2p entry must be one of the p2s atoms.")

    if (symmetry.map_atoms is None) != (symmetry.map_syms is None):
        raise ValueError("map_atoms and map_syms must be provided together.")
    if symmetry.map_atoms is not None:
        map_atoms = as_index_array(symmetry.map_atoms, "map_atoms")
        map_syms = as_index_array(symmetry.map_syms, "map_syms")
        if map_atoms.shape != (natom,):
            raise ValueError("wrong shape for map_atoms")
        if map_syms.shape != (natom,):
            raise ValueError("wrong shape for map_syms")
        check_index_range(map_atoms, natom, "map_atoms")
        check_index_range(map_syms, perms.shape[0], "map_syms")
        if not np.all(map_atoms[map_atoms] == map_atoms):
            raise ValueError("map_atoms must send representatives to themselves.")
