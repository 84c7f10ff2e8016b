"""Assemble supercell symmetry tables from space-group operations."""

from __future__ import annotations

import logging

import numpy as np

from fcsympy.core import compute_all_permutations
from fcsympy.core.types import as_index_array, check_index_range
from fcsympy.modeling.schema import SupercellSymmetry, SymmetryConfig
from fcsympy.modeling.validators import validate_supercell_symmetry

logger = logging.getLogger(__name__)

Array = np.ndarray


def fractional_to_cartesian_rotations(lattice: Array, rotations: Array) -> Array:
    """Return ``L @ W @ inv(L)`` for each fractional rotation ``W``.

    ``lattice`` holds the basis vectors as columns.
    """

    lat = np.asarray(lattice, dtype=float)
    rots = np.asarray(rotations, dtype=float)
    if lat.shape != (3, 3):
        raise ValueError("lattice must have shape (3, 3).")
    if rots.ndim != 3 or rots.shape[1:] != (3, 3):
        raise ValueError("rotations must have shape (num_ops, 3, 3).")
    return np.einsum("ij,sjk,kl->sil", lat, rots, np.linalg.inv(lat))


def translation_operations(rotations_cart: Array, tol: float = 1e-8) -> Array:
    """Indices of operations whose rotation part is the identity."""

    rots = np.asarray(rotations_cart, dtype=float)
    dev = np.abs(rots - np.eye(3)[None, :, :]).reshape(rots.shape[0], -1)
    return np.flatnonzero(np.max(dev, axis=1) < tol)


def infer_s2p(permutations: Array, p2s: Array, op_indices: Array | None = None) -> Array:
    """Map each atom to the first ``p2s`` atom reached by the given operations."""

    perms = as_index_array(permutations, "permutations", ndim=2)
    prim = as_index_array(p2s, "p2s")
    check_index_range(prim, perms.shape[1], "p2s")
    ops = np.arange(perms.shape[0]) if op_indices is None else as_index_array(op_indices, "op_indices")
    images = perms[ops]
    hits = np.isin(images, prim)
    orphan = np.flatnonzero(~hits.any(axis=0))
    if orphan.size:
        raise ValueError(f"Atoms {orphan.tolist()} cannot be mapped onto any p2s atom by lattice translations.")
    first = np.argmax(hits, axis=0)
    return images[first, np.arange(perms.shape[1])]


def resolve_atom_mappings(symmetry: SupercellSymmetry) -> tuple[Array, Array]:
    """Return ``(map_atoms, map_syms)``, deriving them from ``s2p`` when absent."""

    if symmetry.map_atoms is not None and symmetry.map_syms is not None:
        return as_index_array(symmetry.map_atoms, "map_atoms"), as_index_array(symmetry.map_syms, "map_syms")
    perms = as_index_array(symmetry.permutations, "permutations", ndim=2)
    s2p = as_index_array(symmetry.s2p, "s2p")
    hits = perms == s2p[None, :]
    missing = np.flatnonzero(~hits.any(axis=0))
    if missing.size:
        raise ValueError(f"No operation maps atoms {missing.tolist()} onto their s2p representative.")
    return s2p.copy(), np.argmax(hits, axis=0)


def build_supercell_symmetry(
    lattice: Array,
    positions: Array,
    rotations: Array,
    translations: Array,
    p2s: Array,
    s2p: Array | None = None,
    config: SymmetryConfig | None = None,
) -> SupercellSymmetry:
    """Build validated tables from fractional space-group operations.

    ``rotations``/``translations`` act on fractional coordinates of the
    supercell. When ``s2p`` is omitted, each atom is assigned the first
    ``p2s`` atom reachable by a pure lattice translation.
    """

    config = config or SymmetryConfig()
    perms = compute_all_permutations(lattice, positions, rotations, translations, symprec=config.symprec)
    rotations_cart = fractional_to_cartesian_rotations(lattice, rotations)
    if s2p is None:
        s2p = infer_s2p(perms, p2s, op_indices=translation_operations(rotations_cart))
    symmetry = SupercellSymmetry(
        lattice=np.asarray(lattice, dtype=float),
        positions=np.asarray(positions, dtype=float),
        rotations_cart=rotations_cart,
        permutations=perms,
        p2s=as_index_array(p2s, "p2s"),
        s2p=as_index_array(s2p, "s2p"),
        metadata={"symprec": config.symprec, "n_operations": int(perms.shape[0])},
    )
    validate_supercell_symmetry(symmetry)
    logger.debug(
        "Built supercell symmetry: %d atoms, %d representatives, %d operations.",
        symmetry.n_atoms,
        symmetry.n_primitive,
        symmetry.n_operations,
    )
    return symmetry
