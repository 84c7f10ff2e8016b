"""Distribute representative force-constant blocks through symmetry operations."""

from __future__ import annotations

import logging

import numpy as np

from .parallel import run_partitioned
from .types import Array, as_index_array, check_force_constants, check_index_range

logger = logging.getLogger(__name__)


def _validate_distribution_tables(
    force_constants: Array,
    atom_list: Array,
    rotations_cart: Array,
    permutations: Array,
    map_atoms: Array,
    map_syms: Array,
) -> tuple[Array, Array, Array, Array, Array]:
    check_force_constants(force_constants)
    perms = as_index_array(permutations, "permutations", ndim=2)
    num_rot, num_pos = perms.shape
    rots = np.asarray(rotations_cart, dtype=float)
    if rots.ndim != 3 or rots.shape[1:] != (3, 3):
        raise ValueError("wrong shape for rotations_cart: expected (num_rot, 3, 3).")
    if rots.shape[0] != num_rot:
        raise ValueError("permutations and rotations are different length")
    atoms_map = as_index_array(map_atoms, "map_atoms")
    if atoms_map.shape[0] != num_pos:
        raise ValueError("wrong shape for map_atoms")
    syms_map = as_index_array(map_syms, "map_syms")
    if syms_map.shape[0] != num_pos:
        raise ValueError("wrong shape for map_syms")
    if force_constants.shape[:2] != (num_pos, num_pos):
        raise ValueError(
            f"wrong shape for force_constants: expected ({num_pos}, {num_pos}, 3, 3), got {force_constants.shape}."
        )
    todo = as_index_array(atom_list, "atom_list")

    check_index_range(todo, num_pos, "atom_list")
    check_index_range(perms, num_pos, "permutations")
    check_index_range(atoms_map, num_pos, "map_atoms")
    check_index_range(syms_map, num_rot, "map_syms")
    # Sources must be representatives so that no block is both read and written.
    sources = atoms_map[todo]
    not_self = sources[atoms_map[sources] != sources]
    if not_self.size:
        raise ValueError(f"map_atoms must send representatives to themselves; atoms {sorted(set(not_self.tolist()))} do not.")
    return todo, rots, perms, atoms_map, syms_map


def distribute_force_constants(
    force_constants: Array,
    atom_list: Array,
    rotations_cart: Array,
    permutations: Array,
    map_atoms: Array,
    map_syms: Array,
    *,
    n_threads: int | None = None,
) -> None:
    """Fill force-constant rows of non-representative atoms in place.

    For each atom ``i`` in ``atom_list`` whose representative
    ``d = map_atoms[i]`` differs from ``i``, with ``s = map_syms[i]``,
    ``R = rotations_cart[s]`` and ``perm = permutations[s]``::

        fc[i, k] = R.T @ fc[d, perm[k]] @ R        for every atom k

    i.e. ``fc[i, k, a, b] = sum_lm R[l, a] R[m, b] fc[d, perm[k], l, m]``.
    Rows of representatives are read only and never written.
    """

    todo, rots, perms, atoms_map, syms_map = _validate_distribution_tables(
        force_constants, atom_list, rotations_cart, permutations, map_atoms, map_syms
    )
    todo = np.unique(todo[atoms_map[todo] != todo])
    logger.debug("Distributing force constants to %d of %d atoms.", todo.size, force_constants.shape[0])

    def _work(start: int, stop: int) -> None:
        for atom_todo in todo[start:stop]:
            atom_done = atoms_map[atom_todo]
            sym_index = syms_map[atom_todo]
            r_cart = rots[sym_index]
            fc_done = force_constants[atom_done, perms[sym_index]]
            force_constants[atom_todo] = np.einsum("la,mb,klm->kab", r_cart, r_cart, fc_done)

    run_partitioned(_work, todo.size, n_threads=n_threads)
