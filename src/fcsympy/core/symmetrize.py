"""Index-permutation symmetry and translational sum rule for force constants.

Two storage layouts are supported:

- full: ``(N, N, 3, 3)``, one block per ordered supercell atom pair;
- compact: ``(Np, N, 3, 3)``, rows restricted to the representative atoms
  listed in ``p2s``.

Both symmetrizers apply the permutation pass first and the translational
pass second; the second reads the output of the first.
"""

from __future__ import annotations

import logging

import numpy as np

from .parallel import run_partitioned
from .types import Array, as_index_array, check_force_constants, check_index_range

logger = logging.getLogger(__name__)


def _check_full(force_constants: Array) -> int:
    check_force_constants(force_constants)
    natom = force_constants.shape[0]
    if force_constants.shape[1] != natom:
        raise ValueError(f"Full force constants must have shape (N, N, 3, 3), got {force_constants.shape}.")
    return natom


def _set_translational_rows(fc: Array, diag_cols: Array, start: int, stop: int) -> None:
    # Row p holds the self-interaction block at column diag_cols[p].
    for p in range(start, stop):
        c = int(diag_cols[p])
        sums = fc[p, :c].sum(axis=0) + fc[p, c + 1 :].sum(axis=0)
        fc[p, c] = -0.5 * (sums + sums.T)


def set_permutation_symmetry(force_constants: Array, *, n_threads: int | None = None) -> None:
    """Impose ``fc[i, j] == fc[j, i].T`` in place on a full array.

    Index ``i`` owns row ``i`` right of the diagonal, column ``i`` below it
    and the block ``(i, i)``, so every unordered pair is averaged exactly
    once whatever the partitioning.
    """

    _check_full(force_constants)
    fc = force_constants

    def _work(start: int, stop: int) -> None:
        for i in range(start, stop):
            avg = 0.5 * (fc[i, i + 1 :] + fc[i + 1 :, i].transpose(0, 2, 1))
            fc[i, i + 1 :] = avg
            fc[i + 1 :, i] = avg.transpose(0, 2, 1)
            fc[i, i] = 0.5 * (fc[i, i] + fc[i, i].T)

    run_partitioned(_work, fc.shape[0], n_threads=n_threads)


def set_translational_invariance(force_constants: Array, *, n_threads: int | None = None) -> None:
    """Replace each diagonal block by ``-(S + S.T) / 2``, ``S = sum_{j != i} fc[i, j]``."""

    natom = _check_full(force_constants)
    diag_cols = np.arange(natom)
    run_partitioned(
        lambda start, stop: _set_translational_rows(force_constants, diag_cols, start, stop),
        natom,
        n_threads=n_threads,
    )


def symmetrize_force_constants(force_constants: Array, *, n_threads: int | None = None) -> None:
    """Apply permutation symmetry, then the translational sum rule, in place."""

    natom = _check_full(force_constants)
    logger.debug("Symmetrizing full force constants for %d atoms.", natom)
    set_permutation_symmetry(force_constants, n_threads=n_threads)
    set_translational_invariance(force_constants, n_threads=n_threads)


def _compact_lookup_tables(
    force_constants: Array,
    permutations: Array,
    s2p: Array,
    p2s: Array,
) -> tuple[Array, Array, Array, Array]:
    check_force_constants(force_constants)
    n_patom, n_satom = force_constants.shape[:2]
    perms = as_index_array(permutations, "permutations", ndim=2)
    if perms.shape[1] != n_satom or perms.shape[0] == 0:
        raise ValueError(f"wrong shape for permutations: expected (n_sym, {n_satom}), got {perms.shape}.")
    s2p_arr = as_index_array(s2p, "s2p")
    if s2p_arr.shape[0] != n_satom:
        raise ValueError(f"wrong shape for s2p: expected ({n_satom},), got {s2p_arr.shape}.")
    p2s_arr = as_index_array(p2s, "p2s")
    if p2s_arr.shape[0] != n_patom:
        raise ValueError(f"wrong shape for p2s: expected ({n_patom},), got {p2s_arr.shape}.")
    check_index_range(perms, n_satom, "permutations")
    check_index_range(s2p_arr, n_satom, "s2p")
    check_index_range(p2s_arr, n_satom, "p2s")
    if np.unique(p2s_arr).size != n_patom:
        raise ValueError("p2s must not contain repeated atoms.")

    # Row of the compact array holding each atom's representative.
    row_of = np.full(n_satom, -1, dtype=np.int64)
    row_of[p2s_arr] = np.arange(n_patom)
    s2pp = row_of[s2p_arr]
    missing = np.flatnonzero(s2pp < 0)
    if missing.size:
        raise ValueError(f"s2p refers to atoms not listed in p2s for supercell atoms {missing.tolist()}.")

    # First operation sending each atom onto its representative.
    hits = perms == s2p_arr[None, :]
    no_op = np.flatnonzero(~hits.any(axis=0))
    if no_op.size:
        raise ValueError(f"No symmetry operation maps atoms {no_op.tolist()} onto their representatives.")
    nsym_list = np.argmax(hits, axis=0)
    return perms, p2s_arr, s2pp, nsym_list


def symmetrize_compact_force_constants(
    force_constants: Array,
    permutations: Array,
    s2p: Array,
    p2s: Array,
    *,
    n_threads: int | None = None,
) -> None:
    """Symmetrize a compact ``(Np, N, 3, 3)`` array in place.

    For row ``p`` (supercell atom ``i = p2s[p]``) and column ``j != i`` the
    transposed partner block is read from the row of ``j``'s representative,
    at the column the operation taking ``j`` onto that representative sends
    ``i`` to. Results go to a scratch array that is copied back only after
    every row succeeded.
    """

    perms, p2s_arr, s2pp, nsym_list = _compact_lookup_tables(force_constants, permutations, s2p, p2s)
    fc = force_constants
    n_patom, n_satom = fc.shape[:2]
    logger.debug("Symmetrizing compact force constants (%d x %d atoms).", n_patom, n_satom)

    fc_tmp = np.zeros_like(fc)

    def _permutation_rows(start: int, stop: int) -> None:
        for p in range(start, stop):
            i = int(p2s_arr[p])
            partner = fc[s2pp, perms[nsym_list, i]]
            fc_tmp[p] = 0.5 * (fc[p] + partner.transpose(0, 2, 1))
            fc_tmp[p, i] = 0.5 * (fc[p, i] + fc[p, i].T)

    run_partitioned(_permutation_rows, n_patom, n_threads=n_threads)
    run_partitioned(
        lambda start, stop: _set_translational_rows(fc_tmp, p2s_arr, start, stop),
        n_patom,
        n_threads=n_threads,
    )
    fc[...] = fc_tmp


def get_drift_force_constants(
    force_constants: Array,
    p2s: Array | None = None,
) -> tuple[float | None, float]:
    """Largest-magnitude entries of the column and row sums of ``fc``.

    Returns ``(drift_first_index, drift_second_index)``: the signed entry of
    ``sum_i fc[i, j]`` and of ``sum_j fc[i, j]`` with the largest magnitude.
    For compact arrays (``p2s`` given) only the row sums are available and
    the first value is ``None``.
    """

    fc = np.asarray(force_constants, dtype=float)
    if fc.ndim != 4 or fc.shape[2:] != (3, 3):
        raise ValueError(f"wrong shape for force_constants: got {fc.shape}.")

    row_sums = fc.sum(axis=1).ravel()
    drift2 = float(row_sums[np.argmax(np.abs(row_sums))]) if row_sums.size else 0.0
    if p2s is not None:
        if as_index_array(p2s, "p2s").shape[0] != fc.shape[0]:
            raise ValueError("p2s length must match the number of compact rows.")
        return None, drift2
    if fc.shape[0] != fc.shape[1]:
        raise ValueError("Full force constants must be square; pass p2s for compact arrays.")
    col_sums = fc.sum(axis=0).ravel()
    drift1 = float(col_sums[np.argmax(np.abs(col_sums))]) if col_sums.size else 0.0
    return drift1, drift2


def get_permutation_residual(force_constants: Array) -> float:
    """Return ``max |fc[i, j] - fc[j, i].T|`` over a full array."""

    fc = np.asarray(force_constants, dtype=float)
    if fc.ndim != 4 or fc.shape[2:] != (3, 3) or fc.shape[0] != fc.shape[1]:
        raise ValueError(f"Full force constants must have shape (N, N, 3, 3), got {fc.shape}.")
    if fc.size == 0:
        return 0.0
    return float(np.max(np.abs(fc - fc.transpose(1, 0, 3, 2))))
