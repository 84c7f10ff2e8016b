"""Shortest periodic-image vectors between atom pairs."""

from __future__ import annotations

import logging

import numpy as np

from .types import DEFAULT_SYMPREC, Array, as_index_array, check_index_range, search_directions, wrap_fractional

logger = logging.getLogger(__name__)


def copy_smallest_vectors(
    vectors: Array,
    lengths: Array,
    symprec: float = DEFAULT_SYMPREC,
) -> tuple[Array, Array]:
    """Select the candidate images whose length is within ``symprec`` of the minimum.

    Args:
        vectors: ``(..., n_images, 3)`` candidate vectors per atom pair.
        lengths: ``(..., n_images)`` their precomputed lengths.
        symprec: Length tolerance.

    Returns:
        ``(shortest_vectors, multiplicity)``. Selected vectors keep their
        original order and fill the leading slots of ``shortest_vectors``
        (same shape as ``vectors``); remaining slots are zero.
        ``multiplicity`` has the leading shape and is always >= 1.
    """

    vecs = np.asarray(vectors, dtype=float)
    lens = np.asarray(lengths, dtype=float)
    if vecs.ndim < 2 or vecs.shape[-1] != 3:
        raise ValueError("vectors must have shape (..., n_images, 3).")
    if lens.shape != vecs.shape[:-1]:
        raise ValueError(f"lengths shape {lens.shape} does not match vectors shape {vecs.shape}.")
    if vecs.shape[-2] == 0:
        raise ValueError("Each candidate list must contain at least one image.")
    if symprec < 0.0:
        raise ValueError("symprec must be non-negative.")
    if not np.all(np.isfinite(lens)):
        raise ValueError("Candidate image lengths must be finite; got NaN or inf (degenerate geometry).")

    minimum = np.min(lens, axis=-1, keepdims=True)
    selected = (lens - minimum) <= symprec
    multiplicity = np.asarray(np.sum(selected, axis=-1), dtype=np.int64)
    if np.any(multiplicity == 0):
        raise ValueError("No candidate image attains the minimum length (degenerate geometry).")

    # Stable sort brings selected images to the front without reordering them.
    order = np.argsort(~selected, axis=-1, kind="stable")
    shortest = np.take_along_axis(vecs, order[..., None], axis=-2)
    slot = np.arange(vecs.shape[-2])
    shortest[slot >= multiplicity[..., None]] = 0.0
    return shortest, multiplicity


def get_smallest_vectors(
    supercell_lattice: Array,
    supercell_positions: Array,
    p2s: Array,
    symprec: float = DEFAULT_SYMPREC,
) -> tuple[Array, Array]:
    """Shortest vectors from each representative atom to every supercell atom.

    The 27 candidates per pair are the minimum-image fractional difference
    ``pos[s] - pos[p2s[p]]`` shifted by each neighboring supercell
    translation. The supercell lattice should be reasonably reduced, since
    images farther than one cell away are not searched.

    Returns:
        ``(shortest_vectors, multiplicity)`` with shapes ``(N, Np, 27, 3)``
        (supercell fractional coordinates) and ``(N, Np)``.
    """

    lat = np.asarray(supercell_lattice, dtype=float)
    if lat.shape != (3, 3):
        raise ValueError("supercell_lattice must have shape (3, 3) with basis vectors as columns.")
    pos = np.asarray(supercell_positions, dtype=float)
    if pos.ndim != 2 or pos.shape[1] != 3:
        raise ValueError("supercell_positions must have shape (n_atoms, 3).")
    prim = as_index_array(p2s, "p2s")
    check_index_range(prim, pos.shape[0], "p2s")

    diff = wrap_fractional(pos[:, None, :] - pos[prim][None, :, :])
    candidates = diff[:, :, None, :] + search_directions()[None, None, :, :]
    lengths = np.linalg.norm(candidates @ lat.T, axis=-1)
    logger.debug("Searching shortest images for %d x %d atom pairs.", pos.shape[0], prim.size)
    return copy_smallest_vectors(candidates, lengths, symprec=symprec)
