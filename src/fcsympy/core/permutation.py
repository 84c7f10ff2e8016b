"""Atom permutations induced by rigid rotations under periodic boundaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .types import DEFAULT_SYMPREC, Array, wrap_fractional

logger = logging.getLogger(__name__)

# Number of candidate slots compared per vectorized distance evaluation.
SCAN_CHUNK = 64


@dataclass(frozen=True)
class PermutationMatch:
    """Outcome of matching rotated positions against reference positions.

    ``permutation`` is ``None`` whenever any reference atom is left without a
    partner; a partially filled table is never exposed.
    """

    permutation: Array | None
    unmatched_atoms: tuple[int, ...] = ()
    message: str = ""

    @property
    def is_found(self) -> bool:
        return self.permutation is not None

    def __bool__(self) -> bool:
        return self.is_found


def _as_lattice(lattice: Array) -> Array:
    lat = np.asarray(lattice, dtype=float)
    if lat.shape != (3, 3):
        raise ValueError("lattice must have shape (3, 3) with basis vectors as columns.")
    return lat


def _as_positions(values: Array, name: str) -> Array:
    pos = np.asarray(values, dtype=float)
    if pos.ndim != 2 or pos.shape[1] != 3:
        raise ValueError(f"{name} must have shape (n_atoms, 3).")
    return pos


def _match_positions(lat: Array, pos: Array, rot_pos: Array, symprec: float) -> PermutationMatch:
    num_pos = pos.shape[0]
    rot_atom = np.full(num_pos, -1, dtype=np.int64)
    unmatched: list[int] = []
    search_start = 0
    for i in range(num_pos):
        while search_start < num_pos and rot_atom[search_start] >= 0:
            search_start += 1
        slot = -1
        # The first block of free slots containing a hit ends the search.
        for lo in range(search_start, num_pos, SCAN_CHUNK):
            free = lo + np.flatnonzero(rot_atom[lo : lo + SCAN_CHUNK] < 0)
            if free.size == 0:
                continue
            diff = wrap_fractional(pos[i] - rot_pos[free])
            dist = np.linalg.norm(diff @ lat.T, axis=1)
            hits = np.flatnonzero(dist < symprec)
            if hits.size:
                slot = int(free[hits[0]])
                break
        if slot < 0:
            unmatched.append(i)
            continue
        rot_atom[slot] = i

    if unmatched:
        message = (
            f"No rotated position within symprec={symprec:g} for reference atoms {unmatched}; "
            "the operation is not a symmetry of these positions or the tolerance is too tight."
        )
        return PermutationMatch(permutation=None, unmatched_atoms=tuple(unmatched), message=message)
    return PermutationMatch(permutation=rot_atom)


def compute_permutation(
    lattice: Array,
    positions: Array,
    rotated_positions: Array,
    symprec: float = DEFAULT_SYMPREC,
) -> PermutationMatch:
    """Match ``rotated_positions`` to ``positions`` within ``symprec``.

    ``lattice`` holds the basis vectors as columns. On success
    ``permutation[j]`` is the index ``i`` such that ``positions[i]`` and
    ``rotated_positions[j]`` coincide modulo lattice translations, with the
    minimum-image Cartesian distance strictly below ``symprec``.

    Reference atoms are visited in order and each claims the first free
    rotated slot at or after the first unassigned one. Slots are compared in
    blocks of ``SCAN_CHUNK`` and the scan stops at the first block with a
    hit, so near-identity permutations are resolved in close to linear time.
    """

    lat = _as_lattice(lattice)
    pos = _as_positions(positions, "positions")
    rot_pos = _as_positions(rotated_positions, "rotated_positions")
    if pos.shape != rot_pos.shape:
        raise ValueError(
            f"positions and rotated_positions must have the same shape, got {pos.shape} and {rot_pos.shape}."
        )
    if symprec <= 0.0:
        raise ValueError("symprec must be positive.")

    match = _match_positions(lat, pos, rot_pos, symprec)
    if not match:
        logger.warning(match.message)
    return match


def compute_all_permutations(
    lattice: Array,
    positions: Array,
    rotations: Array,
    translations: Array,
    symprec: float = DEFAULT_SYMPREC,
) -> Array:
    """Return the ``(num_ops, n_atoms)`` permutation table of space-group operations.

    ``rotations`` are integer matrices acting on fractional coordinates and
    ``translations`` fractional shifts, so operation ``s`` sends ``x`` to
    ``rotations[s] @ x + translations[s]``. An operation that does not map
    the structure onto itself raises ``ValueError``.
    """

    lat = _as_lattice(lattice)
    pos = _as_positions(positions, "positions")
    rots = np.asarray(rotations, dtype=float)
    trans = np.asarray(translations, dtype=float)
    if rots.ndim != 3 or rots.shape[1:] != (3, 3):
        raise ValueError("rotations must have shape (num_ops, 3, 3).")
    if trans.shape != (rots.shape[0], 3):
        raise ValueError("translations must have shape (num_ops, 3) matching rotations.")
    if symprec <= 0.0:
        raise ValueError("symprec must be positive.")

    perms = np.zeros((rots.shape[0], pos.shape[0]), dtype=np.int64)
    for s, (rot, tr) in enumerate(zip(rots, trans)):
        match = _match_positions(lat, pos, pos @ rot.T + tr, symprec)
        if not match:
            raise ValueError(f"Symmetry operation {s} does not map the structure onto itself: {match.message}")
        perms[s] = match.permutation
    logger.debug("Computed permutations for %d operations on %d atoms.", perms.shape[0], perms.shape[1])
    return perms
