"""Shared array conventions for force-constant symmetry routines."""

from __future__ import annotations

import numpy as np


Array = np.ndarray

# One force-constant block per ordered atom pair.
BLOCK_SHAPE = (3, 3)
# 3x3x3 neighboring-cell images searched for the shortest connecting vector.
NUM_IMAGES = 27

DEFAULT_SYMPREC = 1e-5


def search_directions() -> Array:
    """Return the 27 lattice translations with components in {-1, 0, 1}."""

    return np.array(list(np.ndindex((3, 3, 3))), dtype=int) - 1


def wrap_fractional(diff: Array) -> Array:
    """Minimum-image fractional difference (nearest integer subtracted per axis)."""

    diff = np.asarray(diff, dtype=float)
    return diff - np.rint(diff)


def as_index_array(values, name: str, *, ndim: int = 1) -> Array:
    arr = np.asarray(values)
    if arr.ndim != ndim:
        raise ValueError(f"wrong shape for {name}: expected {ndim}D, got {arr.ndim}D.")
    if arr.size and not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"{name} must contain integers.")
    return arr.astype(np.int64, copy=False)


def check_index_range(arr: Array, bound: int, name: str) -> None:
    if arr.size and (int(arr.min()) < 0 or int(arr.max()) >= bound):
        raise ValueError(f"{name} contains indices outside [0, {bound}).")


def check_force_constants(fc: Array, name: str = "force_constants") -> None:
    """Check an in-place target: float ``(n_rows, n_cols, 3, 3)``, writable."""

    if not isinstance(fc, np.ndarray):
        raise TypeError(f"{name} must be a numpy array to be modified in place.")
    if fc.ndim != 4 or fc.shape[2:] != BLOCK_SHAPE:
        raise ValueError(f"wrong shape for {name}: expected (n_rows, n_atoms, 3, 3), got {fc.shape}.")
    if not np.issubdtype(fc.dtype, np.floating):
        raise ValueError(f"{name} must have a floating dtype, got {fc.dtype}.")
    if not fc.flags.writeable:
        raise ValueError(f"{name} must be writeable.")
