import itertools

import numpy as np
import pytest

from fcsympy.modeling import SupercellSymmetry, build_supercell_symmetry


def _cubic_rotations() -> np.ndarray:
    # The 48 signed permutation matrices (point group m-3m).
    rots = []
    for perm in itertools.permutations(range(3)):
        for signs in itertools.product((1, -1), repeat=3):
            m = np.zeros((3, 3), dtype=int)
            for row, (col, sign) in enumerate(zip(perm, signs)):
                m[row, col] = sign
            rots.append(m)
    return np.asarray(rots)


def _simple_cubic_222() -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """2x2x2 supercell of a one-atom simple cubic cell, with its 384 operations."""

    lattice = 2.0 * np.eye(3)
    positions = np.array([[i, j, k] for i in range(2) for j in range(2) for k in range(2)], dtype=float) / 2.0
    shifts = positions.copy()
    point_group = _cubic_rotations()
    rotations = np.repeat(point_group, len(shifts), axis=0)
    translations = np.tile(shifts, (len(point_group), 1))
    return lattice, positions, rotations, translations


def group_average(fc: np.ndarray, symmetry: SupercellSymmetry) -> np.ndarray:
    """Average fc over the group so that fc[a, b] = R.T fc[g(a), g(b)] R for every operation."""

    perms = np.asarray(symmetry.permutations)
    rots = np.asarray(symmetry.rotations_cart)
    images = fc[perms[:, :, None], perms[:, None, :]]
    return np.einsum("sla,sijlm,smb->ijab", rots, images, rots) / len(perms)


@pytest.fixture
def cubic_cell() -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    return _simple_cubic_222()


@pytest.fixture
def cubic_symmetry(cubic_cell) -> SupercellSymmetry:
    lattice, positions, rotations, translations = cubic_cell
    return build_supercell_symmetry(lattice, positions, rotations, translations, p2s=[0])


@pytest.fixture
def translation_symmetry(cubic_cell) -> SupercellSymmetry:
    lattice, positions, _rotations, _translations = cubic_cell
    rotations = np.repeat(np.eye(3, dtype=int)[None, :, :], len(positions), axis=0)
    return build_supercell_symmetry(lattice, positions, rotations, positions.copy(), p2s=[0])


@pytest.fixture
def symmetric_fc(cubic_symmetry) -> np.ndarray:
    rng = np.random.default_rng(7)
    natom = cubic_symmetry.n_atoms
    return group_average(rng.normal(size=(natom, natom, 3, 3)), cubic_symmetry)


@pytest.fixture
def two_species_symmetry() -> SupercellSymmetry:
    """3x1x1 supercell of a two-atom cell, translations only; s2p = [0, 1, 0, 1, 0, 1]."""

    lattice = np.diag([3.0, 1.0, 1.0])
    positions = np.array([[(n + shift) / 3.0, shift, shift] for n in range(3) for shift in (0.0, 0.5)])
    shifts = np.array([[n / 3.0, 0.0, 0.0] for n in range(3)])
    rotations = np.repeat(np.eye(3, dtype=int)[None, :, :], len(shifts), axis=0)
    return build_supercell_symmetry(lattice, positions, rotations, shifts, p2s=[0, 1])


@pytest.fixture
def shifted_translation_symmetry(cubic_cell) -> SupercellSymmetry:
    lattice, positions, _rotations, _translations = cubic_cell
    rotations = np.repeat(np.eye(3, dtype=int)[None, :, :], len(positions), axis=0)
    return build_supercell_symmetry(lattice, positions, rotations, positions.copy(), p2s=[3])
