import numpy as np
import pytest

from fcsympy.core import distribute_force_constants
from fcsympy.modeling import resolve_atom_mappings


def _rot_z(theta: float) -> np.ndarray:
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def test_distributed_block_is_rotated_representative_block() -> None:
    rng = np.random.default_rng(3)
    natom = 3
    rot = _rot_z(0.5 * np.pi)
    rotations = np.array([np.eye(3), rot])
    permutations = np.array([[0, 1, 2], [1, 0, 2]])
    map_atoms = np.array([0, 0, 2])
    map_syms = np.array([0, 1, 0])

    fc = np.zeros((natom, natom, 3, 3))
    fc[0] = rng.normal(size=(natom, 3, 3))
    fc[2] = rng.normal(size=(natom, 3, 3))
    rows_before = fc[[0, 2]].copy()

    distribute_force_constants(fc, np.arange(natom), rotations, permutations, map_atoms, map_syms)

    for k in range(natom):
        expected = rot.T @ fc[0, permutations[1, k]] @ rot
        assert np.allclose(fc[1, k], expected)
        explicit = np.zeros((3, 3))
        for a in range(3):
            for b in range(3):
                explicit[a, b] = sum(
                    rot[l, a] * rot[m, b] * fc[0, permutations[1, k], l, m] for l in range(3) for m in range(3)
                )
        assert np.allclose(fc[1, k], explicit)
    assert np.array_equal(fc[[0, 2]], rows_before)


def test_distribution_overwrites_previous_values() -> None:
    fc = np.ones((2, 2, 3, 3))
    fc[0] = np.arange(18, dtype=float).reshape(2, 3, 3)
    distribute_force_constants(
        fc,
        [1],
        np.array([np.eye(3), np.eye(3)]),
        np.array([[0, 1], [1, 0]]),
        [0, 0],
        [0, 1],
    )
    assert np.allclose(fc[1, 0], fc[0, 1])
    assert np.allclose(fc[1, 1], fc[0, 0])


def test_distribution_reconstructs_symmetric_field(cubic_symmetry, symmetric_fc) -> None:
    map_atoms, map_syms = resolve_atom_mappings(cubic_symmetry)
    fc = np.zeros_like(symmetric_fc)
    fc[0] = symmetric_fc[0]
    distribute_force_constants(
        fc,
        np.arange(cubic_symmetry.n_atoms),
        cubic_symmetry.rotations_cart,
        cubic_symmetry.permutations,
        map_atoms,
        map_syms,
        n_threads=3,
    )
    assert np.allclose(fc, symmetric_fc, atol=1e-12)


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"map_atoms": [0, 0, 0]}, "map_atoms"),
        ({"map_syms": [[0, 1]]}, "map_syms"),
        ({"rotations_cart": np.array([np.eye(3)])}, "different length"),
        ({"atom_list": [0, 5]}, "atom_list"),
        ({"map_syms": [0, 2]}, "map_syms"),
        ({"map_atoms": [1, 0]}, "representatives"),
    ],
)
def test_distribution_validates_before_writing(kwargs, message) -> None:
    args = {
        "atom_list": [0, 1],
        "rotations_cart": np.array([np.eye(3), -np.eye(3)]),
        "permutations": np.array([[0, 1], [1, 0]]),
        "map_atoms": [0, 0],
        "map_syms": [0, 1],
    }
    args.update(kwargs)
    fc = np.full((2, 2, 3, 3), 7.0)
    with pytest.raises(ValueError, match=message):
        distribute_force_constants(fc, **args)
    assert np.all(fc == 7.0)


def test_distribution_rejects_mismatched_force_constants() -> None:
    with pytest.raises(ValueError, match="force_constants"):
        distribute_force_constants(
            np.zeros((3, 3, 3, 3)),
            [1],
            np.array([np.eye(3), np.eye(3)]),
            np.array([[0, 1], [1, 0]]),
            [0, 0],
            [0, 1],
        )
