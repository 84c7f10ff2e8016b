import numpy as np
import pytest

from fcsympy.core import copy_smallest_vectors, get_smallest_vectors, search_directions


def test_two_equidistant_images_are_both_selected() -> None:
    rng = np.random.default_rng(1)
    vectors = rng.normal(size=(1, 27, 3))
    lengths = 1.2 + rng.random((1, 27))
    lengths[0, 4] = 1.0
    lengths[0, 19] = 1.0

    shortest, multiplicity = copy_smallest_vectors(vectors, lengths, symprec=1e-3)

    assert multiplicity.shape == (1,)
    assert multiplicity[0] == 2
    assert np.allclose(shortest[0, 0], vectors[0, 4])
    assert np.allclose(shortest[0, 1], vectors[0, 19])
    assert np.allclose(shortest[0, 2:], 0.0)


def test_multiplicity_bounds_and_tolerance() -> None:
    rng = np.random.default_rng(2)
    vectors = rng.normal(size=(4, 5, 27, 3))
    lengths = np.round(rng.random((4, 5, 27)), 1)
    symprec = 1e-5
    shortest, multiplicity = copy_smallest_vectors(vectors, lengths, symprec=symprec)

    assert multiplicity.shape == (4, 5)
    assert np.all((multiplicity >= 1) & (multiplicity <= 27))
    minimum = lengths.min(axis=-1)
    for idx in np.ndindex(multiplicity.shape):
        picked = lengths[idx][lengths[idx] - minimum[idx] <= symprec]
        assert picked.size == multiplicity[idx]
        assert np.all(picked - minimum[idx] <= symprec)


def test_degenerate_lengths_raise() -> None:
    vectors = np.zeros((2, 27, 3))
    lengths = np.ones((2, 27))
    lengths[1, 3] = np.nan
    with pytest.raises(ValueError, match="degenerate"):
        copy_smallest_vectors(vectors, lengths)
    with pytest.raises(ValueError, match="at least one image"):
        copy_smallest_vectors(np.zeros((2, 0, 3)), np.zeros((2, 0)))
    with pytest.raises(ValueError, match="does not match"):
        copy_smallest_vectors(vectors, np.ones((2, 26)))


def test_search_directions_cover_neighbor_cells() -> None:
    dirs = search_directions()
    assert dirs.shape == (27, 3)
    assert len({tuple(d) for d in dirs}) == 27
    assert dirs.min() == -1 and dirs.max() == 1


def test_get_smallest_vectors_simple_cubic_supercell(cubic_cell) -> None:
    lattice, positions, _rotations, _translations = cubic_cell
    shortest, multiplicity = get_smallest_vectors(lattice, positions, p2s=[0])

    assert shortest.shape == (8, 1, 27, 3)
    assert multiplicity.shape == (8, 1)
    assert multiplicity[0, 0] == 1
    assert np.allclose(shortest[0, 0, 0], 0.0)

    # Atom 4 sits half a supercell away along x; atom 7 at the body center.
    assert np.allclose(positions[4], [0.5, 0.0, 0.0])
    assert multiplicity[4, 0] == 2
    assert np.allclose(sorted(shortest[4, 0, :2, 0]), [-0.5, 0.5])
    assert multiplicity[7, 0] == 8
