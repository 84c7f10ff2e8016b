"""Example: complete and symmetrize force constants of a 2x2x2 simple cubic supercell.

Only the row of the representative atom is "computed" (here: a toy
nearest-neighbor spring model plus noise); every other row is obtained by
symmetry and the result is made translationally invariant.
"""

import itertools

import numpy as np

from fcsympy.core import get_drift_force_constants, get_permutation_residual, get_smallest_vectors
from fcsympy.modeling import SymmetryConfig, build_supercell_symmetry, compact_fc_to_full_fc


def main() -> None:
    lattice = 2.0 * np.eye(3)
    positions = np.array(list(itertools.product((0.0, 0.5), repeat=3)))

    point_group = []
    for perm in itertools.permutations(range(3)):
        for signs in itertools.product((1, -1), repeat=3):
            m = np.zeros((3, 3), dtype=int)
            for row, (col, sign) in enumerate(zip(perm, signs)):
                m[row, col] = sign
            point_group.append(m)
    rotations = np.repeat(np.asarray(point_group), len(positions), axis=0)
    translations = np.tile(positions, (len(point_group), 1))

    symmetry = build_supercell_symmetry(lattice, positions, rotations, translations, p2s=[0])
    print(f"operations={symmetry.n_operations} atoms={symmetry.n_atoms}")

    vectors, multiplicity = get_smallest_vectors(lattice, positions, symmetry.p2s)
    print("multiplicity per atom:", multiplicity[:, 0].tolist())

    # Central-force springs between representative atom 0 and its neighbors.
    spring = 1.0
    compact = np.zeros((1, len(positions), 3, 3))
    for j in range(1, len(positions)):
        mult = int(multiplicity[j, 0])
        for v in vectors[j, 0, :mult]:
            r = lattice @ v
            e = r / np.linalg.norm(r)
            compact[0, j] -= spring * np.outer(e, e) / (mult * np.linalg.norm(r) ** 2)
    compact += 1e-3 * np.random.default_rng(0).normal(size=compact.shape)

    full = compact_fc_to_full_fc(compact, symmetry, SymmetryConfig(n_threads=2))
    drift1, drift2 = get_drift_force_constants(full)
    print(f"permutation residual={get_permutation_residual(full):.3e}")
    print(f"drift={drift1:.3e}, {drift2:.3e}")


if __name__ == "__main__":
    main()
