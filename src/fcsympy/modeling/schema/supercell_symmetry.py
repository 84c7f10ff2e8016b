"""Symmetry tables of a supercell, as consumed by the force-constant routines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np


Array = np.ndarray


@dataclass(frozen=True)
class SupercellSymmetry:
    """Supercell geometry plus per-operation rotation and permutation tables.

    ``lattice`` holds the supercell basis vectors as columns and
    ``positions`` the fractional coordinates. Operation ``s`` has Cartesian
    rotation ``rotations_cart[s]`` and atom permutation ``permutations[s]``.
    ``p2s`` lists the supercell indices of the representative atoms (rows of
    a compact array) and ``s2p`` gives each atom's representative.
    ``map_atoms``/``map_syms`` default to ``s2p`` and the first operation
    taking each atom onto it.
    """

    lattice: Array
    positions: Array
    rotations_cart: Array
    permutations: Array
    p2s: Array
    s2p: Array
    map_atoms: Array | None = None
    map_syms: Array | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def n_atoms(self) -> int:
        return int(np.asarray(self.positions).shape[0])

    @property
    def n_primitive(self) -> int:
        return int(np.asarray(self.p2s).shape[0])

    @property
    def n_operations(self) -> int:
        return int(np.asarray(self.permutations).shape[0])
