"""Configuration for force-constant completion and symmetrization."""

from __future__ import annotations

from dataclasses import dataclass

from fcsympy.core.types import DEFAULT_SYMPREC


@dataclass(frozen=True)
class SymmetryConfig:
    """Config knobs shared by the modeling helpers."""

    symprec: float = DEFAULT_SYMPREC
    n_threads: int | None = None
    symmetrize: bool = True
    dtype: str = "double"
