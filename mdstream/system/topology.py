"""Topology representation for trajectory frames."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray


@dataclass
class Topology:
    """
    Atom identities and bond connectivity of a frame.

    Index-based design (no objects per atom).

    Attributes:
        n_atoms: Number of atoms in the system.
        names: Atom names, length N.
        elements: Element symbols (or atom types), length N.
        bonds: Bond pairs as (i, j) indices, shape (N_bonds, 2).
    """

    n_atoms: int
    names: list[str] = field(default_factory=list)
    elements: list[str] = field(default_factory=list)
    bonds: NDArray[np.integer] = field(
        default_factory=lambda: np.empty((0, 2), dtype=np.int64)
    )

    def __post_init__(self) -> None:
        """Validate and convert arrays."""
        self.names = [str(name) for name in self.names]
        self.elements = [str(element) for element in self.elements]
        self.bonds = (
            np.asarray(self.bonds, dtype=np.int64).reshape(-1, 2)
            if len(self.bonds) > 0
            else np.empty((0, 2), dtype=np.int64)
        )

        if len(self.names) == 0:
            self.names = ["X"] * self.n_atoms
        if len(self.elements) == 0:
            self.elements = list(self.names)

        if len(self.names) != self.n_atoms:
            raise ValueError(f"names length {len(self.names)} != n_atoms {self.n_atoms}")
        if len(self.elements) != self.n_atoms:
            raise ValueError(
                f"elements length {len(self.elements)} != n_atoms {self.n_atoms}"
            )
        if self.n_bonds and (self.bonds.min() < 0 or self.bonds.max() >= self.n_atoms):
            raise IndexError(f"bond indices out of range [0, {self.n_atoms})")

    @property
    def n_bonds(self) -> int:
        """Return number of bonds."""
        return len(self.bonds)

    def add_bond(self, i: int, j: int) -> None:
        """Add a bond between atoms i and j."""
        self._validate_atom_index(i)
        self._validate_atom_index(j)
        new_bond = np.array([[min(i, j), max(i, j)]], dtype=np.int64)
        self.bonds = (
            np.vstack([self.bonds, new_bond]) if len(self.bonds) > 0 else new_bond
        )

    def with_bonds(self, bonds) -> Topology:
        """Return a copy of this topology with the bond list replaced."""
        return Topology(
            n_atoms=self.n_atoms,
            names=list(self.names),
            elements=list(self.elements),
            bonds=np.asarray(bonds, dtype=np.int64),
        )

    def _validate_atom_index(self, index: int) -> None:
        """Validate that atom index is in range."""
        if index < 0 or index >= self.n_atoms:
            raise IndexError(f"Atom index {index} out of range [0, {self.n_atoms})")
