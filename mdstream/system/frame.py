"""Trajectory frame representation."""

from __future__ import annotations

from dataclasses import dataclass, field

import MDAnalysis as mda
import numpy as np
from numpy.typing import NDArray

from .cell import InfiniteCell, UnitCell
from .topology import Topology


@dataclass
class Frame:
    """
    One snapshot of a trajectory.

    Pure data container, re-created for every step read from a trajectory.

    Attributes:
        positions: Atomic positions, shape (N, 3).
        velocities: Atomic velocities, shape (N, 3), or None.
        topology: Atom names, elements and bonds.
        cell: Unit cell of this step.
        step: Index of this frame in its trajectory.
    """

    positions: NDArray[np.floating]
    velocities: NDArray[np.floating] | None = None
    topology: Topology | None = None
    cell: UnitCell = field(default_factory=InfiniteCell)
    step: int = 0

    def __post_init__(self) -> None:
        """Validate and convert arrays."""
        self.positions = np.asarray(self.positions, dtype=np.float64).reshape(-1, 3)
        n_atoms = len(self.positions)
        if self.velocities is not None:
            self.velocities = np.asarray(self.velocities, dtype=np.float64)
            if self.velocities.shape != (n_atoms, 3):
                raise ValueError(
                    f"velocities shape {self.velocities.shape} incompatible with "
                    f"{n_atoms} atoms"
                )
        if self.topology is None:
            self.topology = Topology(n_atoms=n_atoms)
        elif self.topology.n_atoms != n_atoms:
            raise ValueError(
                f"topology with {self.topology.n_atoms} atoms incompatible with "
                f"{n_atoms} positions"
            )

    @property
    def n_atoms(self) -> int:
        """Return number of atoms."""
        return len(self.positions)

    @property
    def has_velocities(self) -> bool:
        """Whether this frame carries velocities."""
        return self.velocities is not None

    def to_universe(self) -> mda.Universe:
        """
        Build an in-memory MDAnalysis universe holding this frame.

        Used to evaluate selections and to hand frames to MDAnalysis writers.
        """
        n_atoms = self.n_atoms
        universe = mda.Universe.empty(
            n_atoms,
            n_residues=1,
            atom_resindex=np.zeros(n_atoms, dtype=np.int64),
            residue_segindex=[0],
            trajectory=True,
            velocities=self.has_velocities,
        )
        universe.add_TopologyAttr("names", self.topology.names)
        universe.add_TopologyAttr("types", self.topology.elements)
        universe.add_TopologyAttr("elements", self.topology.elements)
        universe.add_TopologyAttr("resnames", ["UNK"])
        universe.add_TopologyAttr("resids", [1])
        if self.topology.n_bonds > 0:
            universe.add_TopologyAttr(
                "bonds", [tuple(int(i) for i in bond) for bond in self.topology.bonds]
            )

        if n_atoms > 0:
            universe.atoms.positions = self.positions
            if self.has_velocities:
                universe.atoms.velocities = self.velocities
        if self.cell.dimensions is not None:
            universe.dimensions = self.cell.dimensions
        return universe
