"""Trajectory files read and written through MDAnalysis."""

from __future__ import annotations

import logging
from pathlib import Path

import MDAnalysis as mda
import numpy as np
from MDAnalysis.coordinates.core import get_writer_for
from MDAnalysis.transformations import set_dimensions

try:
    # mda v>=2.8 has moved the bond guessing into the guesser classes
    from MDAnalysis.guesser.default_guesser import DefaultGuesser
except ImportError:
    # this is where it lives for mda v<=2.7
    DefaultGuesser = None
    from MDAnalysis.topology.guessers import guess_bonds as _mda_guess_bonds

from ..system import Frame, Topology, UnitCell, cell_from_dimensions

logger = logging.getLogger(__name__)


def guess_bonds(atoms, positions, cell: UnitCell) -> np.ndarray:
    """
    Guess bonds between atoms from their positions with MDAnalysis.

    Args:
        atoms: MDAnalysis AtomGroup providing atom types.
        positions: Atomic positions, shape (N, 3).
        cell: Unit cell used for periodic distances.

    Returns:
        Bond pairs as (i, j) indices into ``atoms``, shape (N_bonds, 2).
    """
    positions = np.asarray(positions, dtype=np.float32)
    box = cell.dimensions
    if DefaultGuesser is not None:
        bonds = DefaultGuesser(atoms.universe, box=box).guess_bonds(atoms, positions)
    else:
        bonds = _mda_guess_bonds(atoms, positions, box=box)
    return np.asarray(bonds, dtype=np.int64).reshape(-1, 2)


class Trajectory:
    """
    A trajectory file opened for reading or writing.

    Reading produces one :class:`~mdstream.system.Frame` per step, optionally
    with an overridden unit cell, an alternative topology file, or bonds
    guessed from the positions. Writing accepts frames and hands them to the
    MDAnalysis writer selected from the file extension or the given format.

    Example:
        with Trajectory("water.xyz") as trajectory:
            for step in range(trajectory.step_count):
                frame = trajectory.read()
    """

    def __init__(
        self, path: str | Path, mode: str = "r", format: str | None = None
    ) -> None:
        """
        Open a trajectory.

        Args:
            path: Trajectory file path.
            mode: ``"r"`` to read, ``"w"`` to write.
            format: Force the file format (MDAnalysis format name).

        Raises:
            OSError: If the file can not be opened in the requested mode.
            ValueError: If ``mode`` is not ``"r"`` or ``"w"``.
        """
        if mode not in ("r", "w"):
            raise ValueError(f"unknown trajectory mode '{mode}', use 'r' or 'w'")

        self.path = Path(path)
        self.mode = mode
        self.format = format or None
        self.guess_bonds = False

        self._cell: UnitCell | None = None
        self._topology_path: Path | None = None
        self._topology_format: str | None = None

        self._universe: mda.Universe | None = None
        self._topology: Topology | None = None
        self._step = 0

        self._writer = None
        self._writer_class = None

        if mode == "r":
            if not self.path.is_file():
                raise FileNotFoundError(f"trajectory file '{self.path}' does not exist")
        else:
            if not self.path.parent.is_dir():
                raise FileNotFoundError(
                    f"can not write '{self.path}': directory '{self.path.parent}' "
                    "does not exist"
                )
            try:
                self._writer_class = get_writer_for(
                    str(self.path), format=self.format, multiframe=True
                )
            except (TypeError, ValueError) as error:
                raise OSError(f"can not write '{self.path}': {error}") from error

    def __enter__(self) -> Trajectory:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"Trajectory('{self.path}', '{self.mode}')"

    def close(self) -> None:
        """Release the underlying MDAnalysis reader and writer."""
        if self._universe is not None:
            self._universe.trajectory.close()
            self._universe = None
        if self._writer is not None:
            self._writer.close()
            self._writer = None

    def set_cell(self, cell: UnitCell) -> None:
        """
        Use ``cell`` for all frames instead of the cell stored in the file.

        For written trajectories, ``cell`` replaces the cell of every frame
        passed to :meth:`write`.
        """
        self._cell = cell
        if self.mode == "r" and self._universe is not None:
            # transformations can only be attached once, start over
            self._load()

    def set_topology(self, path: str | Path, format: str | None = None) -> None:
        """
        Read atoms and bonds from ``path`` instead of the trajectory file.

        Args:
            path: Topology file path.
            format: Force the topology file format.
        """
        self._check_mode("r")
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"topology file '{path}' does not exist")
        self._topology_path = path
        self._topology_format = format or None
        if self._universe is not None:
            self._load()

    @property
    def universe(self) -> mda.Universe:
        """The MDAnalysis universe backing a trajectory opened for reading."""
        self._check_mode("r")
        if self._universe is None:
            self._load()
        return self._universe

    @property
    def step_count(self) -> int:
        """Number of steps in the trajectory."""
        if self.mode == "w":
            return self._step
        return len(self.universe.trajectory)

    def read(self) -> Frame:
        """
        Read the next step.

        Raises:
            OSError: If all steps have already been read.
        """
        frame = self.read_step(self._step)
        self._step += 1
        return frame

    def read_step(self, step: int) -> Frame:
        """
        Read a specific step.

        Args:
            step: Step index (0-based).

        Returns:
            The frame at ``step``.
        """
        universe = self.universe
        n_steps = len(universe.trajectory)
        if step < 0 or step >= n_steps:
            raise OSError(
                f"can not read step {step} of '{self.path}' with {n_steps} steps"
            )
        ts = universe.trajectory[step]

        cell = self._cell if self._cell is not None else cell_from_dimensions(ts.dimensions)
        positions = np.array(ts.positions, dtype=np.float64)
        velocities = (
            np.array(ts.velocities, dtype=np.float64) if ts.has_velocities else None
        )

        topology = self._topology
        if self.guess_bonds:
            topology = topology.with_bonds(guess_bonds(universe.atoms, positions, cell))

        return Frame(
            positions=positions,
            velocities=velocities,
            topology=topology,
            cell=cell,
            step=step,
        )

    def write(self, frame: Frame) -> None:
        """
        Append a frame to a trajectory opened for writing.

        Args:
            frame: Frame to write.
        """
        self._check_mode("w")
        if self._cell is not None:
            frame = Frame(
                positions=frame.positions,
                velocities=frame.velocities,
                topology=frame.topology,
                cell=self._cell,
                step=frame.step,
            )
        if self._writer is None:
            self._writer = self._writer_class(str(self.path), n_atoms=frame.n_atoms)
        self._writer.write(frame.to_universe().atoms)
        self._step += 1

    def _load(self) -> None:
        """Create the MDAnalysis universe for reading."""
        if self._universe is not None:
            self._universe.trajectory.close()

        kwargs = {}
        if self.format is not None:
            kwargs["format"] = self.format
        try:
            if self._topology_path is not None:
                if self._topology_format is not None:
                    kwargs["topology_format"] = self._topology_format
                universe = mda.Universe(str(self._topology_path), str(self.path), **kwargs)
            else:
                if self.format is not None:
                    kwargs["topology_format"] = self.format
                universe = mda.Universe(str(self.path), **kwargs)
        except (OSError, ValueError, TypeError) as error:
            raise OSError(f"can not open '{self.path}': {error}") from error

        if self._cell is not None and self._cell.dimensions is not None:
            universe.trajectory.add_transformations(
                set_dimensions(self._cell.dimensions)
            )

        self._universe = universe
        self._topology = _topology_of(universe)
        logger.debug(
            "Opened %s with %d atoms and %d steps",
            self.path, self._topology.n_atoms, len(universe.trajectory),
        )

    def _check_mode(self, mode: str) -> None:
        if self.mode != mode:
            raise OSError(
                f"trajectory '{self.path}' is opened in '{self.mode}' mode"
            )


def _topology_of(universe: mda.Universe) -> Topology:
    """Extract names, elements and bonds from an MDAnalysis universe."""
    atoms = universe.atoms
    n_atoms = atoms.n_atoms
    names = list(atoms.names) if hasattr(atoms, "names") else []
    if hasattr(atoms, "elements"):
        elements = list(atoms.elements)
    elif hasattr(atoms, "types"):
        elements = list(atoms.types)
    else:
        elements = []
    bonds = atoms.bonds.indices if hasattr(atoms, "bonds") else []
    return Topology(n_atoms=n_atoms, names=names, elements=elements, bonds=bonds)
