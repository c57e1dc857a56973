"""Unit cell representation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
from MDAnalysis.lib.mdamath import triclinic_vectors
from numpy.typing import ArrayLike, NDArray

RIGHT_ANGLE = 90.0


@dataclass(frozen=True)
class InfiniteCell:
    """
    Unit cell without periodic boundaries.

    Wrapping is the identity and the volume is zero.
    """

    shape = "infinite"

    @property
    def lengths(self) -> NDArray[np.floating]:
        """Return cell lengths, always zero."""
        return np.zeros(3)

    @property
    def volume(self) -> float:
        """Return cell volume, always zero."""
        return 0.0

    @property
    def dimensions(self) -> None:
        """MDAnalysis box dimensions (None for no box)."""
        return None

    def wrap(self, vectors: ArrayLike) -> NDArray[np.floating]:
        """Return the displacement vector(s) unchanged."""
        return np.asarray(vectors, dtype=np.float64)

    def wrap_positions(self, positions: ArrayLike) -> NDArray[np.floating]:
        """Return the positions unchanged."""
        return np.asarray(positions, dtype=np.float64)


@dataclass(frozen=True)
class OrthorhombicCell:
    """
    Rectangular periodic cell.

    Attributes:
        a, b, c: Cell lengths in angstroms.
    """

    a: float
    b: float
    c: float

    shape = "orthorhombic"

    def __post_init__(self) -> None:
        """Validate cell lengths."""
        for length in (self.a, self.b, self.c):
            if length <= 0:
                raise ValueError(
                    f"orthorhombic cell lengths must be positive, got "
                    f"({self.a}, {self.b}, {self.c})"
                )
        object.__setattr__(self, "a", float(self.a))
        object.__setattr__(self, "b", float(self.b))
        object.__setattr__(self, "c", float(self.c))

    @property
    def lengths(self) -> NDArray[np.floating]:
        """Return cell lengths [a, b, c]."""
        return np.array([self.a, self.b, self.c])

    @property
    def volume(self) -> float:
        """Return cell volume."""
        return self.a * self.b * self.c

    @property
    def dimensions(self) -> NDArray[np.floating]:
        """MDAnalysis box dimensions [a, b, c, alpha, beta, gamma]."""
        return np.array([self.a, self.b, self.c, RIGHT_ANGLE, RIGHT_ANGLE, RIGHT_ANGLE])

    def wrap(self, vectors: ArrayLike) -> NDArray[np.floating]:
        """
        Apply the minimum image convention to displacement vector(s).

        Args:
            vectors: Displacement(s), shape (3,) or (N, 3).

        Returns:
            Displacement(s) with every component in [-L/2, L/2].
        """
        vectors = np.asarray(vectors, dtype=np.float64)
        lengths = self.lengths
        return vectors - lengths * np.round(vectors / lengths)

    def wrap_positions(self, positions: ArrayLike) -> NDArray[np.floating]:
        """Wrap positions into the primary cell [0, L)."""
        positions = np.asarray(positions, dtype=np.float64)
        lengths = self.lengths
        return positions - lengths * np.floor(positions / lengths)


@dataclass(frozen=True)
class TriclinicCell:
    """
    General periodic cell.

    Attributes:
        a, b, c: Cell lengths in angstroms.
        alpha, beta, gamma: Cell angles in degrees.
    """

    a: float
    b: float
    c: float
    alpha: float
    beta: float
    gamma: float

    shape = "triclinic"

    def __post_init__(self) -> None:
        """Validate cell parameters."""
        if min(self.a, self.b, self.c) <= 0:
            raise ValueError(
                f"triclinic cell lengths must be positive, got "
                f"({self.a}, {self.b}, {self.c})"
            )
        for angle in (self.alpha, self.beta, self.gamma):
            if not 0 < angle < 180:
                raise ValueError(f"cell angles must be in (0, 180), got {angle}")
        for name in ("a", "b", "c", "alpha", "beta", "gamma"):
            object.__setattr__(self, name, float(getattr(self, name)))

    @property
    def lengths(self) -> NDArray[np.floating]:
        """Return cell lengths [a, b, c]."""
        return np.array([self.a, self.b, self.c])

    @property
    def angles(self) -> NDArray[np.floating]:
        """Return cell angles [alpha, beta, gamma]."""
        return np.array([self.alpha, self.beta, self.gamma])

    @property
    def dimensions(self) -> NDArray[np.floating]:
        """MDAnalysis box dimensions [a, b, c, alpha, beta, gamma]."""
        return np.concatenate([self.lengths, self.angles])

    @property
    def matrix(self) -> NDArray[np.floating]:
        """3x3 matrix whose rows are the cell vectors."""
        return np.asarray(triclinic_vectors(self.dimensions), dtype=np.float64)

    @property
    def volume(self) -> float:
        """Return cell volume."""
        return float(np.abs(np.linalg.det(self.matrix)))

    def wrap(self, vectors: ArrayLike) -> NDArray[np.floating]:
        """
        Apply the minimum image convention to displacement vector(s).

        The rounding is done in fractional coordinates, which is exact for
        displacements shorter than half the smallest cell length.

        Args:
            vectors: Displacement(s), shape (3,) or (N, 3).

        Returns:
            Minimum image displacement(s).
        """
        vectors = np.asarray(vectors, dtype=np.float64)
        matrix = self.matrix
        fractional = vectors @ np.linalg.inv(matrix)
        fractional = fractional - np.round(fractional)
        return fractional @ matrix

    def wrap_positions(self, positions: ArrayLike) -> NDArray[np.floating]:
        """Wrap positions into the primary cell."""
        positions = np.asarray(positions, dtype=np.float64)
        matrix = self.matrix
        fractional = positions @ np.linalg.inv(matrix)
        fractional = fractional - np.floor(fractional)
        return fractional @ matrix


UnitCell = Union[InfiniteCell, OrthorhombicCell, TriclinicCell]


def cell_from_parameters(
    a: float,
    b: float,
    c: float,
    alpha: float = RIGHT_ANGLE,
    beta: float = RIGHT_ANGLE,
    gamma: float = RIGHT_ANGLE,
) -> UnitCell:
    """
    Build the unit cell matching the given lengths and angles.

    All-zero lengths give an infinite cell, right angles an orthorhombic
    cell and anything else a triclinic cell.
    """
    if a == 0 and b == 0 and c == 0:
        return InfiniteCell()
    if np.allclose([alpha, beta, gamma], RIGHT_ANGLE):
        return OrthorhombicCell(a, b, c)
    return TriclinicCell(a, b, c, alpha, beta, gamma)


def cell_from_dimensions(dimensions: ArrayLike | None) -> UnitCell:
    """
    Classify an MDAnalysis box.

    Args:
        dimensions: [a, b, c, alpha, beta, gamma] or None.

    Returns:
        The matching unit cell.
    """
    if dimensions is None:
        return InfiniteCell()
    dimensions = np.asarray(dimensions, dtype=np.float64)
    if dimensions.shape != (6,):
        raise ValueError(f"box dimensions must have shape (6,), got {dimensions.shape}")
    return cell_from_parameters(*(float(value) for value in dimensions))
