"""I/O layer for trajectory files."""

from .trajectory import Trajectory, guess_bonds

__all__ = [
    "Trajectory",
    "guess_bonds",
]
