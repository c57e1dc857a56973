"""Frames, topologies and unit cells."""

from .cell import (
    InfiniteCell,
    OrthorhombicCell,
    TriclinicCell,
    UnitCell,
    cell_from_dimensions,
    cell_from_parameters,
)
from .frame import Frame
from .topology import Topology

__all__ = [
    "Frame",
    "Topology",
    "UnitCell",
    "InfiniteCell",
    "OrthorhombicCell",
    "TriclinicCell",
    "cell_from_dimensions",
    "cell_from_parameters",
]
