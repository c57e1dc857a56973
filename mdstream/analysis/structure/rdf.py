"""Radial distribution function analysis."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ...errors import ConfigurationError
from ...options import default_output
from ...selection import Selection
from ...system import Frame, InfiniteCell
from ..base import AnalysisOptions, TrajectoryAnalysis
from ..histogram import Histogram

logger = logging.getLogger(__name__)

# Scale constant of the normalization, combined with the 4π shell prefactor
RDF_SCALE = 2e-6
RDF_NORMALIZATION = RDF_SCALE * 4 * np.pi


@dataclass(frozen=True)
class RdfOptions(AnalysisOptions):
    """
    Options of the radial distribution function.

    Attributes:
        output: Output data file, defaults to the trajectory with ``.rdf``.
        selection: Atoms (``"name O"``) or pairs (``"pairs: name O; name H"``).
        rmax: Maximal distance of the histogram.
        npoints: Number of points in the histogram.
        plot: Optional image file for a plot of g(r).
    """

    output: str | None = None
    selection: str = "all"
    rmax: float = 10.0
    npoints: int = 200
    plot: str | None = None

    @property
    def outfile(self) -> str:
        """Output data file."""
        if self.output is not None:
            return self.output
        return default_output(self.trajectory, ".rdf")


class RadialDistribution(TrajectoryAnalysis):
    """
    Pair radial distribution function g(r).

    For a single-atom selection every matched atom is paired with every
    other matched atom; a pair selection is used directly. Distances use the
    minimum image convention of each frame's unit cell.

    Raw counts are accumulated over all visited frames and normalized once
    in :meth:`finish`:

        g(r_i) = count_i / (K * rho * n_pairs * dr * r_i^2)

    with r_i the bin center, rho the mean number density over the visited
    frames, n_pairs the total number of pairs closer than rmax and
    K = 8 pi 1e-6.
    """

    def __init__(self, options: RdfOptions) -> None:
        """
        Initialize RDF calculator.

        Args:
            options: Options of this analysis.
        """
        self._options = options
        self.selection: Selection | None = None
        self.rmax = options.rmax
        self.npoints = options.npoints
        self.reset()

    @property
    def options(self) -> RdfOptions:
        """Options of this analysis."""
        return self._options

    def reset(self) -> None:
        """Reset accumulated statistics."""
        self._n_frames = 0
        self._n_pairs = 0
        self._density_sum = 0.0
        self._r: NDArray[np.floating] | None = None
        self._g_r: NDArray[np.floating] | None = None

    @property
    def n_frames(self) -> int:
        """Number of frames accumulated."""
        return self._n_frames

    @property
    def n_pairs(self) -> int:
        """Number of pairs closer than rmax over all frames."""
        return self._n_pairs

    def setup(self) -> Histogram:
        """Parse the selection and create the histogram."""
        options = self._options
        self.selection = Selection(options.selection)
        if self.selection.arity > 2:
            raise ConfigurationError(
                "can not use a selection with more than two atoms in RDF"
            )
        if options.npoints <= 0:
            raise ValueError(f"number of points must be positive, got {options.npoints}")

        self.rmax = options.rmax
        if options.cell is not None and not isinstance(options.cell, InfiniteCell):
            self.rmax = float(np.min(options.cell.lengths)) / 2
            logger.info("Using rmax = %g, half of the smallest cell length", self.rmax)
        if self.rmax <= 0:
            raise ValueError(f"maximal distance must be positive, got {self.rmax}")

        self.reset()
        return Histogram(self.npoints, 0.0, self.rmax)

    def pairs(self, frame: Frame) -> NDArray[np.integer]:
        """
        Atom pairs of ``frame`` used in the RDF.

        Returns:
            Pairs as (i, j) indices, shape (N_pairs, 2), never with i == j.
        """
        if self.selection.arity == 1:
            matched = np.asarray(self.selection.match_list(frame), dtype=np.int64)
            first, second = np.meshgrid(matched, matched, indexing="ij")
            mask = first != second
            return np.stack([first[mask], second[mask]], axis=-1).reshape(-1, 2)
        return np.asarray(self.selection.evaluate(frame), dtype=np.int64).reshape(-1, 2)

    def accumulate(self, frame: Frame, histogram: Histogram) -> None:
        """Add the pair distances of one frame to the histogram."""
        pairs = self.pairs(frame)
        positions = frame.positions
        displacements = positions[pairs[:, 1]] - positions[pairs[:, 0]]
        distances = np.linalg.norm(frame.cell.wrap(displacements), axis=-1)
        distances = distances[distances < self.rmax]

        histogram.insert_many(distances)
        self._n_pairs += len(distances)

        volume = frame.cell.volume
        density = frame.n_atoms / volume if volume > 0 else float(frame.n_atoms)
        self._density_sum += density
        self._n_frames += 1

    def finish(self, histogram: Histogram) -> None:
        """Normalize the histogram to g(r) and write it to the output file."""
        dr = histogram.bin_size
        if self._n_pairs == 0 or self._n_frames == 0:
            logger.warning(
                "No pair closer than %g in %s, the RDF is not normalized",
                self.rmax, self._options.trajectory,
            )
        else:
            density = self._density_sum / self._n_frames
            norm = RDF_NORMALIZATION * density * self._n_pairs * dr

            def g_of_r(i: int, value: float) -> float:
                r = (i + 0.5) * dr
                return value / (norm * r * r)

            histogram.normalize(g_of_r)

        self._r = histogram.left_edges
        self._g_r = histogram.bins
        self.write(histogram)

        if self._options.plot is not None:
            from ... import plotting

            plotting.rdf(
                histogram.centers,
                self._g_r,
                title=f"g(r) of {self._options.selection}",
                save=self._options.plot,
            )

    def write(self, histogram: Histogram) -> None:
        """Write the histogram as a two-column text table."""
        outfile = self._options.outfile
        dr = histogram.bin_size
        with open(outfile, "w") as fd:
            fd.write(
                f"# Radial distribution function in trajectory "
                f"{self._options.trajectory}\n"
            )
            fd.write(f"# Selection: {self._options.selection}\n")
            for i in range(len(histogram)):
                fd.write(f"{i * dr:g}  {histogram[i]:g}\n")
        logger.info("Wrote %s", outfile)

    @property
    def r(self) -> NDArray[np.floating] | None:
        """Left edge of every bin, available after :meth:`finish`."""
        return self._r

    @property
    def g_r(self) -> NDArray[np.floating] | None:
        """Normalized g(r), available after :meth:`finish`."""
        return self._g_r
