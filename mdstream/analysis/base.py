"""Base classes and driver for histogram-based trajectory analyses."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..io import Trajectory
from ..options import check_topology_options
from ..system import Frame, UnitCell
from .histogram import Histogram
from .steps import StepRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOptions:
    """
    Options shared by every analysis reading one trajectory.

    Attributes:
        trajectory: Input trajectory path.
        input_format: Force the input format, None to guess from extension.
        steps: Steps to use from the input.
        cell: Alternative unit cell, None to use the cell from the file.
        topology: Alternative topology file.
        topology_format: Format of the topology file.
        guess_bonds: Guess bonds from positions in every frame.
    """

    trajectory: str
    input_format: str | None = None
    steps: StepRange = field(default_factory=StepRange)
    cell: UnitCell | None = None
    topology: str | None = None
    topology_format: str | None = None
    guess_bonds: bool = False

    def __post_init__(self) -> None:
        """Reject contradictory options."""
        check_topology_options(self.topology, self.topology_format, self.guess_bonds)


def open_input(options: AnalysisOptions) -> Trajectory:
    """
    Open the input trajectory with the cell and topology overrides applied.

    Raises:
        OSError: If a file can not be opened.
    """
    trajectory = Trajectory(options.trajectory, "r", options.input_format)
    try:
        if options.cell is not None:
            trajectory.set_cell(options.cell)
        if options.topology is not None:
            trajectory.set_topology(options.topology, options.topology_format)
        trajectory.guess_bonds = options.guess_bonds
    except BaseException:
        trajectory.close()
        raise
    return trajectory


class TrajectoryAnalysis(ABC):
    """
    Abstract base class for histogram-based analyses.

    Analyses are driven by :func:`run_analysis`, which calls :meth:`setup`
    once, :meth:`accumulate` for every visited frame in increasing step
    order, and :meth:`finish` once at the end.

    Example:
        analysis = RadialDistribution(RdfOptions(...))
        histogram = run_analysis(analysis)
    """

    @property
    @abstractmethod
    def options(self) -> AnalysisOptions:
        """Options of the input trajectory."""
        ...

    @abstractmethod
    def setup(self) -> Histogram:
        """
        Validate the configuration and create the histogram.

        Must not touch any file, so that a misconfigured analysis fails
        before any I/O.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        ...

    @abstractmethod
    def accumulate(self, frame: Frame, histogram: Histogram) -> None:
        """
        Add the contribution of one frame to the histogram.

        Args:
            frame: Current frame.
            histogram: Histogram created by :meth:`setup`.
        """
        ...

    @abstractmethod
    def finish(self, histogram: Histogram) -> None:
        """
        Normalize the histogram and write the results.

        Args:
            histogram: Histogram after the last visited frame.
        """
        ...


def run_analysis(analysis: TrajectoryAnalysis) -> Histogram:
    """
    Run an analysis over its input trajectory.

    Args:
        analysis: The analysis to run.

    Returns:
        The histogram, as left by :meth:`TrajectoryAnalysis.finish`.

    Raises:
        ConfigurationError: From :meth:`TrajectoryAnalysis.setup`, before
            any file is opened.
        OSError: If the trajectory can not be opened or read.
    """
    histogram = analysis.setup()
    options = analysis.options

    n_frames = 0
    with open_input(options) as trajectory:
        n_steps = trajectory.step_count
        logger.info("Reading %s (%d steps)", options.trajectory, n_steps)
        for step in options.steps.visit(n_steps):
            frame = trajectory.read_step(step)
            analysis.accumulate(frame, histogram)
            n_frames += 1

    logger.info("Accumulated %d frames from %s", n_frames, options.trajectory)
    analysis.finish(histogram)
    return histogram

