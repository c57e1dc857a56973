"""Convert trajectories between formats."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .analysis.base import AnalysisOptions, open_input
from .io import Trajectory
from .system import Frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConvertOptions(AnalysisOptions):
    """
    Options of the convert command.

    Attributes:
        output: Output trajectory path.
        output_format: Force the output format.
        wrap: Wrap positions into the unit cell before writing.
    """

    output: str = ""
    output_format: str | None = None
    wrap: bool = False


def wrap_frame(frame: Frame) -> Frame:
    """Return a copy of ``frame`` with positions wrapped into its unit cell."""
    return Frame(
        positions=frame.cell.wrap_positions(frame.positions),
        velocities=frame.velocities,
        topology=frame.topology,
        cell=frame.cell,
        step=frame.step,
    )


def convert(options: ConvertOptions) -> int:
    """
    Copy every step of the input trajectory to the output trajectory.

    Returns:
        Number of steps written.
    """
    with open_input(options) as infile, Trajectory(
        options.output, "w", options.output_format
    ) as outfile:
        n_steps = 0
        for step in options.steps.visit(infile.step_count):
            frame = infile.read_step(step)
            if options.wrap:
                frame = wrap_frame(frame)
            outfile.write(frame)
            n_steps += 1

    logger.info("Converted %d steps from %s to %s", n_steps, options.trajectory, options.output)
    return n_steps
