"""
Merge multiple trajectories into one file.

All the atoms of the input frames at a given step are concatenated into one
output frame. If the trajectories do not have the same number of steps, the
last step of the shorter trajectories is repeated until the end of the
longest one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from .errors import ConfigurationError
from .io import Trajectory
from .system import Frame, InfiniteCell, Topology, UnitCell

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    """Anything frames can be read from step by step."""

    @property
    def step_count(self) -> int: ...

    def read(self) -> Frame: ...


class FrameSink(Protocol):
    """Anything frames can be written to."""

    def write(self, frame: Frame) -> None: ...


@dataclass(frozen=True)
class MergeOptions:
    """
    Options of the merge command.

    Attributes:
        inputs: Input trajectory paths.
        output: Output trajectory path.
        input_formats: One format per input (None entries are guessed), or
            None to guess all of them.
        output_format: Force the output format.
        cell: Unit cell of the output, disables the unit cell check.
    """

    inputs: tuple[str, ...]
    output: str
    input_formats: tuple[str | None, ...] | None = None
    output_format: str | None = None
    cell: UnitCell | None = None

    def __post_init__(self) -> None:
        """Validate the options."""
        if len(self.inputs) == 0:
            raise ConfigurationError("no input trajectory to merge")
        if self.input_formats is not None and len(self.input_formats) != len(self.inputs):
            raise ConfigurationError(
                f"input formats do not match input files: we have "
                f"{len(self.inputs)} files and {len(self.input_formats)} formats"
            )

    @property
    def formats(self) -> tuple[str | None, ...]:
        """Format of every input."""
        if self.input_formats is None:
            return (None,) * len(self.inputs)
        return self.input_formats


def check_cells(frames: Sequence[Frame]) -> UnitCell:
    """
    Check that the frames can be merged in one unit cell.

    The first non-infinite cell is the reference. Every other non-infinite
    cell must be equal to it, infinite cells are ignored.

    Returns:
        The reference cell, or an infinite cell if all cells are infinite.

    Raises:
        ConfigurationError: If two finite cells differ.
    """
    reference: UnitCell = InfiniteCell()
    for frame in frames:
        if not isinstance(frame.cell, InfiniteCell):
            reference = frame.cell
            break

    for frame in frames:
        if not isinstance(frame.cell, InfiniteCell) and frame.cell != reference:
            raise ConfigurationError(
                "mismatch in unit cells. Please specify which one you want "
                "using the --cell argument."
            )
    return reference


def concatenate(frames: Sequence[Frame], cell: UnitCell | None = None) -> Frame:
    """
    Concatenate the atoms of several frames into one frame.

    Positions, names and elements are appended in order. Bonds are shifted
    by the number of atoms of the preceding frames. The output has
    velocities iff at least one frame has them; frames without velocities
    contribute zeros.

    Args:
        frames: Frames to concatenate.
        cell: Unit cell of the output frame.

    Returns:
        The merged frame.
    """
    n_atoms = sum(frame.n_atoms for frame in frames)
    has_velocities = any(frame.has_velocities for frame in frames)

    positions = np.zeros((n_atoms, 3))
    velocities = np.zeros((n_atoms, 3)) if has_velocities else None
    names: list[str] = []
    elements: list[str] = []
    bonds = []

    start = 0
    for frame in frames:
        end = start + frame.n_atoms
        positions[start:end] = frame.positions
        if frame.has_velocities:
            velocities[start:end] = frame.velocities
        names.extend(frame.topology.names)
        elements.extend(frame.topology.elements)
        # translate bonding informations
        if frame.topology.n_bonds > 0:
            bonds.append(frame.topology.bonds + start)
        start = end

    topology = Topology(
        n_atoms=n_atoms,
        names=names,
        elements=elements,
        bonds=np.vstack(bonds) if bonds else np.empty((0, 2), dtype=np.int64),
    )
    return Frame(
        positions=positions,
        velocities=velocities,
        topology=topology,
        cell=cell if cell is not None else InfiniteCell(),
    )


def merge_frames(
    inputs: Sequence[FrameSource],
    output: FrameSink,
    cell: UnitCell | None = None,
) -> int:
    """
    Read all inputs in lock-step and write the merged frames.

    Args:
        inputs: Trajectories to merge, in output atom order.
        output: Where merged frames are written.
        cell: Forced output unit cell. When given, input cells are not
            checked for consistency.

    Returns:
        Number of steps written.

    Raises:
        ConfigurationError: If input cells mismatch and no cell was given.
            Steps written before the mismatch are kept.
    """
    step_counts = [source.step_count for source in inputs]
    longest = max(step_counts, default=0)
    frames: list[Frame | None] = [None] * len(inputs)

    step = 0
    while True:
        did_read_one_frame = False
        for i, source in enumerate(inputs):
            # shorter trajectories keep their last frame
            if step < step_counts[i]:
                frames[i] = source.read()
                did_read_one_frame = True
            elif step == step_counts[i] < longest:
                logger.info(
                    "Input %d has only %d steps, repeating its last step",
                    i, step_counts[i],
                )

        if not did_read_one_frame:
            break

        if cell is None:
            output_cell = check_cells(frames)
        else:
            output_cell = cell

        merged = concatenate(frames, output_cell)
        merged.step = step
        output.write(merged)
        step += 1

    logger.info(
        "Merged %d trajectories with %s steps into %d steps",
        len(inputs), step_counts, step,
    )
    return step


def merge(options: MergeOptions) -> int:
    """
    Merge the input trajectories into the output file.

    Every file is closed on return, including when an error is raised.

    Returns:
        Number of steps written.
    """
    with ExitStack() as stack:
        inputs = [
            stack.enter_context(Trajectory(path, "r", fmt))
            for path, fmt in zip(options.inputs, options.formats)
        ]
        output = stack.enter_context(
            Trajectory(options.output, "w", options.output_format)
        )
        if options.cell is not None:
            output.set_cell(options.cell)

        return merge_frames(inputs, output, options.cell)
