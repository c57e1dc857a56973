"""Hydrogen bond network along a trajectory."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from MDAnalysis.analysis.hydrogenbonds.hbond_analysis import HydrogenBondAnalysis

from ..errors import ConfigurationError
from ..options import default_output
from ..selection import Selection
from .base import AnalysisOptions, open_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HBondsOptions(AnalysisOptions):
    """
    Options of the hydrogen bond search.

    Attributes:
        output: Output file, defaults to the trajectory with ``.hb``.
        selection: Three-atom selection of donors, hydrogens and acceptors.
        distance: Maximal donor-acceptor distance, in angstroms.
        angle: Maximal donor-acceptor-hydrogen angle, in degrees.
    """

    output: str | None = None
    selection: str = "angles: type N O; type H; type N O"
    distance: float = 3.0
    angle: float = 30.0

    @property
    def outfile(self) -> str:
        """Output file."""
        if self.output is not None:
            return self.output
        return default_output(self.trajectory, ".hb")


def find_hbonds(options: HBondsOptions) -> np.ndarray:
    """
    Find hydrogen bonds in the visited steps of a trajectory.

    The geometric criteria are evaluated by MDAnalysis. Hydrogens are
    attached to donors by distance, so no bonds are needed in the topology.

    Args:
        options: Input trajectory and hydrogen bond criteria.

    Returns:
        Array of shape (N_hbonds, 6) with columns step, donor, hydrogen,
        acceptor, donor-acceptor distance and donor-hydrogen-acceptor angle.

    Raises:
        ConfigurationError: If the selection does not have three atoms.
    """
    selection = Selection(options.selection)
    if selection.arity != 3:
        raise ConfigurationError(
            "hydrogen bonds need a selection with three atoms "
            f"(donor, hydrogen, acceptor), got {selection.arity}"
        )
    donors, hydrogens, acceptors = selection.parts

    with open_input(options) as trajectory:
        universe = trajectory.universe
        start, stop, step = options.steps.as_slice(trajectory.step_count)
        analysis = HydrogenBondAnalysis(
            universe,
            donors_sel=donors,
            hydrogens_sel=hydrogens,
            acceptors_sel=acceptors,
            d_a_cutoff=options.distance,
            # MDAnalysis uses the minimal donor-hydrogen-acceptor angle
            d_h_a_angle_cutoff=180.0 - options.angle,
        )
        analysis.run(start=start, stop=stop, step=step)
        hbonds = np.asarray(analysis.results.hbonds).reshape(-1, 6)

    logger.info("Found %d hydrogen bonds in %s", len(hbonds), options.trajectory)
    return hbonds


def write_hbonds(options: HBondsOptions, hbonds: np.ndarray) -> None:
    """Write one line per hydrogen bond to the output file."""
    with open(options.outfile, "w") as fd:
        fd.write(f"# Hydrogen bonds in trajectory {options.trajectory}\n")
        fd.write(f"# Selection: {options.selection}\n")
        fd.write(
            f"# Criteria: distance < {options.distance:g} A, "
            f"angle < {options.angle:g} deg\n"
        )
        fd.write("# step donor hydrogen acceptor distance angle\n")
        for step, donor, hydrogen, acceptor, distance, angle in hbonds:
            fd.write(
                f"{int(step)} {int(donor)} {int(hydrogen)} {int(acceptor)} "
                f"{distance:.4f} {angle:.2f}\n"
            )
    logger.info("Wrote %s", options.outfile)


def run_hbonds(options: HBondsOptions) -> np.ndarray:
    """Find hydrogen bonds and write them to the output file."""
    hbonds = find_hbonds(options)
    write_hbonds(options, hbonds)
    return hbonds
