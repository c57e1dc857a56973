"""Command-line interface for mdstream.

Commands:
- `mdstream rdf` - radial distribution functions
- `mdstream hbonds` - hydrogen bonds network
- `mdstream merge` - merge multiple trajectories
- `mdstream convert` - convert trajectories between formats
"""

from __future__ import annotations

import functools
import logging
import sys
from typing import Optional

import click

from . import __version__
from .analysis import (
    HBondsOptions,
    RadialDistribution,
    RdfOptions,
    StepRange,
    run_analysis,
    run_hbonds,
)
from .convert import ConvertOptions, convert
from .errors import MdstreamError
from .merge import MergeOptions, merge
from .options import parse_cell, parse_formats, parse_hbond_parameters

LOGGER = logging.getLogger("mdstream")

CELL_HELP = (
    "Alternative unit cell. CELL format is one of <a:b:c:α:β:γ> or <a:b:c> "
    "or <a>. 'a', 'b' and 'c' are in angstroms, 'α', 'β', and 'γ' are in "
    "degrees."
)
STEPS_HELP = (
    "Steps to use from the input. STEPS format is <start>:<end>[:<stride>] "
    "with <start>, <end> and <stride> optional. Default is to use all steps "
    "from the input; starting at 0, ending at the last step, and with a "
    "stride of 1."
)


# =============================================================================
# Helper Functions
# =============================================================================


def _cell_callback(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_cell(value)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


def _steps_callback(ctx, param, value):
    if value is None:
        return StepRange()
    try:
        return StepRange.parse(value)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


def _parameters_callback(ctx, param, value):
    try:
        return parse_hbond_parameters(value)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


def cell_option(function):
    """Add the ``--cell`` option."""
    return click.option(
        "-c", "--cell", callback=_cell_callback, metavar="CELL", help=CELL_HELP
    )(function)


def input_options(guess_bonds: bool = True):
    """Add the options controlling how a single input trajectory is read."""

    def decorator(function):
        options = [
            click.option(
                "--input-format",
                metavar="FORMAT",
                help="Force the input file format to be FORMAT.",
            ),
            click.option(
                "-t",
                "--topology",
                type=click.Path(exists=True, dir_okay=False),
                help="Alternative topology file for the input.",
            ),
            click.option(
                "--topology-format",
                metavar="FORMAT",
                help="Use FORMAT as format for the topology file.",
            ),
            cell_option,
            click.option(
                "--steps", callback=_steps_callback, metavar="STEPS", help=STEPS_HELP
            ),
        ]
        if guess_bonds:
            options.append(
                click.option(
                    "--guess-bonds",
                    is_flag=True,
                    help="Guess the bonds in the input.",
                )
            )
        for option in reversed(options):
            function = option(function)
        return function

    return decorator


def report_errors(function):
    """Report configuration and I/O errors on stderr and exit with code 1."""

    @functools.wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except (MdstreamError, OSError, ValueError) as error:
            LOGGER.debug("Command failed", exc_info=True)
            click.echo(click.style(f"Error: {error}", fg="red"), err=True)
            sys.exit(1)

    return wrapper


# =============================================================================
# Main Command Group
# =============================================================================


@click.group()
@click.version_option(__version__, prog_name="mdstream")
@click.option("-v", "--verbose", is_flag=True, help="Show debug messages.")
def main(verbose: bool) -> None:
    """Analysis tools streaming through molecular dynamics trajectories."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


@main.command()
@click.argument("trajectory", type=click.Path(dir_okay=False))
@click.option(
    "-o",
    "--output",
    help="Write result to FILE. This default to the trajectory file name "
    "with the `.rdf` extension.",
    metavar="FILE",
)
@click.option(
    "-s",
    "--selection",
    default="all",
    show_default=True,
    help='Selection to use for the atoms. This can be a single selection '
    '("name O") or a selection of two atoms ("pairs: name O; name H").',
)
@click.option("--max", "rmax", type=float, default=10.0, show_default=True,
              help="Maximal distance to use.")
@click.option("-p", "--points", "npoints", type=int, default=200, show_default=True,
              help="Number of points in the histogram.")
@click.option("--plot", type=click.Path(dir_okay=False),
              help="Also plot g(r) to this image file (needs matplotlib).")
@input_options()
@report_errors
def rdf(
    trajectory: str,
    output: Optional[str],
    selection: str,
    rmax: float,
    npoints: int,
    plot: Optional[str],
    input_format: Optional[str],
    topology: Optional[str],
    topology_format: Optional[str],
    cell,
    steps: StepRange,
    guess_bonds: bool,
) -> None:
    """Compute radial distribution function.

    Compute pair radial distribution function (often called g(r)). The pairs
    of particles to use can be specified using the MDAnalysis selection
    language. It is possible to provide an alternative topology or unit cell
    when this information is not present in the trajectory.
    """
    options = RdfOptions(
        trajectory=trajectory,
        input_format=input_format,
        steps=steps,
        cell=cell,
        topology=topology,
        topology_format=topology_format,
        guess_bonds=guess_bonds,
        output=output,
        selection=selection,
        rmax=rmax,
        npoints=npoints,
        plot=plot,
    )
    run_analysis(RadialDistribution(options))


@main.command()
@click.argument("trajectory", type=click.Path(dir_okay=False))
@click.option(
    "-o",
    "--output",
    help="Write result to FILE. This default to the trajectory file name "
    "with the `.hb` extension.",
    metavar="FILE",
)
@click.option(
    "-s",
    "--selection",
    default="angles: type N O; type H; type N O",
    show_default=True,
    help="Selection of three atoms: donors, hydrogens and acceptors.",
)
@click.option(
    "-p",
    "--parameters",
    default="3.0:30.0",
    show_default=True,
    callback=_parameters_callback,
    help="Parameters to use for the hydrogen bond. Format is <d:α> where 'd' "
    "is the donor-acceptor maximum distance in angstroms and 'α' is the "
    "donor-acceptor-hydrogen maximum angle in degrees.",
)
@input_options(guess_bonds=False)
@report_errors
def hbonds(
    trajectory: str,
    output: Optional[str],
    selection: str,
    parameters: tuple[float, float],
    input_format: Optional[str],
    topology: Optional[str],
    topology_format: Optional[str],
    cell,
    steps: StepRange,
) -> None:
    """Compute hydrogen bonds network.

    Compute list of hydrogen bonds along a trajectory. It is possible to
    provide an alternative unit cell or topology for the trajectory file if
    they are not defined in the trajectory format.
    """
    distance, angle = parameters
    options = HBondsOptions(
        trajectory=trajectory,
        input_format=input_format,
        steps=steps,
        cell=cell,
        topology=topology,
        topology_format=topology_format,
        output=output,
        selection=selection,
        distance=distance,
        angle=angle,
    )
    run_hbonds(options)


@main.command(name="merge")
@click.argument("inputs", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False),
              help="Output trajectory.")
@click.option("--input-format", metavar="FORMATS",
              help="Comma separated list of formats to use for the input files.")
@click.option("--output-format", metavar="FORMAT",
              help="Force the output file format to be FORMAT.")
@cell_option
@report_errors
def merge_command(
    inputs: tuple[str, ...],
    output: str,
    input_format: Optional[str],
    output_format: Optional[str],
    cell,
) -> None:
    """Merge multiple trajectories.

    If all trajectories do not have the same number of steps, the last step
    of the smaller trajectories is repeated until the end of the longest
    trajectory.

    \b
    Examples:
        mdstream merge solid.pdb gaz.xyz --output=merged.xyz
        mdstream merge --input-format=XYZ,XYZ first.zeo second.zeo -o output.pdb
        mdstream merge -c 25:25:18 polymer.nc surface.xyz -o all.nc
    """
    options = MergeOptions(
        inputs=tuple(inputs),
        output=output,
        input_formats=tuple(parse_formats(input_format, len(inputs)))
        if input_format is not None
        else None,
        output_format=output_format,
        cell=cell,
    )
    merge(options)


@main.command(name="convert")
@click.argument("input", type=click.Path(dir_okay=False))
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--output-format", metavar="FORMAT",
              help="Force the output file format to be FORMAT.")
@click.option("--wrap", is_flag=True, help="Wrap the atoms inside the unit cell.")
@input_options()
@report_errors
def convert_command(
    input: str,
    output: str,
    output_format: Optional[str],
    wrap: bool,
    input_format: Optional[str],
    topology: Optional[str],
    topology_format: Optional[str],
    cell,
    steps: StepRange,
    guess_bonds: bool,
) -> None:
    """Convert trajectories between formats.

    \b
    Examples:
        mdstream convert water.xyz water.pdb --cell=28 --guess-bonds
        mdstream convert butane.pdb butane.nc --wrap
        mdstream convert result.xtc out.nc --topology=initial.pdb
        mdstream convert in.zeo out.mol --input-format=XYZ --output-format=PDB
    """
    options = ConvertOptions(
        trajectory=input,
        input_format=input_format,
        steps=steps,
        cell=cell,
        topology=topology,
        topology_format=topology_format,
        guess_bonds=guess_bonds,
        output=output,
        output_format=output_format,
        wrap=wrap,
    )
    convert(options)


if __name__ == "__main__":
    main()
