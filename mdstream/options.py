"""Parsing of option strings shared by the commands."""

from __future__ import annotations

from pathlib import Path

from .errors import ConfigurationError
from .system import UnitCell, cell_from_parameters


def _parse_float(value: str, what: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"invalid {what} '{value}', expected a number") from None


def parse_cell(string: str) -> UnitCell:
    """
    Parse a unit cell given as ``<a:b:c:α:β:γ>``, ``<a:b:c>`` or ``<a>``.

    Lengths are in angstroms and angles in degrees. A single length gives a
    cubic cell, and zero lengths an infinite cell.

    Raises:
        ValueError: If the string is malformed.
    """
    fields = [_parse_float(field, "unit cell value") for field in string.split(":")]
    if len(fields) == 1:
        a = fields[0]
        return cell_from_parameters(a, a, a)
    if len(fields) == 3:
        return cell_from_parameters(*fields)
    if len(fields) == 6:
        return cell_from_parameters(*fields)
    raise ValueError(
        f"invalid unit cell '{string}', expected <a:b:c:α:β:γ>, <a:b:c> or <a>"
    )


def parse_formats(string: str | None, n_files: int) -> list[str | None]:
    """
    Parse a comma separated list of formats, one for each input file.

    Args:
        string: The list given by the user, or None to guess every format.
        n_files: Number of input files.

    Raises:
        ConfigurationError: If the number of formats and files differ.
    """
    if string is None:
        return [None] * n_files
    formats = [fmt.strip() or None for fmt in string.split(",")]
    if len(formats) != n_files:
        raise ConfigurationError(
            f"input formats do not match input files: we have {n_files} files "
            f"and {len(formats)} formats. Formats must be provided as a comma "
            "separated list: --input-format='XYZ,PDB,NCDF'"
        )
    return formats


def parse_hbond_parameters(string: str) -> tuple[float, float]:
    """
    Parse hydrogen bond parameters ``<d:α>``.

    Returns:
        (donor-acceptor distance in angstroms,
        donor-acceptor-hydrogen angle in degrees)

    Raises:
        ValueError: If the string is malformed or the values out of range.
    """
    fields = string.split(":")
    if len(fields) != 2:
        raise ValueError(f"invalid hydrogen bond parameters '{string}', expected <d:α>")
    distance = _parse_float(fields[0], "distance")
    angle = _parse_float(fields[1], "angle")
    if distance <= 0:
        raise ValueError(f"hydrogen bond distance must be positive, got {distance}")
    if not 0 <= angle <= 180:
        raise ValueError(f"hydrogen bond angle must be in [0, 180], got {angle}")
    return distance, angle


def default_output(trajectory: str | Path, extension: str) -> str:
    """Output path made from the trajectory path and ``extension``."""
    return f"{trajectory}{extension}"


def check_topology_options(
    topology: str | None, topology_format: str | None, guess_bonds: bool
) -> None:
    """
    Reject contradictory topology options.

    Raises:
        ConfigurationError: If both a topology and bond guessing are
            requested, or a topology format is given without a topology.
    """
    if topology is not None and guess_bonds:
        raise ConfigurationError("can not use both '--topology' and '--guess-bonds'")
    if topology_format is not None and topology is None:
        raise ConfigurationError("useless '--topology-format' without '--topology'")
