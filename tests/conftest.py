"""
Pytest configuration and fixtures.
"""

import tempfile
from pathlib import Path

import numpy as np
import pytest

WATER_DIMER_NAMES = ["O", "H", "H", "O", "H", "H"]
WATER_DIMER_POSITIONS = np.array(
    [
        [0.0, 0.0, 0.0],
        [0.96, 0.0, 0.0],
        [-0.24, 0.93, 0.0],
        [2.9, 0.0, 0.0],
        [3.2, 0.9, 0.0],
        [3.2, -0.9, 0.0],
    ]
)


def _write_xyz(path, names, steps):
    with open(path, "w") as fd:
        for i, positions in enumerate(steps):
            fd.write(f"{len(names)}\n")
            fd.write(f"step {i}\n")
            for name, (x, y, z) in zip(names, positions):
                fd.write(f"{name} {x:.5f} {y:.5f} {z:.5f}\n")
    return path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_xyz():
    """Write an XYZ trajectory from atom names and one position array per step."""
    return _write_xyz


@pytest.fixture
def water_dimer(temp_dir):
    """Single-step XYZ file with a hydrogen-bonded water dimer."""
    return _write_xyz(temp_dir / "dimer.xyz", WATER_DIMER_NAMES, [WATER_DIMER_POSITIONS])


@pytest.fixture
def moving_pair(temp_dir):
    """XYZ file with two atoms over 11 steps, atom 1 at x = 1 + 0.1 * step."""
    steps = [
        np.array([[0.0, 0.0, 0.0], [1.0 + 0.1 * i, 0.0, 0.0]]) for i in range(11)
    ]
    return _write_xyz(temp_dir / "pair.xyz", ["Ar", "Ar"], steps)
