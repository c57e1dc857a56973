"""
Plotting utilities for analysis results.

Example:
    >>> from mdstream import plotting
    >>> plotting.rdf(r, g_r, save="rdf.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from numpy.typing import ArrayLike

logger = logging.getLogger(__name__)

# matplotlib is an optional dependency, only needed for plots
try:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install mdstream[plot]"
        )


def rdf(
    r: ArrayLike,
    g_r: ArrayLike,
    title: str = "Radial Distribution Function",
    save: str | Path | None = None,
    figsize: tuple[float, float] = (8, 5),
) -> None:
    """
    Plot radial distribution function g(r).

    Args:
        r: Distances, usually the bin centers.
        g_r: RDF values.
        title: Figure title.
        save: Write the figure to this file and close it.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    r = np.asarray(r)
    g_r = np.asarray(g_r)
    if len(r) == 0 or len(g_r) == 0:
        logger.warning("RDF data is empty, nothing to plot")
        return

    fig, ax = plt.subplots(figsize=figsize)

    ax.plot(r, g_r, "b-", lw=1.5)
    ax.axhline(y=1.0, color="r", linestyle="--", alpha=0.5, label="Ideal gas")
    ax.set_xlabel("r (Å)")
    ax.set_ylabel("g(r)")
    ax.set_title(title)
    ax.set_xlim(0, max(r))
    ax.set_ylim(0, None)
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if save is not None:
        fig.savefig(save, dpi=150, bbox_inches="tight")
        plt.close(fig)
        logger.info("Saved plot to %s", save)
