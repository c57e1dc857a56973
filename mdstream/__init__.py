"""
mdstream - analysis tools streaming through molecular dynamics trajectories.

Commands:
- rdf: radial distribution functions
- hbonds: hydrogen bonds network
- merge: merge multiple trajectories into one
- convert: convert trajectories between formats

Quick Start:
    >>> from mdstream.analysis import RadialDistribution, RdfOptions, run_analysis
    >>> rdf = RadialDistribution(RdfOptions("water.xyz", selection="name O"))
    >>> histogram = run_analysis(rdf)
"""

__version__ = "0.1.0"

from .analysis import (
    Histogram,
    RadialDistribution,
    RdfOptions,
    StepRange,
    run_analysis,
)
from .errors import ConfigurationError, MdstreamError
from .io import Trajectory
from .merge import MergeOptions, merge
from .selection import Selection
from .system import Frame, Topology

__all__ = [
    "ConfigurationError",
    "MdstreamError",
    "Frame",
    "Topology",
    "Trajectory",
    "Selection",
    "Histogram",
    "StepRange",
    "RadialDistribution",
    "RdfOptions",
    "run_analysis",
    "MergeOptions",
    "merge",
]
