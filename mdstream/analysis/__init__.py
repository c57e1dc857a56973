"""Analysis subsystem for trajectories."""

from .base import AnalysisOptions, TrajectoryAnalysis, open_input, run_analysis
from .hbonds import HBondsOptions, find_hbonds, run_hbonds
from .histogram import Histogram
from .steps import StepRange
from .structure.rdf import RadialDistribution, RdfOptions

__all__ = [
    # Harness
    "AnalysisOptions",
    "TrajectoryAnalysis",
    "open_input",
    "run_analysis",
    "Histogram",
    "StepRange",
    # Structure
    "RadialDistribution",
    "RdfOptions",
    # Hydrogen bonds
    "HBondsOptions",
    "find_hbonds",
    "run_hbonds",
]
