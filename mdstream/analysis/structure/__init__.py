"""Structural analyses."""

from .rdf import RadialDistribution, RdfOptions

__all__ = ["RadialDistribution", "RdfOptions"]
