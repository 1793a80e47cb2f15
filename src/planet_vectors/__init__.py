"""Planetary vector geometry: dateline-aware drawing on cylindrical and polar maps."""

__version__ = "0.1.0"
