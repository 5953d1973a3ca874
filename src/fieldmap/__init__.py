"""Geometry capture and viewport clustering for the facility map console."""

__version__ = "0.1.0"
