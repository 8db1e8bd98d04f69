"""Seismic risk scoring from soil, fault, earthquake and elevation data."""

__version__ = "0.1.0"
