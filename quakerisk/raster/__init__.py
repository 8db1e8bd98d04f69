"""Raster access for DEM elevation sampling."""

from quakerisk.raster.dem import PixelSample, RasterGrid, load_dem

__all__ = [
    "load_dem",
    "RasterGrid",
    "PixelSample",
]
