"""Elevation sampling from a DEM raster."""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import rasterio
import structlog

from quakerisk.errors import OutOfBounds
from quakerisk.features import GeographicPoint

logger = structlog.get_logger()


@dataclass(frozen=True)
class PixelSample:
    """Elevation read from a single DEM pixel."""

    row: int
    col: int
    elevation_m: float | None


@dataclass(frozen=True, eq=False)
class RasterGrid:
    """A north-up DEM grid in WGS84 degrees.

    Row 0 is the northern edge; columns increase eastward.
    """

    west: float
    south: float
    east: float
    north: float
    values: np.ndarray
    nodata: float | None = None

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def bbox(self) -> dict[str, float]:
        """Bounding box as minX/minY/maxX/maxY."""
        return {"minX": self.west, "minY": self.south, "maxX": self.east, "maxY": self.north}

    def contains(self, point: GeographicPoint) -> bool:
        """Whether the point lies inside the bbox (edges inclusive)."""
        return self.west <= point.lon <= self.east and self.south <= point.lat <= self.north

    def pixel_for(self, point: GeographicPoint) -> tuple[int, int]:
        """Map a coordinate to (row, col) without bounds checks."""
        x_frac = (point.lon - self.west) / (self.east - self.west)
        y_frac = (self.north - point.lat) / (self.north - self.south)
        return math.floor(y_frac * self.height), math.floor(x_frac * self.width)

    def sample_at(self, row: int, col: int) -> float | None:
        """Value at a pixel, or None for nodata or indices past the stored extent."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            return None

        value = float(self.values[row, col])
        if math.isnan(value):
            return None
        if self.nodata is not None and value == self.nodata:
            return None
        return value

    def sample(self, point: GeographicPoint) -> PixelSample:
        """Nearest-pixel sample at a coordinate.

        Raises:
            OutOfBounds: If the point lies outside the raster bounding box.
        """
        if not self.contains(point):
            raise OutOfBounds(
                "Coordinate outside DEM",
                bbox=self.bbox,
                input={"lat": point.lat, "lng": point.lon},
            )

        row, col = self.pixel_for(point)
        return PixelSample(row=row, col=col, elevation_m=self.sample_at(row, col))

    def elevation_at(self, point: GeographicPoint) -> float | None:
        """Elevation in meters at a coordinate.

        Raises:
            OutOfBounds: If the point lies outside the raster bounding box.
        """
        return self.sample(point).elevation_m


def load_dem(dem_path: Path, band: int = 1) -> RasterGrid:
    """Load a DEM GeoTIFF into memory.

    Args:
        dem_path: Path to a GeoTIFF in EPSG:4326.
        band: Band index holding elevation.

    Returns:
        RasterGrid with the band values, bounds and nodata sentinel.
    """
    with rasterio.open(dem_path) as ds:
        if ds.crs is not None and ds.crs.to_epsg() not in (None, 4326):
            logger.warning("DEM is not in EPSG:4326, bounds used as degrees", crs=str(ds.crs))

        values = ds.read(band)
        bounds = ds.bounds
        nodata: Any = ds.nodata

    grid = RasterGrid(
        west=float(bounds.left),
        south=float(bounds.bottom),
        east=float(bounds.right),
        north=float(bounds.top),
        values=values,
        nodata=float(nodata) if nodata is not None else None,
    )

    logger.info(
        "DEM loaded",
        path=str(dem_path),
        bbox=grid.bbox,
        width=grid.width,
        height=grid.height,
    )

    return grid
