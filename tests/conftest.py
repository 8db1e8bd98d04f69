"""Shared test fixtures for quakerisk tests."""

import numpy as np
import pytest

from quakerisk.config import Config
from quakerisk.datasets import DatasetStore
from quakerisk.features import Feature, FeatureCollection, GeographicPoint
from quakerisk.raster.dem import RasterGrid


def _polygon_feature(coords, **properties) -> Feature:
    return Feature.from_geojson({
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [coords]},
        "properties": properties,
    })


def _square_ring(x0: float, y0: float, size: float = 1.0) -> list[list[float]]:
    return [[x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0]]


def _line_feature(coords, **properties) -> Feature:
    return Feature.from_geojson({
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": coords},
        "properties": properties,
    })


def _quake_feature(lon: float, lat: float, mag=None, depth: float = 10.0) -> Feature:
    return Feature.from_geojson({
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat, depth]},
        "properties": {"mag": mag},
    })


@pytest.fixture
def make_polygon():
    """Builder for a polygon feature from a single exterior ring."""
    return _polygon_feature


@pytest.fixture
def make_square():
    """Builder for an axis-aligned square polygon feature at (x0, y0)."""
    def build(x0: float, y0: float, size: float = 1.0, **properties) -> Feature:
        return _polygon_feature(_square_ring(x0, y0, size), **properties)
    return build


@pytest.fixture
def make_line():
    return _line_feature


@pytest.fixture
def make_quake():
    return _quake_feature


@pytest.fixture
def ensenada_point():
    """A coordinate near Ensenada, Baja California."""
    return GeographicPoint(lat=31.86, lon=-116.6)


@pytest.fixture
def soil_collection():
    """Two disjoint soil squares: clay to the west, basalt to the east."""
    return FeatureCollection(
        name="soil",
        features=(
            _polygon_feature(_square_ring(-117.0, 31.5), CLASE_TEX="Arcilla", ORIGEN="Aluvial"),
            _polygon_feature(_square_ring(-115.5, 31.5), CLASE_TEX="Media", ROCA="Basalto"),
        ),
    )


@pytest.fixture
def fault_collection():
    """A north-south fault along lon -116.6."""
    return FeatureCollection(
        name="faults",
        features=(_line_feature([[-116.6, 31.0], [-116.6, 32.5]], name="Agua Blanca"),),
    )


@pytest.fixture
def quake_collection():
    return FeatureCollection(
        name="quakes",
        features=(
            _quake_feature(-116.6, 31.86, mag=4.5),
            _quake_feature(-116.5, 31.9, mag=5.1),
            _quake_feature(-116.55, 31.8, mag=None),
            _quake_feature(-110.0, 25.0, mag=7.0),
        ),
    )


@pytest.fixture
def dem_grid():
    """A 4x4 DEM over [-117, 31.5, -116, 32.5] with one nodata pixel."""
    values = np.array([
        [100, 110, 120, 130],
        [200, 210, 220, 230],
        [300, 310, -9999, 330],
        [400, 410, 420, 430],
    ], dtype=np.float32)
    return RasterGrid(west=-117.0, south=31.5, east=-116.0, north=32.5, values=values, nodata=-9999.0)


@pytest.fixture
def sequential_config():
    """Config with lookups run in-line."""
    config = Config()
    config.query.parallel = False
    return config


@pytest.fixture
def dataset_store(soil_collection, fault_collection, quake_collection, dem_grid):
    return DatasetStore(
        soil=soil_collection,
        faults=fault_collection,
        quakes=quake_collection,
        dem=dem_grid,
    )
