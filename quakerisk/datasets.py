"""Loaded soil, fault, quake and DEM datasets."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from quakerisk.config import Config, get_config
from quakerisk.errors import DatasetNotReady
from quakerisk.features import FeatureCollection
from quakerisk.raster.dem import RasterGrid, load_dem

logger = structlog.get_logger()

SOIL = "soil"
FAULTS = "faults"
QUAKES = "quakes"
DEM = "dem"

COLLECTION_NAMES = (SOIL, FAULTS, QUAKES)


def load_feature_collection(name: str, path: Path) -> FeatureCollection:
    """Read a GeoJSON FeatureCollection file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} is not a GeoJSON object")
    return FeatureCollection.from_geojson(name, data)


@dataclass(frozen=True, eq=False)
class DatasetStore:
    """Read-only holder for the datasets a risk query needs.

    Any dataset may be None when it failed to load; operations that need it
    get DatasetNotReady from require().
    """

    soil: FeatureCollection | None = None
    faults: FeatureCollection | None = None
    quakes: FeatureCollection | None = None
    dem: RasterGrid | None = None
    dem_path: Path | None = None

    @classmethod
    def load(cls, config: Config | None = None) -> "DatasetStore":
        """Load every dataset named in the configuration.

        Each dataset loads independently; failures are logged and leave that
        dataset unset rather than aborting the others.
        """
        config = config or get_config()
        paths = {
            SOIL: config.data.soil_path,
            FAULTS: config.data.faults_path,
            QUAKES: config.data.quakes_path,
        }

        collections: dict[str, FeatureCollection | None] = {}
        for name, path in paths.items():
            try:
                collections[name] = load_feature_collection(name, path)
            except (OSError, ValueError) as e:
                logger.error("Failed to load dataset", dataset=name, path=str(path), error=str(e))
                collections[name] = None

        logger.info(
            "Datasets loaded",
            **{name: str(path) for name, path in paths.items() if collections[name] is not None},
        )

        dem_path = config.data.dem_path
        dem = None
        if dem_path.exists():
            try:
                dem = load_dem(dem_path)
            except Exception as e:
                logger.error("Failed to load DEM", path=str(dem_path), error=str(e))
        else:
            logger.warning("DEM file not found", path=str(dem_path))

        return cls(
            soil=collections[SOIL],
            faults=collections[FAULTS],
            quakes=collections[QUAKES],
            dem=dem,
            dem_path=dem_path,
        )

    def get(self, name: str) -> Any:
        if name not in (*COLLECTION_NAMES, DEM):
            raise KeyError(name)
        return getattr(self, name)

    def require(self, *names: str) -> None:
        """Raise DatasetNotReady naming every unloaded dataset among ``names``."""
        missing = [name for name in names if self.get(name) is None]
        if missing:
            raise DatasetNotReady(missing)

    def status(self) -> dict[str, bool]:
        """Which datasets are loaded."""
        return {
            SOIL: self.soil is not None,
            FAULTS: self.faults is not None,
            QUAKES: self.quakes is not None,
            "dem_loaded": self.dem is not None,
            "dem_exists": bool(self.dem_path and self.dem_path.exists()),
        }

    def summary(self, name: str) -> dict[str, Any]:
        """Type and feature count of a loaded collection."""
        if name not in COLLECTION_NAMES:
            raise KeyError(name)
        self.require(name)
        collection: FeatureCollection = self.get(name)
        return {"type": collection.type, "features": len(collection)}

    def geojson(self, name: str) -> dict[str, Any]:
        """Full GeoJSON document of a loaded collection."""
        if name not in COLLECTION_NAMES:
            raise KeyError(name)
        self.require(name)
        collection: FeatureCollection = self.get(name)
        return collection.to_geojson()
