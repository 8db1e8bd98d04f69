"""Risk queries against the loaded datasets."""

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable

import structlog

from quakerisk.config import Config, get_config
from quakerisk.datasets import DEM, FAULTS, QUAKES, SOIL, DatasetStore
from quakerisk.errors import InvalidInput, OutOfBounds
from quakerisk.features import Feature, GeographicPoint
from quakerisk.raster.dem import PixelSample
from quakerisk.risk.scoring import RiskResult, score_risk
from quakerisk.spatial.faults import nearest_fault_distance_km
from quakerisk.spatial.quakes import QuakeAggregate, aggregate_quakes
from quakerisk.spatial.soil import locate_soil_feature

logger = structlog.get_logger()


@dataclass(frozen=True)
class RiskQuery:
    """A validated risk request."""

    point: GeographicPoint
    radius_km: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.point.lat, "lng": self.point.lon, "radiusKm": self.radius_km}


@dataclass(frozen=True)
class ElevationResult:
    """Elevation lookup response."""

    point: GeographicPoint
    sample: PixelSample

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": {"lat": self.point.lat, "lng": self.point.lon},
            "elevation_m": self.sample.elevation_m,
            "pixel": {"row": self.sample.row, "col": self.sample.col},
        }


@dataclass(frozen=True)
class SoilLookupResult:
    """Soil lookup response."""

    point: GeographicPoint
    feature: Feature | None

    @property
    def properties(self) -> dict[str, Any] | None:
        return dict(self.feature.properties) if self.feature is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": {"lat": self.point.lat, "lng": self.point.lon},
            "found": self.feature is not None,
            "properties": self.properties,
        }


def validate_radius(radius_km: Any, max_radius_km: float = 300.0) -> float:
    """Validate a search radius in (0, max_radius_km].

    Raises:
        InvalidInput: If the radius is non-numeric, non-finite or out of range.
    """
    try:
        radius = float(radius_km)
    except (TypeError, ValueError):
        raise InvalidInput("radiusKm must be a number", radiusKm=radius_km) from None

    if not math.isfinite(radius) or radius <= 0 or radius > max_radius_km:
        raise InvalidInput(f"radiusKm must be within (0, {max_radius_km:g}]", radiusKm=radius)
    return radius


class RiskService:
    """Answers risk, elevation and soil queries from a DatasetStore."""

    def __init__(self, store: DatasetStore, config: Config | None = None):
        """Initialize the service.

        Args:
            store: Loaded datasets.
            config: Configuration (defaults to the global config).
        """
        self.store = store
        self.config = config or get_config()

    def build_query(self, lat: Any, lon: Any, radius_km: Any = None) -> RiskQuery:
        """Validate raw request values into a RiskQuery."""
        point = GeographicPoint.create(lat, lon)
        if radius_km is None:
            radius_km = self.config.query.default_radius_km
        radius = validate_radius(radius_km, self.config.query.max_radius_km)
        return RiskQuery(point=point, radius_km=radius)

    def assess(self, lat: Any, lon: Any, radius_km: Any = None) -> RiskResult:
        """Compute the risk result for a coordinate.

        Raises:
            InvalidInput: For bad coordinates or radius.
            DatasetNotReady: If any of soil, faults, quakes or DEM is unloaded.
        """
        return self.evaluate(self.build_query(lat, lon, radius_km))

    def evaluate(self, query: RiskQuery) -> RiskResult:
        """Run the four lookups for a validated query and score them.

        Raises:
            DatasetNotReady: If any of soil, faults, quakes or DEM is unloaded.
        """
        self.store.require(SOIL, FAULTS, QUAKES, DEM)
        point = query.point
        lookups: dict[str, Callable[[], Any]] = {
            SOIL: lambda: locate_soil_feature(point, self.store.soil),
            FAULTS: lambda: nearest_fault_distance_km(point, self.store.faults),
            QUAKES: lambda: aggregate_quakes(
                point,
                query.radius_km,
                self.store.quakes,
                magnitude_attribute=self.config.attributes.magnitude,
            ),
            DEM: lambda: self._elevation_or_none(point),
        }

        if self.config.query.parallel:
            with ThreadPoolExecutor(max_workers=self.config.query.max_workers) as pool:
                futures = {name: pool.submit(fn) for name, fn in lookups.items()}
                outputs = {name: future.result() for name, future in futures.items()}
        else:
            outputs = {name: fn() for name, fn in lookups.items()}

        quakes: QuakeAggregate = outputs[QUAKES]
        result = score_risk(
            elevation_m=outputs[DEM],
            nearest_fault_km=outputs[FAULTS],
            quakes=quakes,
            soil_feature=outputs[SOIL],
            soil_class_attribute=self.config.attributes.soil_class,
        )

        logger.info(
            "Risk assessed",
            lat=point.lat,
            lng=point.lon,
            radius_km=query.radius_km,
            risk_score=result.risk_score,
            soil_hint=result.soil_amplification_hint,
            quakes_near=quakes.count,
        )

        return result

    def _elevation_or_none(self, point: GeographicPoint) -> float | None:
        try:
            return self.store.dem.elevation_at(point)
        except OutOfBounds:
            logger.debug("Point outside DEM, elevation unavailable", lat=point.lat, lng=point.lon)
            return None

    def elevation(self, lat: Any, lon: Any) -> ElevationResult:
        """Elevation at a coordinate.

        Raises:
            InvalidInput: For bad coordinates.
            DatasetNotReady: If the DEM is unloaded.
            OutOfBounds: If the point lies outside the DEM.
        """
        point = GeographicPoint.create(lat, lon)
        self.store.require(DEM)
        return ElevationResult(point=point, sample=self.store.dem.sample(point))

    def soil(self, lat: Any, lon: Any) -> SoilLookupResult:
        """Soil polygon containing a coordinate.

        Raises:
            InvalidInput: For bad coordinates.
            DatasetNotReady: If the soil dataset is unloaded.
        """
        point = GeographicPoint.create(lat, lon)
        self.store.require(SOIL)
        return SoilLookupResult(point=point, feature=locate_soil_feature(point, self.store.soil))
