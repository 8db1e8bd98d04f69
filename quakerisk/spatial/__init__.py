"""Linear-scan spatial queries over feature collections."""

from quakerisk.spatial.faults import nearest_fault_distance_km
from quakerisk.spatial.quakes import QuakeAggregate, aggregate_quakes
from quakerisk.spatial.soil import locate_soil_feature

__all__ = [
    "locate_soil_feature",
    "nearest_fault_distance_km",
    "aggregate_quakes",
    "QuakeAggregate",
]
