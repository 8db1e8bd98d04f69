"""Seismic risk heuristic combining fault, quake and soil evidence."""

import math
from dataclasses import dataclass, field
from typing import Any

from quakerisk.features import Feature
from quakerisk.spatial.quakes import QuakeAggregate

MODEL_VERSION = "v0 heuristic (fault distance + recent quakes + soil hint)"

# Weight table
FAULT_MAX_POINTS = 45
FAULT_DECAY_KM = 50.0
QUAKE_COUNT_MAX_POINTS = 25
MAGNITUDE_MAX_POINTS = 20
MAGNITUDE_SATURATION = 8.0
SOFT_SOIL_POINTS = 10
ROCK_SOIL_POINTS = -5
MIN_SCORE = 0
MAX_SCORE = 100

SOFT_SOIL_MARKERS = ("arcill", "aluv", "rellen", "lacustr")
ROCK_SOIL_MARKERS = ("roca", "igne", "basalt")

SOIL_HINT_SOFT = "soft"
SOIL_HINT_ROCK = "rock"
SOIL_HINT_UNKNOWN = "unknown"

DEFAULT_SOIL_CLASS_ATTRIBUTE = "CLASE_TEX"

RISK_LEVELS = [
    {"name": "Low", "min_score": 0, "max_score": 24},
    {"name": "Medium", "min_score": 25, "max_score": 49},
    {"name": "High", "min_score": 50, "max_score": 74},
    {"name": "Critical", "min_score": 75, "max_score": 100},
]


@dataclass(frozen=True)
class ScoringFactor:
    """A single scoring term contribution."""

    name: str
    points: float
    max_points: int
    reason_code: str
    details: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "points": self.points,
            "max_points": self.max_points,
            "reason_code": self.reason_code,
            "details": self.details,
        }


@dataclass(frozen=True)
class RiskResult:
    """Combined lookup outputs and the resulting risk score."""

    elevation_m: float | None
    soil_feature: Feature | None
    nearest_fault_km: float | None
    quake_count_near: int
    max_magnitude_near: float | None
    soil_class: str | None
    soil_amplification_hint: str | None
    risk_score: int
    risk_level: str
    factors: tuple[ScoringFactor, ...] = field(default_factory=tuple)

    def to_dict(self, query: dict[str, Any] | None = None) -> dict[str, Any]:
        """Render the risk response document."""
        doc: dict[str, Any] = {}
        if query is not None:
            doc["input"] = query
        doc.update({
            "elevation_m": self.elevation_m,
            "soil": {"properties": dict(self.soil_feature.properties)} if self.soil_feature else None,
            "faults": {"nearest_km": self.nearest_fault_km},
            "quakes": {"near_count": self.quake_count_near, "max_mag": self.max_magnitude_near},
            "soil_class": self.soil_class,
            "soil_hint": self.soil_amplification_hint,
            "risk_score_0_100": self.risk_score,
            "risk_level": self.risk_level,
            "factors": [f.to_dict() for f in self.factors],
            "notes": {"model": MODEL_VERSION},
        })
        return doc


def score_fault(nearest_fault_km: float | None) -> ScoringFactor:
    """Linear decay from 45 points at 0 km to 0 at 50 km and beyond."""
    if nearest_fault_km is None:
        return ScoringFactor(
            name="Fault Proximity",
            points=0,
            max_points=FAULT_MAX_POINTS,
            reason_code="FAULT_UNKNOWN",
            details="No fault geometry available",
        )

    capped = min(nearest_fault_km, FAULT_DECAY_KM)
    points = max(0.0, FAULT_MAX_POINTS * (1 - capped / FAULT_DECAY_KM))
    return ScoringFactor(
        name="Fault Proximity",
        points=points,
        max_points=FAULT_MAX_POINTS,
        reason_code="FAULT_NEAR" if nearest_fault_km < FAULT_DECAY_KM else "FAULT_FAR",
        details=f"Nearest fault: {nearest_fault_km:.2f} km",
    )


def score_quake_count(count: int) -> ScoringFactor:
    """One point per nearby quake, capped."""
    points = min(QUAKE_COUNT_MAX_POINTS, count)
    return ScoringFactor(
        name="Quake Density",
        points=points,
        max_points=QUAKE_COUNT_MAX_POINTS,
        reason_code="QUAKE_COUNT_CAPPED" if count >= QUAKE_COUNT_MAX_POINTS else "QUAKE_COUNT",
        details=f"Nearby quakes: {count}",
    )


def score_magnitude(max_magnitude: float | None) -> ScoringFactor:
    """Scaled maximum magnitude, saturating at magnitude 8."""
    if max_magnitude is None:
        return ScoringFactor(
            name="Quake Magnitude",
            points=0,
            max_points=MAGNITUDE_MAX_POINTS,
            reason_code="MAGNITUDE_UNKNOWN",
            details="No nearby quake with a magnitude",
        )

    points = min(MAGNITUDE_MAX_POINTS, (max_magnitude / MAGNITUDE_SATURATION) * MAGNITUDE_MAX_POINTS)
    return ScoringFactor(
        name="Quake Magnitude",
        points=points,
        max_points=MAGNITUDE_MAX_POINTS,
        reason_code="MAGNITUDE_SATURATED" if max_magnitude >= MAGNITUDE_SATURATION else "MAGNITUDE",
        details=f"Max magnitude: {max_magnitude:.1f}",
    )


def classify_soil(soil_feature: Feature | None) -> str | None:
    """Amplification hint from Spanish soil-type markers in attribute values.

    Soft-material markers win over rock markers. A feature with neither is
    "unknown"; no feature at all is None.
    """
    if soil_feature is None:
        return None

    values = [str(v).lower() for v in soil_feature.properties.values() if v is not None]

    if any(marker in value for value in values for marker in SOFT_SOIL_MARKERS):
        return SOIL_HINT_SOFT
    if any(marker in value for value in values for marker in ROCK_SOIL_MARKERS):
        return SOIL_HINT_ROCK
    return SOIL_HINT_UNKNOWN


def score_soil(hint: str | None) -> ScoringFactor:
    """Score the soil amplification hint."""
    if hint == SOIL_HINT_SOFT:
        points, reason, details = SOFT_SOIL_POINTS, "SOIL_SOFT", "Soft/unconsolidated soil"
    elif hint == SOIL_HINT_ROCK:
        points, reason, details = ROCK_SOIL_POINTS, "SOIL_ROCK", "Rock/igneous soil"
    elif hint == SOIL_HINT_UNKNOWN:
        points, reason, details = 0, "SOIL_UNKNOWN", "Soil type not recognized"
    else:
        points, reason, details = 0, "SOIL_NONE", "No soil polygon at point"

    return ScoringFactor(
        name="Soil Amplification",
        points=points,
        max_points=SOFT_SOIL_POINTS,
        reason_code=reason,
        details=details,
    )


def finalize_score(total: float) -> int:
    """Clamp to [0, 100] and round half-up."""
    clamped = max(MIN_SCORE, min(MAX_SCORE, total))
    return int(math.floor(clamped + 0.5))


def get_risk_level(score: int) -> str:
    """Get risk level name from score."""
    for level in RISK_LEVELS:
        if level["min_score"] <= score <= level["max_score"]:
            return level["name"]
    return "Unknown"


def score_risk(
    elevation_m: float | None,
    nearest_fault_km: float | None,
    quakes: QuakeAggregate,
    soil_feature: Feature | None,
    soil_class_attribute: str = DEFAULT_SOIL_CLASS_ATTRIBUTE,
) -> RiskResult:
    """Combine lookup outputs into a risk result.

    Missing components contribute zero points. Elevation is reported but
    does not enter the score.

    Args:
        elevation_m: DEM elevation at the point, or None.
        nearest_fault_km: Distance to the nearest fault, or None.
        quakes: Nearby quake count and max magnitude.
        soil_feature: Soil polygon containing the point, or None.
        soil_class_attribute: Property holding the textural soil class.

    Returns:
        RiskResult with score, level and factor breakdown.
    """
    hint = classify_soil(soil_feature)

    factors = (
        score_fault(nearest_fault_km),
        score_quake_count(quakes.count),
        score_magnitude(quakes.max_magnitude),
        score_soil(hint),
    )
    score = finalize_score(sum(f.points for f in factors))

    soil_class = None
    if soil_feature is not None:
        soil_class = soil_feature.properties.get(soil_class_attribute)

    return RiskResult(
        elevation_m=elevation_m,
        soil_feature=soil_feature,
        nearest_fault_km=nearest_fault_km,
        quake_count_near=quakes.count,
        max_magnitude_near=quakes.max_magnitude,
        soil_class=soil_class,
        soil_amplification_hint=hint,
        risk_score=score,
        risk_level=get_risk_level(score),
        factors=factors,
    )
