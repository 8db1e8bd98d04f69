"""Error taxonomy for risk queries."""

from typing import Any


class QuakeRiskError(Exception):
    """Base class for errors surfaced to callers of the risk service."""

    code = "error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Render as an error document."""
        return {"error": self.code, "message": self.message, **self.details}


class InvalidInput(QuakeRiskError):
    """Non-finite or out-of-range coordinate or radius."""

    code = "invalid_input"


class DatasetNotReady(QuakeRiskError):
    """One or more required datasets are not loaded."""

    code = "dataset_not_ready"

    def __init__(self, missing: list[str]):
        super().__init__(f"Datasets not ready: {', '.join(missing)}", missing=missing)
        self.missing = missing


class OutOfBounds(QuakeRiskError):
    """Coordinate lies outside the DEM bounding box."""

    code = "out_of_bounds"


class MalformedGeometry(QuakeRiskError):
    """A single feature's geometry could not be used.

    Never raised to callers: scans receive it as a value inside a
    GeometryOutcome and skip the feature.
    """

    code = "malformed_geometry"
