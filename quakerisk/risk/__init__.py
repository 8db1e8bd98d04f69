"""Risk scoring and query orchestration."""

from quakerisk.risk.assessment import RiskQuery, RiskService
from quakerisk.risk.scoring import RiskResult, ScoringFactor, score_risk

__all__ = [
    "RiskService",
    "RiskQuery",
    "score_risk",
    "RiskResult",
    "ScoringFactor",
]
