"""Single source of risk level classification.

Inherent scores live on the 5x5 integer grid and use inclusive lower
bounds. Residual scores are continuous and use exclusive lower bounds on a
value first rounded to one decimal, so a residual of exactly 15.0 is
"Alto", not "Crítico".
"""
from __future__ import annotations

import math
from typing import Dict, Tuple

from riskengine.models.results import RiskLevel

INHERENT_THRESHOLDS: Dict[str, int] = {
    "critical": 16,
    "high": 11,
    "medium": 8,
    "low": 4,
    "very_low": 1,
}

RESIDUAL_THRESHOLDS: Dict[str, float] = {
    "critical": 15.0,
    "high": 10.0,
    "medium": 7.0,
    "low": 3.0,
    "very_low": 0.0,
}

COLORS: Dict[str, str] = {
    "critical": "#dc2626",
    "high": "#f97316",
    "medium": "#eab308",
    "low": "#22c55e",
    "very_low": "#86efac",
    "na": "#9ca3af",
}

NOT_APPLICABLE = RiskLevel("N/A", 0, COLORS["na"])
VERY_LOW = RiskLevel("Muito Baixo", 1, COLORS["very_low"])
LOW = RiskLevel("Baixo", 2, COLORS["low"])
MEDIUM = RiskLevel("Médio", 3, COLORS["medium"])
HIGH = RiskLevel("Alto", 4, COLORS["high"])
CRITICAL = RiskLevel("Crítico", 5, COLORS["critical"])

ALL_LEVELS: Tuple[RiskLevel, ...] = (CRITICAL, HIGH, MEDIUM, LOW, VERY_LOW, NOT_APPLICABLE)

_BUCKETS: Tuple[Tuple[int, int], ...] = (
    (INHERENT_THRESHOLDS["critical"], 25),
    (INHERENT_THRESHOLDS["high"], 15),
    (INHERENT_THRESHOLDS["medium"], 10),
    (INHERENT_THRESHOLDS["low"], 7),
    (INHERENT_THRESHOLDS["very_low"], 3),
)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like ``Math.round(value * 10**digits) / 10**digits``.

    Browser previews round this way, so the server must too.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def classify_inherent(score: int) -> RiskLevel:
    if score == 0:
        return NOT_APPLICABLE
    if score >= INHERENT_THRESHOLDS["critical"]:
        return CRITICAL
    if score >= INHERENT_THRESHOLDS["high"]:
        return HIGH
    if score >= INHERENT_THRESHOLDS["medium"]:
        return MEDIUM
    if score >= INHERENT_THRESHOLDS["low"]:
        return LOW
    if score >= INHERENT_THRESHOLDS["very_low"]:
        return VERY_LOW
    return NOT_APPLICABLE


def classify_residual(score: float) -> RiskLevel:
    rounded = round_half_up(score, 1)
    if rounded > RESIDUAL_THRESHOLDS["critical"]:
        return CRITICAL
    if rounded > RESIDUAL_THRESHOLDS["high"]:
        return HIGH
    if rounded > RESIDUAL_THRESHOLDS["medium"]:
        return MEDIUM
    if rounded > RESIDUAL_THRESHOLDS["low"]:
        return LOW
    if rounded >= RESIDUAL_THRESHOLDS["very_low"]:
        return VERY_LOW
    return NOT_APPLICABLE


def classify(score: float, residual: bool = False) -> RiskLevel:
    if residual:
        return classify_residual(score)
    return classify_inherent(int(score))


def inherent_bucket_value(score: int) -> int:
    """Snap an inherent score to its matrix bucket (0, 3, 7, 10, 15 or 25)."""
    if score == 0:
        return 0
    for threshold, bucket in _BUCKETS:
        if score >= threshold:
            return bucket
    return 0
