"""Dashboard aggregation.

Every count goes through the one classifier and the one status function, so
the dashboard cannot disagree with the save path.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from riskengine.models.records import Control, Risk
from riskengine.models.vocabulary import PROBABILITY_IMPACT_SCALE
from riskengine.scoring.classification import (
    ALL_LEVELS,
    classify_inherent,
    classify_residual,
    inherent_bucket_value,
)
from riskengine.scoring.control_status import ALL_CONTROL_STATUSES, get_control_status

IMPLEMENTED = "Implementado"
NOT_IMPLEMENTED = "Não Implementado"

# Axis labels shared by both matrix dimensions, lowest first.
RISK_MATRIX_AXIS: List[str] = [
    PROBABILITY_IMPACT_SCALE[value] for value in sorted(PROBABILITY_IMPACT_SCALE)
]


@dataclass
class DashboardMetrics:
    total_processes: int
    total_risks: int
    total_controls: int
    risks_by_level: Dict[str, int] = field(default_factory=dict)
    risks_by_residual_level: Dict[str, int] = field(default_factory=dict)
    risks_by_bucket: Dict[int, int] = field(default_factory=dict)
    controls_by_implementation: Dict[str, int] = field(default_factory=dict)
    controls_by_status: Dict[str, int] = field(default_factory=dict)
    risk_matrix: List[List[int]] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {
            "totalProcesses": self.total_processes,
            "totalRisks": self.total_risks,
            "totalControls": self.total_controls,
            "risksByLevel": dict(self.risks_by_level),
            "risksByResidualLevel": dict(self.risks_by_residual_level),
            "risksByBucket": dict(self.risks_by_bucket),
            "controlsByImplementation": dict(self.controls_by_implementation),
            "controlsByStatus": dict(self.controls_by_status),
            "riskMatrix": [list(row) for row in self.risk_matrix],
            "riskMatrixAxis": list(RISK_MATRIX_AXIS),
        }


def _empty_level_counts() -> Dict[str, int]:
    return {level.label: 0 for level in ALL_LEVELS}


def _drop_empty(counts: Dict[str, int]) -> Dict[str, int]:
    return {label: count for label, count in counts.items() if count}


def aggregate_risks_by_level(risks: Sequence[Risk]) -> Dict[str, int]:
    counts = _empty_level_counts()
    for risk in risks:
        counts[classify_inherent(risk.inherent_risk).label] += 1
    return _drop_empty(counts)


def aggregate_risks_by_residual_level(risks: Sequence[Risk]) -> Dict[str, int]:
    counts = _empty_level_counts()
    for risk in risks:
        counts[classify_residual(risk.residual_risk).label] += 1
    return _drop_empty(counts)


def aggregate_risks_by_bucket(risks: Sequence[Risk]) -> Dict[int, int]:
    """Counts per matrix bucket value (3, 7, 10, 15, 25), highest first."""
    counts = {25: 0, 15: 0, 10: 0, 7: 0, 3: 0}
    for risk in risks:
        bucket = inherent_bucket_value(risk.inherent_risk)
        if bucket:
            counts[bucket] += 1
    return counts


def aggregate_controls_by_implementation(controls: Sequence[Control]) -> Dict[str, int]:
    counts = {IMPLEMENTED: 0, NOT_IMPLEMENTED: 0}
    for control in controls:
        counts[IMPLEMENTED if control.implemented else NOT_IMPLEMENTED] += 1
    return _drop_empty(counts)


def aggregate_controls_by_status(
    controls: Sequence[Control], today: Optional[date] = None
) -> Dict[str, int]:
    counts = {status: 0 for status in ALL_CONTROL_STATUSES}
    for control in controls:
        status = get_control_status(
            control.planned_end_date,
            control.implemented,
            control.actual_end_date,
            today=today,
        )
        counts[status] += 1
    return counts


def build_risk_matrix(risks: Sequence[Risk]) -> List[List[int]]:
    """5x5 counts indexed ``[impact - 1][probability - 1]``."""
    size = len(RISK_MATRIX_AXIS)
    matrix = [[0] * size for _ in range(size)]
    for risk in risks:
        if 1 <= risk.probability <= size and 1 <= risk.impact <= size:
            matrix[risk.impact - 1][risk.probability - 1] += 1
    return matrix


def calculate_dashboard_metrics(
    processes: Sequence[Any],
    risks: Sequence[Risk],
    controls: Sequence[Control],
    today: Optional[date] = None,
) -> DashboardMetrics:
    return DashboardMetrics(
        total_processes=len(processes),
        total_risks=len(risks),
        total_controls=len(controls),
        risks_by_level=aggregate_risks_by_level(risks),
        risks_by_residual_level=aggregate_risks_by_residual_level(risks),
        risks_by_bucket=aggregate_risks_by_bucket(risks),
        controls_by_implementation=aggregate_controls_by_implementation(controls),
        controls_by_status=aggregate_controls_by_status(controls, today=today),
        risk_matrix=build_risk_matrix(risks),
    )
