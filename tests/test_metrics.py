from __future__ import annotations

from datetime import date
from typing import Any

from riskengine.metrics import (
    aggregate_controls_by_implementation,
    aggregate_controls_by_status,
    aggregate_risks_by_bucket,
    aggregate_risks_by_level,
    aggregate_risks_by_residual_level,
    build_risk_matrix,
    calculate_dashboard_metrics,
)
from riskengine.models.records import Control, Risk

TODAY = date(2026, 1, 15)


def _risk(probability: int, impact: int, fac: float = 1.0) -> Risk:
    inherent = probability * impact
    return Risk(
        process_id="p", name="Risco", identification_date="2024-03-15",
        type="Operacional", association="Processo", causes="c",
        consequences="c", dimensions=["Imagem"], probability=probability,
        probability_justification="j", impact=impact, impact_justification="j",
        inherent_risk=inherent, fac=fac, residual_risk=round(inherent * fac, 2),
    )


def _control(**overrides: Any) -> Control:
    values = dict(
        risk_id="r", name="Controle", implemented=False,
        new_or_modified="Novo", type="Preventivo", nature="Manual",
        relation_to_risk="Direto",
    )
    values.update(overrides)
    return Control(**values)


class TestRiskAggregation:
    def test_by_inherent_level(self) -> None:
        risks = [_risk(4, 5), _risk(4, 4), _risk(3, 4), _risk(1, 2)]
        assert aggregate_risks_by_level(risks) == {
            "Crítico": 2,
            "Alto": 1,
            "Muito Baixo": 1,
        }

    def test_by_residual_level(self) -> None:
        risks = [_risk(4, 5, 0.6), _risk(3, 5, 1.0), _risk(4, 4, 0.2)]
        assert aggregate_risks_by_residual_level(risks) == {"Alto": 2, "Baixo": 1}

    def test_by_bucket(self) -> None:
        risks = [_risk(5, 5), _risk(3, 5), _risk(2, 2)]
        assert aggregate_risks_by_bucket(risks) == {25: 1, 15: 1, 10: 0, 7: 1, 3: 0}

    def test_empty(self) -> None:
        assert aggregate_risks_by_level([]) == {}

    def test_matrix(self) -> None:
        matrix = build_risk_matrix([_risk(4, 5), _risk(4, 5), _risk(1, 1)])
        assert matrix[4][3] == 2
        assert matrix[0][0] == 1
        assert sum(sum(row) for row in matrix) == 3


class TestControlAggregation:
    def test_by_implementation(self) -> None:
        controls = [_control(implemented=True), _control(), _control()]
        assert aggregate_controls_by_implementation(controls) == {
            "Implementado": 1,
            "Não Implementado": 2,
        }

    def test_by_status_uses_lifecycle(self) -> None:
        controls = [
            _control(implemented=True, planned_end_date="2025-01-01"),
            _control(planned_end_date="2026-01-10"),
            _control(planned_end_date="2026-02-01"),
            _control(planned_end_date="2026-12-31"),
            _control(),
        ]
        assert aggregate_controls_by_status(controls, today=TODAY) == {
            "on-time": 3,
            "near-due": 1,
            "overdue": 1,
        }

    def test_stored_status_is_ignored(self) -> None:
        controls = [_control(status="on-time", planned_end_date="2025-06-01")]
        assert aggregate_controls_by_status(controls, today=TODAY)["overdue"] == 1


def test_dashboard_metrics() -> None:
    metrics = calculate_dashboard_metrics(
        [{"id": "p1"}, {"id": "p2"}],
        [_risk(4, 5, 0.6)],
        [_control(planned_end_date="2026-01-20")],
        today=TODAY,
    )
    assert metrics.total_processes == 2
    assert metrics.total_risks == 1
    assert metrics.total_controls == 1
    record = metrics.to_record()
    assert record["risksByLevel"] == {"Crítico": 1}
    assert record["risksByResidualLevel"] == {"Alto": 1}
    assert record["controlsByStatus"]["near-due"] == 1
    assert len(record["riskMatrix"]) == 5
    assert record["riskMatrixAxis"] == ["Muito Baixa", "Baixa", "Média", "Alta", "Muito Alta"]
