"""Single source of control lifecycle status.

Status is a pure function of the planned end date, the implementation flag
and "today"; it is recomputed on every read and every save.
"""
from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Tuple

from riskengine.models.results import ControlStatusResult
from riskengine.models.vocabulary import (
    CONTROL_STATUSES,
    STATUS_NEAR_DUE,
    STATUS_ON_TIME,
    STATUS_OVERDUE,
)
from riskengine.scoring.dates import parse_iso_date

NEAR_DUE_THRESHOLD_DAYS = 30

ALL_CONTROL_STATUSES: Tuple[str, ...] = CONTROL_STATUSES

STATUS_PRIORITY: Dict[str, int] = {
    STATUS_OVERDUE: 3,
    STATUS_NEAR_DUE: 2,
    STATUS_ON_TIME: 1,
}

_STATUS_LABELS: Dict[str, str] = {
    STATUS_ON_TIME: "Em Dia",
    STATUS_NEAR_DUE: "Vencimento Próximo",
    STATUS_OVERDUE: "Atrasado",
}

IMPLEMENTED_LABEL = "Implementado"
PENDING_LABEL = "Pendente"


def calculate_control_status(
    planned_end_date: Optional[str],
    implemented: bool,
    actual_end_date: Optional[str] = None,
    today: Optional[date] = None,
) -> ControlStatusResult:
    """Derive the lifecycle status of a control as of ``today``.

    ``actual_end_date`` is accepted alongside the planned date but never
    changes the result; an implemented control is always on time.
    """
    if implemented:
        return ControlStatusResult(STATUS_ON_TIME, IMPLEMENTED_LABEL)

    end = parse_iso_date(planned_end_date)
    if end is None:
        return ControlStatusResult(STATUS_ON_TIME, PENDING_LABEL)

    if today is None:
        today = date.today()
    days = (end - today).days

    if days < 0:
        return ControlStatusResult(STATUS_OVERDUE, f"Atrasado ({-days}d)", days)
    if days <= NEAR_DUE_THRESHOLD_DAYS:
        label = "Vence hoje" if days == 0 else f"{days} dias restantes"
        return ControlStatusResult(STATUS_NEAR_DUE, label, days)
    return ControlStatusResult(STATUS_ON_TIME, f"{days} dias restantes", days)


def get_control_status(
    planned_end_date: Optional[str],
    implemented: bool,
    actual_end_date: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    return calculate_control_status(planned_end_date, implemented, actual_end_date, today).status


def status_display(status: str) -> str:
    return _STATUS_LABELS.get(status, _STATUS_LABELS[STATUS_ON_TIME])
