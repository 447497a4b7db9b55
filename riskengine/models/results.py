from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RiskLevel:
    label: str
    severity: int  # 0 = N/A ... 5 = Crítico
    color: str


@dataclass(frozen=True)
class RiskCalculation:
    inherent_risk: int
    fac: float
    fac_label: str
    residual_risk: float
    max_implementation_date: str
    suggested_response: str
    requires_action: bool
    required_months: int


@dataclass(frozen=True)
class ControlStatusResult:
    status: str
    label: str
    days_remaining: Optional[int] = None

    @property
    def days_overdue(self) -> int:
        if self.days_remaining is None or self.days_remaining >= 0:
            return 0
        return -self.days_remaining
