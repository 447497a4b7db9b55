from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from riskengine.models.records import Risk
from riskengine.models.results import RiskCalculation
from riskengine.models.vocabulary import ACCEPT_RESPONSE, DEFAULT_RESPONSE
from riskengine.scoring.dates import add_months
from riskengine.scoring.fac import compute_fac, fac_label


@dataclass(frozen=True)
class DeadlineBand:
    min_score: float
    months: int


# Residual risk -> months allowed to implement a control. The 15.1 floor is
# independent of the residual classifier's 15.0 boundary; keep both.
DEADLINE_THRESHOLDS: Tuple[Tuple[str, DeadlineBand], ...] = (
    ("critical", DeadlineBand(min_score=15.1, months=6)),
    ("high", DeadlineBand(min_score=8, months=12)),
    ("medium", DeadlineBand(min_score=4, months=36)),
    ("low", DeadlineBand(min_score=0, months=0)),
)

_ACTION_FLOOR = dict(DEADLINE_THRESHOLDS)["medium"].min_score


@dataclass(frozen=True)
class ControlFlags:
    controls_exist: bool = False
    is_effective: bool = False
    is_adequate: bool = False
    is_proportional: bool = False
    is_reasonable: bool = False


def required_months(residual_risk: float) -> int:
    for _, band in DEADLINE_THRESHOLDS:
        if band.months and residual_risk >= band.min_score:
            return band.months
    return 0


def requires_action(residual_risk: float) -> bool:
    return residual_risk >= _ACTION_FLOOR


def compute_risk_values(
    probability: int,
    impact: int,
    flags: ControlFlags,
    identification_date: Optional[str] = None,
    current_suggested_response: Optional[str] = None,
) -> RiskCalculation:
    """Derive every computed field of a risk from its primitive inputs.

    Total for well-formed inputs: an empty or malformed identification date
    simply yields an empty deadline.
    """
    inherent = probability * impact
    fac = compute_fac(
        flags.controls_exist,
        flags.is_effective,
        flags.is_adequate,
        flags.is_proportional,
        flags.is_reasonable,
    )
    residual = round(inherent * fac, 2)

    action = requires_action(residual)
    months = required_months(residual)
    deadline = add_months(identification_date, months) if months else ""

    if not action:
        response = ACCEPT_RESPONSE
    else:
        response = current_suggested_response or DEFAULT_RESPONSE

    return RiskCalculation(
        inherent_risk=inherent,
        fac=fac,
        fac_label=fac_label(fac),
        residual_risk=residual,
        max_implementation_date=deadline,
        suggested_response=response,
        requires_action=action,
        required_months=months,
    )


def flags_of(risk: Risk) -> ControlFlags:
    return ControlFlags(
        controls_exist=risk.controls_exist,
        is_effective=risk.is_control_effective,
        is_adequate=risk.is_control_adequate,
        is_proportional=risk.is_control_proportional,
        is_reasonable=risk.is_control_reasonable,
    )


def calculate_risk(risk: Risk) -> RiskCalculation:
    return compute_risk_values(
        risk.probability,
        risk.impact,
        flags_of(risk),
        risk.identification_date,
        risk.suggested_response,
    )
