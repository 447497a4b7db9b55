from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from riskengine.exceptions import RecordValidationError
from riskengine.models.records import Control, Risk
from riskengine.models.vocabulary import ACCEPT_RESPONSE, RISK_RESPONSES
from riskengine.scoring.control_status import get_control_status
from riskengine.scoring.risk_calculator import calculate_risk
from riskengine.validation.rules import (
    CONTROL_RULES,
    RESIDUAL_TOLERANCE,
    RISK_RULES,
    Rule,
    first_violation,
)
from riskengine.validation.schema import parse_control, parse_risk


def _inconsistent(field: str, message: str) -> RecordValidationError:
    return RecordValidationError(field, message, kind="consistency")


def _enforce(rules: Sequence[Rule], record: Any) -> None:
    violation = first_violation(rules, record)
    if violation is not None:
        raise _inconsistent(violation.field, violation.message)


def _check_derived_risk_fields(risk: Risk) -> None:
    calculation = calculate_risk(risk)
    if risk.fac != calculation.fac:
        raise _inconsistent(
            "fac", f"FAC deve ser {calculation.fac} para os critérios de controle informados"
        )
    if abs(risk.residual_risk - calculation.residual_risk) >= RESIDUAL_TOLERANCE:
        raise _inconsistent(
            "residualRisk", f"Risco residual deve ser {calculation.residual_risk}"
        )
    if not calculation.requires_action and risk.suggested_response != ACCEPT_RESPONSE:
        raise _inconsistent(
            "suggestedResponse", "Riscos sem ação requerida devem ter resposta Aceitar"
        )
    if risk.max_implementation_date != calculation.max_implementation_date:
        expected = calculation.max_implementation_date or "vazia"
        raise _inconsistent(
            "maxImplementationDate",
            f"Data máxima de implementação deve ser {expected}",
        )


def validate_risk(data: Mapping[str, Any]) -> Risk:
    """Check a risk exactly as submitted; raise on the first violation.

    After the cross-field rules, every derived field is recomputed and must
    agree with what was submitted.
    """
    risk = parse_risk(data)
    _enforce(RISK_RULES, risk)
    _check_derived_risk_fields(risk)
    return risk


def validate_control(data: Mapping[str, Any], today: Optional[date] = None) -> Control:
    """Check a control exactly as submitted; ``status`` must match ``today``."""
    control = parse_control(data)
    _enforce(CONTROL_RULES, control)
    expected = get_control_status(
        control.planned_end_date,
        control.implemented,
        control.actual_end_date,
        today=today,
    )
    if control.status != expected:
        raise _inconsistent("status", f"Status do controle deve ser {expected}")
    return control


def normalize_control_flags(risk: Risk) -> Risk:
    """Clear criteria that cannot apply given the flags above them."""
    if not risk.controls_exist:
        return replace(
            risk,
            is_control_effective=False,
            is_control_adequate=False,
            is_control_proportional=False,
            is_control_reasonable=False,
        )
    if not risk.is_control_effective:
        return replace(
            risk,
            is_control_adequate=False,
            is_control_proportional=False,
            is_control_reasonable=False,
        )
    return risk


def prepare_risk(data: Mapping[str, Any], normalize_stale_flags: bool = True) -> Risk:
    """Authoritative save path for a risk.

    Caller-supplied derived fields are ignored and recomputed; the result is
    then held to the same rules as :func:`validate_risk`.
    """
    risk = parse_risk(data, derive=True)
    if normalize_stale_flags:
        risk = normalize_control_flags(risk)

    calculation = calculate_risk(risk)
    if calculation.suggested_response not in RISK_RESPONSES:
        raise RecordValidationError(
            "suggestedResponse",
            f"Valor inválido para suggestedResponse: esperado um de {', '.join(RISK_RESPONSES)}",
        )

    risk = replace(
        risk,
        inherent_risk=calculation.inherent_risk,
        fac=calculation.fac,
        residual_risk=calculation.residual_risk,
        max_implementation_date=calculation.max_implementation_date,
        suggested_response=calculation.suggested_response,
    )
    _enforce(RISK_RULES, risk)
    return risk


def prepare_control(data: Mapping[str, Any], today: Optional[date] = None) -> Control:
    """Authoritative save path for a control; ``status`` is always derived."""
    control = parse_control(data, derive=True)
    status = get_control_status(
        control.planned_end_date,
        control.implemented,
        control.actual_end_date,
        today=today,
    )
    control = replace(control, status=status)
    _enforce(CONTROL_RULES, control)
    return control
