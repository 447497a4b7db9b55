"""Cross-field consistency rules, evaluated in declaration order.

Each rule is a named predicate over an already shape-checked record. The
first rule that fails wins; later rules are not consulted.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Union

from riskengine.models.records import Control, Risk

RESIDUAL_TOLERANCE = 0.1


@dataclass(frozen=True)
class Ok:
    rule: str


@dataclass(frozen=True)
class Violation:
    rule: str
    field: str
    message: str


RuleResult = Union[Ok, Violation]


@dataclass(frozen=True)
class Rule:
    name: str
    field: str
    message: str
    predicate: Callable[[Any], bool]

    def check(self, record: Any) -> RuleResult:
        if self.predicate(record):
            return Ok(self.name)
        return Violation(self.name, self.field, self.message)


def _inherent_matches_product(risk: Risk) -> bool:
    return risk.inherent_risk == risk.probability * risk.impact


def _residual_matches_product(risk: Risk) -> bool:
    return abs(risk.residual_risk - risk.inherent_risk * risk.fac) < RESIDUAL_TOLERANCE


def _fac_without_controls(risk: Risk) -> bool:
    return risk.controls_exist or risk.fac == 1.0


def _fac_with_ineffective_controls(risk: Risk) -> bool:
    if risk.controls_exist and not risk.is_control_effective:
        return risk.fac == 1.0
    return True


def _implemented_requires_actual_end(control: Control) -> bool:
    return not control.implemented or bool(control.actual_end_date)


# ISO dates order lexicographically.
def _planned_start_before_end(control: Control) -> bool:
    if control.planned_start_date and control.planned_end_date:
        return control.planned_start_date <= control.planned_end_date
    return True


def _planned_start_before_actual_end(control: Control) -> bool:
    if control.planned_start_date and control.actual_end_date:
        return control.planned_start_date <= control.actual_end_date
    return True


RISK_RULES: Sequence[Rule] = (
    Rule(
        "inherent_matches_product",
        "inherentRisk",
        "Risco inerente deve ser igual a Probabilidade × Impacto",
        _inherent_matches_product,
    ),
    Rule(
        "residual_matches_product",
        "residualRisk",
        "Risco residual deve ser igual a Risco Inerente × FAC",
        _residual_matches_product,
    ),
    Rule(
        "fac_without_controls",
        "fac",
        "Sem controles, FAC deve ser 1.0 (Ineficaz)",
        _fac_without_controls,
    ),
    Rule(
        "fac_with_ineffective_controls",
        "fac",
        "Controles inefetivos devem ter FAC 1.0",
        _fac_with_ineffective_controls,
    ),
)

CONTROL_RULES: Sequence[Rule] = (
    Rule(
        "implemented_requires_actual_end",
        "actualEndDate",
        "Controle implementado deve ter data de fim real",
        _implemented_requires_actual_end,
    ),
    Rule(
        "planned_start_before_end",
        "plannedEndDate",
        "Data de início deve ser anterior à data de fim",
        _planned_start_before_end,
    ),
    Rule(
        "planned_start_before_actual_end",
        "actualEndDate",
        "Data de fim real deve ser posterior à data de início",
        _planned_start_before_actual_end,
    ),
)


def evaluate(rules: Sequence[Rule], record: Any) -> List[RuleResult]:
    return [rule.check(record) for rule in rules]


def first_violation(rules: Sequence[Rule], record: Any) -> Optional[Violation]:
    for rule in rules:
        result = rule.check(record)
        if isinstance(result, Violation):
            return result
    return None
