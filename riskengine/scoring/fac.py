from __future__ import annotations

from typing import Dict, List, Tuple

STRONG = 0.2
SATISFACTORY = 0.4
MEDIUM = 0.6
WEAK = 0.8
INEFFECTIVE = 1.0

_EFFECTIVE_CREDIT = 0.2
_CRITERION_CREDIT = 0.2

FAC_LABELS: Dict[float, str] = {
    STRONG: "Forte",
    SATISFACTORY: "Satisfatório",
    MEDIUM: "Mediano",
    WEAK: "Fraco",
    INEFFECTIVE: "Ineficaz",
}

FAC_OPTIONS: List[Tuple[float, str]] = sorted(FAC_LABELS.items())


def compute_fac(
    controls_exist: bool,
    is_effective: bool,
    is_adequate: bool,
    is_proportional: bool,
    is_reasonable: bool,
) -> float:
    """Control adequacy factor: 0.2 (strongest mitigation) to 1.0 (none).

    The three criteria only count when controls exist and are effective.
    """
    if not controls_exist or not is_effective:
        return INEFFECTIVE

    reduction = _EFFECTIVE_CREDIT
    for criterion in (is_adequate, is_proportional, is_reasonable):
        if criterion:
            reduction += _CRITERION_CREDIT

    fac = round(1.0 - reduction, 1)
    return min(max(fac, STRONG), INEFFECTIVE)


def fac_label(fac: float) -> str:
    label = FAC_LABELS.get(round(fac, 1))
    if label is not None:
        return label
    if fac <= STRONG:
        return FAC_LABELS[STRONG]
    return "-"
