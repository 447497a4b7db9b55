from riskengine.validation.validator import (
    normalize_control_flags,
    prepare_control,
    prepare_risk,
    validate_control,
    validate_risk,
)

__all__ = [
    "normalize_control_flags",
    "prepare_control",
    "prepare_risk",
    "validate_control",
    "validate_risk",
]
