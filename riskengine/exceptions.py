from __future__ import annotations


class RiskEngineError(Exception):
    """Base exception with user-friendly message."""
    pass


class ConfigError(RiskEngineError):
    pass


class RegisterError(RiskEngineError):
    pass


class RecordValidationError(RiskEngineError):
    """A candidate record was rejected.

    ``field`` is the camelCase path of the offending input as the caller
    submitted it, ``message`` is the text to relay unchanged and ``kind`` is
    either ``"shape"`` or ``"consistency"``.
    """

    def __init__(self, field: str, message: str, kind: str = "shape") -> None:
        super().__init__(message)
        self.field = field
        self.message = message
        self.kind = kind
