from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from riskengine.audit import (
    CONTROL_DERIVED_KEYS,
    RECALCULATION_JUSTIFICATION,
    RISK_DERIVED_KEYS,
    append_history,
    derived_changes,
)
from riskengine.exceptions import RecordValidationError
from riskengine.exporters.base import BaseExporter
from riskengine.formatters.base import BaseFormatter
from riskengine.loader import Register
from riskengine.metrics import calculate_dashboard_metrics
from riskengine.models.records import Control, Risk
from riskengine.validation.validator import prepare_control, prepare_risk


@dataclass
class Rejection:
    kind: str
    index: int
    id: Optional[str]
    field: str
    message: str

    def to_record(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "index": self.index,
            "id": self.id,
            "field": self.field,
            "message": self.message,
        }

    def describe(self) -> str:
        ref = self.id or f"#{self.index}"
        return f"{self.kind} {ref}: {self.field}: {self.message}"


@dataclass
class ScoredRegister:
    risks: List[Risk] = field(default_factory=list)
    controls: List[Control] = field(default_factory=list)
    rejected: List[Rejection] = field(default_factory=list)


def _record_id(raw: Any) -> Optional[str]:
    if isinstance(raw, dict) and isinstance(raw.get("id"), str) and raw["id"]:
        return raw["id"]
    return None


def score_register(
    register: Register,
    actor: str,
    today: Optional[date] = None,
    normalize_stale_flags: bool = True,
) -> ScoredRegister:
    """Run every record of *register* through the save path.

    Rejected records are reported and left out; when recomputation replaces a
    submitted derived value, one history entry records what changed.
    """
    result = ScoredRegister()

    for index, raw in enumerate(register.risks):
        try:
            risk = prepare_risk(raw, normalize_stale_flags=normalize_stale_flags)
        except RecordValidationError as exc:
            result.rejected.append(
                Rejection("risk", index, _record_id(raw), exc.field, exc.message)
            )
            continue
        changes = derived_changes(raw, risk, RISK_DERIVED_KEYS)
        if changes:
            risk = append_history(risk, actor, RECALCULATION_JUSTIFICATION, changes)
        result.risks.append(risk)

    for index, raw in enumerate(register.controls):
        try:
            control = prepare_control(raw, today=today)
        except RecordValidationError as exc:
            result.rejected.append(
                Rejection("control", index, _record_id(raw), exc.field, exc.message)
            )
            continue
        changes = derived_changes(raw, control, CONTROL_DERIVED_KEYS)
        if changes:
            control = append_history(control, actor, RECALCULATION_JUSTIFICATION, changes)
        result.controls.append(control)

    return result


class RegisterExporter(BaseExporter):
    def __init__(
        self,
        register: Register,
        output_dir: Path,
        formatter: BaseFormatter,
        *,
        actor: str,
        today: Optional[date] = None,
        normalize_stale_flags: bool = True,
        force: bool = False,
    ) -> None:
        super().__init__(output_dir, formatter, force=force)
        self.register = register
        self.actor = actor
        self.today = today
        self.normalize_stale_flags = normalize_stale_flags
        self.result: Optional[ScoredRegister] = None

    def export(self) -> None:
        self._ensure_output_dir()
        self._log("Scoring register...")

        scored = score_register(
            self.register,
            self.actor,
            today=self.today,
            normalize_stale_flags=self.normalize_stale_flags,
        )
        self.result = scored

        metrics = calculate_dashboard_metrics(
            self.register.processes, scored.risks, scored.controls, today=self.today,
        )

        self._write_document("risks", [r.to_record() for r in scored.risks])
        self._write_document("controls", [c.to_record() for c in scored.controls])
        self._write_document("rejected", [r.to_record() for r in scored.rejected])
        self._write_document("summary", metrics.to_record())

        for rejection in scored.rejected:
            self._log(f"  rejected {rejection.describe()}")

        self._log(
            f"Scoring register... done ({len(scored.risks)} risks, "
            f"{len(scored.controls)} controls, {len(scored.rejected)} rejected)"
        )
