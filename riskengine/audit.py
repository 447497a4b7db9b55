from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence, TypeVar, Union

from riskengine.models.records import Control, HistoryEntry, Risk

RISK_DERIVED_KEYS = (
    "inherentRisk",
    "fac",
    "residualRisk",
    "maxImplementationDate",
    "suggestedResponse",
    "isControlEffective",
    "isControlProportional",
    "isControlReasonable",
    "isControlAdequate",
)
CONTROL_DERIVED_KEYS = ("status",)

RECALCULATION_JUSTIFICATION = "Recálculo automático dos campos derivados"

RecordT = TypeVar("RecordT", Risk, Control)


def _display(value: Any) -> str:
    if value is None or value == "":
        return "(vazio)"
    return str(value)


def derived_changes(
    submitted: Mapping[str, Any],
    record: Union[Risk, Control],
    keys: Sequence[str],
) -> List[str]:
    """Describe the derived fields whose submitted value was replaced.

    Keys absent from the submission are not reported.
    """
    stored = record.to_record()
    changes: List[str] = []
    for key in keys:
        if key not in submitted:
            continue
        before, after = submitted[key], stored.get(key)
        if before == after:
            continue
        changes.append(f"{key}: {_display(before)} → {_display(after)}")
    return changes


def append_history(
    record: RecordT,
    user: str,
    justification: str,
    changes: Sequence[str],
    now: Optional[datetime] = None,
) -> RecordT:
    """Return a copy of *record* with one more history entry."""
    moment = now or datetime.now(timezone.utc)
    entry = HistoryEntry(
        timestamp=moment.strftime("%Y-%m-%dT%H:%M:%SZ"),
        user=user,
        justification=justification,
        changes="; ".join(changes),
    )
    return replace(record, history=[*record.history, entry])
