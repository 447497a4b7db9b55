"""Input-shape checks for candidate records.

Fields are read in a fixed order and the first problem raises
:class:`RecordValidationError`; no calculation runs on a malformed record.
"""
from __future__ import annotations

import re
import uuid
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from riskengine.exceptions import RecordValidationError
from riskengine.models.records import Control, HistoryEntry, Risk
from riskengine.models.vocabulary import (
    CONTROL_NATURES,
    CONTROL_NEW_MODIFIED,
    CONTROL_RELATIONS,
    CONTROL_STATUSES,
    CONTROL_TYPES,
    DEFAULT_RESPONSE,
    RISK_ASSOCIATIONS,
    RISK_DIMENSIONS,
    RISK_RESPONSES,
    RISK_TYPES,
)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_FORMAT_MESSAGE = "Data deve estar no formato YYYY-MM-DD"

_MISSING = object()


class RecordReader:
    """Typed accessors over an untrusted mapping, one field at a time."""

    def __init__(self, data: Mapping[str, Any], prefix: str = "") -> None:
        if not isinstance(data, Mapping):
            raise RecordValidationError(prefix.rstrip(".") or "record", "Registro deve ser um objeto")
        self._data = data
        self._prefix = prefix

    def path(self, key: str) -> str:
        return self._prefix + key

    def fail(self, key: str, message: str) -> RecordValidationError:
        return RecordValidationError(self.path(key), message)

    def _get(self, key: str, required: bool) -> Any:
        value = self._data.get(key, _MISSING)
        if value is _MISSING or value is None:
            if required:
                raise self.fail(key, f"Campo obrigatório: {key}")
            return _MISSING
        return value

    def string(
        self,
        key: str,
        min_len: int = 0,
        max_len: Optional[int] = None,
        too_short: str = "",
        too_long: str = "",
        required: bool = True,
    ) -> str:
        value = self._get(key, required)
        if value is _MISSING:
            return ""
        if not isinstance(value, str):
            raise self.fail(key, f"Tipo inválido para {key}: texto esperado")
        value = value.strip()
        if not required and value == "":
            return ""
        if len(value) < min_len:
            raise self.fail(key, too_short or f"{key} muito curto (mínimo {min_len} caracteres)")
        if max_len is not None and len(value) > max_len:
            raise self.fail(key, too_long or f"{key} muito longo (máximo {max_len} caracteres)")
        return value

    def choice(self, key: str, options: Sequence[str], required: bool = True) -> str:
        value = self._get(key, required)
        if value is _MISSING:
            return ""
        if value not in options:
            raise self.fail(
                key, f"Valor inválido para {key}: esperado um de {', '.join(options)}"
            )
        return value

    def boolean(self, key: str) -> bool:
        value = self._get(key, True)
        if not isinstance(value, bool):
            raise self.fail(key, f"Tipo inválido para {key}: booleano esperado")
        return value

    def integer(
        self, key: str, low: int, high: int, below: str, above: str, fractional: str
    ) -> int:
        value = self._get(key, True)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self.fail(key, f"Tipo inválido para {key}: número esperado")
        if isinstance(value, float):
            if not value.is_integer():
                raise self.fail(key, fractional)
            value = int(value)
        if value < low:
            raise self.fail(key, below)
        if value > high:
            raise self.fail(key, above)
        return value

    def number(
        self, key: str, low: float, high: float, below: str, above: str
    ) -> float:
        value = self._get(key, True)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self.fail(key, f"Tipo inválido para {key}: número esperado")
        if value < low:
            raise self.fail(key, below)
        if value > high:
            raise self.fail(key, above)
        return value

    def iso_date(self, key: str, required: bool = True) -> str:
        value = self._get(key, required)
        if value is _MISSING:
            return ""
        if not isinstance(value, str):
            raise self.fail(key, DATE_FORMAT_MESSAGE)
        if value == "" and not required:
            return ""
        if not _ISO_DATE_RE.match(value):
            raise self.fail(key, DATE_FORMAT_MESSAGE)
        return value

    def uuid(self, key: str, message: str, required: bool = True) -> Optional[str]:
        value = self._get(key, required)
        if value is _MISSING or value == "":
            if required:
                raise self.fail(key, message)
            return None
        if not isinstance(value, str) or not _is_uuid(value):
            raise self.fail(key, message)
        return value

    def string_list(self, key: str) -> List[str]:
        value = self._get(key, False)
        if value is _MISSING:
            return []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise self.fail(key, f"Tipo inválido para {key}: lista de textos esperada")
        return [v.strip() for v in value]

    def choice_list(
        self, key: str, options: Sequence[str], min_items: int, too_few: str
    ) -> List[str]:
        value = self._get(key, True)
        if not isinstance(value, list):
            raise self.fail(key, f"Tipo inválido para {key}: lista esperada")
        for index, item in enumerate(value):
            if item not in options:
                raise RecordValidationError(
                    f"{self.path(key)}.{index}",
                    f"Valor inválido para {key}: esperado um de {', '.join(options)}",
                )
        if len(value) < min_items:
            raise self.fail(key, too_few)
        return list(value)

    def history(self, key: str = "history") -> List[HistoryEntry]:
        value = self._get(key, False)
        if value is _MISSING:
            return []
        if not isinstance(value, list):
            raise self.fail(key, f"Tipo inválido para {key}: lista esperada")
        return [
            parse_history_entry(item, prefix=f"{self.path(key)}.{index}.")
            for index, item in enumerate(value)
        ]

    def raw(self, key: str) -> Any:
        return self._data.get(key)


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return len(value) == 36


def _is_iso_datetime(value: str) -> bool:
    if "T" not in value:
        return False
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        datetime.fromisoformat(text)
    except ValueError:
        return False
    return True


def parse_history_entry(data: Any, prefix: str = "") -> HistoryEntry:
    reader = RecordReader(data, prefix)
    timestamp = reader.string("timestamp")
    if not _is_iso_datetime(timestamp):
        raise reader.fail("timestamp", "Data/hora deve estar no formato ISO 8601")
    return HistoryEntry(
        timestamp=timestamp,
        user=reader.string("user", 1, too_short="Usuário é obrigatório"),
        justification=reader.string("justification", 1, too_short="Justificativa é obrigatória"),
        changes=reader.string("changes", 1, too_short="Mudanças são obrigatórias"),
    )


def parse_risk(data: Mapping[str, Any], derive: bool = False) -> Risk:
    """Shape-check a risk record.

    With ``derive=True`` the computed fields are not read (they will be
    replaced) except ``suggestedResponse``, which is kept as the caller's
    current choice and checked once the final value is known.
    """
    reader = RecordReader(data)
    risk_id = reader.uuid("id", "ID de risco inválido", required=False)
    process_id = reader.uuid("processId", "ID de processo inválido")
    name = reader.string(
        "name", 5, 200,
        too_short="Nome do risco muito curto (mínimo 5 caracteres)",
        too_long="Nome do risco muito longo (máximo 200 caracteres)",
    )
    identification_date = reader.iso_date("identificationDate")
    risk_type = reader.choice("type", RISK_TYPES)
    association = reader.choice("association", RISK_ASSOCIATIONS)
    causes = reader.string(
        "causes", 5, 1000,
        too_short="Causas do risco são obrigatórias",
        too_long="Causas muito longas",
    )
    consequences = reader.string(
        "consequences", 5, 1000,
        too_short="Consequências do risco são obrigatórias",
        too_long="Consequências muito longas",
    )
    dimensions = reader.choice_list(
        "dimensions", RISK_DIMENSIONS, 1, "Selecione ao menos uma dimensão"
    )
    probability = reader.integer(
        "probability", 1, 5,
        "Probabilidade mínima é 1",
        "Probabilidade máxima é 5",
        "Probabilidade deve ser um número inteiro",
    )
    probability_justification = reader.string(
        "probabilityJustification", 5, 500,
        too_short="Justificativa de probabilidade é obrigatória",
        too_long="Justificativa de probabilidade muito longa",
    )
    impact = reader.integer(
        "impact", 1, 5,
        "Impacto mínimo é 1",
        "Impacto máximo é 5",
        "Impacto deve ser um número inteiro",
    )
    impact_justification = reader.string(
        "impactJustification", 5, 500,
        too_short="Justificativa de impacto é obrigatória",
        too_long="Justificativa de impacto muito longa",
    )

    if derive:
        inherent_risk: float = 0
    else:
        inherent_risk = reader.number(
            "inherentRisk", 0, 25,
            "Risco inerente não pode ser negativo",
            "Risco inerente máximo é 25",
        )

    controls_exist = reader.boolean("controlsExist")
    is_effective = reader.boolean("isControlEffective")
    is_proportional = reader.boolean("isControlProportional")
    is_reasonable = reader.boolean("isControlReasonable")
    is_adequate = reader.boolean("isControlAdequate")

    if derive:
        fac: float = 1.0
        residual_risk: float = 0.0
        response = reader.raw("suggestedResponse")
        if response is not None and not isinstance(response, str):
            raise reader.fail("suggestedResponse", "Tipo inválido para suggestedResponse: texto esperado")
        suggested_response = response or DEFAULT_RESPONSE
        max_date = ""
    else:
        fac = reader.number(
            "fac", 0.2, 1.0,
            "FAC mínimo é 0.2 (Forte)",
            "FAC máximo é 1.0 (Ineficaz)",
        )
        residual_risk = reader.number(
            "residualRisk", 0, 25,
            "Risco residual não pode ser negativo",
            "Risco residual máximo é 25",
        )
        suggested_response = reader.choice("suggestedResponse", RISK_RESPONSES)
        max_date = reader.iso_date("maxImplementationDate", required=False)

    return Risk(
        id=risk_id,
        process_id=process_id or "",
        name=name,
        identification_date=identification_date,
        type=risk_type,
        association=association,
        causes=causes,
        consequences=consequences,
        dimensions=dimensions,
        probability=probability,
        probability_justification=probability_justification,
        impact=impact,
        impact_justification=impact_justification,
        inherent_risk=inherent_risk,
        controls_exist=controls_exist,
        is_control_effective=is_effective,
        is_control_proportional=is_proportional,
        is_control_reasonable=is_reasonable,
        is_control_adequate=is_adequate,
        fac=fac,
        residual_risk=residual_risk,
        suggested_response=suggested_response,
        max_implementation_date=max_date,
        is_lgpd_related=reader.boolean("isLgpdRelated"),
        history=reader.history(),
    )


def _control_id(reader: RecordReader) -> Optional[str]:
    # Saved controls carry a UUID; unsaved ones a temporary "c..." id.
    value = reader.raw("id")
    if value is None or value == "":
        return None
    if isinstance(value, str) and (_is_uuid(value) or value.startswith("c")):
        return value
    raise reader.fail("id", "ID de controle inválido")


def parse_control(data: Mapping[str, Any], derive: bool = False) -> Control:
    """Shape-check a control record; ``derive=True`` skips ``status``."""
    reader = RecordReader(data)
    control_id = _control_id(reader)
    risk_id = reader.uuid("riskId", "ID de risco inválido")
    name = reader.string(
        "name", 5, 200,
        too_short="Nome do controle muito curto (mínimo 5 caracteres)",
        too_long="Nome do controle muito longo (máximo 200 caracteres)",
    )
    implemented = reader.boolean("implemented")
    status = "on-time" if derive else reader.choice("status", CONTROL_STATUSES)

    return Control(
        id=control_id,
        risk_id=risk_id or "",
        name=name,
        implemented=implemented,
        status=status,
        new_or_modified=reader.choice("newOrModified", CONTROL_NEW_MODIFIED),
        type=reader.choice("type", CONTROL_TYPES),
        nature=reader.choice("nature", CONTROL_NATURES),
        relation_to_risk=reader.choice("relationToRisk", CONTROL_RELATIONS),
        responsible=reader.string(
            "responsible", max_len=100, required=False,
            too_long="Nome do responsável muito longo",
        ),
        implementation_method=reader.string(
            "implementationMethod", max_len=1000, required=False,
            too_long="Método de implementação muito longo",
        ),
        macro_steps=reader.string(
            "macroSteps", max_len=1000, required=False,
            too_long="Macro etapas muito longas",
        ),
        planned_start_date=reader.iso_date("plannedStartDate", required=False),
        planned_end_date=reader.iso_date("plannedEndDate", required=False),
        actual_end_date=reader.iso_date("actualEndDate", required=False),
        involved_sectors=reader.string_list("involvedSectors"),
        adequacy_analysis=reader.string(
            "adequacyAnalysis", max_len=1000, required=False,
            too_long="Análise de adequação muito longa",
        ),
        history=reader.history(),
    )
