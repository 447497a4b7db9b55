from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class HistoryEntry:
    timestamp: str
    user: str
    justification: str
    changes: str

    def to_record(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "user": self.user,
            "justification": self.justification,
            "changes": self.changes,
        }


@dataclass
class Risk:
    process_id: str
    name: str
    identification_date: str
    type: str
    association: str
    causes: str
    consequences: str
    dimensions: List[str]
    probability: int
    probability_justification: str
    impact: int
    impact_justification: str
    inherent_risk: int = 0
    controls_exist: bool = False
    is_control_effective: bool = False
    is_control_proportional: bool = False
    is_control_reasonable: bool = False
    is_control_adequate: bool = False
    fac: float = 1.0
    residual_risk: float = 0.0
    suggested_response: str = "Aceitar"
    max_implementation_date: str = ""
    is_lgpd_related: bool = False
    id: Optional[str] = None
    history: List[HistoryEntry] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        if self.id is not None:
            record["id"] = self.id
        record.update({
            "processId": self.process_id,
            "name": self.name,
            "identificationDate": self.identification_date,
            "type": self.type,
            "association": self.association,
            "causes": self.causes,
            "consequences": self.consequences,
            "dimensions": list(self.dimensions),
            "probability": self.probability,
            "probabilityJustification": self.probability_justification,
            "impact": self.impact,
            "impactJustification": self.impact_justification,
            "inherentRisk": self.inherent_risk,
            "controlsExist": self.controls_exist,
            "isControlEffective": self.is_control_effective,
            "isControlProportional": self.is_control_proportional,
            "isControlReasonable": self.is_control_reasonable,
            "isControlAdequate": self.is_control_adequate,
            "fac": self.fac,
            "residualRisk": self.residual_risk,
            "suggestedResponse": self.suggested_response,
            "maxImplementationDate": self.max_implementation_date,
            "isLgpdRelated": self.is_lgpd_related,
            "history": [entry.to_record() for entry in self.history],
        })
        return record


@dataclass
class Control:
    risk_id: str
    name: str
    implemented: bool
    new_or_modified: str
    type: str
    nature: str
    relation_to_risk: str
    status: str = "on-time"
    responsible: str = ""
    implementation_method: str = ""
    macro_steps: str = ""
    planned_start_date: str = ""
    planned_end_date: str = ""
    actual_end_date: str = ""
    involved_sectors: List[str] = field(default_factory=list)
    adequacy_analysis: str = ""
    id: Optional[str] = None
    history: List[HistoryEntry] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        if self.id is not None:
            record["id"] = self.id
        record.update({
            "riskId": self.risk_id,
            "name": self.name,
            "implemented": self.implemented,
            "status": self.status,
            "newOrModified": self.new_or_modified,
            "type": self.type,
            "nature": self.nature,
            "relationToRisk": self.relation_to_risk,
            "responsible": self.responsible,
            "implementationMethod": self.implementation_method,
            "macroSteps": self.macro_steps,
            "plannedStartDate": self.planned_start_date,
            "plannedEndDate": self.planned_end_date,
            "actualEndDate": self.actual_end_date,
            "involvedSectors": list(self.involved_sectors),
            "adequacyAnalysis": self.adequacy_analysis,
            "history": [entry.to_record() for entry in self.history],
        })
        return record
