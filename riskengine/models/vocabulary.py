from __future__ import annotations

from typing import Dict, Tuple

RISK_TYPES: Tuple[str, ...] = ("Operacional", "Suporte")
RISK_ASSOCIATIONS: Tuple[str, ...] = ("Processo", "Projeto")
RISK_DIMENSIONS: Tuple[str, ...] = (
    "Operacional",
    "Conformidade",
    "Imagem",
    "Estratégico",
    "Sancionatório",
    "Privacidade",
)
RISK_RESPONSES: Tuple[str, ...] = (
    "Aceitar",
    "Compartilhar",
    "Eliminar",
    "Evitar",
    "Potencializar",
    "Reduzir",
)
ACCEPT_RESPONSE = "Aceitar"
DEFAULT_RESPONSE = RISK_RESPONSES[0]

PROBABILITY_IMPACT_SCALE: Dict[int, str] = {
    1: "Muito Baixa",
    2: "Baixa",
    3: "Média",
    4: "Alta",
    5: "Muito Alta",
}

CONTROL_TYPES: Tuple[str, ...] = ("Preventivo", "Corretivo")
CONTROL_NATURES: Tuple[str, ...] = ("Manual", "Automatizado", "Híbrido")
CONTROL_RELATIONS: Tuple[str, ...] = ("Direto", "Indireto")
CONTROL_NEW_MODIFIED: Tuple[str, ...] = ("Novo", "Modificado")

STATUS_ON_TIME = "on-time"
STATUS_NEAR_DUE = "near-due"
STATUS_OVERDUE = "overdue"
CONTROL_STATUSES: Tuple[str, ...] = (STATUS_ON_TIME, STATUS_NEAR_DUE, STATUS_OVERDUE)
