from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict
from unittest.mock import patch

import pytest
import yaml

from riskengine.audit import RISK_DERIVED_KEYS, append_history, derived_changes
from riskengine.exceptions import RegisterError
from riskengine.exporters.register import RegisterExporter, score_register
from riskengine.formatters.json_formatter import JsonFormatter
from riskengine.formatters.yaml_formatter import YamlFormatter
from riskengine.loader import Register, load_register
from riskengine.validation.validator import prepare_risk

PROCESS_ID = "3f1c2b9a-8d4e-4f6a-9b2c-1d2e3f4a5b6c"
RISK_ID = "9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d"
TODAY = date(2026, 6, 10)


def _make_risk(**overrides: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": RISK_ID,
        "processId": PROCESS_ID,
        "name": "Indisponibilidade do sistema de protocolo",
        "identificationDate": "2024-03-15",
        "type": "Suporte",
        "association": "Processo",
        "causes": "Servidor único sem redundância",
        "consequences": "Atraso no atendimento",
        "dimensions": ["Operacional"],
        "probability": 4,
        "probabilityJustification": "Quedas mensais registradas",
        "impact": 5,
        "impactJustification": "Serviço essencial",
        "inherentRisk": 20,
        "controlsExist": True,
        "isControlEffective": True,
        "isControlProportional": False,
        "isControlReasonable": False,
        "isControlAdequate": True,
        "fac": 0.6,
        "residualRisk": 12.0,
        "suggestedResponse": "Reduzir",
        "maxImplementationDate": "2025-03-15",
        "isLgpdRelated": False,
        "history": [],
    }
    record.update(overrides)
    return record


def _make_control(**overrides: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": "c1",
        "riskId": RISK_ID,
        "name": "Cluster de alta disponibilidade",
        "implemented": False,
        "status": "on-time",
        "newOrModified": "Novo",
        "type": "Preventivo",
        "nature": "Automatizado",
        "relationToRisk": "Direto",
        "plannedStartDate": "2026-01-01",
        "plannedEndDate": "2026-06-30",
        "actualEndDate": "",
    }
    record.update(overrides)
    return record


def _make_register() -> Register:
    return Register(
        processes=[{"id": PROCESS_ID, "name": "Protocolo"}],
        risks=[_make_risk(inherentRisk=1), _make_risk(id=None, probability=7)],
        controls=[_make_control()],
    )


def _read_yaml(path: Path) -> Any:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


class TestScoreRegister:
    def test_valid_records_recomputed(self) -> None:
        scored = score_register(_make_register(), "ana", today=TODAY)
        assert len(scored.risks) == 1
        assert scored.risks[0].inherent_risk == 20
        assert len(scored.controls) == 1
        assert scored.controls[0].status == "near-due"

    def test_rejected_records_reported(self) -> None:
        scored = score_register(_make_register(), "ana", today=TODAY)
        assert len(scored.rejected) == 1
        rejection = scored.rejected[0]
        assert rejection.kind == "risk"
        assert rejection.index == 1
        assert rejection.id is None
        assert rejection.field == "probability"
        assert rejection.describe() == "risk #1: probability: Probabilidade máxima é 5"

    def test_history_appended_for_replaced_values(self) -> None:
        scored = score_register(_make_register(), "ana", today=TODAY)
        history = scored.risks[0].history
        assert len(history) == 1
        assert history[0].user == "ana"
        assert history[0].changes == "inherentRisk: 1 → 20"

        control_history = scored.controls[0].history
        assert control_history[0].changes == "status: on-time → near-due"

    def test_consistent_records_get_no_history(self) -> None:
        register = Register(risks=[_make_risk()], controls=[_make_control(status="near-due")])
        scored = score_register(register, "ana", today=TODAY)
        assert scored.risks[0].history == []
        assert scored.controls[0].history == []

    def test_non_mapping_record_rejected(self) -> None:
        scored = score_register(Register(risks=["oops"]), "ana")  # type: ignore[list-item]
        assert scored.rejected[0].field == "record"


class TestRegisterExporter:
    def test_writes_all_documents(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        out = tmp_path / "scored"
        exporter = RegisterExporter(
            _make_register(), out, YamlFormatter(), actor="ana", today=TODAY, force=True,
        )
        exporter.export()

        for name in ("risks", "controls", "rejected", "summary"):
            assert (out / f"{name}.yaml").is_file()

        risks = _read_yaml(out / "risks.yaml")
        assert risks[0]["inherentRisk"] == 20
        assert risks[0]["residualRisk"] == 12.0
        assert risks[0]["history"][0]["justification"] == "Recálculo automático dos campos derivados"

        rejected = _read_yaml(out / "rejected.yaml")
        assert rejected[0]["field"] == "probability"

        summary = _read_yaml(out / "summary.yaml")
        assert summary["totalProcesses"] == 1
        assert summary["totalRisks"] == 1
        assert summary["risksByResidualLevel"] == {"Alto": 1}

        captured = capsys.readouterr()
        assert "rejected risk #1: probability" in captured.out
        assert "done (1 risks, 1 controls, 1 rejected)" in captured.out

    def test_json_output(self, tmp_path: Path) -> None:
        exporter = RegisterExporter(
            _make_register(), tmp_path, JsonFormatter(), actor="ana", today=TODAY, force=True,
        )
        exporter.export()
        controls = json.loads((tmp_path / "controls.json").read_text(encoding="utf-8"))
        assert controls[0]["status"] == "near-due"

    def test_existing_file_kept_when_declined(self, tmp_path: Path) -> None:
        (tmp_path / "risks.yaml").write_text("old\n", encoding="utf-8")
        exporter = RegisterExporter(
            _make_register(), tmp_path, YamlFormatter(), actor="ana", today=TODAY,
        )
        with patch("builtins.input", return_value="n"):
            exporter.export()
        assert (tmp_path / "risks.yaml").read_text(encoding="utf-8") == "old\n"
        assert (tmp_path / "summary.yaml").is_file()

    def test_overwrite_all(self, tmp_path: Path) -> None:
        for name in ("risks", "controls"):
            (tmp_path / f"{name}.yaml").write_text("old\n", encoding="utf-8")
        exporter = RegisterExporter(
            _make_register(), tmp_path, YamlFormatter(), actor="ana", today=TODAY,
        )
        with patch("builtins.input", return_value="all") as prompt:
            exporter.export()
        assert prompt.call_count == 1
        assert (tmp_path / "controls.yaml").read_text(encoding="utf-8") != "old\n"


class TestLoadRegister:
    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "register.yaml"
        path.write_text(
            yaml.dump({"processes": [{"id": "p"}], "risks": [_make_risk()]}, allow_unicode=True),
            encoding="utf-8",
        )
        register = load_register(path)
        assert len(register.processes) == 1
        assert register.risks[0]["name"] == "Indisponibilidade do sistema de protocolo"
        assert register.controls == []

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "register.json"
        path.write_text(json.dumps({"controls": [_make_control()]}), encoding="utf-8")
        assert load_register(path).controls[0]["id"] == "c1"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "register.yaml"
        path.write_text("", encoding="utf-8")
        assert load_register(path) == Register()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RegisterError, match="not found"):
            load_register(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "register.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(RegisterError, match="expected a mapping"):
            load_register(path)

    def test_section_not_a_list(self, tmp_path: Path) -> None:
        path = tmp_path / "register.yaml"
        path.write_text("risks: 3\n", encoding="utf-8")
        with pytest.raises(RegisterError, match="'risks' must be a list"):
            load_register(path)

    def test_malformed_json(self, tmp_path: Path) -> None:
        path = tmp_path / "register.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RegisterError, match="Cannot parse"):
            load_register(path)


class TestAudit:
    def test_absent_keys_not_reported(self) -> None:
        submitted = _make_risk()
        del submitted["fac"]
        risk = prepare_risk(submitted)
        assert derived_changes(submitted, risk, RISK_DERIVED_KEYS) == []

    def test_empty_values_displayed(self) -> None:
        submitted = _make_risk(maxImplementationDate="")
        risk = prepare_risk(submitted)
        assert derived_changes(submitted, risk, RISK_DERIVED_KEYS) == [
            "maxImplementationDate: (vazio) → 2025-03-15"
        ]

    def test_append_history_copies(self) -> None:
        risk = prepare_risk(_make_risk())
        now = datetime(2026, 6, 10, 12, 0, tzinfo=timezone.utc)
        updated = append_history(risk, "ana", "Revisão", ["fac: 0.4 → 0.6"], now=now)
        assert risk.history == []
        assert updated.history[0].timestamp == "2026-06-10T12:00:00Z"
        assert updated.history[0].changes == "fac: 0.4 → 0.6"
