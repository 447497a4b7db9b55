from __future__ import annotations

import argparse
from datetime import date
from functools import partial
from pathlib import Path
from typing import List, Optional

from riskengine.config import load_config, write_config
from riskengine.exceptions import ConfigError, RecordValidationError
from riskengine.exporters.register import RegisterExporter, score_register
from riskengine.formatters import get_formatter
from riskengine.loader import load_register
from riskengine.metrics import calculate_dashboard_metrics
from riskengine.models.config import AppConfig, OUTPUT_FORMATS
from riskengine.scoring.dates import parse_iso_date
from riskengine.validation.validator import validate_control, validate_risk

_OUTPUT_DIR = "scored"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="riskengine",
        description="Risk and control scoring for process risk registers.",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--init", action="store_true", help="Initialize configuration.")
    group.add_argument(
        "--score", metavar="FILE",
        help="Recompute derived fields of every record and write the scored register.",
    )
    group.add_argument(
        "--validate", metavar="FILE",
        help="Check records as submitted and report the first violation of each.",
    )
    group.add_argument(
        "--summary", metavar="FILE",
        help="Print dashboard metrics for a register.",
    )
    parser.add_argument(
        "--output", metavar="DIR", default=_OUTPUT_DIR,
        help=f"Output directory for --score (default: {_OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--today", metavar="YYYY-MM-DD",
        help="Reference date for control status (default: current date).",
    )
    parser.add_argument(
        "--format", dest="output_format", choices=OUTPUT_FORMATS,
        help="Output format (default: from configuration).",
    )
    parser.add_argument(
        "--force", action="store_true",
        help="Overwrite existing files without confirmation.",
    )
    return parser


def _parse_today(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    parsed = parse_iso_date(value)
    if parsed is None:
        raise ConfigError(f"Invalid --today value '{value}'. Use YYYY-MM-DD.")
    return parsed


def _run_init() -> None:
    actor = input("Enter the name to record in history entries: ")
    if not actor.strip():
        raise ConfigError("Actor name cannot be empty.")

    config = AppConfig(actor=actor)

    cwd = Path.cwd()
    write_config(cwd, config)
    (cwd / _OUTPUT_DIR).mkdir(exist_ok=True)

    print("Configuration saved to .riskengine.ini")
    print(f"Created directories: {_OUTPUT_DIR}/")


def _run_score(args: argparse.Namespace, config: AppConfig) -> None:
    register = load_register(Path(args.score))
    exporter = RegisterExporter(
        register,
        Path(args.output),
        get_formatter(args.output_format or config.output_format),
        actor=config.actor,
        today=_parse_today(args.today),
        normalize_stale_flags=config.normalize_stale_flags,
        force=args.force,
    )
    exporter.export()


def _run_validate(args: argparse.Namespace) -> int:
    register = load_register(Path(args.validate))
    today = _parse_today(args.today)
    failures: List[str] = []

    for kind, records, validate in (
        ("risk", register.risks, validate_risk),
        ("control", register.controls, partial(validate_control, today=today)),
    ):
        for index, raw in enumerate(records):
            try:
                validate(raw)
            except RecordValidationError as exc:
                ref = raw.get("id") if isinstance(raw, dict) and raw.get("id") else f"#{index}"
                failures.append(f"{kind} {ref}: {exc.field}: {exc.message}")

    total = len(register.risks) + len(register.controls)
    for line in failures:
        print(line)
    print(f"{total - len(failures)} of {total} records valid.")
    return 1 if failures else 0


def _run_summary(args: argparse.Namespace, config: AppConfig) -> None:
    register = load_register(Path(args.summary))
    today = _parse_today(args.today)
    scored = score_register(
        register,
        config.actor,
        today=today,
        normalize_stale_flags=config.normalize_stale_flags,
    )
    metrics = calculate_dashboard_metrics(
        register.processes, scored.risks, scored.controls, today=today,
    )
    formatter = get_formatter(args.output_format or config.output_format)
    print(formatter.dumps(metrics.to_record()), end="")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.init:
        _run_init()
        return 0
    if not (args.score or args.validate or args.summary):
        parser.print_help()
        return 0

    config = load_config(Path.cwd())
    if args.score:
        _run_score(args, config)
    elif args.validate:
        return _run_validate(args)
    else:
        _run_summary(args, config)
    return 0
