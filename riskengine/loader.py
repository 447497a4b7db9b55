from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from riskengine.exceptions import RegisterError

_SECTIONS = ("processes", "risks", "controls")


@dataclass
class Register:
    processes: List[Dict[str, Any]] = field(default_factory=list)
    risks: List[Dict[str, Any]] = field(default_factory=list)
    controls: List[Dict[str, Any]] = field(default_factory=list)


def load_register(path: Path) -> Register:
    """Read a YAML or JSON register of processes, risks and controls."""
    if not path.is_file():
        raise RegisterError(f"Register file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (ValueError, yaml.YAMLError) as exc:
        raise RegisterError(
            f"Cannot parse {path.name}. Expected a YAML or JSON document."
        ) from exc

    if data is None:
        return Register()
    if not isinstance(data, dict):
        raise RegisterError(
            f"Invalid register in {path.name}: expected a mapping with "
            + ", ".join(f"'{s}'" for s in _SECTIONS)
            + " lists."
        )

    sections: Dict[str, List[Dict[str, Any]]] = {}
    for name in _SECTIONS:
        items = data.get(name) or []
        if not isinstance(items, list):
            raise RegisterError(f"Invalid register in {path.name}: '{name}' must be a list.")
        sections[name] = items

    return Register(**sections)
