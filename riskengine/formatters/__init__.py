from __future__ import annotations

from riskengine.exceptions import ConfigError
from riskengine.formatters.base import BaseFormatter
from riskengine.formatters.json_formatter import JsonFormatter
from riskengine.formatters.yaml_formatter import YamlFormatter


def get_formatter(output_format: str) -> BaseFormatter:
    if output_format == "json":
        return JsonFormatter()
    if output_format == "yaml":
        return YamlFormatter()
    raise ConfigError(f"Unsupported output format '{output_format}'.")
