from __future__ import annotations

from dataclasses import dataclass

from riskengine.exceptions import ConfigError

OUTPUT_FORMATS = ("yaml", "json")


@dataclass
class AppConfig:
    actor: str = "riskengine"
    output_format: str = "yaml"
    normalize_stale_flags: bool = True

    def __post_init__(self) -> None:
        self.actor = self.actor.strip()
        if not self.actor:
            raise ConfigError("Actor name cannot be empty.")
        self.output_format = self.output_format.strip().lower()
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Unsupported output format '{self.output_format}'. "
                f"Use one of: {', '.join(OUTPUT_FORMATS)}."
            )
