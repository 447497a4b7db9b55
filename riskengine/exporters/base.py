from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from riskengine.formatters.base import BaseFormatter


class BaseExporter(ABC):
    def __init__(
        self,
        output_dir: Path,
        formatter: BaseFormatter,
        *,
        force: bool = False,
    ) -> None:
        self.output_dir = output_dir
        self.formatter = formatter
        self.force = force
        self._overwrite_all = False

    @abstractmethod
    def export(self) -> None:
        """Compute results and write them to output_dir."""
        ...

    def _ensure_output_dir(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _log(self, message: str) -> None:
        print(message)

    def _should_write(self, path: Path) -> bool:
        """Check whether *path* should be written, prompting if needed."""
        if not path.exists():
            return True
        if self.force or self._overwrite_all:
            return True
        while True:
            answer = input(
                f"Overwrite existing {path.name}? [Yes/No/All] "
            ).strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            if answer in ("a", "all"):
                self._overwrite_all = True
                return True

    def _write_document(self, name: str, data: Any) -> None:
        path = self.output_dir / (name + self.formatter.file_extension())
        if self._should_write(path):
            self.formatter.write(data, path)
