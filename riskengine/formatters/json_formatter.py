from __future__ import annotations

import json
from typing import Any

from riskengine.formatters.base import BaseFormatter


class JsonFormatter(BaseFormatter):
    def dumps(self, data: Any) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    def file_extension(self) -> str:
        return ".json"
