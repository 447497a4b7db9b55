from __future__ import annotations

import sys

from riskengine.cli import main as cli_main
from riskengine.exceptions import RiskEngineError


def main() -> None:
    try:
        status = cli_main()
    except RiskEngineError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        sys.exit(130)
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
