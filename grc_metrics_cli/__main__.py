from __future__ import annotations

import sys

from grc_metrics_cli.cli import main as cli_main
from grc_metrics_cli.exceptions import GrcMetricsError


def main() -> None:
    try:
        cli_main()
    except GrcMetricsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        sys.exit(130)


if __name__ == "__main__":
    main()
